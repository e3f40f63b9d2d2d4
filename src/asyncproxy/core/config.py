"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings


class TimingConfig(BaseSettings):
    """Poll loop timing, in seconds from the arrival of the current call."""

    model_config = {"env_prefix": "ASYNCPROXY_TIMING_"}

    poll_interval: float = 2.0
    early_failure_threshold: float = 16.0
    poll_budget: float = 22.0

    @model_validator(mode="after")
    def _check_bounds(self) -> TimingConfig:
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if self.early_failure_threshold > self.poll_budget:
            raise ValueError("early_failure_threshold must not exceed poll_budget")
        return self


class DynamoDBConfig(BaseSettings):
    """DynamoDB task table configuration."""

    model_config = {"env_prefix": "ASYNCPROXY_DYNAMO_", "populate_by_name": True}

    table_name: str = Field(
        default="async-proxy-tasks",
        validation_alias=AliasChoices("ASYNCPROXY_DYNAMO_TABLE_NAME", "DYNAMODB_TABLE_NAME"),
    )
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class RedisConfig(BaseSettings):
    """Redis task store configuration."""

    model_config = {"env_prefix": "ASYNCPROXY_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    key_prefix: str = "task:"


class LambdaConfig(BaseSettings):
    """Worker and downstream Lambda function configuration."""

    model_config = {"env_prefix": "ASYNCPROXY_LAMBDA_", "populate_by_name": True}

    worker_function_name: str = Field(
        default="",
        validation_alias=AliasChoices("ASYNCPROXY_LAMBDA_WORKER_FUNCTION_NAME", "LAMBDA_TALKER_NAME"),
    )
    downstream_function_name: str = Field(
        default="",
        validation_alias=AliasChoices("ASYNCPROXY_LAMBDA_DOWNSTREAM_FUNCTION_NAME", "MAIN_LAMBDA_NAME"),
    )
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {
        "env_prefix": "ASYNCPROXY_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    stage_name: str = Field(
        default="",
        validation_alias=AliasChoices("ASYNCPROXY_STAGE_NAME", "STAGE_NAME"),
    )
    store_backend: Literal["dynamodb", "redis", "memory"] = "dynamodb"
    record_ttl_seconds: int = 86400

    timing: TimingConfig = Field(default_factory=TimingConfig)
    dynamodb: DynamoDBConfig = Field(default_factory=DynamoDBConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    aws_lambda: LambdaConfig = Field(default_factory=LambdaConfig)
