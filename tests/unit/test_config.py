"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from asyncproxy.core.config import AppSettings, DynamoDBConfig, LambdaConfig, TimingConfig


def test_default_settings():
    settings = AppSettings()
    assert settings.environment == "dev"
    assert settings.store_backend == "dynamodb"
    assert settings.record_ttl_seconds == 86400


def test_timing_defaults():
    timing = TimingConfig()
    assert timing.poll_interval == 2.0
    assert timing.early_failure_threshold == 16.0
    assert timing.poll_budget == 22.0


def test_timing_env_override(monkeypatch):
    monkeypatch.setenv("ASYNCPROXY_TIMING_POLL_BUDGET", "25")
    assert TimingConfig().poll_budget == 25.0


def test_timing_rejects_threshold_past_budget():
    with pytest.raises(ValidationError):
        TimingConfig(early_failure_threshold=30, poll_budget=22)


def test_timing_rejects_non_positive_interval():
    with pytest.raises(ValidationError):
        TimingConfig(poll_interval=0)


def test_legacy_env_names_are_honoured(monkeypatch):
    monkeypatch.setenv("DYNAMODB_TABLE_NAME", "tasks-legacy")
    monkeypatch.setenv("LAMBDA_TALKER_NAME", "talker")
    monkeypatch.setenv("MAIN_LAMBDA_NAME", "main")
    monkeypatch.setenv("STAGE_NAME", "prod")
    assert DynamoDBConfig().table_name == "tasks-legacy"
    cfg = LambdaConfig()
    assert cfg.worker_function_name == "talker"
    assert cfg.downstream_function_name == "main"
    assert AppSettings().stage_name == "prod"


def test_prefixed_env_names(monkeypatch):
    monkeypatch.setenv("ASYNCPROXY_DYNAMO_TABLE_NAME", "tasks-dev")
    monkeypatch.setenv("ASYNCPROXY_STORE_BACKEND", "redis")
    assert AppSettings().dynamodb.table_name == "tasks-dev"
    assert AppSettings().store_backend == "redis"
