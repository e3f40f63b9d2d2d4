"""Pluggable task store backends behind the ITaskStore protocol."""

from __future__ import annotations

from asyncproxy.core.config import AppSettings
from asyncproxy.core.protocols import ITaskStore
from asyncproxy.persistence.dynamodb_backend import DynamoDBTaskStore
from asyncproxy.persistence.memory_backend import MemoryTaskStore
from asyncproxy.persistence.redis_backend import RedisTaskStore


def create_task_store(settings: AppSettings | None = None) -> ITaskStore:
    """Create the task store selected by ``settings.store_backend``."""
    if settings is None:
        settings = AppSettings()

    if settings.store_backend == "memory":
        return MemoryTaskStore()

    if settings.store_backend == "redis":
        return RedisTaskStore(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
            key_prefix=settings.redis.key_prefix,
        )

    return DynamoDBTaskStore(
        table_name=settings.dynamodb.table_name,
        region=settings.dynamodb.region,
        endpoint_url=settings.dynamodb.endpoint_url,
    )
