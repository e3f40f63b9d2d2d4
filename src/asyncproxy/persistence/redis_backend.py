"""Redis backend implementing ITaskStore."""

from __future__ import annotations

import time

import redis

from asyncproxy.core.exceptions import (
    InvalidTransitionError,
    TaskMarshalError,
    TaskNotFoundError,
    TaskStoreError,
)
from asyncproxy.models.task import TaskRecord, TaskStatus


class RedisTaskStore:
    """ITaskStore backed by Redis, one JSON string per task key.

    Record expiry maps onto Redis key expiry, so an expired task simply
    stops resolving.
    """

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 key_prefix: str = "task:") -> None:
        self._host = host
        self._port = port
        self._db = db
        self._prefix = key_prefix
        self._client = redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    def _key(self, request_id: str) -> str:
        return f"{self._prefix}{request_id}"

    def create(self, record: TaskRecord) -> None:
        key = self._key(record.request_id)
        try:
            created = self._client.set(key, record.to_json(), nx=True, exat=record.expires_at)
        except Exception as exc:
            raise TaskStoreError(f"Redis SET failed for key={key!r}: {exc}") from exc
        if not created:
            raise TaskStoreError(f"Task {record.request_id} already exists")

    def get(self, request_id: str) -> TaskRecord:
        key = self._key(request_id)
        try:
            raw = self._client.get(key)
        except Exception as exc:
            raise TaskStoreError(f"Redis GET failed for key={key!r}: {exc}") from exc
        if raw is None:
            raise TaskNotFoundError(request_id)
        record = TaskRecord.from_json(raw)
        if record.is_expired(time.time()):
            raise TaskNotFoundError(request_id)
        return record

    def complete(self, request_id: str, result: str) -> None:
        key = self._key(request_id)
        try:
            with self._client.pipeline() as pipe:
                while True:
                    try:
                        pipe.watch(key)
                        raw = pipe.get(key)
                        if raw is None:
                            raise TaskNotFoundError(request_id)
                        current = TaskRecord.from_json(raw)
                        if current.status != TaskStatus.PENDING:
                            raise InvalidTransitionError(request_id, current.status, TaskStatus.CREATED)
                        pipe.multi()
                        pipe.set(key, current.complete(result).to_json(), keepttl=True)
                        pipe.execute()
                        return
                    except redis.WatchError:
                        continue
        except (TaskNotFoundError, TaskStoreError, TaskMarshalError):
            raise
        except Exception as exc:
            raise TaskStoreError(f"Redis update failed for key={key!r}: {exc}") from exc

    def delete(self, request_id: str) -> None:
        key = self._key(request_id)
        try:
            self._client.delete(key)
        except Exception as exc:
            raise TaskStoreError(f"Redis DELETE failed for key={key!r}: {exc}") from exc
