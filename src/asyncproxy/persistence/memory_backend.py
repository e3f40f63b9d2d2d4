"""In-memory task store for unit tests and local runs, dict-backed."""

from __future__ import annotations

import threading
import time
from typing import Callable

from asyncproxy.core.exceptions import TaskNotFoundError, TaskStoreError
from asyncproxy.models.task import TaskRecord


class MemoryTaskStore:
    """Dict-backed ITaskStore.

    Guarded by a lock because the local dispatcher completes tasks from a
    worker thread while the proxy polls.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._records: dict[str, TaskRecord] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def create(self, record: TaskRecord) -> None:
        with self._lock:
            if record.request_id in self._records:
                raise TaskStoreError(f"Task {record.request_id} already exists")
            self._records[record.request_id] = record

    def get(self, request_id: str) -> TaskRecord:
        with self._lock:
            record = self._records.get(request_id)
            if record is None:
                raise TaskNotFoundError(request_id)
            if record.is_expired(self._clock()):
                del self._records[request_id]
                raise TaskNotFoundError(request_id)
            return record

    def complete(self, request_id: str, result: str) -> None:
        with self._lock:
            record = self._records.get(request_id)
            if record is None:
                raise TaskNotFoundError(request_id)
            self._records[request_id] = record.complete(result)

    def delete(self, request_id: str) -> None:
        with self._lock:
            self._records.pop(request_id, None)

    def __contains__(self, request_id: str) -> bool:
        return request_id in self._records

    def __len__(self) -> int:
        return len(self._records)
