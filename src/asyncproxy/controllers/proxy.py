"""ProxyController: the public facade of the asynchronous-completion protocol.

A fresh request creates a PENDING task and starts the worker without waiting
for it. Every request, fresh or resumed, then polls the task store until the
task is CREATED or the poll budget runs out. On completion the stored
downstream response is returned verbatim and the task is deleted; on timeout
the caller gets a 303 pointing back at the same path with ``requestID`` set,
so the next call rejoins the same task instead of starting a new one.

All deadlines are measured from a single start time captured when the call
arrives.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from asyncproxy.core.config import TimingConfig
from asyncproxy.core.exceptions import (
    AsyncProxyError,
    DispatchError,
    TaskMarshalError,
    TaskNotFoundError,
)
from asyncproxy.core.protocols import IDispatcher, ITaskStore
from asyncproxy.models.envelope import ProxyRequest, ProxyResponse
from asyncproxy.models.task import TaskRecord

logger = logging.getLogger(__name__)


class ProxyController:
    """Coordinates task creation, worker dispatch, bounded polling and redirects."""

    def __init__(
        self,
        *,
        store: ITaskStore,
        dispatcher: IDispatcher,
        timing: TimingConfig | None = None,
        stage_name: str = "",
        record_ttl_seconds: int | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._timing = timing or TimingConfig()
        self._stage_name = stage_name
        self._record_ttl = record_ttl_seconds
        self._clock = clock
        self._sleep = sleep

    async def handle(self, request: ProxyRequest) -> ProxyResponse:
        start = self._clock()
        deadline = start + self._timing.poll_budget

        request_id = request.request_id
        if not request_id:
            try:
                request_id = await self._start_task(request)
            except DispatchError as exc:
                logger.error("Worker dispatch failed: %s", exc)
                return ProxyResponse.error(500, "There is an issue with the worker.")
            except AsyncProxyError as exc:
                logger.error("Task creation failed: %s", exc)
                return ProxyResponse.error(500, "There is an issue with the task store.")

        if self._clock() - start > self._timing.early_failure_threshold:
            logger.error("Task %s: setup exceeded %.1fs, giving up",
                         request_id, self._timing.early_failure_threshold)
            return ProxyResponse.error(500, "The task store is responding too slowly.")

        while self._clock() < deadline:
            try:
                record = await asyncio.to_thread(self._store.get, request_id)
            except TaskNotFoundError:
                logger.info("Task %s not found", request_id)
                return ProxyResponse.error(404, "RequestID is wrong.")
            except AsyncProxyError as exc:
                logger.error("Task %s: read failed: %s", request_id, exc)
                return ProxyResponse.error(500, "There is an issue with the task store.")

            if record.is_created:
                return await self._deliver(record)

            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            await self._sleep(min(self._timing.poll_interval, remaining))

        location = request.resume_location(request_id, self._stage_name)
        logger.info("Task %s still pending, redirecting to %s", request_id, location)
        return ProxyResponse.redirect(location)

    async def _start_task(self, request: ProxyRequest) -> str:
        record = TaskRecord.pending(ttl_seconds=self._record_ttl)
        await asyncio.to_thread(self._store.create, record)
        logger.info("Created task %s", record.request_id)

        try:
            await asyncio.to_thread(self._dispatcher.dispatch, request.with_request_id(record.request_id))
        except DispatchError:
            # Nothing will ever complete this task.
            await self._discard(record.request_id)
            raise
        return record.request_id

    async def _deliver(self, record: TaskRecord) -> ProxyResponse:
        try:
            response = ProxyResponse.from_json(record.result)
        except TaskMarshalError as exc:
            logger.error("Task %s: unreadable result: %s", record.request_id, exc)
            return ProxyResponse.error(500, "There is an issue with unmarshalling the task.")
        await self._discard(record.request_id)
        logger.info("Task %s delivered with status %d", record.request_id, response.status_code)
        return response

    async def _discard(self, request_id: str) -> None:
        try:
            await asyncio.to_thread(self._store.delete, request_id)
        except AsyncProxyError as exc:
            logger.warning("Task %s: delete failed, left for expiry: %s", request_id, exc)
