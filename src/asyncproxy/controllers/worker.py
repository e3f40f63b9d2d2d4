"""WorkerController runs the downstream operation and records its outcome."""

from __future__ import annotations

import json
import logging

from asyncproxy.core.exceptions import AsyncProxyError, DownstreamInvocationError
from asyncproxy.core.protocols import IDownstream, ITaskStore
from asyncproxy.models.envelope import ProxyRequest, ProxyResponse

logger = logging.getLogger(__name__)


class WorkerController:
    """Executes the downstream call for one task and performs its terminal write.

    Whatever the downstream returns, error statuses included, is stored as
    the task result. Only a failure to invoke the downstream at all, or to
    write the result, is reported as an error, and then only to whoever
    invoked the worker.
    """

    def __init__(self, *, store: ITaskStore, downstream: IDownstream) -> None:
        self._store = store
        self._downstream = downstream

    def handle(self, request: ProxyRequest) -> ProxyResponse:
        request_id = request.worker_request_id
        if not request_id:
            logger.error("Worker invoked without a RequestID header")
            return ProxyResponse.error(400, "RequestID header is missing.")

        try:
            result = self._downstream.invoke(request)
        except DownstreamInvocationError as exc:
            logger.error("Task %s: downstream invocation failed: %s", request_id, exc)
            return ProxyResponse.error(500, "There is an issue with the downstream function.")

        try:
            self._store.complete(request_id, result)
        except AsyncProxyError as exc:
            logger.error("Task %s: result lost, store write failed: %s", request_id, exc)
            return ProxyResponse.error(500, "There is an issue with the task store.")

        logger.info("Task %s completed", request_id)
        return ProxyResponse(
            status_code=201,
            body=json.dumps({"message": "The result was created."}),
        )
