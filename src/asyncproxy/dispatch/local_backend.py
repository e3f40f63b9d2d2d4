"""In-process dispatch and downstream bindings for local runs and tests."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

from pydantic import ValidationError

from asyncproxy.core.exceptions import DispatchError
from asyncproxy.models.envelope import ProxyRequest, ProxyResponse

logger = logging.getLogger(__name__)


class LocalDispatcher:
    """IDispatcher that runs the worker on a background thread pool."""

    def __init__(self, worker: Callable[[ProxyRequest], Any], max_workers: int = 4) -> None:
        self._worker = worker
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="asyncproxy-worker")

    def dispatch(self, request: ProxyRequest) -> None:
        try:
            future = self._pool.submit(self._worker, request)
        except RuntimeError as exc:
            raise DispatchError(f"Worker pool is not accepting tasks: {exc}") from exc
        future.add_done_callback(self._log_failure)

    @staticmethod
    def _log_failure(future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("Local worker crashed: %s", exc, exc_info=exc)

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)


class CallableDownstream:
    """IDownstream wrapping a Python callable that returns a response.

    The callable may return a ProxyResponse or a plain response dict. An
    exception raised by it, or a dict that is not a proxy response, is the
    downstream's own failure and is turned into a 502 response, not
    propagated.
    """

    def __init__(self, func: Callable[[ProxyRequest], ProxyResponse | dict]) -> None:
        self._func = func

    def invoke(self, request: ProxyRequest) -> str:
        try:
            response = self._func(request)
        except Exception as exc:
            logger.warning("Downstream callable raised: %s", exc)
            return ProxyResponse.error(502, str(exc)).to_json()
        if isinstance(response, ProxyResponse):
            return response.to_json()
        try:
            return ProxyResponse.model_validate(response).to_json()
        except ValidationError as exc:
            logger.warning("Downstream callable returned a malformed response: %s", exc)
            return ProxyResponse.error(502, "The downstream returned a malformed response.").to_json()
