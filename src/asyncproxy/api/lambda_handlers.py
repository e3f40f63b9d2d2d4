"""AWS Lambda entry points for the proxy and worker functions.

Deploy with handler ``asyncproxy.api.lambda_handlers.proxy_handler`` for the
public function behind API Gateway and
``asyncproxy.api.lambda_handlers.worker_handler`` for the worker.
"""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import Any, Callable

from asyncproxy.bootstrap import AppContext, build_context
from asyncproxy.core.config import AppSettings
from asyncproxy.core.exceptions import TaskMarshalError
from asyncproxy.core.logging import setup_logging
from asyncproxy.core.types import LambdaEvent
from asyncproxy.models.envelope import ProxyRequest, ProxyResponse

logger = logging.getLogger(__name__)

LambdaHandler = Callable[[LambdaEvent, Any], dict[str, Any]]


def _parse(event: LambdaEvent) -> ProxyRequest | ProxyResponse:
    try:
        return ProxyRequest.from_event(event)
    except TaskMarshalError as exc:
        logger.error("Rejected malformed event: %s", exc)
        return ProxyResponse.error(400, "The request could not be parsed.")


def make_proxy_handler(app_context: AppContext) -> LambdaHandler:
    """Build the API Gateway handler for the public proxy function."""
    controller = app_context.proxy_controller()

    def handler(event: LambdaEvent, context: Any) -> dict[str, Any]:
        request = _parse(event)
        if isinstance(request, ProxyResponse):
            return request.to_event()
        return asyncio.run(controller.handle(request)).to_event()

    return handler


def make_worker_handler(app_context: AppContext) -> LambdaHandler:
    """Build the handler for the asynchronously invoked worker function."""
    controller = app_context.worker_controller()

    def handler(event: LambdaEvent, context: Any) -> dict[str, Any]:
        request = _parse(event)
        if isinstance(request, ProxyResponse):
            return request.to_event()
        return controller.handle(request).to_event()

    return handler


@lru_cache(maxsize=1)
def _default_context() -> AppContext:
    settings = AppSettings()
    setup_logging(settings.log_level)
    return build_context(settings)


def proxy_handler(event: LambdaEvent, context: Any) -> dict[str, Any]:
    return make_proxy_handler(_default_context())(event, context)


def worker_handler(event: LambdaEvent, context: Any) -> dict[str, Any]:
    return make_worker_handler(_default_context())(event, context)
