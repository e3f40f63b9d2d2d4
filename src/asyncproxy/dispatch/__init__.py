"""Worker dispatch and downstream invocation bindings."""

from __future__ import annotations

from asyncproxy.core.config import AppSettings
from asyncproxy.core.protocols import IDispatcher, IDownstream
from asyncproxy.dispatch.lambda_backend import LambdaDispatcher, LambdaDownstream
from asyncproxy.dispatch.local_backend import CallableDownstream, LocalDispatcher


def create_dispatch(settings: AppSettings | None = None) -> tuple[IDispatcher, IDownstream]:
    """Create Lambda-backed dispatcher and downstream from application settings.

    Returns:
        Tuple of (dispatcher, downstream).
    """
    if settings is None:
        settings = AppSettings()

    cfg = settings.aws_lambda
    dispatcher = LambdaDispatcher(
        function_name=cfg.worker_function_name,
        region=cfg.region,
        endpoint_url=cfg.endpoint_url,
    )
    downstream = LambdaDownstream(
        function_name=cfg.downstream_function_name,
        region=cfg.region,
        endpoint_url=cfg.endpoint_url,
    )
    return dispatcher, downstream


__all__ = [
    "CallableDownstream",
    "LambdaDispatcher",
    "LambdaDownstream",
    "LocalDispatcher",
    "create_dispatch",
]
