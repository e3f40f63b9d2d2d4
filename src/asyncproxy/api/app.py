"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from asyncproxy.api.routes import health, proxy
from asyncproxy.bootstrap import AppContext, build_context
from asyncproxy.core.logging import setup_logging


def create_app(context: AppContext | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Pre-built dependencies; built from the environment when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize and tear down application resources."""
        app_context = context or build_context()
        setup_logging(app_context.settings.log_level)
        app.state.context = app_context
        app.state.proxy_controller = app_context.proxy_controller()
        yield
        shutdown = getattr(app_context.dispatcher, "shutdown", None)
        if callable(shutdown):
            shutdown()

    app = FastAPI(
        title="Async Proxy",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(health.router)
    # Catch-all, must be mounted last.
    app.include_router(proxy.router)
    return app
