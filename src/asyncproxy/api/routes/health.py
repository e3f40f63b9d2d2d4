"""Health check endpoints."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from asyncproxy.core.exceptions import AsyncProxyError, TaskNotFoundError

router = APIRouter(tags=["health"])

_PROBE_ID = "__readiness_probe__"


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(request: Request):
    """Ready when the task store answers a lookup, even with not-found."""
    store = request.app.state.context.store
    try:
        await asyncio.to_thread(store.get, _PROBE_ID)
    except TaskNotFoundError:
        pass
    except AsyncProxyError as exc:
        return JSONResponse(status_code=503, content={"status": "unavailable", "error": str(exc)})
    return {"status": "ready"}
