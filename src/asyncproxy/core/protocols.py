"""Protocol interfaces for the async proxy's external collaborators.

All inter-layer communication uses these Protocols: structural typing,
no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from asyncproxy.models.envelope import ProxyRequest, ProxyResponse
    from asyncproxy.models.task import TaskRecord


# ---------------------------------------------------------------------------
# Persistence: Task Store
# ---------------------------------------------------------------------------

@runtime_checkable
class ITaskStore(Protocol):
    """Durable keyed storage for task records."""

    def create(self, record: TaskRecord) -> None: ...

    def get(self, request_id: str) -> TaskRecord: ...

    def complete(self, request_id: str, result: str) -> None: ...

    def delete(self, request_id: str) -> None: ...


# ---------------------------------------------------------------------------
# Dispatch: fire-and-forget worker start
# ---------------------------------------------------------------------------

@runtime_checkable
class IDispatcher(Protocol):
    """Starts the worker asynchronously; never waits for it to finish."""

    def dispatch(self, request: ProxyRequest) -> None: ...


# ---------------------------------------------------------------------------
# Downstream: the opaque business operation
# ---------------------------------------------------------------------------

@runtime_checkable
class IDownstream(Protocol):
    """Synchronously runs the backend operation and returns its raw response."""

    def invoke(self, request: ProxyRequest) -> str: ...
