"""Async proxy exception hierarchy."""

from __future__ import annotations


class AsyncProxyError(Exception):
    """Base exception for all async proxy errors."""


class TaskMarshalError(AsyncProxyError):
    """A task record or a stored result could not be (de)serialized."""


class TaskStoreError(AsyncProxyError):
    """The task store is unreachable or rejected an operation."""


class TaskNotFoundError(AsyncProxyError):
    """No task record exists for the given request id."""

    def __init__(self, request_id: str) -> None:
        self.request_id = request_id
        super().__init__(f"No task record for request_id={request_id!r}")


class InvalidTransitionError(TaskStoreError):
    """A task status change other than PENDING -> CREATED was attempted."""

    def __init__(self, request_id: str, current: str, target: str) -> None:
        self.request_id = request_id
        self.current = current
        self.target = target
        super().__init__(f"Task {request_id} cannot move from {current} to {target}")


class DispatchError(AsyncProxyError):
    """The worker could not be started."""


class DownstreamInvocationError(AsyncProxyError):
    """The downstream function could not be invoked at all."""
