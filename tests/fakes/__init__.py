"""Shared test doubles: memory store re-export plus a virtual clock and dispatcher."""

from __future__ import annotations

from typing import Callable

from asyncproxy.models.envelope import ProxyRequest
from asyncproxy.persistence.memory_backend import MemoryTaskStore


class FakeClock:
    """Virtual monotonic clock; ``sleep`` advances time and fires due callbacks."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []
        self._events: list[tuple[float, Callable[[], None]]] = []

    def __call__(self) -> float:
        return self.now

    def at(self, when: float, callback: Callable[[], None]) -> None:
        self._events.append((when, callback))
        self._events.sort(key=lambda e: e[0])

    def advance(self, seconds: float) -> None:
        self.now += seconds
        while self._events and self._events[0][0] <= self.now:
            _, callback = self._events.pop(0)
            callback()

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)


class RecordingDispatcher:
    """IDispatcher that records submissions and optionally reacts to them."""

    def __init__(self, on_dispatch: Callable[[ProxyRequest], None] | None = None) -> None:
        self.requests: list[ProxyRequest] = []
        self._on_dispatch = on_dispatch

    def dispatch(self, request: ProxyRequest) -> None:
        self.requests.append(request)
        if self._on_dispatch is not None:
            self._on_dispatch(request)


__all__ = ["FakeClock", "MemoryTaskStore", "RecordingDispatcher"]
