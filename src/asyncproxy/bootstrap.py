"""Dependency wiring: one AppContext per process, passed to the controllers."""

from __future__ import annotations

from dataclasses import dataclass

from asyncproxy.controllers.proxy import ProxyController
from asyncproxy.controllers.worker import WorkerController
from asyncproxy.core.config import AppSettings
from asyncproxy.core.protocols import IDispatcher, IDownstream, ITaskStore
from asyncproxy.dispatch import create_dispatch
from asyncproxy.dispatch.local_backend import LocalDispatcher
from asyncproxy.persistence import create_task_store


@dataclass(frozen=True)
class AppContext:
    """Settings plus the external collaborators both controllers depend on."""

    settings: AppSettings
    store: ITaskStore
    dispatcher: IDispatcher
    downstream: IDownstream

    def proxy_controller(self) -> ProxyController:
        return ProxyController(
            store=self.store,
            dispatcher=self.dispatcher,
            timing=self.settings.timing,
            stage_name=self.settings.stage_name,
            record_ttl_seconds=self.settings.record_ttl_seconds,
        )

    def worker_controller(self) -> WorkerController:
        return WorkerController(store=self.store, downstream=self.downstream)


def build_context(settings: AppSettings | None = None) -> AppContext:
    """Wire the configured task store with the Lambda dispatcher and downstream."""
    if settings is None:
        settings = AppSettings()
    store = create_task_store(settings)
    dispatcher, downstream = create_dispatch(settings)
    return AppContext(settings=settings, store=store, dispatcher=dispatcher, downstream=downstream)


def build_local_context(downstream: IDownstream, settings: AppSettings | None = None,
                        store: ITaskStore | None = None) -> AppContext:
    """Wire an in-process deployment: the worker runs on a local thread pool."""
    if settings is None:
        settings = AppSettings(store_backend="memory")
    if store is None:
        store = create_task_store(settings)
    worker = WorkerController(store=store, downstream=downstream)
    dispatcher = LocalDispatcher(worker.handle)
    return AppContext(settings=settings, store=store, dispatcher=dispatcher, downstream=downstream)
