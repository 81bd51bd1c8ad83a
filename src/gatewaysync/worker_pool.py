"""Fixed-size pool of reconciliation workers fed by a shared queue."""

from __future__ import annotations

import queue
import threading
from logging import getLogger
from typing import TYPE_CHECKING

from gatewaysync.domain.errors import StoreError

if TYPE_CHECKING:
    from gatewaysync.domain.model import GatewayUpdate
    from gatewaysync.domain.reconciliation import GatewayReconciler

log = getLogger(__name__)

_STOP = object()


class WorkerPool:
    """Run ``workers`` threads that reconcile queued updates one at a time.

    A failing update is logged and skipped; the worker keeps going.
    """

    def __init__(self, reconciler: GatewayReconciler, *, workers: int = 1) -> None:
        if workers < 1:
            raise ValueError(f"workers must be positive, got {workers}")
        self.reconciler = reconciler
        self.workers = workers
        self._queue: queue.Queue[GatewayUpdate | object] = queue.Queue()
        self._threads: list[threading.Thread] = []

    @property
    def is_running(self) -> bool:
        return any(thread.is_alive() for thread in self._threads)

    def submit(self, update: GatewayUpdate) -> None:
        self._queue.put(update)

    def start(self) -> None:
        if self._threads:
            raise RuntimeError("Worker pool already started")
        for index in range(self.workers):
            thread = threading.Thread(
                target=self._run,
                name=f"gatewaysync-worker-{index}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)
        log.info("Started %s reconciliation workers", self.workers)

    def join(self) -> None:
        """Block until every submitted update has been handled."""

        self._queue.join()

    def stop(self, timeout: float | None = None) -> None:
        """Let the workers finish the queued updates, then end their threads."""

        for _ in self._threads:
            self._queue.put(_STOP)
        for thread in self._threads:
            thread.join(timeout)
        self._threads.clear()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._handle(item)  # type: ignore[arg-type]
            finally:
                self._queue.task_done()

    def _handle(self, update: GatewayUpdate) -> None:
        try:
            self.reconciler.reconcile(update)
        except StoreError as exc:
            log.warning(
                "Skipping update for %s/%s: %s", update.network_id, update.gateway_id, exc
            )
        except Exception:
            log.exception(
                "Unexpected failure reconciling %s/%s", update.network_id, update.gateway_id
            )
