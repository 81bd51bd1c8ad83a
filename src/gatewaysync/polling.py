"""Timers driving the periodic status pollers."""

from __future__ import annotations

import threading
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from gatewaysync.domain.errors import DecodeError

if TYPE_CHECKING:
    from gatewaysync.domain.ports.fetching import GatewayStatusFetcher, UpdateSink

log = getLogger(__name__)


def poll_once(fetcher: GatewayStatusFetcher, sink: UpdateSink) -> int:
    """Fetch once and submit every update; failures are logged, not raised."""

    try:
        updates = fetcher()
    except (httpx.HTTPError, DecodeError) as exc:
        log.warning("Fetching %s statuses failed: %s", fetcher.name, exc)
        return 0
    for update in updates:
        sink.submit(update)
    log.debug("Submitted %s updates from %s", len(updates), fetcher.name)
    return len(updates)


class PeriodicPoller:
    """Poll ``fetcher`` every ``interval_seconds`` on a daemon thread.

    The first fetch runs immediately after :meth:`start`.
    """

    def __init__(
        self,
        fetcher: GatewayStatusFetcher,
        sink: UpdateSink,
        *,
        interval_seconds: float,
    ) -> None:
        self.fetcher = fetcher
        self.sink = sink
        self.interval_seconds = interval_seconds
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError(f"Poller {self.fetcher.name} already started")
        self._stopped.clear()
        self._thread = threading.Thread(
            target=self._run,
            name=f"gatewaysync-poller-{self.fetcher.name}",
            daemon=True,
        )
        self._thread.start()
        log.info("Polling %s every %s seconds", self.fetcher.name, self.interval_seconds)

    def stop(self, timeout: float | None = None) -> None:
        self._stopped.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stopped.is_set():
            try:
                poll_once(self.fetcher, self.sink)
            except Exception:
                log.exception("Poller %s failed", self.fetcher.name)
            self._stopped.wait(self.interval_seconds)
