"""Reject updates that are not strictly newer than the last accepted one."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gatewaysync.domain.reconciliation.cache import InMemoryCache

if TYPE_CHECKING:
    from gatewaysync.domain.ports.unit_of_work import UnitOfWorkFactory
    from gatewaysync.domain.reconciliation.cache import KeyValueCache


def _default_last_heard_cache() -> KeyValueCache[int, int]:
    return InMemoryCache()


@dataclass(slots=True)
class StalenessFilter:
    """Compare event times in epoch nanoseconds, in the cache and in the store."""

    unit_of_work_factory: UnitOfWorkFactory
    cache: KeyValueCache[int, int] = field(default_factory=_default_last_heard_cache)

    def is_newer(self, gateway_db_id: int, candidate_ns: int) -> bool:
        """Return whether ``candidate_ns`` is strictly after the last accepted time.

        On a cache miss the stored value is loaded and cached as-is; the cache
        only moves to ``candidate_ns`` through :meth:`advance`.
        """

        last_heard_ns = self.cache.get(gateway_db_id)
        if last_heard_ns is None:
            with self.unit_of_work_factory() as uow:
                last_heard_ns = uow.repositories.gateways.last_heard_ns(gateway_db_id)
            if last_heard_ns is None:
                return True
            self.cache.set(gateway_db_id, last_heard_ns)
        return candidate_ns > last_heard_ns

    def advance(self, gateway_db_id: int, time_ns: int) -> None:
        self.cache.set(gateway_db_id, time_ns)
