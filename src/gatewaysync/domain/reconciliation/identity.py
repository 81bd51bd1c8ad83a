"""Map external ``(network_id, gateway_id)`` pairs to durable surrogate ids."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from gatewaysync.domain.reconciliation.cache import InMemoryCache

if TYPE_CHECKING:
    from gatewaysync.domain.ports.unit_of_work import UnitOfWorkFactory
    from gatewaysync.domain.reconciliation.cache import KeyValueCache

log = getLogger(__name__)

type IdentityKey = tuple[str, str]


def _default_identity_cache() -> KeyValueCache[IdentityKey, int]:
    return InMemoryCache()


@dataclass(slots=True)
class IdentityResolver:
    """Resolve gateways through a cache backed by an atomic get-or-create.

    Two workers may miss the cache for the same unseen gateway at once; the
    repository's get-or-create is conflict tolerant, so both converge on the
    same row.
    """

    unit_of_work_factory: UnitOfWorkFactory
    cache: KeyValueCache[IdentityKey, int] = field(default_factory=_default_identity_cache)

    def resolve(self, network_id: str, gateway_id: str) -> int:
        key = (network_id, gateway_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        with self.unit_of_work_factory() as uow:
            gateway_db_id = uow.repositories.gateways.get_or_create_id(network_id, gateway_id)
            uow.commit()

        log.debug("Resolved %s/%s to gateway %s", network_id, gateway_id, gateway_db_id)
        self.cache.set(key, gateway_db_id)
        return gateway_db_id
