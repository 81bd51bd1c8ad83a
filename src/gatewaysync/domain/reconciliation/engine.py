"""Orchestrator for per-update gateway reconciliation.

The engine composes the identity resolver, staleness filter, override
lookup, coordinate rules and movement detector, and performs the
conditional writes. It is synchronous: a worker runs one update to
completion, blocking only on store I/O.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from gatewaysync.domain.coordinates import DEFAULT_RULES, CoordinateRules, classify
from gatewaysync.domain.model import (
    SENTINEL,
    GatewayLocation,
    MovementStatus,
    ReconciliationOutcome,
)
from gatewaysync.domain.movement import MovementDetector
from gatewaysync.domain.ports.metrics import NullMetrics
from gatewaysync.domain.reconciliation.identity import IdentityResolver
from gatewaysync.domain.reconciliation.locks import NullLock
from gatewaysync.domain.reconciliation.overrides import find_force
from gatewaysync.domain.reconciliation.staleness import StalenessFilter

if TYPE_CHECKING:
    from datetime import datetime

    from gatewaysync.domain.model import CoordinateRejection, Coordinates, GatewayUpdate
    from gatewaysync.domain.ports.metrics import ReconciliationMetrics
    from gatewaysync.domain.ports.unit_of_work import UnitOfWorkFactory
    from gatewaysync.domain.reconciliation.cache import KeyValueCache
    from gatewaysync.domain.reconciliation.identity import IdentityKey
    from gatewaysync.domain.reconciliation.locks import IdentityLock

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationResult:
    """What happened to a single update."""

    outcome: ReconciliationOutcome
    gateway_db_id: int
    coordinates: Coordinates | None = None
    forced: bool = False
    rejection: CoordinateRejection | None = None


@dataclass(slots=True, kw_only=True)
class GatewayReconciler:
    """Run the reconciliation pipeline for one update at a time."""

    unit_of_work_factory: UnitOfWorkFactory
    identities: IdentityResolver
    staleness: StalenessFilter
    metrics: ReconciliationMetrics = field(default_factory=NullMetrics)
    movement: MovementDetector = field(default_factory=MovementDetector)
    coordinate_rules: CoordinateRules = DEFAULT_RULES
    identity_lock: IdentityLock = field(default_factory=NullLock)
    clock: Callable[[], float] = field(default=time.perf_counter)

    @classmethod
    def create(
        cls,
        unit_of_work_factory: UnitOfWorkFactory,
        *,
        identity_cache: KeyValueCache[IdentityKey, int] | None = None,
        last_heard_cache: KeyValueCache[int, int] | None = None,
        metrics: ReconciliationMetrics | None = None,
        movement: MovementDetector | None = None,
        coordinate_rules: CoordinateRules | None = None,
        identity_lock: IdentityLock | None = None,
    ) -> GatewayReconciler:
        """Build a reconciler whose collaborators share one store."""

        identities = (
            IdentityResolver(unit_of_work_factory, identity_cache)
            if identity_cache is not None
            else IdentityResolver(unit_of_work_factory)
        )
        staleness = (
            StalenessFilter(unit_of_work_factory, last_heard_cache)
            if last_heard_cache is not None
            else StalenessFilter(unit_of_work_factory)
        )
        return cls(
            unit_of_work_factory=unit_of_work_factory,
            identities=identities,
            staleness=staleness,
            metrics=metrics or NullMetrics(),
            movement=movement or MovementDetector(),
            coordinate_rules=coordinate_rules or DEFAULT_RULES,
            identity_lock=identity_lock or NullLock(),
        )

    def reconcile(self, update: GatewayUpdate) -> ReconciliationResult:
        """Reconcile ``update`` against the stored state of its gateway.

        Raises :class:`~gatewaysync.domain.errors.StoreError` when the store
        fails; nothing is retried.
        """

        started = self.clock()
        self.metrics.record_processed()

        gateway_db_id = self.identities.resolve(update.network_id, update.gateway_id)
        heard_at = update.heard_at

        with self.identity_lock.for_identity(gateway_db_id):
            if not self.staleness.is_newer(gateway_db_id, update.time_ns):
                log.debug(
                    "Status record stale: %s/%s at %s",
                    update.network_id,
                    update.gateway_id,
                    heard_at,
                )
                return ReconciliationResult(
                    outcome=ReconciliationOutcome.STALE,
                    gateway_db_id=gateway_db_id,
                )
            result = self._apply(gateway_db_id, update, heard_at)

        if result.outcome is ReconciliationOutcome.NEW:
            self.metrics.record_new()
        elif result.outcome is ReconciliationOutcome.MOVED:
            self.metrics.record_moved()
        self.metrics.observe_duration_ms((self.clock() - started) * 1000.0)
        return result

    def _apply(
        self,
        gateway_db_id: int,
        update: GatewayUpdate,
        heard_at: datetime,
    ) -> ReconciliationResult:
        with self.unit_of_work_factory() as uow:
            gateways = uow.repositories.gateways

            gateways.update_last_heard(gateway_db_id, update.time_ns)
            uow.commit()
            self.staleness.advance(gateway_db_id, update.time_ns)

            if update.hardware_id is not None or update.description is not None:
                gateways.update_details(
                    gateway_db_id,
                    hardware_id=update.hardware_id,
                    description=update.description,
                )

            coordinates = update.coordinates
            rejection: CoordinateRejection | None = None
            forced = find_force(
                uow.repositories.location_forces,
                update.network_id,
                update.gateway_id,
            )
            if forced is not None:
                log.info("Gateway %s coordinates forced to %s", update.gateway_id, forced)
                coordinates = forced
            else:
                rejection = classify(
                    coordinates.latitude,
                    coordinates.longitude,
                    rules=self.coordinate_rules,
                )
                if rejection is not None:
                    log.info(
                        "Gateway %s coordinates invalid (%s), using 0,0",
                        update.gateway_id,
                        rejection,
                    )
                    coordinates = SENTINEL

            latest = uow.repositories.locations.latest(update.network_id, update.gateway_id)
            status = self.movement.detect(
                latest.coordinates if latest is not None else None,
                coordinates,
            )

            if status is not MovementStatus.NOT_MOVED:
                log.info("Gateway %s %s: %s", update.gateway_id, status, coordinates)
                uow.repositories.locations.add(
                    GatewayLocation(
                        network_id=update.network_id,
                        gateway_id=update.gateway_id,
                        installed_at=heard_at,
                        latitude=coordinates.latitude,
                        longitude=coordinates.longitude,
                    )
                )
                gateways.update_location(
                    gateway_db_id,
                    latitude=coordinates.latitude,
                    longitude=coordinates.longitude,
                    altitude=update.altitude,
                    location_accuracy=update.location_accuracy,
                    location_source=update.location_source,
                )
            uow.commit()

        return ReconciliationResult(
            outcome=ReconciliationOutcome.from_movement(status),
            gateway_db_id=gateway_db_id,
            coordinates=coordinates,
            forced=forced is not None,
            rejection=rejection,
        )
