"""Reconciliation core turning gateway updates into consistent gateway state.

Per-update flow:
1) resolve the durable identity of the gateway
2) drop updates that are not strictly newer than the last accepted one
3) persist last-heard and optional descriptive fields
4) apply administrator overrides, otherwise validate coordinates
5) detect movement against the location history and record moves
"""

from __future__ import annotations

from .cache import InMemoryCache, KeyValueCache
from .engine import GatewayReconciler, ReconciliationResult
from .identity import IdentityResolver
from .locks import IdentityLock, NullLock, ShardedLock
from .overrides import find_force
from .staleness import StalenessFilter

__all__ = [
    "GatewayReconciler",
    "IdentityLock",
    "IdentityResolver",
    "InMemoryCache",
    "KeyValueCache",
    "NullLock",
    "ReconciliationResult",
    "ShardedLock",
    "StalenessFilter",
    "find_force",
]
