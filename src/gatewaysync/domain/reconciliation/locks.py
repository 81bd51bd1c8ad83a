"""Optional per-identity mutual exclusion.

Without serialization two workers may interleave the staleness check and the
last-heard write for the same gateway. That is accepted by default; enabling
:class:`ShardedLock` closes the window at some cost in throughput.
"""

from __future__ import annotations

import threading
from contextlib import AbstractContextManager, nullcontext
from typing import Protocol

DEFAULT_SHARDS = 64


class IdentityLock(Protocol):
    def for_identity(self, gateway_db_id: int) -> AbstractContextManager[object]: ...


class NullLock:
    """Provides no exclusion at all."""

    def for_identity(self, gateway_db_id: int) -> AbstractContextManager[object]:
        del gateway_db_id
        return nullcontext()


class ShardedLock:
    """A fixed set of locks, one chosen per surrogate id."""

    def __init__(self, shards: int = DEFAULT_SHARDS) -> None:
        if shards <= 0:
            raise ValueError("shards must be positive")
        self._locks = tuple(threading.Lock() for _ in range(shards))

    def for_identity(self, gateway_db_id: int) -> AbstractContextManager[object]:
        return self._locks[gateway_db_id % len(self._locks)]
