"""Observability port for the reconciliation pipeline."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ReconciliationMetrics(Protocol):
    def record_processed(self) -> None: ...

    def record_new(self) -> None: ...

    def record_moved(self) -> None: ...

    def observe_duration_ms(self, milliseconds: float) -> None: ...


class NullMetrics:
    """Metrics sink that discards everything."""

    def record_processed(self) -> None:
        return None

    def record_new(self) -> None:
        return None

    def record_moved(self) -> None:
        return None

    def observe_duration_ms(self, milliseconds: float) -> None:
        del milliseconds


__all__ = ["NullMetrics", "ReconciliationMetrics"]
