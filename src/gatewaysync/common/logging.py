"""Shared logging helpers for gatewaysync."""

from __future__ import annotations

import logging

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with terse defaults.

    Pass ``force=True`` to reconfigure from tests or when the CLI overrides the level.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def parse_log_level(name: str) -> int:
    normalized = name.strip().upper()
    if normalized not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {name}")
    return logging.getLevelNamesMapping()[normalized]
