from __future__ import annotations

from .logging import LOG_LEVELS, configure_logging, parse_log_level

__all__ = ["LOG_LEVELS", "configure_logging", "parse_log_level"]
