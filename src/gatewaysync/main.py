#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import sys
import threading
from signal import SIGINT, SIGTERM, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from gatewaysync.app import start_service
from gatewaysync.common.logging import LOG_LEVELS, configure_logging, parse_log_level
from gatewaysync.config.errors import ConfigurationError
from gatewaysync.domain.errors import StoreError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_shutdown = threading.Event()


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid integer: {value}") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"Must be positive: {value}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile gateway identities and locations from uplinks and status pollers"
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Number of reconciliation workers (defaults to GATEWAYSYNC_WORKERS)",
    )
    parser.add_argument(
        "--no-web",
        dest="web",
        action="store_false",
        default=None,
        help="Disable the gateway-data web poller",
    )
    parser.add_argument(
        "--noc",
        action="store_true",
        default=None,
        help="Enable the NOC status poller",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run every enabled poller once, wait for reconciliation and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        default="INFO",
        help="Root log level (default: %(default)s)",
    )
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=parse_log_level(parsed_args.log_level), force=True)

    try:
        service = start_service(
            workers=parsed_args.workers,
            web=parsed_args.web,
            noc=parsed_args.noc,
            once=parsed_args.once,
        )
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except StoreError:
        log.exception("Cannot reach the database")
        sys.exit(1)
    except OSError:
        log.exception("Cannot reach the message bus")
        sys.exit(1)

    if service is None:
        return

    signal(SIGINT, _request_shutdown)
    signal(SIGTERM, _request_shutdown)
    try:
        _shutdown.wait()
    finally:
        log.info("Shutting down")
        service.stop(timeout=10.0)


def _request_shutdown(_signal_received: int, _frame: FrameType | None) -> None:
    _shutdown.set()


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
