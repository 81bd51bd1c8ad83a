from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from gatewaysync.domain.errors import DecodeError

from .translator import decode_uplink_message

if TYPE_CHECKING:
    from gatewaysync.domain.ports.fetching import UpdateSink

log = getLogger(__name__)


@dataclass(slots=True)
class UplinkMessageHandler:
    """Decode bus messages and forward their updates to a sink.

    Undecodable messages are logged and dropped.
    """

    sink: UpdateSink

    def __call__(self, body: bytes | str) -> int:
        try:
            updates = decode_uplink_message(body)
        except DecodeError as exc:
            log.warning("Dropping uplink message: %s", exc)
            return 0
        for update in updates:
            self.sink.submit(update)
        return len(updates)
