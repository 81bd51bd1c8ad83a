from __future__ import annotations

import json

import pytest

from gatewaysync.adapters.uplinks import UplinkMessageHandler, decode_uplink_message
from gatewaysync.domain.errors import DecodeError
from gatewaysync.domain.model import DEFAULT_NETWORK_ID, GatewayUpdate, UpdateSource

TIME_NS = 1_714_564_800_123_456_789


def _message(**overrides: object) -> bytes:
    payload: dict[str, object] = {
        "time": TIME_NS,
        "gateways": [
            {
                "gtw_id": "eui-b827ebfffe61f1a7",
                "gtw_eui": "B827EBFFFE61F1A7",
                "latitude": 52.3676,
                "longitude": 4.9041,
                "altitude": 12.7,
                "location_accuracy": 5,
                "location_source": "gps",
                "description": "Rooftop",
            },
            {
                "gtw_id": "eui-0000024b08060112",
                "latitude": 51.4416,
                "longitude": 5.4697,
            },
        ],
    }
    payload.update(overrides)
    return json.dumps(payload).encode()


class CollectingSink:
    def __init__(self) -> None:
        self.updates: list[GatewayUpdate] = []

    def submit(self, update: GatewayUpdate) -> None:
        self.updates.append(update)


def test_decode_produces_one_update_per_gateway() -> None:
    first, second = decode_uplink_message(_message())

    assert first.network_id == DEFAULT_NETWORK_ID
    assert first.gateway_id == "eui-b827ebfffe61f1a7"
    assert first.hardware_id == "B827EBFFFE61F1A7"
    assert first.altitude == 12
    assert first.location_accuracy == 5
    assert first.location_source == "gps"
    assert first.description == "Rooftop"
    assert first.source is UpdateSource.UPLINK
    assert first.time_ns == second.time_ns == TIME_NS
    assert second.hardware_id is None
    assert second.altitude is None
    assert second.description is None


def test_decode_uses_message_network_and_normalizes_blanks() -> None:
    body = _message(
        network_id="private-network",
        gateways=[
            {
                "gtw_id": "gw-1",
                "gtw_eui": " ",
                "description": "",
                "latitude": 1.5,
                "longitude": 2.5,
                "altitude": 0,
            }
        ],
    )

    (update,) = decode_uplink_message(body)

    assert update.network_id == "private-network"
    assert update.hardware_id is None
    assert update.description is None
    assert update.altitude == 0


def test_decode_allows_empty_gateway_list() -> None:
    assert decode_uplink_message(_message(gateways=[])) == []


def test_gateway_without_coordinates_is_reported_at_origin() -> None:
    body = _message(
        gateways=[
            {"gtw_id": "with-gps", "latitude": -25.7, "longitude": 28.2},
            {"gtw_id": "no-gps"},
        ]
    )

    located, unlocated = decode_uplink_message(body)

    assert (located.gateway_id, located.coordinates.as_tuple()) == ("with-gps", (-25.7, 28.2))
    assert (unlocated.gateway_id, unlocated.coordinates.as_tuple()) == ("no-gps", (0.0, 0.0))
    assert unlocated.time_ns == TIME_NS


@pytest.mark.parametrize("entry", [{"latitude": 1.0, "longitude": 2.0}, {"gtw_id": " "}])
def test_gateway_entry_without_id_is_skipped(
    entry: dict[str, object],
    caplog: pytest.LogCaptureFixture,
) -> None:
    body = _message(gateways=[entry, {"gtw_id": "gw-1", "latitude": 1.5, "longitude": 2.5}])

    updates = decode_uplink_message(body)

    assert [update.gateway_id for update in updates] == ["gw-1"]
    assert "without gateway id" in caplog.text


@pytest.mark.parametrize(
    "body",
    [
        b"not json",
        b"[]",
        json.dumps({"gateways": []}).encode(),
        json.dumps({"time": 1, "gateways": [{"gtw_id": "gw", "latitude": "north"}]}).encode(),
    ],
)
def test_malformed_messages_raise_decode_error(body: bytes) -> None:
    with pytest.raises(DecodeError):
        decode_uplink_message(body)


def test_handler_forwards_updates_to_sink() -> None:
    sink = CollectingSink()
    handler = UplinkMessageHandler(sink)

    assert handler(_message()) == 2
    assert [update.gateway_id for update in sink.updates] == [
        "eui-b827ebfffe61f1a7",
        "eui-0000024b08060112",
    ]


def test_handler_drops_undecodable_messages(caplog: pytest.LogCaptureFixture) -> None:
    sink = CollectingSink()
    handler = UplinkMessageHandler(sink)

    assert handler(b"{") == 0
    assert sink.updates == []
    assert "Dropping uplink message" in caplog.text
