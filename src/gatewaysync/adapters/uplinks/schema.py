"""Pydantic models describing uplink messages published on the bus."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gatewaysync.adapters.payloads import blank_to_none, truncate_to_int


class UplinkBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class UplinkGateway(UplinkBaseModel):
    """One receiving gateway listed in an uplink's metadata.

    Coordinates and id may be missing; the translator handles those entries.
    """

    gateway_id: str | None = Field(default=None, alias="gtw_id")
    hardware_id: str | None = Field(default=None, alias="gtw_eui")
    latitude: float | None = None
    longitude: float | None = None
    altitude: int | None = None
    location_accuracy: int | None = None
    location_source: str | None = None
    description: str | None = None

    _normalize_text = field_validator(
        "gateway_id",
        "hardware_id",
        "location_source",
        "description",
        mode="before",
    )(blank_to_none)
    _normalize_integers = field_validator(
        "altitude",
        "location_accuracy",
        mode="before",
    )(truncate_to_int)


class UplinkMessage(UplinkBaseModel):
    time: int = Field(ge=0)
    network_id: str | None = None
    gateways: list[UplinkGateway] = Field(default_factory=list)

    _normalize_network = field_validator("network_id", mode="before")(blank_to_none)
