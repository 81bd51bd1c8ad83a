"""Pydantic models describing the public gateway-data listing."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, RootModel, field_validator

from gatewaysync.adapters.payloads import blank_to_none


class WebBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class WebLocation(WebBaseModel):
    latitude: float | None = None
    longitude: float | None = None
    altitude: float | None = None


class WebGatewayStatus(WebBaseModel):
    id: str | None = None
    description: str | None = None
    location: WebLocation | None = None
    last_seen: datetime | None = None

    _normalize_text = field_validator("id", "description", "last_seen", mode="before")(
        blank_to_none
    )


class WebGatewayDataResponse(RootModel[dict[str, WebGatewayStatus]]):
    """Listing keyed by gateway id."""
