"""Pydantic models describing the network operations centre status listing."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gatewaysync.adapters.payloads import blank_to_none


class NocBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NocLocation(NocBaseModel):
    latitude: float | None = None
    longitude: float | None = None
    altitude: float | None = None


class NocGatewayStatus(NocBaseModel):
    timestamp: datetime | None = None
    location: NocLocation | None = None

    _normalize_timestamp = field_validator("timestamp", mode="before")(blank_to_none)

    @property
    def has_timestamp(self) -> bool:
        """Whether the record carries a real timestamp (the zero time counts as unset)."""

        return self.timestamp is not None and self.timestamp.year > 1


class NocStatusesResponse(NocBaseModel):
    statuses: dict[str, NocGatewayStatus] = Field(default_factory=dict)
