"""Normalized vehicle lookup result."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from motcheck._constants import EPOCH_DATE, NO_MILEAGE


class VehicleRecord(BaseModel):
    """Vehicle identity plus data from its most recent MOT test.

    Built only by :func:`motcheck.mapping.map_vehicle_document`.  When the
    vehicle has no MOT history the expiry date stays at ``1970-01-01`` and
    the mileage at ``0``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    registration: str
    """Normalized registration (uppercase, no whitespace)."""
    make: str
    model: str
    primary_colour: str
    mot_expiry_date: date = EPOCH_DATE
    """Expiry of the most recent MOT certificate."""
    mileage_at_last_mot: int = Field(default=NO_MILEAGE, ge=0)
    """Odometer reading recorded at the most recent MOT test."""

    @property
    def has_mot_history(self) -> bool:
        return self.mot_expiry_date != EPOCH_DATE or self.mileage_at_last_mot != NO_MILEAGE

    def to_json_dict(self) -> dict[str, Any]:
        """camelCase JSON payload served to front-ends."""
        return self.model_dump(mode="json", by_alias=True)
