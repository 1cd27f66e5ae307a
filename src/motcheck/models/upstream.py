"""Typed view of the DVSA vehicle document.

Every field is optional here; deciding which absences are errors is the
job of :mod:`motcheck.mapping`.  ``StrictStr`` keeps wrongly typed values
(e.g. a numeric ``make``) from being coerced silently.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class UpstreamMotTest(BaseModel):
    """One entry of the ``motTests`` array."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    expiry_date: StrictStr | None = Field(default=None, alias="expiryDate")
    """Certificate expiry, e.g. ``"2024-01-01"``.  Absent for failed tests."""
    odometer_value: StrictStr | None = Field(default=None, alias="odometerValue")
    """Odometer reading as a decimal string, e.g. ``"50000"``."""


class UpstreamVehicleDocument(BaseModel):
    """Top level of the vehicle-history response."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    registration: StrictStr | None = None
    make: StrictStr | None = None
    model: StrictStr | None = None
    primary_colour: StrictStr | None = Field(default=None, alias="primaryColour")
    mot_tests: list[Any] | None = Field(default=None, alias="motTests")
    """Assumed to be ordered most recent first.  Entries stay undecoded; only
    the latest one is validated, as :class:`UpstreamMotTest`."""
