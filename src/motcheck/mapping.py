"""Conversion of the upstream vehicle document into a :class:`VehicleRecord`.

This is the only place where "field present and well typed" becomes a
strongly typed record.  Missing required fields fail fast and name the
offending field; they are never replaced by empty strings.

``motTests`` is assumed to be ordered most recent first, so element 0 is
taken as the latest test.  The upstream API does not document this order.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError

from motcheck._constants import EPOCH_DATE, NO_MILEAGE
from motcheck.exceptions import (
    InvalidRegistrationError,
    MalformedDateError,
    MalformedMileageError,
    MalformedUpstreamResponseError,
)
from motcheck.models.upstream import UpstreamMotTest, UpstreamVehicleDocument
from motcheck.models.vehicle import VehicleRecord
from motcheck.registration import normalize_registration

_DIGITS = re.compile(r"[0-9]+")

# Python attribute name -> upstream key, for error reporting.
_UPSTREAM_KEYS: dict[str, str] = {
    "primary_colour": "primaryColour",
    "mot_tests": "motTests",
    "expiry_date": "expiryDate",
    "odometer_value": "odometerValue",
}


def parse_expiry_date(value: str) -> date:
    """Parse an MOT expiry date.

    Accepts ``YYYY-MM-DD``, the dotted ``YYYY.MM.DD`` form used by older
    API versions, and full ISO datetimes (the date part is kept).

    Raises
    ------
    MalformedDateError
        If *value* matches none of those forms.
    """
    text = value.strip()
    candidate = text.replace(".", "-") if re.fullmatch(r"\d{4}\.\d{2}\.\d{2}", text) else text
    try:
        return date.fromisoformat(candidate)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(candidate).date()
    except ValueError as exc:
        raise MalformedDateError(f"Invalid MOT expiryDate {value!r}", field="expiryDate") from exc


def parse_odometer(value: str) -> int:
    """Parse an odometer reading given as a base-10 digit string.

    Raises
    ------
    MalformedMileageError
        If *value* is not a non-negative decimal integer.
    """
    text = value.strip()
    if not _DIGITS.fullmatch(text):
        raise MalformedMileageError(f"Invalid MOT odometerValue {value!r}", field="odometerValue")
    return int(text)


def _error_from_validation(exc: ValidationError) -> MalformedUpstreamResponseError:
    """Translate the first pydantic error into the matching error kind."""
    loc = exc.errors()[0]["loc"] if exc.errors() else ()
    names = [_UPSTREAM_KEYS.get(str(part), str(part)) for part in loc if isinstance(part, str)]
    leaf = names[-1] if names else None
    message = f"Vehicle response field {'.'.join(names) or '<document>'} has an unexpected type"
    if leaf == "expiryDate":
        return MalformedDateError(message, field=leaf)
    if leaf == "odometerValue":
        return MalformedMileageError(message, field=leaf)
    # A bad nested entry is reported against the array itself.
    return MalformedUpstreamResponseError(message, field=names[0] if names else None)


def _require(document: UpstreamVehicleDocument, attribute: str, field: str) -> str:
    value = getattr(document, attribute)
    if value is None:
        raise MalformedUpstreamResponseError(
            f"Vehicle response missing required field {field!r}",
            field=field,
        )
    return value


def _latest_test(document: UpstreamVehicleDocument) -> UpstreamMotTest | None:
    """Validate and return element 0 of ``motTests``; older entries are not read."""
    if not document.mot_tests:
        return None
    latest = document.mot_tests[0]
    if not isinstance(latest, dict):
        raise MalformedUpstreamResponseError("Vehicle response motTests[0] is not an object", field="motTests")
    try:
        return UpstreamMotTest.model_validate(latest)
    except ValidationError as exc:
        raise _error_from_validation(exc) from exc


def map_vehicle_document(doc: Any) -> VehicleRecord:
    """Map a decoded vehicle document to a :class:`VehicleRecord`.

    Raises
    ------
    MalformedUpstreamResponseError
        If *doc* is not an object, or a required field (``registration``,
        ``make``, ``model``, ``primaryColour``) is missing or not a string.
        ``field`` names the offending upstream key.
    MalformedDateError
        If the latest test's ``expiryDate`` cannot be parsed.
    MalformedMileageError
        If the latest test's ``odometerValue`` is not a digit string.
    """
    if not isinstance(doc, dict):
        raise MalformedUpstreamResponseError("Vehicle response is not a JSON object")

    try:
        document = UpstreamVehicleDocument.model_validate(doc)
    except ValidationError as exc:
        raise _error_from_validation(exc) from exc

    raw_registration = _require(document, "registration", "registration")
    make = _require(document, "make", "make")
    model = _require(document, "model", "model")
    colour = _require(document, "primary_colour", "primaryColour")

    try:
        registration = normalize_registration(raw_registration)
    except InvalidRegistrationError as exc:
        raise MalformedUpstreamResponseError(
            f"Vehicle response has an invalid registration {raw_registration!r}",
            field="registration",
        ) from exc

    expiry = EPOCH_DATE
    mileage = NO_MILEAGE
    latest = _latest_test(document)
    if latest is not None:
        # Failed tests carry no expiryDate; unreadable odometers carry no value.
        if latest.expiry_date is not None:
            expiry = parse_expiry_date(latest.expiry_date)
        if latest.odometer_value is not None:
            mileage = parse_odometer(latest.odometer_value)

    return VehicleRecord(
        registration=registration,
        make=make,
        model=model,
        primary_colour=colour,
        mot_expiry_date=expiry,
        mileage_at_last_mot=mileage,
    )
