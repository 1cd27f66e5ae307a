"""motcheck - Async proxy for DVSA MOT history vehicle lookups."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("motcheck")
except PackageNotFoundError:
    __version__ = "0+local"

from motcheck.auth import TokenManager
from motcheck.cache import ResultCache
from motcheck.config import MotCheckConfig
from motcheck.exceptions import (
    InvalidRegistrationError,
    MalformedDateError,
    MalformedMileageError,
    MalformedTokenResponseError,
    MalformedUpstreamResponseError,
    MotCheckError,
    MotConfigError,
    MotTransportError,
    UpstreamAuthError,
    UpstreamHttpError,
    UpstreamTimeoutError,
    VehicleNotFoundError,
)
from motcheck.mapping import map_vehicle_document
from motcheck.models import AccessToken, VehicleRecord
from motcheck.proxy import VehicleLookupProxy
from motcheck.registration import normalize_registration

__all__ = [
    "__version__",
    "AccessToken",
    "InvalidRegistrationError",
    "MalformedDateError",
    "MalformedMileageError",
    "MalformedTokenResponseError",
    "MalformedUpstreamResponseError",
    "MotCheckConfig",
    "MotCheckError",
    "MotConfigError",
    "MotTransportError",
    "ResultCache",
    "TokenManager",
    "UpstreamAuthError",
    "UpstreamHttpError",
    "UpstreamTimeoutError",
    "VehicleLookupProxy",
    "VehicleNotFoundError",
    "VehicleRecord",
    "map_vehicle_document",
    "normalize_registration",
]
