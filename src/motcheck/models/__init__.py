"""Data models for motcheck."""

from motcheck.models.token import AccessToken
from motcheck.models.upstream import UpstreamMotTest, UpstreamVehicleDocument
from motcheck.models.vehicle import VehicleRecord

__all__ = [
    "AccessToken",
    "UpstreamMotTest",
    "UpstreamVehicleDocument",
    "VehicleRecord",
]
