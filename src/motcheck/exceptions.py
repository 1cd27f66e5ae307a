"""Custom exception hierarchy for motcheck."""

from __future__ import annotations


class MotCheckError(Exception):
    """Base exception for all motcheck errors."""


class MotConfigError(MotCheckError):
    """Invalid or missing configuration."""


class InvalidRegistrationError(MotCheckError, ValueError):
    """Registration input is empty or contains unsupported characters."""

    def __init__(self, message: str, *, registration: str | None = None) -> None:
        self.registration = registration
        super().__init__(message)


class MotTransportError(MotCheckError):
    """HTTP-level failure (network error or unexpected status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        body: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.body = body
        super().__init__(message)


class UpstreamAuthError(MotTransportError):
    """The token endpoint rejected the client-credentials exchange."""


class UpstreamHttpError(MotTransportError):
    """The vehicle endpoint answered with a non-2xx status."""


class VehicleNotFoundError(UpstreamHttpError):
    """The vehicle endpoint has no record for the registration (HTTP 404)."""

    def __init__(
        self,
        registration: str,
        *,
        endpoint: str = "",
        body: str = "",
    ) -> None:
        self.registration = registration
        super().__init__(
            f"Vehicle with registration {registration} not found",
            status_code=404,
            endpoint=endpoint,
            body=body,
        )


class UpstreamTimeoutError(MotTransportError):
    """A token or vehicle request did not complete within the configured timeout."""


class MalformedTokenResponseError(MotCheckError):
    """Token endpoint answered 2xx but without a usable ``access_token``."""


class MalformedUpstreamResponseError(MotCheckError):
    """Vehicle document violated the expected shape.

    ``field`` names the offending upstream field, or is ``None`` when the
    document as a whole could not be read.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class MalformedDateError(MalformedUpstreamResponseError):
    """An MOT ``expiryDate`` could not be parsed as a calendar date."""


class MalformedMileageError(MalformedUpstreamResponseError):
    """An MOT ``odometerValue`` is not a base-10 non-negative integer."""
