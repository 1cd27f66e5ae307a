"""Vehicle history endpoint: GET ``{base_url}{vehicle_path}``."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote

from motcheck._redact import redact_for_log
from motcheck._transport import Transport
from motcheck.config import MotCheckConfig
from motcheck.exceptions import MalformedUpstreamResponseError, UpstreamHttpError, VehicleNotFoundError
from motcheck.models.token import AccessToken

_logger = logging.getLogger(__name__)


def build_vehicle_headers(config: MotCheckConfig, token: AccessToken) -> dict[str, str]:
    return {
        "Authorization": token.authorization,
        "X-API-Key": config.api_key,
        "Accept": "application/json",
    }


async def fetch_vehicle_document(
    config: MotCheckConfig,
    transport: Transport,
    registration: str,
    token: AccessToken,
) -> Any:
    """Fetch the raw vehicle document for a normalized registration.

    Parameters
    ----------
    config : MotCheckConfig
        Supplies the base URL, path template and API key.
    transport : Transport
        HTTP transport.
    registration : str
        Normalized registration, used as the final path segment.
    token : AccessToken
        Bearer token from :meth:`motcheck.auth.TokenManager.ensure_token`.

    Returns
    -------
    Any
        The decoded JSON body, not yet validated.

    Raises
    ------
    VehicleNotFoundError
        On HTTP 404.
    UpstreamHttpError
        On any other non-2xx status.
    MalformedUpstreamResponseError
        If the body is not JSON.
    """
    url = config.vehicle_url(quote(registration, safe=""))
    response = await transport.get(url, build_vehicle_headers(config, token))

    if response.status == 404:
        raise VehicleNotFoundError(registration, endpoint=url, body=response.text)
    if not response.ok:
        raise UpstreamHttpError(
            f"Vehicle lookup failed: HTTP {response.status}: {response.text[:200]}",
            status_code=response.status,
            endpoint=url,
            body=response.text,
        )

    try:
        document = json.loads(response.text)
    except json.JSONDecodeError as exc:
        raise MalformedUpstreamResponseError(f"Vehicle response is not JSON: {response.text[:64]}") from exc

    _logger.debug("Vehicle response for %s parsed=%s", registration, redact_for_log(document))
    return document
