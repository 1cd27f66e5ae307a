"""OAuth2 client-credentials token endpoint.

Endpoint:
  - POST ``config.token_url`` (form encoded)
"""

from __future__ import annotations

import json
import logging
from typing import Any

from motcheck._redact import redact_for_log
from motcheck._transport import HttpResponse
from motcheck.config import MotCheckConfig
from motcheck.exceptions import MalformedTokenResponseError, UpstreamAuthError
from motcheck.models.token import AccessToken

_logger = logging.getLogger(__name__)


def build_token_form(config: MotCheckConfig) -> dict[str, str]:
    """Form body for the client-credentials grant."""
    return {
        "grant_type": "client_credentials",
        "client_id": config.client_id,
        "client_secret": config.client_secret,
        "scope": config.scope_url,
    }


def _parse_expires_in(value: Any) -> float | None:
    """Return a positive lifetime in seconds, or ``None`` if unusable."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    if seconds != seconds or seconds <= 0:  # NaN or non-positive
        return None
    return seconds


def parse_token_response(response: HttpResponse, endpoint: str, now: float) -> AccessToken:
    """Validate a token endpoint response and build the held token.

    Parameters
    ----------
    response : HttpResponse
        Raw response from the token endpoint.
    endpoint : str
        Token URL, recorded on raised errors.
    now : float
        Clock reading stored as the token's acquisition time.

    Raises
    ------
    UpstreamAuthError
        If the endpoint answered with a non-2xx status.
    MalformedTokenResponseError
        If the body is not a JSON object with a non-empty string
        ``access_token``.
    """
    if not response.ok:
        raise UpstreamAuthError(
            f"Token request failed: HTTP {response.status}: {response.text[:200]}",
            status_code=response.status,
            endpoint=endpoint,
            body=response.text,
        )

    try:
        payload = json.loads(response.text)
    except json.JSONDecodeError as exc:
        raise MalformedTokenResponseError(f"Token response is not JSON: {response.text[:64]}") from exc

    if not isinstance(payload, dict):
        raise MalformedTokenResponseError("Token response is not a JSON object")

    _logger.debug("Token response parsed=%s", redact_for_log(payload))

    access_token = payload.get("access_token")
    if not isinstance(access_token, str) or not access_token.strip():
        raise MalformedTokenResponseError("Token response missing access_token")

    return AccessToken(
        access_token=access_token,
        acquired_at=now,
        expires_in=_parse_expires_in(payload.get("expires_in")),
    )
