"""Helpers for safe debug logging.

The proxy handles OAuth client secrets, bearer tokens and the DVSA API key.
``redact_for_log`` masks those before request or response data reaches a
DEBUG log line.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

REDACTED = "<redacted>"

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "access_token",
        "refresh_token",
        "id_token",
        "client_secret",
        "authorization",
        "x-api-key",
        "api_key",
    }
)

_MAX_DEPTH = 20


def is_sensitive_key(key: object) -> bool:
    """Whether values stored under *key* must never be logged."""
    return str(key).lower() in _SENSITIVE_KEYS


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Mappings have sensitive keys masked (case-insensitive), lists and tuples
    are walked, long strings are truncated and anything else is rendered
    with ``repr`` so object internals are not dumped.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if isinstance(value, Mapping):
        return {
            str(k): REDACTED if is_sensitive_key(k) else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
            for k, v in value.items()
        }

    if isinstance(value, (list, tuple)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
