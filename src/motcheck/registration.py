"""Registration plate normalization.

The compact form produced here is both the cache key and the value sent
upstream. Only the permissive shape is checked (ASCII letters, digits and
whitespace); plate grammar is left to the caller.
"""

from __future__ import annotations

import re

from motcheck.exceptions import InvalidRegistrationError

_ALLOWED = re.compile(r"[A-Za-z0-9\s]+", re.ASCII)
_WHITESPACE = re.compile(r"\s+", re.ASCII)


def normalize_registration(raw: str | None) -> str:
    """Uppercase *raw* and strip all whitespace.

    The shape is checked before case folding, so characters whose
    uppercase form is ASCII (``"ß"``, ``"ſ"``) are still rejected.

    Raises
    ------
    InvalidRegistrationError
        If *raw* is ``None``, empty, whitespace only, or contains anything
        other than ASCII letters, digits and whitespace.
    """
    if raw is None or not _WHITESPACE.sub("", raw):
        raise InvalidRegistrationError("Registration cannot be empty", registration=raw)

    if not _ALLOWED.fullmatch(raw):
        raise InvalidRegistrationError(
            f"Registration {raw!r} may only contain letters, digits and spaces",
            registration=raw,
        )
    return _WHITESPACE.sub("", raw).upper()
