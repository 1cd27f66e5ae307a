"""OAuth2 access token model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from motcheck._constants import TOKEN_EXPIRY_MARGIN_SECONDS


class AccessToken(BaseModel):
    """Bearer token obtained from the client-credentials exchange.

    Parameters
    ----------
    access_token : str
        Opaque bearer token sent in the ``Authorization`` header.
    acquired_at : float
        Clock reading (seconds, same clock as the owning
        :class:`~motcheck.auth.TokenManager`) when the token was received.
    expires_in : float or None
        Lifetime reported by the token endpoint.  ``None`` when the response
        carried no usable expiry; such a token is treated as already expired
        so the next request refreshes it.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    access_token: str
    acquired_at: float
    expires_in: float | None = None

    @property
    def expires_at(self) -> float | None:
        """Clock reading after which the token must not be used."""
        if self.expires_in is None:
            return None
        return self.acquired_at + self.expires_in - TOKEN_EXPIRY_MARGIN_SECONDS

    def is_expired(self, now: float) -> bool:
        expires_at = self.expires_at
        if expires_at is None:
            return True
        return now >= expires_at

    @property
    def authorization(self) -> str:
        """Value for the ``Authorization`` header."""
        return f"Bearer {self.access_token}"

    def __repr__(self) -> str:
        return f"AccessToken(acquired_at={self.acquired_at!r}, expires_in={self.expires_in!r})"
