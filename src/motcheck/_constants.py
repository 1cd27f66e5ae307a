"""Internal constants shared across the library."""

from datetime import date

DEFAULT_BASE_URL = "https://history.mot.api.gov.uk"
DEFAULT_VEHICLE_PATH = "/v1/trade/vehicles/registration/{registration}"
USER_AGENT = "motcheck/1.0"

#: Lifetime of a cached lookup result in seconds (30 minutes).
CACHE_TTL_SECONDS: float = 30 * 60
CACHE_MAX_ENTRIES: int = 10_000

#: Seconds subtracted from the upstream ``expires_in`` so a token is
#: refreshed slightly before the token endpoint would reject it.
TOKEN_EXPIRY_MARGIN_SECONDS: float = 60.0

DEFAULT_REQUEST_TIMEOUT: float = 30.0

# Zero values used when the upstream document carries no MOT test data.
EPOCH_DATE = date(1970, 1, 1)
NO_MILEAGE = 0
