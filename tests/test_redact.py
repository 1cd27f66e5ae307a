from __future__ import annotations

from motcheck._redact import REDACTED, is_sensitive_key, redact_for_log


def test_redact_for_log_redacts_credentials() -> None:
    payload = {
        "access_token": "eyJ0eXAi",
        "token_type": "Bearer",
        "expires_in": 3599,
        "headers": {"Authorization": "Bearer eyJ0eXAi", "X-API-Key": "key", "Accept": "application/json"},
        "form": [{"client_secret": "s3cret", "client_id": "abc"}],
    }

    redacted = redact_for_log(payload)

    assert redacted["access_token"] == REDACTED
    assert redacted["token_type"] == "Bearer"
    assert redacted["expires_in"] == 3599
    assert redacted["headers"]["Authorization"] == REDACTED
    assert redacted["headers"]["X-API-Key"] == REDACTED
    assert redacted["headers"]["Accept"] == "application/json"
    assert redacted["form"] == [{"client_secret": REDACTED, "client_id": "abc"}]


def test_redact_for_log_leaves_vehicle_document_readable() -> None:
    document = {"registration": "AB12CDE", "motTests": [{"odometerValue": "50000"}]}
    assert redact_for_log(document) == document


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_is_sensitive_key_ignores_case() -> None:
    assert is_sensitive_key("AUTHORIZATION")
    assert not is_sensitive_key("make")
