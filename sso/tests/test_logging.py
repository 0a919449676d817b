from __future__ import annotations

from sso.shared.logging import sanitize_message
from sso.shared.logging.sensitive_filter import sanitize_record


def test_password_values_are_redacted() -> None:
    assert sanitize_message("login password=pw123") == "login password=***REDACTED***"


def test_app_secret_is_redacted() -> None:
    assert "top-secret" not in sanitize_message("app loaded secret='top-secret'")


def test_jwt_is_redacted() -> None:
    token = "eyJhbGciOiJIUzI1NiJ9.eyJ1aWQiOjF9.c2lnbmF0dXJlLXZhbHVl"

    assert token not in sanitize_message(f"issued {token}")


def test_werkzeug_hash_is_redacted() -> None:
    hashed = "scrypt:32768:8:1$AbCdEfGh$0123456789abcdef"

    assert hashed not in sanitize_message(f"stored {hashed}")


def test_email_local_part_is_masked() -> None:
    assert sanitize_message("auth.login: attempting email=a@x.com") == (
        "auth.login: attempting email=***@x.com"
    )


def test_sanitize_record_rewrites_message() -> None:
    record = {"message": "password=pw123"}

    assert sanitize_record(record) is True
    assert record["message"] == "password=***REDACTED***"
