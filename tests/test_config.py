"""Unit tests for core/config.py -- Settings validation.

Settings are built with _env_file=None so a developer's .env cannot leak in.
Keyword arguments take precedence over the environment set in conftest.py.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import Settings


def test_defaults() -> None:
    s = Settings(_env_file=None, bcrypt_rounds=12)
    assert s.port == 3000
    assert s.session_cookie_name == "session_id"
    assert s.last_logout_cookie_prefix == "lastLogged_"
    assert s.cors_origins == ["http://localhost:4200"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"session_ttl_seconds": 0},
        {"session_purge_interval_seconds": -1},
        {"bcrypt_rounds": 3},
        {"bcrypt_rounds": 32},
        {"session_cookie_name": "bad name"},
        {"last_logout_cookie_prefix": "last;"},
        {"credential_backend": "redis"},
    ],
)
def test_invalid_values_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)


def test_list_fields_read_json_from_env(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ORIGINS", '["https://app.example"]')
    assert Settings(_env_file=None).cors_origins == ["https://app.example"]


def test_insecure_cookies_warn_outside_debug(caplog) -> None:
    with caplog.at_level("WARNING", logger="sessionauth.config"):
        Settings(_env_file=None, debug=False, secure_cookies=False)
    assert "SECURE_COOKIES" in caplog.text
