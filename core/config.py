"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for SessionAuth happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. session_ttl_seconds -> SESSION_TTL_SECONDS). List fields accept
      JSON (CORS_ORIGINS='["http://localhost:4200"]').

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
import string
from functools import lru_cache
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("sessionauth.config")

# Characters http.cookies accepts in a cookie name.
_LEGAL_COOKIE_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~:")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 3000

    # ------------------------------------------------------------------
    # Credential store
    # ------------------------------------------------------------------

    credential_backend: Literal["sql", "memory"] = "sql"
    database_url: str = "sqlite:///./users.db"
    bcrypt_rounds: int = 12

    # ------------------------------------------------------------------
    # Sessions and cookies
    # ------------------------------------------------------------------

    session_cookie_name: str = "session_id"
    # Idle timeout -- every successful resolve pushes the deadline forward.
    session_ttl_seconds: int = 3600
    session_purge_interval_seconds: int = 300
    last_logout_cookie_prefix: str = "lastLogged_"
    secure_cookies: bool = False

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    cors_origins: list[str] = ["http://localhost:4200"]
    allowed_hosts: list[str] = ["localhost", "127.0.0.1", "*.localhost"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_limits(self) -> "Settings":
        """Reject values the session and credential layers cannot work with.

        bcrypt itself refuses cost factors outside 4..31, so failing here
        surfaces the problem at startup instead of on the first registration.
        Cookie names are checked because Starlette raises on illegal names
        only when the first response is written.
        """
        if self.session_ttl_seconds <= 0:
            raise ValueError("SESSION_TTL_SECONDS must be positive.")
        if self.session_purge_interval_seconds <= 0:
            raise ValueError("SESSION_PURGE_INTERVAL_SECONDS must be positive.")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31.")
        for name in (self.session_cookie_name, self.last_logout_cookie_prefix):
            if not name or not set(name) <= _LEGAL_COOKIE_CHARS:
                raise ValueError(f"Illegal cookie name: {name!r}")
        if not self.secure_cookies and not self.debug:
            logger.warning("SECURE_COOKIES is off -- session cookies will be sent over plain HTTP.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
