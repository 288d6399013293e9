"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the user management service happen here.
No module should call os.getenv() or os.environ.get() directly -- import
get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. jwt_key -> JWT_KEY). Type coercion and validation are built in.

  JwtConfig: the signing key, issuer and audience are copied out of Settings
      into a small frozen struct that is handed to the token issuer at
      construction time. The issuer never reads Settings itself.

Security notes:
  JWT_KEY shorter than 32 chars is rejected outright. HS256 signing relies on
  key entropy -- a short key weakens every token.

  In production mode (DEBUG not set or false), a missing JWT_KEY is a hard
  startup failure. In dev mode a random key is generated with a warning, so
  tokens do not survive a restart.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or cache/.
"""

import logging
import secrets
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("usermanagement.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'user_management.db'}"
_DEFAULT_CACHE_PATH = str(Path(__file__).resolve().parent.parent / "user_cache.db")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file. The model_validator enforces
    the JWT_KEY policy at startup.
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
    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # JWT
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured". The model_validator
    # below either generates a dev key or raises, so callers never see "".
    jwt_key: str = ""
    jwt_issuer: str = "https://localhost"
    jwt_audience: str = "https://localhost"

    # ------------------------------------------------------------------
    # Lookup cache
    # ------------------------------------------------------------------

    user_cache_enabled: bool = True
    # A file, so the API process and the management CLI see the same entries.
    user_cache_path: str = _DEFAULT_CACHE_PATH
    user_cache_ttl_seconds: int = 600

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_jwt_key(self) -> "Settings":
        """Enforce the JWT_KEY policy.

        Dev mode (DEBUG=true): auto-generate a random key with a warning.
        Production mode: refuse to start if JWT_KEY is missing.
        Both modes: reject keys shorter than 32 characters.
        """
        if not self.jwt_key:
            if self.debug:
                self.jwt_key = secrets.token_hex(32)
                logger.warning("WARNING: Using auto-generated JWT_KEY. Issued tokens will not survive a restart.")
            else:
                raise ValueError(
                    "JWT_KEY is required in production mode. "
                    "Set JWT_KEY in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.jwt_key) < 32:
            raise ValueError("JWT_KEY must be at least 32 characters.")
        return self


@dataclass(frozen=True)
class JwtConfig:
    """Signing key, issuer and audience for bearer tokens."""

    key: str
    issuer: str
    audience: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "JwtConfig":
        return cls(key=settings.jwt_key, issuer=settings.jwt_issuer, audience=settings.jwt_audience)


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
