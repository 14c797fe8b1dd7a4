"""Configuration management using Pydantic Settings."""

import logging
from typing import Any, Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sentry_sdk.utils import BadDsn, Dsn

from .errors import ConfigurationError


class Settings(BaseSettings):
    """Command settings loaded from SENTRY_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SENTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Destination
    dsn: Optional[str] = None

    # Logging
    log_level: str = "WARNING"

    # Transport
    flush_timeout: float = 2.0  # Seconds to wait for the client queue to drain

    @field_validator("dsn", mode="before")
    @classmethod
    def parse_dsn(cls, v: Any) -> Optional[str]:
        """Treat an empty DSN the same as an unset one."""
        if v is None:
            return None
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v: Any) -> str:
        """Normalize log level names, falling back to WARNING."""
        if not v or not isinstance(v, str):
            return "WARNING"
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            return "WARNING"
        return level

    def get_dsn(self) -> Dsn:
        """
        Resolve the destination credential.

        Returns:
            Parsed DSN

        Raises:
            ConfigurationError: If no DSN is configured or it is malformed
        """
        if not self.dsn:
            raise ConfigurationError(
                "No DSN configured. Set SENTRY_DSN or pass --dsn."
            )
        try:
            return Dsn(self.dsn)
        except (BadDsn, ValueError) as e:
            raise ConfigurationError(f"Invalid DSN {self.dsn!r}: {e}") from e


def load_settings(**values: Any) -> Settings:
    """
    Build settings from the environment, the .env file and explicit values.

    Raises:
        ConfigurationError: If a value cannot be parsed, e.g. a non-numeric
            SENTRY_FLUSH_TIMEOUT
    """
    try:
        return Settings(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid settings: {problems}") from e
