"""Centralized configuration management for the country directory service."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load a local .env file before the settings singleton is created so every
# consumer importing :mod:`country_directory.settings` sees the same values.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_COUNTRIES_API_URL = "https://restcountries.com/v3.1/all"
DEFAULT_COUNTRY_DETAIL_URL = "https://restcountries.com/v3.1/alpha/{code}"
DEFAULT_EXCHANGE_RATES_URL = "https://api.exchangerate-api.com/v4/latest/USD"
DEFAULT_HTTP_TIMEOUT_SECONDS = 15.0
DEFAULT_FAVORITES_FILE = "./data/favorites.json"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_LOG_LEVEL = "INFO"

FavoritesBackend = Literal["memory", "file", "redis"]


def _normalize_origin(origin: str) -> str:
    """Return the origin stripped of whitespace and trailing slashes."""

    return origin.strip().rstrip("/")


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Besides the raw environment values the class exposes a handful of derived
    helpers (numeric log level, parsed CORS origins, the favorites file path)
    so downstream modules never repeat the parsing logic.
    """

    _explicit_redis_url: bool = PrivateAttr(default=False)
    _explicit_cors_allow_origins: bool = PrivateAttr(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def __init__(self, **values: object) -> None:
        """Capture explicit overrides prior to delegating to ``BaseSettings``."""

        normalized_keys = {str(key).lower() for key in values}
        super().__init__(**values)
        self._explicit_redis_url = "redis_url" in normalized_keys
        self._explicit_cors_allow_origins = (
            "cors_allow_origins_raw" in normalized_keys
            or "cors_allow_origins" in normalized_keys
        )
        redis_env = os.getenv("REDIS_URL")
        if redis_env is not None and redis_env.strip():
            self._explicit_redis_url = True
        cors_env = os.getenv("CORS_ALLOW_ORIGINS")
        if cors_env is not None and cors_env.strip():
            self._explicit_cors_allow_origins = True

    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )
    countries_api_url: str = Field(
        default=DEFAULT_COUNTRIES_API_URL,
        alias="COUNTRIES_API_URL",
        description="Endpoint returning the full REST Countries v3.1 dataset.",
    )
    country_detail_url: str = Field(
        default=DEFAULT_COUNTRY_DETAIL_URL,
        alias="COUNTRY_DETAIL_URL",
        description=(
            "Template for the single-country endpoint. ``{code}`` is replaced by"
            " the requested three-letter code."
        ),
    )
    exchange_rates_url: str = Field(
        default=DEFAULT_EXCHANGE_RATES_URL,
        alias="EXCHANGE_RATES_URL",
        description="Endpoint returning USD-based exchange rates keyed by currency code.",
    )
    http_timeout_seconds: float = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        alias="HTTP_TIMEOUT_SECONDS",
        gt=0,
        description="Timeout applied to every outbound provider request.",
    )
    countries_data_file: str | None = Field(
        default=None,
        alias="COUNTRIES_DATA_FILE",
        description=(
            "Optional path to a local JSON dump of the dataset. When set the"
            " service loads countries from disk instead of the HTTP API."
        ),
    )
    favorites_backend: FavoritesBackend = Field(
        default="file",
        alias="FAVORITES_BACKEND",
        description="Key-value store backing the favorites set: memory, file or redis.",
    )
    favorites_file: str = Field(
        default=DEFAULT_FAVORITES_FILE,
        alias="FAVORITES_FILE",
        description="JSON file used by the ``file`` favorites backend.",
    )
    redis_url: str = Field(
        default=DEFAULT_REDIS_URL,
        alias="REDIS_URL",
        description="Redis connection string consumed by the ``redis`` favorites backend.",
    )
    cors_allow_origins_raw: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of CORS origins allowed to call the API.",
    )

    @property
    def cors_allow_origins(self) -> list[str]:
        """Return normalised CORS origins supplied via environment variables."""

        if not self.cors_allow_origins_raw:
            return []

        origins = [
            _normalize_origin(origin)
            for origin in self.cors_allow_origins_raw.split(",")
            if origin.strip()
        ]
        return [origin for origin in origins if origin]

    @property
    def favorites_path(self) -> Path:
        return Path(self.favorites_file).expanduser()

    @property
    def data_file_path(self) -> Path | None:
        if not self.countries_data_file:
            return None
        return Path(self.countries_data_file).expanduser()

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if (
            self.favorites_backend == "redis"
            and not self._explicit_redis_url
            and self.redis_url == DEFAULT_REDIS_URL
        ):
            warnings.append(
                "REDIS_URL is not set - favorites will use the default localhost "
                "Redis instance"
            )

        if not self._explicit_cors_allow_origins and not self.cors_allow_origins:
            warnings.append(
                "CORS_ALLOW_ORIGINS is not set - using default localhost origins only "
                "(may cause CORS issues in production)"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_COUNTRIES_API_URL",
    "DEFAULT_COUNTRY_DETAIL_URL",
    "DEFAULT_EXCHANGE_RATES_URL",
    "DEFAULT_FAVORITES_FILE",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_REDIS_URL",
    "FavoritesBackend",
    "get_settings",
]
