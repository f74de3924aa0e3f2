"""Data providers supplying the country dataset and single-country details.

Providers never raise for upstream trouble: network errors, HTTP status
errors and malformed JSON are logged and reported as ``ok=False`` results so
the directory can degrade to an empty dataset. No retries are attempted.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import httpx

from country_directory.schemas.country import Country
from country_directory.services.normalization import (
    country_from_payload,
    normalize_code,
    normalize_countries,
)
from country_directory.settings import AppSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderResult:
    ok: bool
    countries: tuple[Country, ...] = ()
    error: str | None = None
    elapsed_ms: int = 0


@dataclass(frozen=True)
class CountryLookupResult:
    ok: bool
    country: Country | None = None
    error: str | None = None


@runtime_checkable
class CountryProvider(Protocol):
    """Collaborator surface consumed by the dataset cache and detail service."""

    async def fetch_all(self) -> ProviderResult:
        """Return the full ordered dataset or a failed result."""

    async def fetch_country(self, code: str) -> CountryLookupResult:
        """Return one country (``country=None`` when unknown) or a failed result."""

    async def fetch_exchange_rate(self, currency_code: str) -> float | None:
        """Return units of ``currency_code`` per US dollar when available."""


def _elapsed_ms(start: float) -> int:
    return int((time.time() - start) * 1000)


class RestCountriesProvider:
    """HTTP provider backed by the public REST Countries and exchange-rate APIs."""

    def __init__(
        self,
        *,
        countries_url: str,
        detail_url: str,
        exchange_rates_url: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._countries_url = countries_url
        self._detail_url = detail_url
        self._exchange_rates_url = exchange_rates_url
        self._timeout = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: AppSettings) -> RestCountriesProvider:
        return cls(
            countries_url=settings.countries_api_url,
            detail_url=settings.country_detail_url,
            exchange_rates_url=settings.exchange_rates_url,
            timeout_seconds=settings.http_timeout_seconds,
        )

    @property
    def description(self) -> str:
        return self._countries_url

    async def _get_json(self, url: str) -> Any:
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            try:
                return response.json()
            except json.JSONDecodeError as exc:
                raise ValueError(f"Response is not valid JSON from {url}") from exc

    async def fetch_all(self) -> ProviderResult:
        start = time.time()
        try:
            payload = await self._get_json(self._countries_url)
            countries = normalize_countries(payload)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Country dataset fetch failed: %s", exc)
            return ProviderResult(ok=False, error=str(exc), elapsed_ms=_elapsed_ms(start))

        return ProviderResult(
            ok=True, countries=tuple(countries), elapsed_ms=_elapsed_ms(start)
        )

    async def fetch_country(self, code: str) -> CountryLookupResult:
        normalized = normalize_code(code)
        url = self._detail_url.format(code=normalized)
        try:
            payload = await self._get_json(url)
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                return CountryLookupResult(ok=True, country=None)
            logger.error("Country lookup for %s failed: %s", normalized, exc)
            return CountryLookupResult(ok=False, error=str(exc))
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Country lookup for %s failed: %s", normalized, exc)
            return CountryLookupResult(ok=False, error=str(exc))

        # The alpha endpoint answers with a one-element array.
        record = payload[0] if isinstance(payload, list) and payload else payload
        country = country_from_payload(record) if isinstance(record, dict) else None
        return CountryLookupResult(ok=True, country=country)

    async def fetch_exchange_rate(self, currency_code: str) -> float | None:
        try:
            payload = await self._get_json(self._exchange_rates_url)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Exchange rate fetch failed: %s", exc)
            return None

        rates = payload.get("rates") if isinstance(payload, dict) else None
        if not isinstance(rates, dict):
            return None
        rate = rates.get(currency_code)
        if isinstance(rate, (int, float)) and rate > 0:
            return float(rate)
        return None


class JsonFileProvider:
    """Offline provider reading a REST Countries dump from disk.

    Exchange rates are not available offline, so detail lookups carry none.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def description(self) -> str:
        return str(self._path)

    async def fetch_all(self) -> ProviderResult:
        start = time.time()
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
            countries = normalize_countries(payload)
        except (OSError, ValueError) as exc:
            logger.error("Country dataset file %s unusable: %s", self._path, exc)
            return ProviderResult(ok=False, error=str(exc), elapsed_ms=_elapsed_ms(start))
        return ProviderResult(
            ok=True, countries=tuple(countries), elapsed_ms=_elapsed_ms(start)
        )

    async def fetch_country(self, code: str) -> CountryLookupResult:
        result = await self.fetch_all()
        if not result.ok:
            return CountryLookupResult(ok=False, error=result.error)
        normalized = normalize_code(code)
        country = next((c for c in result.countries if c.code == normalized), None)
        return CountryLookupResult(ok=True, country=country)

    async def fetch_exchange_rate(self, currency_code: str) -> float | None:
        return None


def build_provider(settings: AppSettings) -> CountryProvider:
    """Return the offline provider when a data file is configured, else HTTP."""

    data_file = settings.data_file_path
    if data_file is not None:
        return JsonFileProvider(data_file)
    return RestCountriesProvider.from_settings(settings)


__all__ = [
    "CountryLookupResult",
    "CountryProvider",
    "JsonFileProvider",
    "ProviderResult",
    "RestCountriesProvider",
    "build_provider",
]
