"""Conversion of raw REST Countries v3.1 payloads into :class:`Country` records."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from country_directory.schemas.country import Country, CurrencyInfo

logger = logging.getLogger(__name__)


def normalize_code(value: Any) -> str:
    """Return ``value`` as a stripped, uppercase code ("" when unusable)."""

    if not isinstance(value, str):
        return ""
    return value.strip().upper()


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_str_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value else ()
    if not isinstance(value, Iterable):
        return ()
    return tuple(item for item in value if isinstance(item, str) and item)


def _languages(value: Any) -> dict[str, str]:
    return {
        str(key): name
        for key, name in _as_mapping(value).items()
        if isinstance(name, str) and name
    }


def _currencies(value: Any) -> dict[str, CurrencyInfo]:
    currencies: dict[str, CurrencyInfo] = {}
    for key, info in _as_mapping(value).items():
        info_map = _as_mapping(info)
        currencies[str(key)] = CurrencyInfo(
            name=_as_str(info_map.get("name")),
            symbol=_as_str(info_map.get("symbol")),
        )
    return currencies


def _flag_url(value: Any) -> str:
    flags = _as_mapping(value)
    return _as_str(flags.get("png")) or _as_str(flags.get("svg"))


def _as_count(value: Any) -> int:
    """Whole, non-negative count; floats are truncated and anything else is 0."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return max(0, int(value))


def _as_area(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    area = float(value)
    if not math.isfinite(area):
        return None
    return max(0.0, area)


def country_from_payload(raw: Mapping[str, Any]) -> Country | None:
    """Build a :class:`Country` from one raw record.

    Returns ``None`` when the record has no usable code or fails validation;
    the caller decides whether that is worth a log line.
    """

    code = normalize_code(raw.get("cca3"))
    if not code:
        return None

    name = _as_mapping(raw.get("name"))
    subregion = _as_str(raw.get("subregion")) or None

    try:
        return Country(
            code=code,
            common_name=_as_str(name.get("common")),
            official_name=_as_str(name.get("official")),
            capitals=_as_str_tuple(raw.get("capital")),
            population=_as_count(raw.get("population")),
            region=_as_str(raw.get("region")),
            subregion=subregion,
            languages=_languages(raw.get("languages")),
            currencies=_currencies(raw.get("currencies")),
            flag_image_url=_flag_url(raw.get("flags")),
            area=_as_area(raw.get("area")),
            borders=tuple(normalize_code(border) for border in _as_str_tuple(raw.get("borders"))),
        )
    except ValidationError as exc:
        logger.warning("Skipping country %s that failed validation: %s", code, exc)
        return None


def normalize_countries(payload: Any) -> list[Country]:
    """Normalize a provider payload into unique, ordered country records.

    Non-dict items, records without a code and invalid records are skipped.
    When two records share a code the first one wins.
    """

    if isinstance(payload, Mapping):
        payload = [payload]
    if not isinstance(payload, list):
        raise ValueError("Country payload must be a JSON array of objects")

    countries: list[Country] = []
    seen: set[str] = set()
    skipped = 0
    for raw in payload:
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        country = country_from_payload(raw)
        if country is None:
            skipped += 1
            continue
        if country.code in seen:
            logger.warning("Duplicate country code %s ignored", country.code)
            skipped += 1
            continue
        seen.add(country.code)
        countries.append(country)

    if skipped:
        logger.warning("Skipped %d unusable country records", skipped)
    return countries


__all__ = ["country_from_payload", "normalize_code", "normalize_countries"]
