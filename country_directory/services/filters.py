"""Directory filtering helpers."""

from __future__ import annotations

from collections.abc import Collection, Iterable

from country_directory.schemas.country import Country
from country_directory.schemas.directory import FilterCriteria


def matches_criteria(country: Country, criteria: FilterCriteria) -> bool:
    """Return True when ``country`` passes search, region and language filters."""

    if criteria.search_term:
        name = country.common_name or ""
        if criteria.search_term.lower() not in name.lower():
            return False

    if criteria.region and country.region != criteria.region:
        return False

    if criteria.language:
        languages = country.languages or {}
        if criteria.language not in languages.values():
            return False

    return True


def apply_filters(
    countries: Iterable[Country],
    criteria: FilterCriteria,
    favorites: Collection[str],
) -> list[Country]:
    """Return the visible subset of ``countries`` in dataset order.

    Favorites-only mode replaces the other criteria rather than narrowing
    them: the result is every favorite country, whatever the search term,
    region or language currently hold.
    """

    if criteria.favorites_only:
        return [country for country in countries if country.code in favorites]
    return [country for country in countries if matches_criteria(country, criteria)]


__all__ = ["apply_filters", "matches_criteria"]
