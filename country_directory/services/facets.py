"""Facet choices derived from the loaded dataset."""

from __future__ import annotations

from collections.abc import Sequence

from country_directory.schemas.country import Country
from country_directory.schemas.directory import Facets


def build_facets(countries: Sequence[Country]) -> Facets:
    """Return distinct regions (first-seen order) and languages (sorted)."""

    regions: dict[str, None] = {}
    languages: set[str] = set()
    for country in countries:
        if country.region:
            regions.setdefault(country.region, None)
        languages.update(name for name in country.languages.values() if name)

    return Facets(regions=tuple(regions), languages=tuple(sorted(languages)))


class FacetIndex:
    """Memoizes :func:`build_facets` on the identity of the dataset object."""

    def __init__(self) -> None:
        self._source: Sequence[Country] | None = None
        self._facets = Facets()

    def refresh(self, countries: Sequence[Country]) -> Facets:
        """Return facets for ``countries``, rebuilding only when a different list is passed.

        The check is by identity, so a dataset that is mutated in place is not
        picked up. :class:`DatasetCache` hands out one tuple per load.
        """

        if countries is not self._source:
            self._facets = build_facets(countries)
            self._source = countries
        return self._facets

    @property
    def facets(self) -> Facets:
        return self._facets

    @property
    def regions(self) -> tuple[str, ...]:
        return self._facets.regions

    @property
    def languages(self) -> tuple[str, ...]:
        return self._facets.languages


__all__ = ["FacetIndex", "build_facets"]
