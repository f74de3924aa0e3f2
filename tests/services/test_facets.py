"""Tests for facet derivation and memoization."""

from __future__ import annotations

from unittest.mock import patch

from country_directory.services import facets as facets_module
from country_directory.services.facets import FacetIndex, build_facets
from tests.conftest import make_country


def test_regions_first_seen_and_languages_sorted() -> None:
    countries = [
        make_country("JPN", region="Asia", languages={"jpn": "Japanese"}),
        make_country("USA", region="Americas", languages={"eng": "English"}),
        make_country("CAN", region="Americas", languages={"eng": "English", "fra": "French"}),
        make_country("ATA", region=""),
    ]

    facets = build_facets(countries)

    assert facets.regions == ("Asia", "Americas")
    assert facets.languages == ("English", "French", "Japanese")


def test_empty_dataset_has_no_facets() -> None:
    facets = build_facets([])

    assert facets.regions == ()
    assert facets.languages == ()


def test_facet_values_are_distinct() -> None:
    countries = [make_country(f"C{i}", region="Europe", languages={"deu": "German"}) for i in range(4)]

    facets = build_facets(countries)

    assert facets.regions == ("Europe",)
    assert facets.languages == ("German",)


def test_index_recomputes_only_when_dataset_reference_changes(sample_countries) -> None:
    index = FacetIndex()
    dataset = tuple(sample_countries)

    with patch.object(facets_module, "build_facets", wraps=build_facets) as spy:
        first = index.refresh(dataset)
        second = index.refresh(dataset)
        assert spy.call_count == 1

        index.refresh(tuple(sample_countries[:1]))
        assert spy.call_count == 2

    assert first is second
    assert index.regions == ("Americas",)
    assert index.languages == ("English",)
