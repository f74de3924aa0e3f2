"""Tests for the combined filter predicate."""

from __future__ import annotations

from country_directory.schemas.directory import FilterCriteria
from country_directory.services.filters import apply_filters, matches_criteria
from tests.conftest import make_country


def _codes(countries) -> list[str]:
    return [country.code for country in countries]


def test_search_is_case_insensitive_substring(sample_countries) -> None:
    result = apply_filters(sample_countries, FilterCriteria(search_term="uNi"), set())

    assert _codes(result) == ["USA"]


def test_region_filter_preserves_dataset_order(sample_countries) -> None:
    result = apply_filters(sample_countries, FilterCriteria(region="Americas"), set())

    assert _codes(result) == ["USA", "CAN"]


def test_region_match_is_case_sensitive(sample_countries) -> None:
    assert apply_filters(sample_countries, FilterCriteria(region="americas"), set()) == []


def test_language_filter_matches_mapping_values(sample_countries) -> None:
    result = apply_filters(sample_countries, FilterCriteria(language="French"), set())

    assert _codes(result) == ["CAN"]


def test_criteria_combine_with_and(sample_countries) -> None:
    criteria = FilterCriteria(search_term="a", region="Americas", language="English")

    assert _codes(apply_filters(sample_countries, criteria, set())) == ["USA", "CAN"]

    criteria = FilterCriteria(search_term="can", region="Asia")
    assert apply_filters(sample_countries, criteria, set()) == []


def test_favorites_only_ignores_other_criteria(sample_countries) -> None:
    criteria = FilterCriteria(favorites_only=True, search_term="zzz", region="Asia")

    result = apply_filters(sample_countries, criteria, {"JPN", "USA"})

    assert _codes(result) == ["USA", "JPN"]


def test_favorites_only_with_no_favorites_is_empty(sample_countries) -> None:
    assert apply_filters(sample_countries, FilterCriteria(favorites_only=True), set()) == []


def test_missing_fields_fail_non_empty_filters_without_raising() -> None:
    bare = make_country("ATA", name="")

    assert matches_criteria(bare, FilterCriteria()) is True
    assert matches_criteria(bare, FilterCriteria(search_term="ant")) is False
    assert matches_criteria(bare, FilterCriteria(region="Antarctic")) is False
    assert matches_criteria(bare, FilterCriteria(language="English")) is False


def test_result_is_subsequence_and_narrowing_is_monotonic(sample_countries) -> None:
    broad = apply_filters(sample_countries, FilterCriteria(region="Americas"), set())
    narrow = apply_filters(
        sample_countries, FilterCriteria(region="Americas", search_term="can"), set()
    )

    assert set(_codes(narrow)) <= set(_codes(broad))
    positions = [sample_countries.index(country) for country in broad]
    assert positions == sorted(positions)
