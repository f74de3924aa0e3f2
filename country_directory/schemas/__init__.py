from country_directory.schemas.country import Country, CountryDetail, CurrencyInfo
from country_directory.schemas.directory import (
    DirectoryItem,
    DirectorySnapshot,
    EmptyState,
    Facets,
    FilterCriteria,
    PageWindow,
)

__all__ = [
    "Country",
    "CountryDetail",
    "CurrencyInfo",
    "DirectoryItem",
    "DirectorySnapshot",
    "EmptyState",
    "Facets",
    "FilterCriteria",
    "PageWindow",
]
