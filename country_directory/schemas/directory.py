"""Pydantic schemas describing directory state and the snapshots served to clients."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from country_directory.schemas.country import Country

EmptyStateKind = Literal["no_favorites", "no_matches", "no_countries"]


class FilterCriteria(BaseModel):
    """The query currently active in the directory.

    ``favorites_only`` overrides the other fields instead of narrowing them.
    """

    model_config = ConfigDict(frozen=True)

    search_term: str = ""
    region: str = ""
    language: str = ""
    favorites_only: bool = False

    @property
    def has_active_filters(self) -> bool:
        return bool(self.search_term or self.region or self.language)


class Facets(BaseModel):
    model_config = ConfigDict(frozen=True)

    regions: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()


class PageWindow(BaseModel):
    """Numbered page buttons plus the optional trailing last-page shortcut."""

    model_config = ConfigDict(frozen=True)

    pages: tuple[int, ...]
    show_ellipsis: bool = False
    last_page: int | None = None


class DirectoryItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    country: Country
    is_favorite: bool = False


class EmptyState(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: EmptyStateKind
    message: str


class DirectorySnapshot(BaseModel):
    """Immutable view of the directory after the latest recomputation."""

    model_config = ConfigDict(frozen=True)

    items: tuple[DirectoryItem, ...] = ()
    total_count: int = 0
    total_pages: int = 1
    current_page: int = 1
    items_per_page: int
    page_window: PageWindow
    has_previous: bool = False
    has_next: bool = False
    show_pagination: bool = False
    regions: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    favorite_count: int = 0
    favorites: tuple[str, ...] = ()
    favorites_persist_failed: bool = False
    criteria: FilterCriteria
    dataset_loaded: bool = False
    dataset_failed: bool = False
    dataset_error: str | None = None
    empty_state: EmptyState | None = None


class SearchTermUpdate(BaseModel):
    term: str = Field("", max_length=200, description="Free-text name search")


class RegionUpdate(BaseModel):
    region: str = Field("", description="Region facet value; empty clears the filter")


class LanguageUpdate(BaseModel):
    language: str = Field("", description="Language facet value; empty clears the filter")


class FavoritesOnlyUpdate(BaseModel):
    enabled: bool
