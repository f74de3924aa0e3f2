"""Recomputation pipeline tying the directory components together.

:class:`DirectoryService` owns the two pieces of client state (filter
criteria and the current page). Every mutator runs the pipeline

    dataset -> facets -> filters -> pagination -> snapshot

and returns a fresh immutable :class:`DirectorySnapshot`. Criteria changes
reset the page to 1; favorite toggles do not.
"""

from __future__ import annotations

import logging

from country_directory.schemas.country import Country
from country_directory.schemas.directory import (
    DirectoryItem,
    DirectorySnapshot,
    EmptyState,
    Facets,
    FilterCriteria,
)
from country_directory.services.dataset import DatasetCache
from country_directory.services.facets import FacetIndex
from country_directory.services.favorites import FavoritesStore
from country_directory.services.filters import apply_filters
from country_directory.services.pagination import ITEMS_PER_PAGE, Paginator, clamp_page

logger = logging.getLogger(__name__)

NO_FAVORITES_MESSAGE = "No favorites yet"
NO_MATCHES_MESSAGE = "No countries match your search"
NO_COUNTRIES_MESSAGE = "No countries found"


class DirectoryService:
    def __init__(
        self,
        *,
        dataset: DatasetCache,
        favorites: FavoritesStore,
        facet_index: FacetIndex | None = None,
        paginator: Paginator | None = None,
    ) -> None:
        self._dataset = dataset
        self._favorites = favorites
        self._facet_index = facet_index or FacetIndex()
        self._paginator = paginator or Paginator(ITEMS_PER_PAGE)
        self._criteria = FilterCriteria()
        self._current_page = 1

    @property
    def dataset(self) -> DatasetCache:
        return self._dataset

    @property
    def favorites(self) -> FavoritesStore:
        return self._favorites

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def current_page(self) -> int:
        return self._current_page

    # -- criteria ------------------------------------------------------------

    def _update_criteria(self, **changes: object) -> DirectorySnapshot:
        updated = self._criteria.model_copy(update=changes)
        if updated != self._criteria:
            self._criteria = updated
            self._current_page = 1
            logger.debug("Filter criteria changed: %s", updated)
        return self.snapshot()

    def set_search_term(self, term: str) -> DirectorySnapshot:
        return self._update_criteria(search_term=term or "")

    def set_region(self, region: str | None) -> DirectorySnapshot:
        return self._update_criteria(region=region or "")

    def set_language(self, language: str | None) -> DirectorySnapshot:
        return self._update_criteria(language=language or "")

    def set_favorites_only(self, enabled: bool) -> DirectorySnapshot:
        return self._update_criteria(favorites_only=bool(enabled))

    def clear_filters(self) -> DirectorySnapshot:
        """Clear the region and language facets, keeping the search term."""

        return self._update_criteria(region="", language="")

    def clear_all_filters(self) -> DirectorySnapshot:
        return self._update_criteria(search_term="", region="", language="")

    # -- favorites -----------------------------------------------------------

    def toggle_favorite(self, code: str) -> tuple[bool, DirectorySnapshot]:
        is_favorite = self._favorites.toggle(code)
        return is_favorite, self.snapshot()

    # -- pagination ----------------------------------------------------------

    def go_to_page(self, page: int) -> DirectorySnapshot:
        self._current_page = clamp_page(page, self._paginator.total_pages(len(self.filtered())))
        return self.snapshot()

    def next_page(self) -> DirectorySnapshot:
        pages = self._paginator.total_pages(len(self.filtered()))
        self._current_page = self._paginator.next_page(self._current_page, pages)
        return self.snapshot()

    def prev_page(self) -> DirectorySnapshot:
        pages = self._paginator.total_pages(len(self.filtered()))
        self._current_page = self._paginator.previous_page(self._current_page, pages)
        return self.snapshot()

    # -- read side -----------------------------------------------------------

    def facets(self) -> Facets:
        return self._facet_index.refresh(self._dataset.get_all())

    def filtered(self) -> list[Country]:
        return apply_filters(self._dataset.get_all(), self._criteria, self._favorites.all())

    def _empty_state(self, total_count: int) -> EmptyState | None:
        if total_count:
            return None
        if self._criteria.favorites_only:
            return EmptyState(kind="no_favorites", message=NO_FAVORITES_MESSAGE)
        if self._criteria.has_active_filters:
            return EmptyState(kind="no_matches", message=NO_MATCHES_MESSAGE)
        return EmptyState(kind="no_countries", message=NO_COUNTRIES_MESSAGE)

    def snapshot(self) -> DirectorySnapshot:
        facets = self.facets()
        favorites = self._favorites.all()
        filtered = self.filtered()
        total_count = len(filtered)
        pages = self._paginator.total_pages(total_count)

        # Toggling favorites can shrink the result under the current page.
        self._current_page = clamp_page(self._current_page, pages)
        page = self._current_page

        items = tuple(
            DirectoryItem(country=country, is_favorite=country.code in favorites)
            for country in self._paginator.visible_slice(filtered, page)
        )
        return DirectorySnapshot(
            items=items,
            total_count=total_count,
            total_pages=pages,
            current_page=page,
            items_per_page=self._paginator.items_per_page,
            page_window=self._paginator.page_window(page, pages),
            has_previous=page > 1,
            has_next=page < pages,
            show_pagination=self._paginator.should_paginate(total_count),
            regions=facets.regions,
            languages=facets.languages,
            favorite_count=self._favorites.count,
            favorites=tuple(self._favorites.codes()),
            favorites_persist_failed=self._favorites.persist_failed,
            criteria=self._criteria,
            dataset_loaded=self._dataset.loaded,
            dataset_failed=self._dataset.failed,
            dataset_error=self._dataset.error,
            empty_state=self._empty_state(total_count),
        )


__all__ = [
    "DirectoryService",
    "NO_COUNTRIES_MESSAGE",
    "NO_FAVORITES_MESSAGE",
    "NO_MATCHES_MESSAGE",
]
