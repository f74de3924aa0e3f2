"""FastAPI router exposing the filter and pagination surface of the directory."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from country_directory.schemas.directory import (
    DirectorySnapshot,
    Facets,
    FavoritesOnlyUpdate,
    LanguageUpdate,
    RegionUpdate,
    SearchTermUpdate,
)
from country_directory.services.dependencies import get_directory_service
from country_directory.services.directory_service import DirectoryService

router = APIRouter()


@router.get("", response_model=DirectorySnapshot)
async def get_snapshot(
    service: DirectoryService = Depends(get_directory_service),
) -> DirectorySnapshot:
    """Return the page of countries for the current criteria."""

    return service.snapshot()


@router.get("/facets", response_model=Facets)
async def get_facets(
    service: DirectoryService = Depends(get_directory_service),
) -> Facets:
    """Regions and languages available for the facet dropdowns."""

    return service.facets()


@router.post("/search", response_model=DirectorySnapshot)
async def set_search_term(
    payload: SearchTermUpdate,
    service: DirectoryService = Depends(get_directory_service),
) -> DirectorySnapshot:
    return service.set_search_term(payload.term)


@router.post("/region", response_model=DirectorySnapshot)
async def set_region(
    payload: RegionUpdate,
    service: DirectoryService = Depends(get_directory_service),
) -> DirectorySnapshot:
    """Select a region; an empty value shows every region."""

    return service.set_region(payload.region)


@router.post("/language", response_model=DirectorySnapshot)
async def set_language(
    payload: LanguageUpdate,
    service: DirectoryService = Depends(get_directory_service),
) -> DirectorySnapshot:
    return service.set_language(payload.language)


@router.post("/favorites-only", response_model=DirectorySnapshot)
async def set_favorites_only(
    payload: FavoritesOnlyUpdate,
    service: DirectoryService = Depends(get_directory_service),
) -> DirectorySnapshot:
    return service.set_favorites_only(payload.enabled)


@router.post("/clear-filters", response_model=DirectorySnapshot)
async def clear_filters(
    service: DirectoryService = Depends(get_directory_service),
) -> DirectorySnapshot:
    """Reset the region and language dropdowns."""

    return service.clear_filters()


@router.post("/clear-all", response_model=DirectorySnapshot)
async def clear_all_filters(
    service: DirectoryService = Depends(get_directory_service),
) -> DirectorySnapshot:
    return service.clear_all_filters()


@router.post("/pages/{page}", response_model=DirectorySnapshot)
async def go_to_page(
    page: int = Path(..., ge=1, description="1-based page number; clamped to the last page"),
    service: DirectoryService = Depends(get_directory_service),
) -> DirectorySnapshot:
    return service.go_to_page(page)


@router.post("/next", response_model=DirectorySnapshot)
async def next_page(
    service: DirectoryService = Depends(get_directory_service),
) -> DirectorySnapshot:
    return service.next_page()


@router.post("/prev", response_model=DirectorySnapshot)
async def prev_page(
    service: DirectoryService = Depends(get_directory_service),
) -> DirectorySnapshot:
    return service.prev_page()
