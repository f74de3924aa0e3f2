"""FastAPI router for the persisted favorites set."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from country_directory.schemas.favorites import (
    FavoritesResponse,
    FavoriteStatus,
    FavoriteToggleResponse,
)
from country_directory.services.dependencies import get_directory_service
from country_directory.services.directory_service import DirectoryService
from country_directory.services.normalization import normalize_code

router = APIRouter()


@router.get("", response_model=FavoritesResponse)
async def list_favorites(
    service: DirectoryService = Depends(get_directory_service),
) -> FavoritesResponse:
    favorites = service.favorites
    return FavoritesResponse(
        total=favorites.count,
        codes=favorites.codes(),
        persist_failed=favorites.persist_failed,
    )


@router.get("/{code}", response_model=FavoriteStatus)
async def get_favorite_status(
    code: str,
    service: DirectoryService = Depends(get_directory_service),
) -> FavoriteStatus:
    return FavoriteStatus(
        code=normalize_code(code),
        is_favorite=service.favorites.is_favorite(code),
    )


@router.post("/{code}/toggle", response_model=FavoriteToggleResponse)
def toggle_favorite(
    code: str,
    service: DirectoryService = Depends(get_directory_service),
) -> FavoriteToggleResponse:
    """Flip membership and return the recomputed directory.

    The current page is kept; it is only clamped when the favorites-only view
    shrinks below it. Declared without ``async`` because the write-through to
    the file or Redis store blocks, so FastAPI runs it in its threadpool.
    """

    try:
        is_favorite, snapshot = service.toggle_favorite(code)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc

    return FavoriteToggleResponse(
        code=normalize_code(code),
        is_favorite=is_favorite,
        total=snapshot.favorite_count,
        snapshot=snapshot,
    )
