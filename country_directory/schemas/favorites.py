"""Pydantic schemas that power the favorites API surface."""

from __future__ import annotations

from pydantic import BaseModel, Field

from country_directory.schemas.directory import DirectorySnapshot


class FavoritesResponse(BaseModel):
    """Current favorite codes in insertion order."""

    total: int = Field(..., ge=0)
    codes: list[str] = Field(default_factory=list)
    persist_failed: bool = Field(
        False,
        description="True when the last write to the backing store did not succeed.",
    )


class FavoriteStatus(BaseModel):
    code: str
    is_favorite: bool


class FavoriteToggleResponse(FavoriteStatus):
    """Membership after a toggle together with the recomputed directory."""

    total: int = Field(..., ge=0)
    snapshot: DirectorySnapshot
