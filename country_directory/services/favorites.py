"""Persisted favorites set with write-through storage."""

from __future__ import annotations

import json
import logging

from country_directory.errors import StorageError
from country_directory.services.normalization import normalize_code
from country_directory.storage import KeyValueStore

logger = logging.getLogger(__name__)

FAVORITES_STORAGE_KEY = "countryFavorites"


class FavoritesStore:
    """Membership set of favorite country codes.

    The set is hydrated once from ``store`` and every mutation writes the full
    set back as a JSON array before returning. Storage trouble never escapes:
    unreadable state hydrates as empty and a failed write is logged and
    flagged through :attr:`persist_failed`.
    """

    def __init__(self, store: KeyValueStore, *, key: str = FAVORITES_STORAGE_KEY) -> None:
        self._store = store
        self._key = key
        self._persist_failed = False
        # dict keeps insertion order for the persisted array
        self._codes: dict[str, None] = dict.fromkeys(self._hydrate())

    def _hydrate(self) -> list[str]:
        try:
            raw = self._store.get(self._key)
        except StorageError as exc:
            logger.warning("Favorites could not be read, starting empty: %s", exc)
            return []
        if raw is None:
            return []

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored favorites under %s are not valid JSON; ignoring", self._key)
            return []
        if not isinstance(payload, list):
            logger.warning("Stored favorites under %s are not an array; ignoring", self._key)
            return []

        codes = [normalize_code(item) for item in payload if isinstance(item, str)]
        return [code for code in codes if code]

    def _persist(self) -> None:
        try:
            self._store.set(self._key, json.dumps(list(self._codes)))
        except StorageError as exc:
            self._persist_failed = True
            logger.error("Favorites write failed: %s", exc)
            return
        self._persist_failed = False

    def toggle(self, code: str) -> bool:
        """Flip membership of ``code`` and return the new membership."""

        normalized = normalize_code(code)
        if not normalized:
            raise ValueError("Country code must not be blank")

        if normalized in self._codes:
            del self._codes[normalized]
            is_favorite = False
        else:
            self._codes[normalized] = None
            is_favorite = True

        self._persist()
        logger.debug("Favorite %s -> %s", normalized, is_favorite)
        return is_favorite

    def is_favorite(self, code: str) -> bool:
        return normalize_code(code) in self._codes

    def all(self) -> frozenset[str]:
        return frozenset(self._codes)

    def codes(self) -> list[str]:
        return list(self._codes)

    @property
    def count(self) -> int:
        return len(self._codes)

    @property
    def persist_failed(self) -> bool:
        return self._persist_failed

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.is_favorite(code)

    def __len__(self) -> int:
        return len(self._codes)


__all__ = ["FAVORITES_STORAGE_KEY", "FavoritesStore"]
