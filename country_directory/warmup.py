"""Startup warmup: load the country dataset and hydrate favorites before serving.

The dataset is fetched exactly once; when the provider fails the directory
still starts, serving an empty dataset flagged as failed.
"""

from __future__ import annotations

import logging
import time

from country_directory.errors import DirectoryError
from country_directory.services.dataset import DatasetCache
from country_directory.services.facets import FacetIndex
from country_directory.services.favorites import FavoritesStore
from country_directory.services.provider import CountryProvider

logger = logging.getLogger(__name__)


async def warmup_dataset(dataset: DatasetCache, provider: CountryProvider) -> None:
    """Await the single dataset fetch and record the outcome on ``dataset``."""

    start = time.time()
    try:
        await dataset.load_from(provider)
    except DirectoryError as e:
        logger.warning(f"Dataset warmup skipped: {e}")
        return

    elapsed = (time.time() - start) * 1000
    if dataset.failed:
        logger.warning(f"⚠ Country dataset failed to load ({elapsed:.0f}ms): {dataset.error}")
        return
    logger.info(f"✓ Country dataset loaded: {len(dataset)} countries ({elapsed:.0f}ms)")


def warmup_facets(facet_index: FacetIndex, dataset: DatasetCache) -> None:
    facets = facet_index.refresh(dataset.get_all())
    logger.info(
        f"✓ Facets ready: {len(facets.regions)} regions, {len(facets.languages)} languages"
    )


def warmup_favorites(favorites: FavoritesStore) -> None:
    logger.info(f"✓ Favorites hydrated ({favorites.count} saved)")


async def warmup_all(
    *,
    dataset: DatasetCache,
    provider: CountryProvider,
    facet_index: FacetIndex,
    favorites: FavoritesStore,
) -> None:
    """Run every warmup step in sequence and log the total time."""

    logger.info("=" * 60)
    logger.info("Warming up country directory...")
    logger.info("=" * 60)

    start = time.time()

    await warmup_dataset(dataset, provider)
    warmup_facets(facet_index, dataset)
    warmup_favorites(favorites)

    total_elapsed = (time.time() - start) * 1000
    logger.info("=" * 60)
    logger.info(f"✓ Warmup complete ({total_elapsed:.0f}ms)")
    logger.info("=" * 60)


__all__ = ["warmup_all", "warmup_dataset", "warmup_facets", "warmup_favorites"]
