"""In-memory holder for the most recently fetched catalogs."""

import asyncio
import logging

from brewdeck.catalog.fetcher import CatalogFetcher
from brewdeck.catalog.models import CatalogSnapshot

logger = logging.getLogger(__name__)


class CatalogState:
    """
    Holds the current CatalogSnapshot.

    A reload swaps in a new snapshot only after both catalogs were fetched;
    on failure the previous snapshot stays current.
    """

    def __init__(self, fetcher: CatalogFetcher):
        self.fetcher = fetcher
        self._snapshot = CatalogSnapshot()
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    async def reload(self) -> CatalogSnapshot:
        """Fetch both catalogs and replace the snapshot."""
        async with self._lock:
            formulae, casks = await self.fetcher.fetch_catalogs()
            self._snapshot = CatalogSnapshot.from_lists(formulae, casks)
            logger.info(
                f"Catalog replaced: {len(formulae)} formulae, {len(casks)} casks"
            )
            return self._snapshot

    async def ensure_loaded(self) -> CatalogSnapshot:
        """Fetch the catalogs unless a snapshot is already held."""
        if self._snapshot.is_empty:
            return await self.reload()
        return self._snapshot
