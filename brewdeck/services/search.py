"""
Incremental catalog search.

Filtering runs as a background task per query. A new query supersedes the
pass in flight: the old pass is cancelled and, even if it gets as far as
finishing, never publishes its result.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, TypeVar

from brewdeck.catalog.models import Cask, CatalogSnapshot, Formula

logger = logging.getLogger(__name__)

E = TypeVar("E", Formula, Cask)

DEFAULT_BATCH_SIZE = 256


@dataclass(frozen=True)
class FilterResult:
    """Both filtered catalogs for one query, published as a single update."""
    query: str
    formulae: tuple[Formula, ...]
    casks: tuple[Cask, ...]

    def to_dict(self, limit: Optional[int] = None) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "query": self.query,
            "formula_count": len(self.formulae),
            "cask_count": len(self.casks),
            "formulae": [f.model_dump() for f in self.formulae[:limit]],
            "casks": [c.model_dump() for c in self.casks[:limit]],
        }


def matches(search_key: str, needle: str) -> bool:
    """Case-insensitive containment; needle must already be casefolded."""
    return not needle or needle in search_key.casefold()


def filter_snapshot(snapshot: CatalogSnapshot, query: str) -> FilterResult:
    """Filter a snapshot in one go, preserving catalog order."""
    needle = query.casefold()
    return FilterResult(
        query=query,
        formulae=tuple(f for f in snapshot.formulae if matches(f.search_key, needle)),
        casks=tuple(c for c in snapshot.casks if matches(c.search_key, needle)),
    )


class IncrementalFilter:
    """
    Search-as-you-type filter over the in-memory catalogs.

    Each set_query() starts a new pass and supersedes the previous one.
    Passes check whether they are still current before every element and
    yield to the event loop every batch_size elements, so a superseded pass
    stops almost immediately. Only a pass that is still current when it
    completes publishes, and it publishes both lists at once.

    Attributes:
        result: The most recently published FilterResult, or None
    """

    def __init__(
        self,
        snapshot_provider: Callable[[], CatalogSnapshot],
        on_update: Optional[Callable[[FilterResult], None]] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        """
        Args:
            snapshot_provider: Returns the catalogs to filter; read once per pass
            on_update: Called on the event loop with each published result
            batch_size: Elements processed between yields to the event loop
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.snapshot_provider = snapshot_provider
        self.on_update = on_update
        self.batch_size = batch_size
        self.result: Optional[FilterResult] = None
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        """True while a pass is running."""
        return self._task is not None and not self._task.done()

    def set_query(self, query: str) -> asyncio.Task:
        """
        Start filtering for query, superseding any pass in flight.

        Must be called from within the running event loop.

        Returns:
            The task running the new pass
        """
        self._supersede()
        generation = self._generation
        self._task = asyncio.create_task(self._run_pass(query, generation))
        return self._task

    def cancel(self) -> None:
        """Supersede the pass in flight without starting a new one."""
        self._supersede()
        self._task = None

    def _supersede(self) -> None:
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _filter_entries(
        self,
        entries: Sequence[E],
        needle: str,
        generation: int,
    ) -> Optional[list[E]]:
        kept = []
        for index, entry in enumerate(entries, 1):
            if not self._is_current(generation):
                return None
            if matches(entry.search_key, needle):
                kept.append(entry)
            if index % self.batch_size == 0:
                await asyncio.sleep(0)
        return kept

    async def _run_pass(self, query: str, generation: int) -> None:
        snapshot = self.snapshot_provider()
        needle = query.casefold()

        formulae = await self._filter_entries(snapshot.formulae, needle, generation)
        if formulae is None:
            return
        casks = await self._filter_entries(snapshot.casks, needle, generation)
        if casks is None or not self._is_current(generation):
            return

        # No await between the check above and publishing
        self.result = FilterResult(query=query, formulae=tuple(formulae), casks=tuple(casks))
        logger.debug(
            f"Filter '{query}' matched {len(formulae)} formulae, {len(casks)} casks"
        )
        if self.on_update is not None:
            self.on_update(self.result)

    async def wait(self) -> Optional[FilterResult]:
        """
        Wait until the newest pass has finished and return the latest result.

        If the pass being waited on is superseded, waits for its successor.
        Exceptions raised by the pass propagate.
        """
        while True:
            task = self._task
            if task is None:
                return self.result
            await asyncio.wait({task})
            if task is self._task:
                if not task.cancelled():
                    task.result()
                return self.result
