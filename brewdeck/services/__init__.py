"""Application services: inventory synchronization and catalog search."""

from brewdeck.services.synchronizer import InventorySynchronizer, ToolStatus
from brewdeck.services.search import FilterResult, IncrementalFilter, filter_snapshot

__all__ = [
    "InventorySynchronizer",
    "ToolStatus",
    "FilterResult",
    "IncrementalFilter",
    "filter_snapshot",
]
