"""Remote package catalogs: models, retrieval, and the in-memory snapshot."""

from brewdeck.catalog.models import Cask, CatalogSnapshot, Formula, Versions
from brewdeck.catalog.fetcher import CatalogFetcher
from brewdeck.catalog.state import CatalogState

__all__ = [
    "Cask",
    "CatalogSnapshot",
    "Formula",
    "Versions",
    "CatalogFetcher",
    "CatalogState",
]
