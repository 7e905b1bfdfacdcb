"""Dependency injection functions for FastAPI and the CLI.

This module provides process-wide singletons for:
- ExecutableLocator and the brew runners
- InventoryRepository (the persisted inventory)
- InventorySynchronizer
- CatalogState (the in-memory catalogs)
- Utility functions for testing (reset_dependencies)
"""

from typing import Optional

from brewdeck.catalog.fetcher import CatalogFetcher
from brewdeck.catalog.state import CatalogState
from brewdeck.config import get_settings
from brewdeck.repositories.inventory_repository import InventoryRepository
from brewdeck.runner.executor import CommandRunner
from brewdeck.runner.locator import ExecutableLocator
from brewdeck.runner.streaming import StreamingCommandRunner
from brewdeck.services.synchronizer import InventorySynchronizer


_locator: Optional[ExecutableLocator] = None
_inventory_repository: Optional[InventoryRepository] = None
_synchronizer: Optional[InventorySynchronizer] = None
_catalog_state: Optional[CatalogState] = None


def get_locator() -> ExecutableLocator:
    """Get or create the executable locator singleton."""
    global _locator
    if _locator is None:
        _locator = ExecutableLocator(get_settings().brew_paths)
    return _locator


def get_inventory_repository() -> InventoryRepository:
    """Get or create the inventory repository singleton.

    Opening the store is the one failure brewdeck treats as fatal; any
    error is left to propagate to the entry point.

    Returns:
        InventoryRepository: The singleton inventory store
    """
    global _inventory_repository
    if _inventory_repository is None:
        _inventory_repository = InventoryRepository(get_settings().inventory_path)
    return _inventory_repository


def get_synchronizer() -> InventorySynchronizer:
    """Get or create the inventory synchronizer singleton.

    One synchronizer per process, so refreshes of the shared inventory are
    serialized by its lock.

    Returns:
        InventorySynchronizer: The singleton synchronizer
    """
    global _synchronizer
    if _synchronizer is None:
        locator = get_locator()
        _synchronizer = InventorySynchronizer(
            runner=CommandRunner(locator),
            streaming_runner=StreamingCommandRunner(locator),
            repository=get_inventory_repository(),
            locator=locator,
        )
    return _synchronizer


def get_catalog_fetcher() -> CatalogFetcher:
    """Create a catalog fetcher from settings."""
    settings = get_settings()
    return CatalogFetcher(
        formula_url=settings.formula_catalog_url,
        cask_url=settings.cask_catalog_url,
        timeout=settings.http_timeout,
    )


def get_catalog_state() -> CatalogState:
    """Get or create the in-memory catalog singleton."""
    global _catalog_state
    if _catalog_state is None:
        _catalog_state = CatalogState(get_catalog_fetcher())
    return _catalog_state


def reset_dependencies() -> None:
    """Reset all dependency singletons (for testing).

    Closes the inventory store and clears every singleton, forcing them to
    be recreated on next access.
    """
    global _locator, _inventory_repository, _synchronizer, _catalog_state
    if _inventory_repository is not None:
        _inventory_repository.close()
    _locator = None
    _inventory_repository = None
    _synchronizer = None
    _catalog_state = None

    # Clear lru_cache for settings
    get_settings.cache_clear()
