"""Persisted inventory of installed packages.

This module stores InstalledPackage records in a DiskCache (SQLite) directory
and swaps whole generations atomically inside a single transaction.
"""

import asyncio
import logging
import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional

from diskcache import Cache, Timeout

from brewdeck.exceptions import SyncException
from brewdeck.inventory.models import InstalledPackage, PackageKind
from brewdeck.repositories.base import Repository

logger = logging.getLogger(__name__)

# Failures DiskCache can surface while writing
STORE_ERRORS = (Timeout, sqlite3.Error, OSError)


def _sort_key(package: InstalledPackage) -> tuple[str, str]:
    return (package.name, package.version)


class InventoryRepository(Repository[InstalledPackage]):
    """DiskCache-backed inventory keyed by package id.

    At most one record exists per (name, kind). All operations are
    serialized by an asyncio.Lock, so a generation swap never interleaves
    with another write.

    Attributes:
        directory: Location of the DiskCache store
    """

    def __init__(self, directory: str | Path):
        """Open (or create) the inventory store.

        Args:
            directory: Directory for the store; created if missing

        Raises:
            OSError, sqlite3.Error: The store could not be opened. Callers treat
                this as fatal at startup.
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._cache = Cache(directory=str(self.directory))
        self._lock = asyncio.Lock()

    def _load_all(self) -> List[InstalledPackage]:
        packages = []
        for key in self._cache:
            data = self._cache.get(key)
            if data is not None:
                packages.append(InstalledPackage.from_dict(data))
        return packages

    async def get(self, id: str) -> Optional[InstalledPackage]:
        async with self._lock:
            data = self._cache.get(id)
            return InstalledPackage.from_dict(data) if data is not None else None

    async def get_all(self) -> List[InstalledPackage]:
        """Return every record sorted by name, then version."""
        async with self._lock:
            return sorted(self._load_all(), key=_sort_key)

    async def find(self, name: str, kind: Optional[PackageKind] = None) -> List[InstalledPackage]:
        """Return records with the given name, optionally of one kind."""
        async with self._lock:
            return sorted(
                (p for p in self._load_all()
                 if p.name == name and (kind is None or p.kind is kind)),
                key=_sort_key,
            )

    async def add(self, entity: InstalledPackage) -> InstalledPackage:
        """Insert a record, replacing any record with the same (name, kind)."""
        async with self._lock:
            try:
                with self._cache.transact():
                    for existing in self._load_all():
                        if existing.identity == entity.identity:
                            self._cache.delete(existing.id)
                    self._cache.set(entity.id, entity.to_dict())
            except STORE_ERRORS as e:
                raise SyncException(f"Failed to store {entity.name}: {e}") from e
            return entity

    async def delete(self, id: str) -> bool:
        async with self._lock:
            try:
                return self._cache.delete(id)
            except STORE_ERRORS as e:
                raise SyncException(f"Failed to delete {id}: {e}") from e

    async def exists(self, id: str) -> bool:
        async with self._lock:
            return id in self._cache

    async def count(self) -> int:
        async with self._lock:
            return len(self._cache)

    async def replace_all(self, packages: Iterable[InstalledPackage]) -> List[InstalledPackage]:
        """Replace the whole inventory with a new generation.

        Every existing record is deleted and every new one inserted inside
        one transaction: readers see either the old generation or the new
        one, never a mix. Duplicate (name, kind) pairs keep the first record.

        Args:
            packages: The new generation

        Returns:
            The stored generation, sorted by name then version

        Raises:
            SyncException: The transaction could not be committed; the previous
                generation is left in place
        """
        generation: dict[tuple[str, PackageKind], InstalledPackage] = {}
        for package in packages:
            if package.identity in generation:
                logger.warning(f"Duplicate {package.kind.value} {package.name} in refresh; keeping first")
                continue
            generation[package.identity] = package

        async with self._lock:
            try:
                with self._cache.transact():
                    self._cache.clear()
                    for package in generation.values():
                        self._cache.set(package.id, package.to_dict())
            except STORE_ERRORS as e:
                logger.error(f"Inventory commit failed, previous generation kept: {e}")
                raise SyncException(
                    f"Failed to commit inventory: {e}",
                    details={"packages": len(generation)},
                ) from e

        logger.info(f"Inventory replaced with {len(generation)} packages")
        return sorted(generation.values(), key=_sort_key)

    def stats(self) -> dict:
        """Return store size and location."""
        return {
            "size": len(self._cache),
            "volume": self._cache.volume(),
            "directory": self._cache.directory,
        }

    def close(self) -> None:
        """Close the store and release its file handles."""
        self._cache.close()
