"""Repository pattern implementations for the data access layer.

This package provides the abstract repository interface and the persisted
inventory store.
"""

from brewdeck.repositories.base import Repository
from brewdeck.repositories.inventory_repository import InventoryRepository

__all__ = [
    "Repository",
    "InventoryRepository",
]
