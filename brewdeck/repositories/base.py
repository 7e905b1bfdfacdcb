"""Base repository interface for the data access layer.

This module provides a generic repository pattern interface that can be
implemented for different storage backends.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

# Generic type variable for entity types
T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """Abstract base class for async repositories.

    Type Parameters:
        T: The type of entity this repository manages

    Example:
        ```python
        class PackageRepository(Repository[InstalledPackage]):
            async def get(self, id: str) -> Optional[InstalledPackage]:
                ...

            async def get_all(self) -> List[InstalledPackage]:
                ...
        ```
    """

    @abstractmethod
    async def get(self, id: str) -> Optional[T]:
        """Retrieve a single entity by its identifier.

        Args:
            id: The unique identifier of the entity

        Returns:
            The entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[T]:
        """Retrieve all entities from the repository.

        Returns:
            A list of all entities. Returns empty list if none exist.
        """
        pass

    @abstractmethod
    async def add(self, entity: T) -> T:
        """Add a new entity to the repository.

        Args:
            entity: The entity to add

        Returns:
            The added entity
        """
        pass

    @abstractmethod
    async def delete(self, id: str) -> bool:
        """Delete an entity from the repository.

        Args:
            id: The unique identifier of the entity to delete

        Returns:
            True if the entity was deleted, False if not found
        """
        pass

    @abstractmethod
    async def exists(self, id: str) -> bool:
        """Check if an entity exists in the repository.

        Args:
            id: The unique identifier to check

        Returns:
            True if the entity exists, False otherwise
        """
        pass
