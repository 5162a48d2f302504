"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that domain-specific
repository interfaces extend.  Service-layer code depends on this
abstraction, never on Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar
from uuid import UUID

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Customer``).
    """

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def create(self, entity: T) -> UUID:
        """Insert a new entity and return its primary key."""

    @abstractmethod
    def update(self, id: Any, data: Dict[str, Any]) -> bool:
        """Write ``data`` onto the entity with the given ID.

        Returns ``False`` when no such entity exists.
        """

    @abstractmethod
    def delete(self, id: Any) -> bool:
        """Remove an entity by ID.  Returns ``False`` when nothing was removed."""
