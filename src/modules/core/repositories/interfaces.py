"""Generic repository contract.

Services depend on these abstractions and receive concrete Django
implementations through their constructors, so a service can be
exercised with any object honouring the same methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base contract: every aggregate can be fetched, saved and removed by id."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Return the entity, or ``None`` for a missing or malformed id."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Hard-delete an entity; ``False`` when nothing matched."""
