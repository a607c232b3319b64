"""
Core interfaces and abstract base classes for the CCRM platform.
"""

from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, TypeVar


T = TypeVar('T')


class Repository(ABC, Generic[T]):
    """Abstract base class for record stores.

    There is deliberately no delete operation: records are deactivated.
    """

    @abstractmethod
    def add(self, entity: T) -> T:
        """Validate and store an entity, replacing any entity with the same key."""
        pass

    @abstractmethod
    def find_by_id(self, entity_id: str) -> Optional[T]:
        """Find entity by ID."""
        pass

    @abstractmethod
    def find_all(self) -> List[T]:
        """All entities ordered by natural key."""
        pass

    @abstractmethod
    def find_by(self, predicate: Callable[[T], bool]) -> List[T]:
        """Entities matching a predicate, ordered by natural key."""
        pass

    def exists(self, entity_id: str) -> bool:
        """Check whether an entity with this ID is stored."""
        return self.find_by_id(entity_id) is not None

    def count(self) -> int:
        return len(self.find_all())
