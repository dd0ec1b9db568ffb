"""Abstract CRUD surface shared by every entity type."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")


class EntityRepository(ABC, Generic[T]):

    @abstractmethod
    def list_all(self, cancel: threading.Event | None = None) -> list[T]:
        """Return every entity; an empty list when there are none."""

    @abstractmethod
    def get_by_id(
        self, entity_id: str, cancel: threading.Event | None = None
    ) -> T | None:
        """Return the entity with this identifier (case-insensitive), or None."""

    @abstractmethod
    def add(self, candidate: T, cancel: threading.Event | None = None) -> T:
        """Validate and append a new entity; return it as persisted."""

    @abstractmethod
    def update(self, candidate: T, cancel: threading.Event | None = None) -> T:
        """Apply the entity's field-level replacement; return the result."""
