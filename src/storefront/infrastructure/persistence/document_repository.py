"""Generic repository engine over one collection of the store document.

Every operation runs inside the store's exclusive section. Writes follow
the same cycle: load the whole document, locate or build the entity,
validate, mutate in memory, save the whole document. Any exception
raised before ``save`` leaves the persisted document untouched, and
the exclusive section is released on every exit path.

Subclasses supply the collection accessor, the identifier accessor and
the entity-specific rules for ``add`` and ``update``.
"""

from __future__ import annotations

import logging
import threading
from abc import abstractmethod
from collections.abc import Callable
from typing import ClassVar, TypeVar

from storefront.domain.exceptions import NotFoundError
from storefront.domain.model.store_document import StoreDocument
from storefront.domain.repository.document_store import DocumentStore
from storefront.domain.repository.entity_repository import EntityRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DocumentRepository(EntityRepository[T]):

    entity_name: ClassVar[str]

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    # --- Entity-specific hooks ------------------------------------------------

    @abstractmethod
    def _collection(self, document: StoreDocument) -> list[T]:
        """The document list holding this entity type."""

    @abstractmethod
    def _key(self, entity: T) -> str:
        """The entity's identifier."""

    @abstractmethod
    def _prepare_new(self, candidate: T, document: StoreDocument) -> T:
        """Validate ``candidate`` and return the entity to append."""

    @abstractmethod
    def _apply_update(self, existing: T, candidate: T, document: StoreDocument) -> T:
        """Validate and return the replacement for ``existing``."""

    # --- Reads ----------------------------------------------------------------

    def list_all(self, cancel: threading.Event | None = None) -> list[T]:
        return list(self._collection(self._snapshot(cancel)))

    def get_by_id(
        self, entity_id: str, cancel: threading.Event | None = None
    ) -> T | None:
        entities = self._collection(self._snapshot(cancel))
        index = self._index_of(entities, entity_id)
        return None if index is None else entities[index]

    def find(
        self, predicate: Callable[[T], bool], cancel: threading.Event | None = None
    ) -> list[T]:
        """Pure filter over ``list_all``."""
        return [entity for entity in self.list_all(cancel) if predicate(entity)]

    # --- Writes ---------------------------------------------------------------

    def add(self, candidate: T, cancel: threading.Event | None = None) -> T:
        with self._store.exclusive(cancel):
            document = self._store.load()
            entity = self._prepare_new(candidate, document)
            self._collection(document).append(entity)
            self._store.save(document)
        logger.info("Added %s %s", self.entity_name, self._key(entity))
        return entity

    def update(self, candidate: T, cancel: threading.Event | None = None) -> T:
        return self._modify(
            self._key(candidate),
            lambda existing, document: self._apply_update(existing, candidate, document),
            cancel,
        )

    def _modify(
        self,
        entity_id: str,
        change: Callable[[T, StoreDocument], T],
        cancel: threading.Event | None,
    ) -> T:
        """Locate ``entity_id`` and replace it with ``change(existing, document)``."""
        with self._store.exclusive(cancel):
            document = self._store.load()
            entities = self._collection(document)
            index = self._index_of(entities, entity_id)
            if index is None:
                raise NotFoundError(
                    f"{self.entity_name.capitalize()} '{entity_id}' not found"
                )
            updated = change(entities[index], document)
            entities[index] = updated
            self._store.save(document)
        logger.info("Updated %s %s", self.entity_name, self._key(updated))
        return updated

    # --- Helpers --------------------------------------------------------------

    def _snapshot(self, cancel: threading.Event | None) -> StoreDocument:
        with self._store.exclusive(cancel):
            return self._store.load()

    def _index_of(self, entities: list[T], entity_id: str) -> int | None:
        wanted = (entity_id or "").strip().casefold()
        for i, entity in enumerate(entities):
            if self._key(entity).casefold() == wanted:
                return i
        return None

    def _taken_keys(self, document: StoreDocument) -> set[str]:
        return {self._key(entity).casefold() for entity in self._collection(document)}
