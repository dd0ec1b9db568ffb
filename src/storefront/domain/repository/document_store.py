"""Abstract document store.

Defined in the domain layer so repositories never depend on how or
where the document is persisted. ``JsonDocumentStore`` is the file
implementation; tests use an in-memory fake.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from storefront.domain.model.store_document import StoreDocument


class DocumentStore(ABC):

    @abstractmethod
    def load(self) -> StoreDocument:
        """Return the current document; an empty one if none exists yet."""

    @abstractmethod
    def save(self, document: StoreDocument) -> None:
        """Replace the persisted document atomically."""

    @abstractmethod
    def exclusive(
        self, cancel: threading.Event | None = None
    ) -> AbstractContextManager[None]:
        """Scoped exclusive section bracketing one load-mutate-save cycle.

        Raises OperationCancelled if ``cancel`` is set before the section
        is acquired.
        """
