"""In-memory fake document store for testing.

Implements the same abstract interface as JsonDocumentStore but keeps
the document in memory. Each load returns a deep copy, so nothing a
repository does to a loaded document is visible until it saves, which
mirrors the file store. Loads and saves are counted.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from storefront.domain.exceptions import OperationCancelled
from storefront.domain.model.store_document import StoreDocument
from storefront.domain.repository.document_store import DocumentStore


class FakeDocumentStore(DocumentStore):

    def __init__(self, document: StoreDocument | None = None) -> None:
        self._document = copy.deepcopy(document or StoreDocument())
        self._lock = threading.Lock()
        self.loads = 0
        self.saves = 0

    @property
    def document(self) -> StoreDocument:
        return copy.deepcopy(self._document)

    def load(self) -> StoreDocument:
        self.loads += 1
        return copy.deepcopy(self._document)

    def save(self, document: StoreDocument) -> None:
        self.saves += 1
        self._document = copy.deepcopy(document)

    @contextmanager
    def exclusive(self, cancel: threading.Event | None = None) -> Iterator[None]:
        if cancel is not None and cancel.is_set():
            raise OperationCancelled("cancelled")
        with self._lock:
            yield
