"""JSON-file-backed implementation of DocumentStore.

One file holds the whole store document. Writes go to a temporary file
in the same directory which then replaces the target with
``os.replace``, so a reader sees either the previous document or the
new one, never a partial write.

The exclusive section combines an in-process ``threading.Lock`` with a
``filelock.FileLock`` next to the document, so several processes may
share one backing file. Both are acquired by polling, which lets a
waiting caller observe its cancellation signal and gives up after
``lock_timeout`` seconds.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TypeVar

from filelock import FileLock, Timeout

from storefront.domain.exceptions import (
    LockTimeoutError,
    OperationCancelled,
    StoreIOError,
)
from storefront.domain.model.store_document import StoreDocument
from storefront.domain.repository.document_store import DocumentStore
from storefront.infrastructure.config import StoreSettings
from storefront.infrastructure.persistence import json_codec

logger = logging.getLogger(__name__)

R = TypeVar("R")

# Errors worth another attempt: typically another process holding the
# file open briefly (PermissionError on Windows during a replace).
TRANSIENT_ERRORS = (PermissionError, BlockingIOError, InterruptedError, TimeoutError)


class JsonDocumentStore(DocumentStore):

    def __init__(self, settings: StoreSettings) -> None:
        self._settings = settings
        self._path = Path(settings.data_path)
        self._thread_lock = threading.Lock()
        self._file_lock = FileLock(str(self._path) + ".lock")

    @property
    def path(self) -> Path:
        return self._path

    # --- DocumentStore interface ----------------------------------------------

    def load(self) -> StoreDocument:
        content = self._with_retries("read", self._read_bytes)
        if content is None:
            logger.warning(
                "Store document not found at %s, starting with an empty store",
                self._path,
            )
            return StoreDocument()
        document = json_codec.loads(content)
        logger.debug(
            "Loaded %d products, %d orders, %d customers from %s",
            len(document.products), len(document.orders),
            len(document.customers), self._path,
        )
        return document

    def save(self, document: StoreDocument) -> None:
        text = json_codec.dumps(document)
        self._with_retries("write", lambda: self._write_atomically(text))
        logger.debug("Saved store document to %s", self._path)

    @contextmanager
    def exclusive(self, cancel: threading.Event | None = None) -> Iterator[None]:
        _raise_if_cancelled(cancel)
        deadline = time.monotonic() + self._settings.lock_timeout
        self._wait_for("thread lock", self._acquire_thread_lock, cancel, deadline)
        try:
            self._with_retries("prepare the directory for", self._ensure_directory)
            self._wait_for("file lock", self._acquire_file_lock, cancel, deadline)
            try:
                logger.debug("Entered exclusive section for %s", self._path)
                yield
            finally:
                self._file_lock.release()
        finally:
            self._thread_lock.release()

    # --- Locking helpers ------------------------------------------------------

    def _acquire_thread_lock(self) -> bool:
        return self._thread_lock.acquire(timeout=self._settings.poll_interval)

    def _acquire_file_lock(self) -> bool:
        try:
            self._file_lock.acquire(timeout=self._settings.poll_interval)
        except Timeout:
            return False
        return True

    def _wait_for(
        self,
        what: str,
        acquire: Callable[[], bool],
        cancel: threading.Event | None,
        deadline: float,
    ) -> None:
        while True:
            _raise_if_cancelled(cancel)
            if acquire():
                return
            if time.monotonic() >= deadline:
                raise LockTimeoutError(
                    f"Timed out after {self._settings.lock_timeout}s "
                    f"waiting for the {what} on {self._path}"
                )

    # --- File helpers ---------------------------------------------------------

    def _read_bytes(self) -> bytes | None:
        try:
            return self._path.read_bytes()
        except FileNotFoundError:
            return None

    def _ensure_directory(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def _write_atomically(self, text: str) -> None:
        self._ensure_directory()
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _with_retries(self, action: str, operation: Callable[[], R]) -> R:
        attempts = self._settings.io_retries + 1
        attempt = 1
        while True:
            try:
                return operation()
            except TRANSIENT_ERRORS as exc:
                if attempt == attempts:
                    raise StoreIOError(
                        f"Failed to {action} {self._path} after {attempts} attempts: {exc}"
                    ) from exc
                logger.warning(
                    "Transient error during %s of %s (attempt %d/%d): %s",
                    action, self._path, attempt, attempts, exc,
                )
                time.sleep(self._settings.retry_delay * attempt)
                attempt += 1
            except OSError as exc:
                raise StoreIOError(f"Failed to {action} {self._path}: {exc}") from exc


def _raise_if_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise OperationCancelled("Operation cancelled before entering the store")
