from __future__ import annotations

import copy
import logging
import uuid
from collections import Counter
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator

from pydantic import ValidationError

from .errors import CommitError, DuplicateGuidError, LoadError, StoreClosedError
from .interfaces import DocumentCollection
from .json_store import atomic_write_text, dump_json, read_json
from .locks import ReaderWriterLock
from .models import Document, StoreFile
from .settings import DEFAULT_SETTINGS, StoreSettings

logger = logging.getLogger(__name__)

GUID_FIELD = "guid"

Predicate = Callable[[Document], bool]


def new_guid() -> str:
    return str(uuid.uuid4())


def _guid_key(doc: Document) -> str | None:
    """String form of the stored guid, used for every lookup; None when absent."""
    value = doc.get(GUID_FIELD)
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _has_guid(doc: Document) -> bool:
    key = _guid_key(doc)
    return key is not None and bool(key.strip())


class DocumentStore(DocumentCollection):
    """
    Keeps every document of one JSON file in memory.

    The file (a JSON array of objects) is read once on construction. Reads and
    point mutations work on the in-memory list under a reader/writer lock, and
    nothing reaches the disk until `commit()` rewrites the whole file.

    Every read returns deep copies, so callers can keep or modify results
    without seeing (or causing) later changes to the store.

        with DocumentStore("people.json") as db:
            db.insert({"firstname": "John", "department": "IT"})
            db.commit()
    """

    def __init__(self, path: str | Path, settings: StoreSettings | None = None):
        self._path = Path(path)
        self._settings = settings or DEFAULT_SETTINGS
        self._lock = ReaderWriterLock()
        self._closed = False
        self._records: list[Document] = []

        # Every change to the list, the initial load included, happens under the write lock.
        with self._lock.writing():
            self._records = self._load()

    @classmethod
    def open(cls, path: str | Path, settings: StoreSettings | None = None) -> "DocumentStore":
        return cls(path, settings)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def settings(self) -> StoreSettings:
        return self._settings

    @property
    def closed(self) -> bool:
        return self._closed

    def _load(self) -> list[Document]:
        try:
            raw = read_json(self._path)
        except FileNotFoundError as e:
            if self._settings.create_if_missing:
                logger.debug("LOAD: %s does not exist yet, starting empty", self._path)
                return []
            raise LoadError(self._path, "file does not exist") from e
        except (OSError, ValueError) as e:
            raise LoadError(self._path, str(e)) from e

        try:
            docs = StoreFile.from_disk_doc(raw).to_disk_doc()
        except ValidationError as e:
            raise LoadError(self._path, "expected a JSON array of objects") from e

        guids = Counter(_guid_key(d) for d in docs if _has_guid(d))
        dupes = [g for g, n in guids.items() if n > 1]
        if dupes:
            logger.warning("LOAD: %s holds duplicate guids: %r", self._path, dupes)

        logger.debug("LOAD: %d documents from %s", len(docs), self._path)
        return docs

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreClosedError(self._path)

    @contextmanager
    def _reading(self) -> Iterator[None]:
        with self._lock.reading():
            self._ensure_open()
            yield

    @contextmanager
    def _writing(self) -> Iterator[None]:
        with self._lock.writing():
            self._ensure_open()
            yield

    def _index_of(self, guid: str) -> int | None:
        for i, doc in enumerate(self._records):
            if _guid_key(doc) == guid:
                return i
        return None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def records(self) -> list[Document]:
        with self._reading():
            return copy.deepcopy(self._records)

    def select(self, predicate: Predicate) -> list[Document]:
        """
        Return copies of every document for which `predicate` is true, in store order.

        The predicate runs while the read lock is held and must not call back
        into the store.
        """
        with self._reading():
            return [copy.deepcopy(doc) for doc in self._records if predicate(doc)]

    def select_one(self, predicate: Predicate) -> Document | None:
        with self._reading():
            for doc in self._records:
                if predicate(doc):
                    return copy.deepcopy(doc)
            return None

    def find(self, guid: str) -> Document | None:
        # Duplicate guids resolve to the first one in store order.
        with self._reading():
            index = self._index_of(guid)
            return copy.deepcopy(self._records[index]) if index is not None else None

    def exists(self, guid: str) -> bool:
        with self._reading():
            return any(_guid_key(doc) == guid for doc in self._records)

    def count(self) -> int:
        with self._reading():
            return len(self._records)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, doc: Document) -> None:
        """
        Append `doc` to the store.

        A missing, null or blank `guid` is replaced with a fresh UUID, written
        back into the caller's dict as well. A copy is stored, so later changes
        to `doc` do not leak into the store.
        """
        with self._writing():
            if not isinstance(doc, dict):
                raise TypeError("doc must be a dict")
            if not _has_guid(doc):
                doc[GUID_FIELD] = new_guid()
            elif self._settings.unique_guids and self._index_of(_guid_key(doc)) is not None:
                raise DuplicateGuidError(_guid_key(doc))
            self._records.append(copy.deepcopy(doc))

    def update(self, guid: str, doc: Document) -> bool:
        with self._writing():
            if not isinstance(doc, dict):
                raise TypeError("doc must be a dict")
            index = self._index_of(guid)
            if index is None:
                return False
            # The lookup key wins over whatever guid the caller's doc carried.
            doc[GUID_FIELD] = guid
            self._records[index] = copy.deepcopy(doc)
            return True

    def delete(self, guid: str) -> None:
        with self._writing():
            before = len(self._records)
            self._records[:] = [d for d in self._records if _guid_key(d) != guid]
            removed = before - len(self._records)
            if removed > 1:
                logger.debug("DELETE: removed %d documents sharing guid %r", removed, guid)

    # ------------------------------------------------------------------
    # Persistence / lifecycle
    # ------------------------------------------------------------------

    def commit(self) -> None:
        """
        Rewrite the backing file with every document currently held.

        Raises CommitError when the documents cannot be serialized or the file
        cannot be written. The previous file and the in-memory documents are
        left as they were, so the call can simply be retried.
        """
        with self._writing():
            try:
                text = dump_json(
                    self._records,
                    indent=self._settings.indent,
                    ensure_ascii=self._settings.ensure_ascii,
                )
            except (TypeError, ValueError, RecursionError) as e:
                raise CommitError(self._path, f"documents are not JSON serializable: {e}") from e

            try:
                atomic_write_text(self._path, text, fsync=self._settings.fsync)
            except OSError as e:
                raise CommitError(self._path, str(e)) from e

            logger.debug("COMMIT: wrote %d documents to %s", len(self._records), self._path)

    def close(self) -> None:
        """
        Release the store. Waits for running operations to finish; calling it
        again is a no-op. Any other operation afterwards raises StoreClosedError.
        """
        with self._lock.writing():
            if self._closed:
                return
            self._closed = True
            self._records = []
        logger.debug("CLOSE: %s", self._path)

    def __enter__(self) -> "DocumentStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{type(self).__name__} path={str(self._path)!r} {state}>"
