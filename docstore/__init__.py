from __future__ import annotations

from .errors import CommitError, DuplicateGuidError, LoadError, StoreClosedError, StoreError
from .interfaces import DocumentCollection
from .locks import ReaderWriterLock
from .models import Document
from .repositories import AsyncDocumentStore
from .settings import StoreSettings
from .store import GUID_FIELD, DocumentStore

__all__ = [
    "GUID_FIELD",
    "Document",
    "DocumentCollection",
    "DocumentStore",
    "AsyncDocumentStore",
    "StoreSettings",
    "ReaderWriterLock",
    "StoreError",
    "LoadError",
    "CommitError",
    "StoreClosedError",
    "DuplicateGuidError",
]
