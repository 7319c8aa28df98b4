from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from .models import Document
from .settings import StoreSettings
from .store import DocumentStore, Predicate


class AsyncDocumentStore:
    """
    Async wrapper around a DocumentStore.
    Uses asyncio.to_thread so lock waits and file I/O never block the event loop.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    @classmethod
    async def open(cls, path: str | Path, settings: StoreSettings | None = None) -> "AsyncDocumentStore":
        store = await asyncio.to_thread(DocumentStore, path, settings)
        return cls(store)

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def closed(self) -> bool:
        return self._store.closed

    async def records(self) -> list[Document]:
        return await asyncio.to_thread(self._store.records)

    async def select(self, predicate: Predicate) -> list[Document]:
        return await asyncio.to_thread(self._store.select, predicate)

    async def select_one(self, predicate: Predicate) -> Document | None:
        return await asyncio.to_thread(self._store.select_one, predicate)

    async def find(self, guid: str) -> Document | None:
        return await asyncio.to_thread(self._store.find, guid)

    async def exists(self, guid: str) -> bool:
        return await asyncio.to_thread(self._store.exists, guid)

    async def count(self) -> int:
        return await asyncio.to_thread(self._store.count)

    async def insert(self, doc: Document) -> None:
        await asyncio.to_thread(self._store.insert, doc)

    async def update(self, guid: str, doc: Document) -> bool:
        return await asyncio.to_thread(self._store.update, guid, doc)

    async def delete(self, guid: str) -> None:
        await asyncio.to_thread(self._store.delete, guid)

    async def commit(self) -> None:
        await asyncio.to_thread(self._store.commit)

    async def close(self) -> None:
        await asyncio.to_thread(self._store.close)

    async def __aenter__(self) -> "AsyncDocumentStore":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
