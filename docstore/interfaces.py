from __future__ import annotations

from typing import Callable, Protocol

from .models import Document


class DocumentCollection(Protocol):
    """
    Minimal embedded-DB interface: an ordered collection of JSON-like documents
    keyed by their `guid` field, persisted in full on commit.
    """

    def records(self) -> list[Document]:
        """Snapshot of every document, in insertion order."""
        ...

    def select(self, predicate: Callable[[Document], bool]) -> list[Document]:
        ...

    def select_one(self, predicate: Callable[[Document], bool]) -> Document | None:
        ...

    def find(self, guid: str) -> Document | None:
        ...

    def exists(self, guid: str) -> bool:
        ...

    def count(self) -> int:
        ...

    def insert(self, doc: Document) -> None:
        ...

    def update(self, guid: str, doc: Document) -> bool:
        """Replace the first document with this guid in place; False when none matches."""
        ...

    def delete(self, guid: str) -> None:
        """Remove every document with this guid."""
        ...

    def commit(self) -> None:
        """Persist the full collection, replacing the backing file."""
        ...

    def close(self) -> None:
        ...
