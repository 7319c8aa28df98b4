from __future__ import annotations

from pathlib import Path


class StoreError(Exception):
    """Base class for every error raised by the document store."""


class LoadError(StoreError):
    """The backing file could not be read or decoded into a list of documents."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"cannot load {path}: {reason}")
        self.path = path
        self.reason = reason


class CommitError(StoreError):
    """
    Writing the backing file failed.

    The in-memory documents are untouched, so the commit can be retried.
    """

    def __init__(self, path: Path, reason: str):
        super().__init__(f"cannot commit {path}: {reason}")
        self.path = path
        self.reason = reason


class StoreClosedError(StoreError):
    def __init__(self, path: Path):
        super().__init__(f"store for {path} is closed")
        self.path = path


class DuplicateGuidError(StoreError):
    def __init__(self, guid: str):
        super().__init__(f"a document with guid {guid!r} already exists")
        self.guid = guid
