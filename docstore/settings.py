from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StoreSettings:
    # Serialization
    indent: int = 2
    ensure_ascii: bool = False

    # Durability: flush the temp file to disk before it replaces the backing file
    fsync: bool = True

    # Loading: start empty when the backing file does not exist yet
    create_if_missing: bool = False

    # Reject inserts whose guid is already held (default keeps duplicates)
    unique_guids: bool = False


DEFAULT_SETTINGS = StoreSettings()
