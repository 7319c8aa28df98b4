from __future__ import annotations

from typing import Any

from pydantic import RootModel

Document = dict[str, Any]


class StoreFile(RootModel[list[Document]]):
    """
    Mirrors the on-disk file schema exactly:
      [
        { "guid": "...", ... },
        ...
      ]

    Documents are schema-less; only the outer shape (an array of objects) is checked.
    """

    @classmethod
    def from_disk_doc(cls, raw: Any) -> "StoreFile":
        # An empty file or a bare `null` means "no records".
        if raw is None:
            return cls([])
        return cls.model_validate(raw)

    def to_disk_doc(self) -> list[Document]:
        return self.root
