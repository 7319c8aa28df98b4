from __future__ import annotations

import copy
import json
from pathlib import Path
import sys
from typing import Any, Callable, Iterator

import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection,
# so `import docstore` works without installing the package first.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from docstore import DocumentStore  # noqa: E402


SAMPLE_DOCS: list[dict[str, Any]] = [
    {"guid": "A", "firstname": "John", "department": "IT", "x": 1},
    {"guid": "B", "firstname": "Jane", "department": "HR", "x": 2},
    {"guid": "C", "firstname": "Ada", "department": "IT", "x": 3, "tags": ["admin"], "meta": {"level": 2}},
]


@pytest.fixture
def write_db(tmp_path: Path) -> Callable[[Any], Path]:
    """
    Write a raw value (list/dict serialized as JSON, str written verbatim) to a temp db file.
    """

    def _write(content: Any, name: str = "database.json") -> Path:
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def db_path(write_db: Callable[[Any], Path]) -> Path:
    return write_db(SAMPLE_DOCS)


@pytest.fixture
def store(db_path: Path) -> Iterator[DocumentStore]:
    with DocumentStore(db_path) as db:
        yield db


@pytest.fixture
def sample_docs() -> list[dict[str, Any]]:
    return copy.deepcopy(SAMPLE_DOCS)
