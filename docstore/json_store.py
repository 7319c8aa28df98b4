from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def read_json(path: Path) -> Any | None:
    """
    Read JSON from disk.

    Returns None for empty or whitespace-only files. Unlike a best-effort reader,
    a missing file, an I/O error, bad UTF-8, invalid JSON or nesting too deep to
    decode all raise (OSError / ValueError) so the caller can refuse to start
    from bad data.
    """
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except RecursionError as e:
        raise ValueError("JSON is nested too deeply to decode") from e


def dump_json(payload: Any, *, indent: int = 2, ensure_ascii: bool = False) -> str:
    # Key order is kept as held in memory, never sorted.
    return json.dumps(payload, indent=indent, ensure_ascii=ensure_ascii) + "\n"


def atomic_write_text(path: Path, text: str, *, fsync: bool = True) -> None:
    """
    Atomically replace `path` with `text` by writing a temp file in the same
    directory and renaming it over the target.

    Either the old file stays as it was or the new one fully replaces it.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            if fsync:
                os.fsync(f.fileno())
        # Keep the permissions of the file being replaced.
        if path.exists():
            os.chmod(tmp_name, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            try:
                os.remove(tmp_name)
            except OSError:
                logger.debug("could not remove temp file %s", tmp_name, exc_info=True)

