#!/usr/bin/env python3
"""
Atomic JSON persistence helpers.

Every file Quotie shares between the app and the widget is replaced as a
whole: the payload is written to a temp file in the same directory, flushed
to disk, then renamed over the target. A concurrent reader sees either the
old complete file or the new complete file, never a partial one.

Usage:
    from Quotie.atomic_io import read_json_bytes, write_json_atomic

    write_json_atomic(path, {"version": 1, "quotes": []})
    raw = read_json_bytes(path)  # None when missing/unreadable
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional


logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when a file could not be durably written."""
    pass


def write_json_atomic(path: Path, payload: Any, indent: Optional[int] = 2) -> None:
    """
    Serialize payload as JSON and atomically replace path with it.

    Args:
        path: Target file
        payload: JSON-serializable object
        indent: Pretty-print indent (None for compact output)

    Raises:
        PersistenceError: If the directory or file could not be written
    """
    path = Path(path)
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(payload, indent=indent, ensure_ascii=False)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmp_name, path)
        tmp_name = None
    except (OSError, TypeError, ValueError) as e:
        raise PersistenceError(f"Failed to write {path}: {e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug(f"Could not remove temp file {tmp_name}")


def read_json_bytes(path: Path) -> Optional[bytes]:
    """Read a file's raw bytes, returning None when it is missing or unreadable."""
    path = Path(path)
    if not path.exists():
        return None
    try:
        return path.read_bytes()
    except OSError as e:
        logger.warning(f"Could not read {path}: {e}")
        return None


def load_json_object(path: Path) -> Optional[dict]:
    """
    Load a JSON object from path.

    Returns None when the file is missing, unreadable, not valid JSON, or
    not a JSON object.
    """
    raw = read_json_bytes(path)
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning(f"Ignoring corrupt JSON file {path}")
        return None
    return data if isinstance(data, dict) else None
