#!/usr/bin/env python3
"""
Small key/value stores ("defaults") backed by a single JSON file.

Two are used at runtime:
    - the app's private defaults (hunger and nudge counters)
    - the shared group defaults read by the widget (projection slots,
      widget settings, reload signal)

Each write replaces the whole file atomically, so readers in another
process never observe a half-written record. There is no field-level
merging: last writer wins.

Usage:
    from Quotie.defaults import FileDefaults

    defaults = FileDefaults(state_dir / "defaults.json")
    defaults.set("memmi.hungerLevel", 3)
    level = defaults.get_int("memmi.hungerLevel")
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .atomic_io import load_json_object, write_json_atomic


logger = logging.getLogger(__name__)


class Defaults(Protocol):
    """Key/value interface shared by the file-backed and in-memory stores."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def update(self, values: Dict[str, Any]) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class _TypedGetters:
    """Typed read helpers layered on get()."""

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            return default
        return value

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        return value if isinstance(value, bool) else default

    def get_str(self, key: str) -> Optional[str]:
        value = self.get(key)
        return value if isinstance(value, str) else None


class FileDefaults(_TypedGetters):
    """
    JSON-file key/value store.

    The file is re-read on every get() so values written by another process
    are picked up without restarting.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        return load_json_object(self.path) or {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Store a value.

        Raises:
            PersistenceError: If the file could not be written
        """
        data = self._load()
        data[key] = value
        write_json_atomic(self.path, data)

    def update(self, values: Dict[str, Any]) -> None:
        """
        Store several values as one record.

        All keys land in a single file replace: a failed write leaves every
        one of them at its previous value.

        Raises:
            PersistenceError: If the file could not be written
        """
        data = self._load()
        data.update(values)
        write_json_atomic(self.path, data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        del data[key]
        write_json_atomic(self.path, data)

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._load())


class InMemoryDefaults(_TypedGetters):
    """Process-local key/value store with the same contract."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def update(self, values: Dict[str, Any]) -> None:
        self._data.update(values)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._data)
