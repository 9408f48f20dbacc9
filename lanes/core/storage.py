"""
FILE: lanes/core/storage.py
PURPOSE: Key-value persistence primitive used by the board store
EXPORTS:
  - KeyValueStorage (protocol: get(key) / set(key, value))
  - JsonFileStorage (file-backed implementation)
  - MemoryStorage (in-process implementation)
  - DATA_DIR, DATA_PATH (default file location)
DEPENDENCIES:
  - json (stdlib)
  - logging (stdlib)
  - os (stdlib)
  - pathlib (stdlib)
  - lanes.core.exceptions (StorageError)
NOTES:
  - Data stored at ~/.lanes/lanes.json unless LANES_HOME is set
  - Values are opaque serialized text; the store owns the format
  - Failures surface as StorageError, never as raw OSError
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Protocol

from .exceptions import StorageError


logger = logging.getLogger(__name__)


# Data file location (cross-platform)
DATA_DIR = Path(os.environ.get("LANES_HOME", Path.home() / ".lanes"))
DATA_PATH = DATA_DIR / "lanes.json"


class KeyValueStorage(Protocol):
    """Anything exposing get/set over serialized text."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class JsonFileStorage:
    """
    Key-value storage kept in a single JSON object on disk.

    The file maps each key to its text value. Writes go to a sibling temp
    file first and are then renamed over the original, so a crash never
    leaves a half-written snapshot behind.
    """

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Path:
        # Resolved lazily so tests can monkeypatch DATA_PATH
        return self._path if self._path is not None else DATA_PATH

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Cannot read {self.path}: not a key-value object")
        return data

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except StorageError as e:
            # Unreadable file: its contents are already lost to load()
            logger.warning("Overwriting unreadable data file: %s", e)
            data = {}
        data[key] = value
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


class MemoryStorage:
    """Dict-backed storage, handy for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
