"""
Dream Stores
============

Persistence collaborators with a get-all / replace-all contract.

Both operations are synchronous and never raise to the caller:
    - ``load()`` failures are logged and treated as "no data"
    - ``replace()`` failures are logged and the write is dropped

Stores:
    - JsonDreamStore: dream collection as a JSON array on disk
    - JsonTagStore: hidden-tag list as a JSON array on disk
    - InMemoryDreamStore / InMemoryTagStore: process-local, for tests and dry runs

Usage:
    ```python
    from dreamlog.storage import JsonDreamStore

    store = JsonDreamStore("./data/dreams.json")
    dreams = store.load()
    store.replace(dreams)
    ```
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, List, Protocol, Sequence, Union

from loguru import logger

from dreamlog.core.exceptions import (
    DataCorruptionError,
    DreamLogError,
    StorageError,
    ValidationError,
)
from dreamlog.core.models import Dream


class DreamStore(Protocol):
    def load(self) -> List[Dream]: ...

    def replace(self, dreams: Sequence[Dream]) -> None: ...


class TagStore(Protocol):
    def load(self) -> List[str]: ...

    def replace(self, tags: Sequence[str]) -> None: ...


# =============================================================================
# JSON file backend
# =============================================================================


class _JsonArrayFile:
    """Reads and atomically rewrites one JSON array file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read(self) -> List[Any]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise DataCorruptionError(str(self.path), f"Invalid JSON ({e.msg})")
        except UnicodeDecodeError as e:
            raise DataCorruptionError(str(self.path), f"Not UTF-8 ({e.reason})") from e
        except OSError as e:
            raise StorageError(str(self.path), "read", str(e))

        if not isinstance(data, list):
            raise DataCorruptionError(str(self.path), "Expected a JSON array")
        return data

    def write(self, items: List[Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(str(self.path), "write", str(e))


class JsonDreamStore:
    """Dream collection persisted as a JSON array of dream objects."""

    def __init__(self, path: Union[str, Path]):
        self._file = _JsonArrayFile(path)

    @property
    def path(self) -> Path:
        return self._file.path

    def load(self) -> List[Dream]:
        try:
            raw = self._file.read()
        except DreamLogError as e:
            logger.error(f"[JsonDreamStore] Failed to load dreams: {e}")
            return []

        dreams: List[Dream] = []
        for entry in raw:
            try:
                dreams.append(Dream.from_dict(entry))
            except ValidationError as e:
                logger.warning(f"[JsonDreamStore] Dropping malformed entry: {e}")
        logger.debug(f"[JsonDreamStore] Loaded {len(dreams)} dreams from {self.path}")
        return dreams

    def replace(self, dreams: Sequence[Dream]) -> None:
        try:
            self._file.write([d.to_dict() for d in dreams])
        except DreamLogError as e:
            logger.error(f"[JsonDreamStore] Failed to save dreams, write dropped: {e}")


class JsonTagStore:
    """Hidden-tag list persisted as a JSON array of strings."""

    def __init__(self, path: Union[str, Path]):
        self._file = _JsonArrayFile(path)

    @property
    def path(self) -> Path:
        return self._file.path

    def load(self) -> List[str]:
        try:
            raw = self._file.read()
        except DreamLogError as e:
            logger.error(f"[JsonTagStore] Failed to load hidden tags: {e}")
            return []
        return [str(tag) for tag in raw if isinstance(tag, str) and tag]

    def replace(self, tags: Sequence[str]) -> None:
        try:
            self._file.write(list(tags))
        except DreamLogError as e:
            logger.error(f"[JsonTagStore] Failed to save hidden tags, write dropped: {e}")


# =============================================================================
# In-memory backend
# =============================================================================


class InMemoryDreamStore:
    def __init__(self, dreams: Sequence[Dream] = ()):
        self._dreams: List[Dream] = list(dreams)
        self.writes = 0

    def load(self) -> List[Dream]:
        return list(self._dreams)

    def replace(self, dreams: Sequence[Dream]) -> None:
        self._dreams = list(dreams)
        self.writes += 1


class InMemoryTagStore:
    def __init__(self, tags: Sequence[str] = ()):
        self._tags: List[str] = list(tags)

    def load(self) -> List[str]:
        return list(self._tags)

    def replace(self, tags: Sequence[str]) -> None:
        self._tags = list(tags)


__all__ = [
    "DreamStore",
    "TagStore",
    "JsonDreamStore",
    "JsonTagStore",
    "InMemoryDreamStore",
    "InMemoryTagStore",
]
