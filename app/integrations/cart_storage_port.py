"""Cart storage port and the local (memory, JSON file) implementations."""
from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from app.core.exceptions import PersistenceException

logger = logging.getLogger(__name__)


@runtime_checkable
class CartStoragePort(Protocol):
    """Durable copy of a cart's line items, addressed by a string key."""

    def load(self, key: str) -> Any | None:
        """Return the stored payload, or ``None`` when nothing is saved."""
        ...

    def save(self, key: str, items: list[dict[str, Any]]) -> None:
        ...


class MemoryCartStorage:
    """Process-local storage; used in tests and as Redis fallback."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def load(self, key: str) -> Any | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def save(self, key: str, items: list[dict[str, Any]]) -> None:
        if not items:
            self._data.pop(key, None)
            return
        self._data[key] = json.dumps(items, ensure_ascii=False)

    def keys(self) -> list[str]:
        return list(self._data)


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class JsonFileCartStorage:
    """One JSON file per key inside ``directory``."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._directory = Path(directory)

    def path_for(self, key: str) -> Path:
        safe = _UNSAFE_CHARS.sub("_", key).strip("._") or "cart"
        return self._directory / f"{safe}.json"

    def load(self, key: str) -> Any | None:
        path = self.path_for(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceException(key, str(exc)) from exc
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable cart file %s", path)
            return None

    def save(self, key: str, items: list[dict[str, Any]]) -> None:
        path = self.path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(items, f, ensure_ascii=False)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as exc:
            raise PersistenceException(key, str(exc)) from exc


__all__ = ["CartStoragePort", "JsonFileCartStorage", "MemoryCartStorage"]
