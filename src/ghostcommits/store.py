"""Flat key/value persistence for scheduler records."""

import asyncio
import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger


class KeyValueStore:
    """Async get/set by key. Values must be JSON serializable."""

    async def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    async def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    async def clear(self) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Process-local store, used in tests and for dry runs."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    async def clear(self) -> None:
        self._data.clear()


class JsonFileStore(KeyValueStore):
    """All keys kept in one JSON document on disk.

    The file is re-read on every access so changes written by another process
    (the CLI editing the config while the daemon runs) are picked up. Writes
    replace the file atomically so a crash never leaves a truncated document.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read_file(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"State file {self.path} does not contain a JSON object")
        return data

    def _write_file(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        os.replace(tmp_path, self.path)

    async def get(self, key: str) -> Optional[Any]:
        async with self._lock:
            data = await asyncio.to_thread(self._read_file)
            return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_file)
            data[key] = copy.deepcopy(value)
            await asyncio.to_thread(self._write_file, data)
            logger.debug(f"Stored {key} in {self.path}")

    async def clear(self) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write_file, {})
