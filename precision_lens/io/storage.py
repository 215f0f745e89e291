"""Plain (unencrypted) key-value storage kept in a single JSON document."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Dict, Optional

import aiofiles

from ..core.logging_utils import get_module_logger
from ..lens.errors import StorageError

logger = get_module_logger("PlainStorage")


class FilePlainStorage:
    """``get_item`` / ``set_item`` over a JSON file.

    Writes go to a temporary sibling file that then replaces the document,
    so a crash never leaves a half-written store behind.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def get_item(self, key: str) -> Optional[str]:
        async with self._lock:
            data = await self._load()
        value = data.get(key)
        return value if isinstance(value, str) else None

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            data = await self._load()
            data[key] = value
            await self._write(data)
        logger.debug("Stored %d chars under '%s'", len(value), key)

    async def _load(self) -> Dict[str, object]:
        if not await asyncio.to_thread(self.path.exists):
            return {}
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except OSError as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Corrupt storage file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Corrupt storage file {self.path}: expected an object")
        return data

    async def _write(self, data: Dict[str, object]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            await asyncio.to_thread(self.path.parent.mkdir, parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data))
            await asyncio.to_thread(os.replace, tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e


__all__ = ["FilePlainStorage"]
