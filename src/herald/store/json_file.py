"""JSON file store backend — one ``<key>.json`` file per document."""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from herald.errors.delivery_errors import StoreError


class JsonFileStore:
    """Stores each document as pretty-printed JSON under a data directory.

    Writes go to a temporary file first and are renamed into place, so a
    crash mid-write leaves the previous document intact.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """Return the file path used for *key*."""
        return self._directory / f"{key}.json"

    async def connect(self) -> None:
        """Create the data directory if needed."""
        await asyncio.to_thread(self._directory.mkdir, parents=True, exist_ok=True)

    async def close(self) -> None:  # noqa: ASYNC910
        """Close (no-op)."""

    async def load(self, key: str) -> dict[str, Any] | None:
        return await asyncio.to_thread(self._read, self.path_for(key))

    async def save(self, key: str, document: dict[str, Any]) -> None:
        await asyncio.to_thread(self._write, self.path_for(key), document)

    @staticmethod
    def _read(path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise StoreError(f"{path} does not contain a JSON object")
        return data

    @staticmethod
    def _write(path: Path, document: dict[str, Any]) -> None:
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, indent=2)
            Path(tmp).replace(path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
