"""
Local filesystem storage backend.

Writes generated project trees below a base directory. Keys that would
escape the base directory are rejected.
"""

from __future__ import annotations

from pathlib import Path

import aiofiles
import aiofiles.os
from pydantic import BaseModel

from .interface import StorageBackend


class LocalStorageBackend(StorageBackend):
    """Local filesystem storage backend."""

    def __init__(self, base_path: Path) -> None:
        """Initialize local storage.

        Args:
            base_path: Base directory for all storage operations
        """
        self.base_path = base_path.resolve()

    async def _ensure_parent(self, path: Path) -> None:
        """Ensure parent directory exists."""
        parent = path.parent
        if not parent.exists():
            parent.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        """Get full filesystem path for a key.

        Raises:
            ValueError: If the key resolves outside the base directory
        """
        clean_key = key.replace("\\", "/").lstrip("/")
        full_path = (self.base_path / clean_key).resolve()
        try:
            full_path.relative_to(self.base_path)
        except ValueError:
            raise ValueError(f"Key escapes storage root: {key}") from None
        return full_path

    async def store_bytes(self, key: str, data: bytes) -> str:
        """Store raw bytes to filesystem."""
        full_path = self._get_full_path(key)
        await self._ensure_parent(full_path)

        async with aiofiles.open(full_path, "wb") as f:
            await f.write(data)

        return key

    async def store_model(self, key: str, model: BaseModel) -> str:
        """Store Pydantic model as JSON."""
        # Generated files use LF endings on every platform
        content = model.model_dump_json(indent=2) + "\n"
        return await self.store_bytes(key, content.encode("utf-8"))

    async def load_bytes(self, key: str) -> bytes:
        """Load raw bytes from filesystem."""
        full_path = self._get_full_path(key)

        if not full_path.exists():
            raise FileNotFoundError(f"Key not found: {key}")

        async with aiofiles.open(full_path, "rb") as f:
            return await f.read()

    async def delete(self, key: str) -> bool:
        """Delete file from filesystem."""
        full_path = self._get_full_path(key)

        if full_path.is_file():
            await aiofiles.os.remove(full_path)
            return True
        return False

    async def list_keys(self, prefix: str = "") -> list[str]:
        """List all keys with prefix."""
        search_path = self._get_full_path(prefix) if prefix else self.base_path

        if not search_path.exists():
            return []

        keys = [
            path.relative_to(self.base_path).as_posix()
            for path in search_path.rglob("*")
            if path.is_file()
        ]
        return sorted(keys)

    async def copy_tree(self, source: Path, prefix: str) -> list[str]:
        """Copy a local directory into storage, preserving relative layout."""
        copied = []
        for path in sorted(source.rglob("*")):
            if not path.is_file():
                continue
            async with aiofiles.open(path, "rb") as f:
                data = await f.read()
            key = f"{prefix.rstrip('/')}/{path.relative_to(source).as_posix()}"
            copied.append(await self.store_bytes(key, data))
        return copied
