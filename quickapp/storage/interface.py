"""
Storage backend interface.

Defines the abstract interface the build orchestrator uses to materialize a
generated project tree. Keys are forward-slash relative paths.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel


class StorageBackend(ABC):
    """Abstract storage backend interface."""

    @abstractmethod
    async def store_bytes(self, key: str, data: bytes) -> str:
        """Store raw bytes and return the storage key.

        Args:
            key: Storage key/path
            data: Raw bytes to store

        Returns:
            The final storage key
        """
        ...

    @abstractmethod
    async def store_model(self, key: str, model: BaseModel) -> str:
        """Store a Pydantic model as JSON."""
        ...

    @abstractmethod
    async def load_bytes(self, key: str) -> bytes:
        """Load raw bytes from storage."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key from storage. Returns True if deleted."""
        ...

    @abstractmethod
    async def list_keys(self, prefix: str = "") -> list[str]:
        """List all keys with the given prefix."""
        ...

    @abstractmethod
    async def copy_tree(self, source: Path, prefix: str) -> list[str]:
        """Copy every file under a local directory to keys below ``prefix``."""
        ...

    @staticmethod
    def compute_hash(data: bytes) -> str:
        """Compute SHA-256 hash of data."""
        return hashlib.sha256(data).hexdigest()
