"""
Wallet snapshot persistence.

Optional key-value storage for serialized wallet state. Absence of a
configured directory is a valid state: nothing is restored or saved.
"""

import asyncio
from pathlib import Path
from typing import Protocol

from loguru import logger

from dapp_client.utils.exceptions import SnapshotError

from .types import PersistedWalletSnapshot


class Persistence(Protocol):
    """Byte storage addressed by path."""

    async def exists(self, path: Path) -> bool: ...

    async def read_bytes(self, path: Path) -> bytes: ...

    async def write_bytes(self, path: Path, data: bytes) -> None: ...

    async def mkdir(self, path: Path) -> None: ...


class FilesystemPersistence:
    """Local filesystem storage; blocking calls run in worker threads."""

    async def exists(self, path: Path) -> bool:
        return await asyncio.to_thread(path.exists)

    async def read_bytes(self, path: Path) -> bytes:
        return await asyncio.to_thread(path.read_bytes)

    async def write_bytes(self, path: Path, data: bytes) -> None:
        await asyncio.to_thread(self._write_atomic, path, data)

    async def mkdir(self, path: Path) -> None:
        await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)

    @staticmethod
    def _write_atomic(path: Path, data: bytes) -> None:
        # Readers never see a half-written snapshot
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_bytes(data)
        tmp_path.replace(path)


class SnapshotStore:
    """Reads and writes one wallet snapshot file."""

    def __init__(
        self,
        persistence: Persistence,
        directory: Path | str | None,
        filename: str,
    ) -> None:
        """
        Initialize snapshot store.

        Args:
            persistence: Storage backend
            directory: Sync cache directory (None disables persistence)
            filename: Snapshot file name inside the directory
        """
        self.persistence = persistence
        self.directory = Path(directory) if directory is not None else None
        self.filename = filename

    @property
    def enabled(self) -> bool:
        return self.directory is not None

    @property
    def path(self) -> Path | None:
        if self.directory is None:
            return None
        return self.directory / self.filename

    async def exists(self) -> bool:
        """True if persistence is configured and a snapshot file is present."""
        path = self.path
        if path is None:
            return False
        return await self.persistence.exists(path)

    async def load(self) -> PersistedWalletSnapshot | None:
        """
        Read and parse the snapshot.

        Returns:
            Parsed snapshot, or None if persistence is disabled or no file exists

        Raises:
            SnapshotError: If the file exists but cannot be read or parsed
        """
        path = self.path
        if path is None or not await self.persistence.exists(path):
            return None

        logger.info(f"Attempting to restore state from {path}")
        try:
            data = await self.persistence.read_bytes(path)
        except OSError as e:
            raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e
        return PersistedWalletSnapshot.parse(data)

    async def save(self, serialized_state: str) -> Path:
        """
        Write serialized wallet state, creating the directory if needed.

        Raises:
            SnapshotError: If persistence is disabled
            OSError: If writing fails
        """
        path = self.path
        if path is None or self.directory is None:
            raise SnapshotError("Sync cache directory is not configured")
        await self.persistence.mkdir(self.directory)
        await self.persistence.write_bytes(path, serialized_state.encode("utf-8"))
        return path
