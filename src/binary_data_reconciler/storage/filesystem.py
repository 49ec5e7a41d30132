"""Filesystem binary data backend.

Each object lives at `storage_path / key`, optionally next to a
`<key>.metadata` sidecar holding its JSON metadata (file name, mime type,
size). A rename moves both.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from binary_data_reconciler.execution.binary_data_id import StorageMode
from binary_data_reconciler.storage.backend import (
    BinaryDataAlreadyExistsError,
    BinaryDataBackend,
    BinaryDataNotFoundError,
)

logger = logging.getLogger(__name__)

METADATA_SUFFIX = ".metadata"


class FilesystemBinaryDataBackend(BinaryDataBackend):
    """Binary data stored as plain files under a single directory."""

    mode = StorageMode.FILESYSTEM

    def __init__(self, storage_path: Path) -> None:
        """Initialize filesystem storage.

        Args:
            storage_path: Root directory for binary data files.
        """
        self.storage_path = storage_path
        self.storage_path.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        """Get the filesystem path for a key.

        Raises:
            ValueError: If the key is empty or resolves outside `storage_path`.
        """
        if not key:
            raise ValueError("Binary data key is required")

        path = self.storage_path / key
        resolved = path.resolve()
        base_resolved = self.storage_path.resolve()
        if not resolved.is_relative_to(base_resolved) or resolved == base_resolved:
            raise ValueError(f"Binary data key escapes storage path: {key!r}")
        return path

    def metadata_path_for(self, key: str) -> Path:
        path = self.path_for(key)
        return path.with_name(path.name + METADATA_SUFFIX)

    async def exists(self, key: str) -> bool:
        path = self.path_for(key)
        return await asyncio.to_thread(path.is_file)

    async def rename(self, old_key: str, new_key: str) -> None:
        await asyncio.to_thread(self._rename, old_key, new_key)
        logger.debug(
            "Binary data file renamed",
            extra={"old_key": old_key, "new_key": new_key, "storage_path": str(self.storage_path)},
        )

    def _rename(self, old_key: str, new_key: str) -> None:
        source = self.path_for(old_key)
        dest = self.path_for(new_key)

        if not source.is_file():
            raise BinaryDataNotFoundError(old_key)

        dest.parent.mkdir(parents=True, exist_ok=True)
        # Linking fails if dest is occupied; Path.rename would replace it.
        try:
            dest.hardlink_to(source)
        except FileNotFoundError:
            raise BinaryDataNotFoundError(old_key) from None
        except FileExistsError:
            raise BinaryDataAlreadyExistsError(new_key) from None
        source.unlink(missing_ok=True)

        # Metadata is optional; older files were written without it.
        source_metadata = self.metadata_path_for(old_key)
        if source_metadata.exists():
            source_metadata.replace(self.metadata_path_for(new_key))
