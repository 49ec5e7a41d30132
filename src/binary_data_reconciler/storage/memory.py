"""In-memory binary data backend."""

from __future__ import annotations

import logging

from binary_data_reconciler.execution.binary_data_id import StorageMode
from binary_data_reconciler.storage.backend import (
    BinaryDataAlreadyExistsError,
    BinaryDataBackend,
    BinaryDataNotFoundError,
)

logger = logging.getLogger(__name__)


class InMemoryBinaryDataBackend(BinaryDataBackend):
    """Dict-backed store used for `default` mode.

    Renames are atomic with respect to the event loop: there is no suspension
    point between the checks and the move.
    """

    mode = StorageMode.DEFAULT

    def __init__(self, objects: dict[str, bytes] | None = None) -> None:
        self._objects: dict[str, bytes] = dict(objects or {})

    def put(self, key: str, content: bytes) -> None:
        self._objects[key] = content

    def get(self, key: str) -> bytes:
        try:
            return self._objects[key]
        except KeyError:
            raise BinaryDataNotFoundError(key) from None

    async def exists(self, key: str) -> bool:
        return key in self._objects

    async def rename(self, old_key: str, new_key: str) -> None:
        if old_key not in self._objects:
            raise BinaryDataNotFoundError(old_key)
        if new_key in self._objects:
            raise BinaryDataAlreadyExistsError(new_key)
        self._objects[new_key] = self._objects.pop(old_key)
        logger.debug("Binary data renamed", extra={"old_key": old_key, "new_key": new_key})
