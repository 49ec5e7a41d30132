"""Abstract base class for binary data storage backends."""

from abc import ABC, abstractmethod

from binary_data_reconciler.execution.binary_data_id import StorageMode


class BinaryDataError(Exception):
    """Base class for storage backend failures."""


class BinaryDataNotFoundError(BinaryDataError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Binary data not found: {key}")
        self.key = key


class BinaryDataAlreadyExistsError(BinaryDataError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Binary data already exists: {key}")
        self.key = key


class BinaryDataBackend(ABC):
    """Abstract base class for binary data storage backends.

    Backends are injected into the components that need them; nothing looks a
    backend up from process-wide state.
    """

    mode: StorageMode

    @abstractmethod
    async def rename(self, old_key: str, new_key: str) -> None:
        """Move the object stored under `old_key` to `new_key`.

        Args:
            old_key: Key the object is currently stored under.
            new_key: Key the object should be stored under afterwards.

        Raises:
            BinaryDataNotFoundError: If nothing is stored under `old_key`.
            BinaryDataAlreadyExistsError: If `new_key` is already occupied.
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether an object is stored under `key`.

        Args:
            key: Storage key to look up.

        Returns:
            True if the key resolves to a stored object.
        """
        pass
