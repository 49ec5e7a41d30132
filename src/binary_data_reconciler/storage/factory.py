"""Factory for creating binary data backends."""

import logging

from binary_data_reconciler.execution.binary_data_id import StorageMode
from binary_data_reconciler.execution.config import ReconcilerSettings
from binary_data_reconciler.storage.backend import BinaryDataBackend
from binary_data_reconciler.storage.filesystem import FilesystemBinaryDataBackend
from binary_data_reconciler.storage.memory import InMemoryBinaryDataBackend
from binary_data_reconciler.storage.object_store import ObjectStoreBinaryDataBackend

logger = logging.getLogger(__name__)


class BinaryDataBackendFactory:
    """Factory for creating binary data backend instances."""

    @staticmethod
    def create(settings: ReconcilerSettings) -> BinaryDataBackend:
        """Create a binary data backend based on configuration.

        Args:
            settings: Settings specifying the binary data mode.

        Returns:
            Configured backend instance.

        Raises:
            ValueError: If the mode is not supported.
        """
        mode = settings.binary_data_mode
        logger.info("Creating binary data backend", extra={"mode": mode.value})

        if mode is StorageMode.FILESYSTEM:
            return FilesystemBinaryDataBackend(settings.binary_data_storage_path)
        elif mode is StorageMode.OBJECT_STORE:
            return ObjectStoreBinaryDataBackend(
                settings.object_store_bucket,
                settings.object_store_prefix,
                region=settings.object_store_region,
                endpoint_url=settings.object_store_endpoint_url,
            )
        elif mode is StorageMode.DEFAULT:
            return InMemoryBinaryDataBackend()
        else:
            raise ValueError(f"Unsupported binary data mode: {mode}")
