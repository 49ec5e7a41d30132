"""Binary data storage backends."""

from binary_data_reconciler.storage.backend import (
    BinaryDataAlreadyExistsError,
    BinaryDataBackend,
    BinaryDataError,
    BinaryDataNotFoundError,
)
from binary_data_reconciler.storage.factory import BinaryDataBackendFactory

__all__ = [
    "BinaryDataAlreadyExistsError",
    "BinaryDataBackend",
    "BinaryDataBackendFactory",
    "BinaryDataError",
    "BinaryDataNotFoundError",
]
