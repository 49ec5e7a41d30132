"""Binary data identifiers and their execution-scoped repair.

A binary data id is serialized as ``"<mode>:<key>"``. When a binary data file is
written before its execution has been registered, the key is missing the
execution id:

```txt
filesystem:11869055-83c4-4493-876a-9092c4708b9b ->
filesystem:39011869055-83c4-4493-876a-9092c4708b9b

objectStore:workflows/123/executions/temp/binary_data/69055-83c4-4493-876a-9092c4708b9b ->
objectStore:workflows/123/executions/390/binary_data/69055-83c4-4493-876a-9092c4708b9b
```
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

UUID_V4_CHAR_LENGTH = 36
TEMP_SEGMENT = "/temp/"


class StorageMode(str, Enum):
    FILESYSTEM = "filesystem"
    OBJECT_STORE = "objectStore"
    DEFAULT = "default"


class MalformedBinaryDataIdError(ValueError):
    """Raised when a serialized binary data id has no known mode or no key."""

    def __init__(self, binary_data_id: object) -> None:
        super().__init__(f"Malformed binary data id: {binary_data_id!r}")
        self.binary_data_id = binary_data_id


@dataclass(frozen=True, slots=True)
class BinaryDataId:
    mode: StorageMode
    key: str

    @staticmethod
    def parse(raw: str) -> BinaryDataId:
        mode_raw, sep, key = raw.partition(":")
        if not sep or not key:
            raise MalformedBinaryDataIdError(raw)
        try:
            mode = StorageMode(mode_raw)
        except ValueError as e:
            raise MalformedBinaryDataIdError(raw) from e
        return BinaryDataId(mode=mode, key=key)

    def serialize(self) -> str:
        return f"{self.mode.value}:{self.key}"

    def __str__(self) -> str:
        return self.serialize()


def is_placeholder(
    key: str,
    mode: StorageMode,
    *,
    uuid_length: int = UUID_V4_CHAR_LENGTH,
) -> bool:
    """Whether `key` was written before its execution id was known.

    Filesystem keys are a bare UUID until the execution id is prepended, so the
    check is pure length equality. Object store keys carry a `/temp/` segment
    in place of the execution id.
    """

    if mode is StorageMode.FILESYSTEM:
        return len(key) == uuid_length
    if mode is StorageMode.OBJECT_STORE:
        return TEMP_SEGMENT in key
    if mode is StorageMode.DEFAULT:
        # Inline data carries no execution-scoped path.
        return False
    raise ValueError(f"Unsupported binary data mode: {mode!r}")


def repair_key(key: str, mode: StorageMode, execution_id: str) -> str:
    """Return `key` rewritten to include `execution_id`."""

    if mode is StorageMode.FILESYSTEM:
        return f"{execution_id}{key}"
    if mode is StorageMode.OBJECT_STORE:
        return key.replace(TEMP_SEGMENT, f"/{execution_id}/", 1)
    if mode is StorageMode.DEFAULT:
        raise ValueError("Binary data in default mode is not execution-scoped")
    raise ValueError(f"Unsupported binary data mode: {mode!r}")
