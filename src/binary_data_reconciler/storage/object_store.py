"""S3-compatible object store binary data backend."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from botocore.exceptions import ClientError

from binary_data_reconciler.execution.binary_data_id import StorageMode
from binary_data_reconciler.storage.backend import (
    BinaryDataAlreadyExistsError,
    BinaryDataBackend,
    BinaryDataNotFoundError,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _is_not_found(exc: ClientError) -> bool:
    error_code = exc.response.get("Error", {}).get("Code")
    return str(error_code) in _NOT_FOUND_CODES


class ObjectStoreBinaryDataBackend(BinaryDataBackend):
    """Binary data stored as objects in an S3-compatible bucket.

    S3 has no native rename: the object is copied (metadata included) to the
    new key and the old key is deleted afterwards.
    """

    mode = StorageMode.OBJECT_STORE

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        *,
        client: Any | None = None,
        region: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        if not bucket.strip():
            raise ValueError("Object store bucket is required")

        self.bucket = bucket
        self.prefix = prefix.strip("/")
        if client is None:
            import boto3

            client = boto3.client("s3", region_name=region, endpoint_url=endpoint_url)
        self._client = client

    def _key(self, key: str) -> str:
        relative = key.lstrip("/")
        if not self.prefix:
            return relative
        return f"{self.prefix}/{relative}"

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self._exists, self._key(key))

    async def rename(self, old_key: str, new_key: str) -> None:
        await asyncio.to_thread(self._rename, old_key, new_key)
        logger.debug(
            "Binary data object renamed",
            extra={"bucket": self.bucket, "old_key": old_key, "new_key": new_key},
        )

    def _exists(self, object_key: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=object_key)
        except ClientError as exc:
            if _is_not_found(exc):
                return False
            raise
        return True

    def _rename(self, old_key: str, new_key: str) -> None:
        source = self._key(old_key)
        dest = self._key(new_key)

        if not self._exists(source):
            raise BinaryDataNotFoundError(old_key)
        if self._exists(dest):
            raise BinaryDataAlreadyExistsError(new_key)

        self._client.copy_object(
            Bucket=self.bucket,
            Key=dest,
            CopySource={"Bucket": self.bucket, "Key": source},
            MetadataDirective="COPY",
        )
        self._client.delete_object(Bucket=self.bucket, Key=source)
