"""Configuration for the binary data reconciler.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The binary data mode decides which storage backend receives rename calls.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from binary_data_reconciler.execution.binary_data_id import StorageMode


class ReconcilerSettings(BaseSettings):
    """Settings for the reconciler.

    Environment variables:
    - LOG_LEVEL                  (optional)
    - BINARY_DATA_MODE           (optional; filesystem | objectStore | default)
    - BINARY_DATA_STORAGE_PATH   (optional)
    - OBJECT_STORE_BUCKET        (required in objectStore mode)
    - OBJECT_STORE_PREFIX        (optional)
    - OBJECT_STORE_REGION        (optional)
    - OBJECT_STORE_ENDPOINT_URL  (optional)
    - EXECUTION_STATE_PATH       (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `ReconcilerSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    binary_data_mode: StorageMode = Field(
        default=StorageMode.DEFAULT,
        validation_alias="BINARY_DATA_MODE",
        description="Storage mode binary data is written in",
    )
    binary_data_storage_path: Path = Field(
        default=Path("binary_data"),
        validation_alias="BINARY_DATA_STORAGE_PATH",
        description="Directory holding binary data files in filesystem mode",
    )

    object_store_bucket: str = Field(
        default="",
        validation_alias="OBJECT_STORE_BUCKET",
        description="Bucket holding binary data objects in objectStore mode",
    )
    object_store_prefix: str = Field(
        default="",
        validation_alias="OBJECT_STORE_PREFIX",
        description="Key prefix prepended to every binary data object key",
    )
    object_store_region: str | None = Field(
        default=None,
        validation_alias="OBJECT_STORE_REGION",
        description="Region of the object store bucket",
    )
    object_store_endpoint_url: str | None = Field(
        default=None,
        validation_alias="OBJECT_STORE_ENDPOINT_URL",
        description="Endpoint URL for S3-compatible stores (MinIO, LocalStack)",
    )

    execution_state_path: Path = Field(
        default=Path("executions"),
        validation_alias="EXECUTION_STATE_PATH",
        description="Directory where finalized executions are persisted",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_bucket_for_object_store(self) -> ReconcilerSettings:
        if self.binary_data_mode is StorageMode.OBJECT_STORE and not self.object_store_bucket.strip():
            raise ValueError("OBJECT_STORE_BUCKET is required in objectStore mode")
        return self

    @property
    def executions_dir(self) -> Path:
        """Directory where execution records are persisted."""

        return self.execution_state_path
