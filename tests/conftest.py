"""Test configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from binary_data_reconciler.storage.filesystem import FilesystemBinaryDataBackend
from binary_data_reconciler.storage.memory import InMemoryBinaryDataBackend

FILESYSTEM_UUID = "11869055-83c4-4493-876a-9092c4708b9b"
OBJECT_STORE_TEMP_KEY = "workflows/123/executions/temp/binary_data/69055-83c4-4493-876a-9092c4708b9b"


def _make_task_runs(binary_data_id: str | None) -> list[dict[str, Any]]:
    item: dict[str, Any] = {"json": {"fileName": "report.pdf"}}
    if binary_data_id is not None:
        item["binary"] = {
            "data": {
                "id": binary_data_id,
                "mimeType": "application/pdf",
                "fileName": "report.pdf",
            }
        }
    return [{"startTime": 1700000000000, "executionTime": 12, "data": {"main": [[item]]}}]


def _binary_data_id_of(run_data: dict[str, Any], node_name: str) -> str:
    return run_data[node_name][0]["data"]["main"][0][0]["binary"]["data"]["id"]


@pytest.fixture
def make_task_runs() -> Callable[[str | None], list[dict[str, Any]]]:
    """Build a node's task runs with a single item, optionally carrying binary data."""
    return _make_task_runs


@pytest.fixture
def binary_data_id_of() -> Callable[[dict[str, Any], str], str]:
    """Read the binary data id of a node back out of run data."""
    return _binary_data_id_of


@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    """Provide a temporary binary data directory."""
    path = tmp_path / "binary_data"
    path.mkdir()
    return path


@pytest.fixture
def filesystem_backend(storage_dir: Path) -> FilesystemBinaryDataBackend:
    return FilesystemBinaryDataBackend(storage_dir)


@pytest.fixture
def memory_backend() -> InMemoryBinaryDataBackend:
    return InMemoryBinaryDataBackend(
        {
            FILESYSTEM_UUID: b"pdf-bytes",
            OBJECT_STORE_TEMP_KEY: b"png-bytes",
        }
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Run in an empty directory with no reconciler variables set."""
    for name in (
        "LOG_LEVEL",
        "BINARY_DATA_MODE",
        "BINARY_DATA_STORAGE_PATH",
        "OBJECT_STORE_BUCKET",
        "OBJECT_STORE_PREFIX",
        "OBJECT_STORE_REGION",
        "OBJECT_STORE_ENDPOINT_URL",
        "EXECUTION_STATE_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
