"""Unit tests for the command-line interface."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from binary_data_reconciler.execution.main import EXIT_PARTIAL_FAILURE, main

UUID = "11869055-83c4-4493-876a-9092c4708b9b"
MISSING_UUID = "33333333-83c4-4493-876a-9092c4708b9b"


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def filesystem_env(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    storage = clean_env / "binary_data"
    storage.mkdir()
    monkeypatch.setenv("BINARY_DATA_MODE", "filesystem")
    monkeypatch.setenv("BINARY_DATA_STORAGE_PATH", str(storage))
    monkeypatch.setenv("EXECUTION_STATE_PATH", str(clean_env / "executions"))
    return storage


def _write_execution(path: Path, run_data: dict[str, Any]) -> None:
    path.write_text(json.dumps({"workflowId": "wf", "runData": run_data}), encoding="utf-8")


def test_reconcile_rewrites_execution_file(
    filesystem_env: Path,
    clean_env: Path,
    make_task_runs: Callable[[str | None], list[dict[str, Any]]],
    binary_data_id_of: Callable[[dict[str, Any], str], str],
    capsys: pytest.CaptureFixture[str],
) -> None:
    (filesystem_env / UUID).write_bytes(b"pdf")
    execution_file = clean_env / "execution.json"
    _write_execution(execution_file, {"Read File": make_task_runs(f"filesystem:{UUID}")})

    code = main(["reconcile", "--input", str(execution_file), "--execution-id", "390"])

    assert code == 0
    written = json.loads(execution_file.read_text(encoding="utf-8"))
    assert written["id"] == "390"
    assert binary_data_id_of(written["runData"], "Read File") == f"filesystem:390{UUID}"
    assert (filesystem_env / f"390{UUID}").exists()
    assert f"Restored Read File: filesystem:{UUID} -> filesystem:390{UUID}" in capsys.readouterr().out


def test_reconcile_reports_partial_failure(
    filesystem_env: Path,
    clean_env: Path,
    make_task_runs: Callable[[str | None], list[dict[str, Any]]],
    capsys: pytest.CaptureFixture[str],
) -> None:
    execution_file = clean_env / "execution.json"
    output_file = clean_env / "out" / "execution.json"
    _write_execution(execution_file, {"Lost File": make_task_runs(f"filesystem:{MISSING_UUID}")})

    code = main(
        [
            "reconcile",
            "--input",
            str(execution_file),
            "--execution-id",
            "390",
            "--output",
            str(output_file),
        ]
    )

    assert code == EXIT_PARTIAL_FAILURE
    assert output_file.exists()
    assert "Failed Lost File" in capsys.readouterr().err


def test_finalize_persists_execution(
    filesystem_env: Path,
    clean_env: Path,
    make_task_runs: Callable[[str | None], list[dict[str, Any]]],
    binary_data_id_of: Callable[[dict[str, Any], str], str],
    capsys: pytest.CaptureFixture[str],
) -> None:
    (filesystem_env / UUID).write_bytes(b"pdf")
    execution_file = clean_env / "execution.json"
    _write_execution(execution_file, {"Read File": make_task_runs(f"filesystem:{UUID}")})

    code = main(["finalize", "--input", str(execution_file)])

    assert code == 0
    assert "Finalized execution 1" in capsys.readouterr().out
    persisted = json.loads((clean_env / "executions" / "1.json").read_text(encoding="utf-8"))
    assert binary_data_id_of(persisted["runData"], "Read File") == f"filesystem:1{UUID}"


def test_check_id(clean_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["check-id", f"filesystem:{UUID}"]) == 0
    assert "missing execution id" in capsys.readouterr().out

    assert main(["check-id", f"filesystem:390{UUID}"]) == 0
    assert "execution-scoped" in capsys.readouterr().out

    assert main(["check-id", "s3:abc"]) == 2


def test_configuration_error(
    clean_env: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("BINARY_DATA_MODE", "objectStore")

    assert main(["check-id", f"filesystem:{UUID}"]) == 2
    assert "Configuration error" in capsys.readouterr().err


def test_unreadable_execution_file(filesystem_env: Path, clean_env: Path) -> None:
    code = main(
        ["reconcile", "--input", str(clean_env / "missing.json"), "--execution-id", "1"]
    )

    assert code == 1
