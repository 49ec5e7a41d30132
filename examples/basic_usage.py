#!/usr/bin/env python3
"""Programmatic reconciliation example.

This demonstrates using the reconciler components directly:

* load settings from `.env`
* build the configured binary data backend
* register an execution, restore its binary data ids and persist it

The execution JSON file is passed as an argument.
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Sequence

from binary_data_reconciler.execution.config import ReconcilerSettings
from binary_data_reconciler.execution.lifecycle import ExecutionLifecycle
from binary_data_reconciler.execution.logging import configure_logging
from binary_data_reconciler.execution.restore import BinaryDataReconciler
from binary_data_reconciler.execution.store import ExecutionStore, load_execution_file
from binary_data_reconciler.storage.factory import BinaryDataBackendFactory


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Finalize an execution (programmatic example).")
    parser.add_argument("execution", type=Path, help="Execution JSON file containing runData")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = ReconcilerSettings()
    configure_logging(settings.log_level)

    reconciler = BinaryDataReconciler(BinaryDataBackendFactory.create(settings))
    lifecycle = ExecutionLifecycle(
        store=ExecutionStore(settings.executions_dir), reconciler=reconciler
    )

    record, report = asyncio.run(lifecycle.finalize(load_execution_file(args.execution)))

    print(f"Execution {record.id}: {len(report.restored)} binary data ids restored")
    for failure in report.failures:
        print(f"  {failure.node_name}: {failure.message}")
    print(f"Persisted to: {settings.executions_dir / f'{record.id}.json'}")
    return 0 if report.ok else 4


if __name__ == "__main__":
    raise SystemExit(main())
