"""CLI entrypoint for the binary data reconciler."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from binary_data_reconciler import __version__
from binary_data_reconciler.execution.binary_data_id import (
    BinaryDataId,
    MalformedBinaryDataIdError,
    is_placeholder,
)
from binary_data_reconciler.execution.config import ReconcilerSettings
from binary_data_reconciler.execution.lifecycle import ExecutionLifecycle
from binary_data_reconciler.execution.logging import configure_logging
from binary_data_reconciler.execution.restore import BinaryDataReconciler, ReconciliationReport
from binary_data_reconciler.execution.store import (
    ExecutionStore,
    load_execution_file,
    write_execution_file,
)
from binary_data_reconciler.storage.factory import BinaryDataBackendFactory

logger = logging.getLogger(__name__)

EXIT_PARTIAL_FAILURE = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="binary-data-reconciler",
        description="Restore execution ids in binary data ids written before registration",
    )
    parser.add_argument(
        "--version", action="version", version=f"binary-data-reconciler {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    reconcile = subparsers.add_parser(
        "reconcile",
        help="Restore binary data ids in an execution file for a known execution id",
    )
    reconcile.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Execution JSON file containing runData",
    )
    reconcile.add_argument(
        "--execution-id",
        required=True,
        help="Id of the execution the run data belongs to",
    )
    reconcile.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the reconciled execution (defaults to overwriting --input)",
    )

    finalize = subparsers.add_parser(
        "finalize",
        help="Register an execution, restore its binary data ids and persist it",
    )
    finalize.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Execution JSON file containing runData",
    )

    check_id = subparsers.add_parser(
        "check-id",
        help="Report whether a binary data id is still missing its execution id",
    )
    check_id.add_argument("binary_data_id", help="Serialized id, e.g. 'filesystem:<uuid>'")

    return parser


def _print_report(report: ReconciliationReport) -> None:
    for restored in report.restored:
        print(f"Restored {restored.node_name}: {restored.old_id} -> {restored.new_id}")
    for failure in report.failures:
        print(f"Failed {failure.node_name}: {failure.message}", file=sys.stderr)


def _check_id(raw: str) -> int:
    try:
        binary_data_id = BinaryDataId.parse(raw)
    except MalformedBinaryDataIdError as e:
        print(str(e), file=sys.stderr)
        return 2

    if is_placeholder(binary_data_id.key, binary_data_id.mode):
        print(f"{raw}: missing execution id")
    else:
        print(f"{raw}: execution-scoped")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = ReconcilerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        if args.command == "check-id":
            return _check_id(args.binary_data_id)

        reconciler = BinaryDataReconciler(BinaryDataBackendFactory.create(settings))

        if args.command == "reconcile":
            record = load_execution_file(args.input)
            report = asyncio.run(reconciler.reconcile(record.run_data, args.execution_id))

            output = args.output or args.input
            write_execution_file(output, record.model_copy(update={"id": args.execution_id}))
            logger.info(
                "Execution file written",
                extra={"path": str(output), "execution_id": args.execution_id},
            )
            _print_report(report)
            return 0 if report.ok else EXIT_PARTIAL_FAILURE

        if args.command == "finalize":
            store = ExecutionStore(settings.executions_dir)
            lifecycle = ExecutionLifecycle(store=store, reconciler=reconciler)

            record = load_execution_file(args.input)
            finalized, report = asyncio.run(lifecycle.finalize(record))
            print(f"Finalized execution {finalized.id}")
            _print_report(report)
            return 0 if report.ok else EXIT_PARTIAL_FAILURE

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
