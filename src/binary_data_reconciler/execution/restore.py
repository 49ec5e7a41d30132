"""Restore execution ids in binary data ids after an execution is registered.

Whenever the execution id is not available to the binary data backend at the
time a binary data file is written, its key is missing the execution id. This
module restores the id in the stored object's key and in the run data
reference pointing at it.

Only one reference per node is inspected: the `data` binary property of the
first item in the first `main` batch of the node's first task run. Nodes that
attach binary data anywhere else are left as they are.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from binary_data_reconciler.execution.binary_data_id import (
    BinaryDataId,
    MalformedBinaryDataIdError,
    is_placeholder,
    repair_key,
)
from binary_data_reconciler.storage.backend import BinaryDataBackend

logger = logging.getLogger(__name__)

MAIN_CHANNEL = "main"
BINARY_PROPERTY = "data"

RunData = dict[str, list[dict[str, Any]]]


@dataclass(frozen=True, slots=True)
class RestoredBinaryDataId:
    node_name: str
    old_id: str
    new_id: str


@dataclass(frozen=True, slots=True)
class NodeReconciliationFailure:
    node_name: str
    binary_data_id: object
    error: Exception

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass(slots=True)
class ReconciliationReport:
    """Outcome of one reconciliation pass.

    A pass may be partially successful. Failed nodes keep their original
    reference; it is up to the caller whether that is acceptable.
    """

    execution_id: str
    restored: list[RestoredBinaryDataId] = field(default_factory=list)
    failures: list[NodeReconciliationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_json(self) -> dict[str, object]:
        return {
            "execution_id": self.execution_id,
            "restored": [
                {"node": r.node_name, "old_id": r.old_id, "new_id": r.new_id}
                for r in self.restored
            ],
            "failures": [
                {"node": f.node_name, "binary_data_id": f.binary_data_id, "error": f.message}
                for f in self.failures
            ],
        }


def _first(value: object) -> object:
    if isinstance(value, list) and value:
        return value[0]
    return None


def find_binary_data(task_runs: object) -> dict[str, Any] | None:
    """Return the binary property holding the node's binary data id, if any.

    Path: task_runs[0].data.main[0][0].binary.data
    """

    task_run = _first(task_runs)
    if not isinstance(task_run, Mapping):
        return None
    channels = task_run.get("data")
    if not isinstance(channels, Mapping):
        return None
    item = _first(_first(channels.get(MAIN_CHANNEL)))
    if not isinstance(item, Mapping):
        return None
    binary = item.get("binary")
    if not isinstance(binary, Mapping):
        return None
    holder = binary.get(BINARY_PROPERTY)
    if not isinstance(holder, dict):
        return None
    return holder


class BinaryDataReconciler:
    """Rename placeholder binary data objects and rewrite their references.

    The backend is injected. Nodes that pass binary data through unchanged
    share one placeholder id, so renames are grouped by stored key: one rename
    per key, and every node referencing it is rewritten once it succeeds.
    Renames run concurrently and every one of them is awaited, whether or not
    its siblings fail.
    """

    def __init__(self, backend: BinaryDataBackend) -> None:
        self.backend = backend

    async def reconcile(self, run_data: RunData, execution_id: str) -> ReconciliationReport:
        """Restore `execution_id` in every placeholder binary data id in `run_data`.

        `run_data` is mutated in place.
        """

        if not execution_id:
            raise ValueError("execution_id is required")

        report = ReconciliationReport(execution_id=execution_id)
        groups: dict[BinaryDataId, list[tuple[str, dict[str, Any]]]] = {}
        for node_name, task_runs in run_data.items():
            holder = find_binary_data(task_runs)
            if holder is None or not holder.get("id"):
                continue

            raw = holder["id"]
            try:
                if not isinstance(raw, str):
                    raise MalformedBinaryDataIdError(raw)
                binary_data_id = BinaryDataId.parse(raw)
            except MalformedBinaryDataIdError as e:
                self._record_failure(report, node_name, raw, e)
                continue

            if not is_placeholder(binary_data_id.key, binary_data_id.mode):
                logger.debug(
                    "Binary data id already execution-scoped",
                    extra={"node": node_name, "binary_data_id": raw},
                )
                continue
            groups.setdefault(binary_data_id, []).append((node_name, holder))

        pending = list(groups.items())
        results = await asyncio.gather(
            *(self._rename(binary_data_id, execution_id) for binary_data_id, _ in pending),
            return_exceptions=True,
        )

        for (binary_data_id, nodes), result in zip(pending, results, strict=True):
            old_id = binary_data_id.serialize()
            if isinstance(result, Exception):
                for node_name, _ in nodes:
                    self._record_failure(report, node_name, old_id, result)
            elif isinstance(result, BaseException):
                raise result
            else:
                for node_name, holder in nodes:
                    holder["id"] = result
                    report.restored.append(
                        RestoredBinaryDataId(node_name=node_name, old_id=old_id, new_id=result)
                    )
                    logger.info(
                        "Restored binary data id",
                        extra={
                            "execution_id": execution_id,
                            "node": node_name,
                            "old_id": old_id,
                            "new_id": result,
                        },
                    )

        logger.info(
            "Binary data reconciliation finished",
            extra={
                "execution_id": execution_id,
                "renames": len(pending),
                "restored": len(report.restored),
                "failed": len(report.failures),
            },
        )
        return report

    async def _rename(self, binary_data_id: BinaryDataId, execution_id: str) -> str:
        new_key = repair_key(binary_data_id.key, binary_data_id.mode, execution_id)
        await self.backend.rename(binary_data_id.key, new_key)
        return BinaryDataId(mode=binary_data_id.mode, key=new_key).serialize()

    @staticmethod
    def _record_failure(
        report: ReconciliationReport, node_name: str, binary_data_id: object, error: Exception
    ) -> None:
        failure = NodeReconciliationFailure(
            node_name=node_name, binary_data_id=binary_data_id, error=error
        )
        report.failures.append(failure)
        logger.warning(
            "Failed to restore binary data id",
            extra={
                "execution_id": report.execution_id,
                "node": node_name,
                "binary_data_id": binary_data_id,
                "error": failure.message,
            },
        )
