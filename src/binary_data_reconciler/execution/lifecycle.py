"""Execution finalization: register, reconcile binary data ids, persist."""

from __future__ import annotations

import logging

from binary_data_reconciler.execution.restore import BinaryDataReconciler, ReconciliationReport
from binary_data_reconciler.execution.store import ExecutionRecord, ExecutionStore

logger = logging.getLogger(__name__)


class ExecutionLifecycle:
    """Run the post-execution steps in order.

    Reconciliation always completes before the record is persisted, so no
    consumer of the store ever sees a placeholder binary data id that could
    have been restored.
    """

    def __init__(self, *, store: ExecutionStore, reconciler: BinaryDataReconciler) -> None:
        self._store = store
        self._reconciler = reconciler

    async def finalize(
        self, record: ExecutionRecord
    ) -> tuple[ExecutionRecord, ReconciliationReport]:
        registered = self._store.register(record) if record.id is None else record
        assert registered.id is not None

        report = await self._reconciler.reconcile(registered.run_data, registered.id)
        if not report.ok:
            logger.warning(
                "Persisting execution with unrestored binary data ids",
                extra={
                    "execution_id": registered.id,
                    "nodes": [f.node_name for f in report.failures],
                },
            )

        self._store.save(registered)
        return registered, report
