"""Execution records with local JSON persistence.

An execution is written in two steps:
- `register` reserves the next numeric execution id (this is when the id
  becomes known)
- `save` persists the finalized record, after its binary data ids have been
  reconciled
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class ExecutionRecord(BaseModel):
    """Persisted representation of a workflow execution and its run data."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None)
    workflow_id: str = Field(default="", alias="workflowId")
    status: str = Field(default="success")
    finished: bool = Field(default=True)
    started_at: str | None = Field(default=None, alias="startedAt")
    stopped_at: str | None = Field(default=None, alias="stoppedAt")

    # node name -> task runs -> data -> channel -> batches -> items
    run_data: dict[str, list[dict[str, Any]]] = Field(default_factory=dict, alias="runData")

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ExecutionNotFoundError(LookupError):
    def __init__(self, execution_id: str) -> None:
        super().__init__(f"Execution not found: {execution_id}")
        self.execution_id = execution_id


def load_execution_file(path: Path) -> ExecutionRecord:
    raw = json.loads(path.read_text(encoding="utf-8"))
    return ExecutionRecord.model_validate(raw)


def write_execution_file(path: Path, record: ExecutionRecord) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(record.to_json(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )


class ExecutionStore:
    """JSON-file backed store, one file per execution id."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, execution_id: str) -> Path:
        return self._directory / f"{execution_id}.json"

    def list_ids(self) -> list[str]:
        if not self._directory.exists():
            return []
        ids = [p.stem for p in self._directory.glob("*.json") if p.is_file()]
        return sorted(ids, key=lambda i: (not i.isdigit(), int(i) if i.isdigit() else 0, i))

    def _next_id(self) -> int:
        numeric = [int(i) for i in self.list_ids() if i.isdigit()]
        return max(numeric, default=0) + 1

    def register(self, record: ExecutionRecord) -> ExecutionRecord:
        """Reserve an execution id for `record` and return a copy carrying it.

        The reservation file holds no run data; the finalized record replaces
        it via `save`.
        """

        self._directory.mkdir(parents=True, exist_ok=True)
        candidate = self._next_id()
        while True:
            execution_id = str(candidate)
            reservation = record.model_copy(
                update={"id": execution_id, "run_data": {}, "finished": False, "status": "new"}
            )
            data = json.dumps(reservation.to_json(), indent=2, ensure_ascii=False) + "\n"
            try:
                with self._path(execution_id).open("x", encoding="utf-8") as handle:
                    handle.write(data)
            except FileExistsError:
                candidate += 1
                continue
            break

        logger.info(
            "Execution registered",
            extra={"execution_id": execution_id, "workflow_id": record.workflow_id},
        )
        return record.model_copy(update={"id": execution_id})

    def save(self, record: ExecutionRecord) -> None:
        if not record.id:
            raise ValueError("Execution must be registered before it is saved")
        write_execution_file(self._path(record.id), record)
        logger.info(
            "Execution saved",
            extra={"execution_id": record.id, "path": str(self._path(record.id))},
        )

    def load(self, execution_id: str) -> ExecutionRecord:
        path = self._path(execution_id)
        if not path.exists():
            raise ExecutionNotFoundError(execution_id)
        return load_execution_file(path)
