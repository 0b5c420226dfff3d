from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from featurekeeper.core.operations import BatchResult, OperationOutcome, RequestedOperation


@dataclass
class ExplainLog:
    """Append-only JSONL audit trail of feature update decisions."""

    path: Path

    def emit(self, event: str, payload: dict) -> None:
        record = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "payload": payload,
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False, sort_keys=True) + "\n")

    def feature_update(self, operation: RequestedOperation, outcome: OperationOutcome) -> None:
        self.emit(
            "feature_update",
            {**operation.to_dict(), "succeeded": outcome.succeeded, "message": outcome.message},
        )

    def batch_summary(self, result: BatchResult) -> None:
        self.emit("batch_summary", {"total": result.total, "failed": result.failed})
