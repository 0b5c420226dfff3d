from __future__ import annotations

from typing import Iterable, TextIO

import structlog

from featurekeeper.admin.base import ClusterFeatureState, FeatureAdmin
from featurekeeper.core.operations import BatchResult, OperationOutcome, RequestedOperation
from featurekeeper.core.planner import execute_operation
from featurekeeper.errors import BatchFailedError
from featurekeeper.safety.explain import ExplainLog

logger = structlog.get_logger(__name__)


def run_batch(
    operations: Iterable[RequestedOperation],
    admin: FeatureAdmin,
    out: TextIO,
    *,
    state: ClusterFeatureState | None = None,
    explain: ExplainLog | None = None,
) -> BatchResult:
    """Run operations in request order, printing each outcome as it is produced.

    Failures never stop the batch. Raises ``BatchFailedError`` after the last
    operation when any of them failed.
    """
    snapshot = state if state is not None else admin.describe_features()
    outcomes: list[OperationOutcome] = []
    for operation in operations:
        outcome = execute_operation(operation, snapshot, admin)
        outcomes.append(outcome)
        print(outcome.message, file=out)
        if explain is not None:
            explain.feature_update(operation, outcome)

    result = BatchResult(tuple(outcomes))
    if explain is not None:
        explain.batch_summary(result)
    logger.info("batch_completed", total=result.total, failed=result.failed)
    if result.failed > 0:
        raise BatchFailedError(result.failed, result.total)
    return result
