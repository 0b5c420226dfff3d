"""Per-operation validation against a cluster snapshot, and outcome phrasing.

Direction checks run locally against the snapshot; everything else (supported
ranges, metadata.version downgrade safety) is decided by the control plane and
its message is passed through unchanged.
"""

from __future__ import annotations

import structlog

from featurekeeper.admin.base import ClusterFeatureState, FeatureAdmin
from featurekeeper.core.operations import OperationKind, OperationOutcome, RequestedOperation

logger = structlog.get_logger(__name__)

UPGRADE_TO_LOWER = "Can't upgrade to lower version."
DOWNGRADE_TO_NEWER = "Can't downgrade to newer version."
MISSING_RESULT = "The control plane returned no result for this feature."

_VERBS = {
    OperationKind.UPGRADE: ("upgrade", "upgraded"),
    OperationKind.DOWNGRADE: ("downgrade", "downgraded"),
    OperationKind.DISABLE: ("disable", "disabled"),
}


def local_check(operation: RequestedOperation, state: ClusterFeatureState) -> str | None:
    current = state.finalized_level(operation.feature_name)
    target = operation.target_level
    if operation.kind == OperationKind.UPGRADE:
        if target <= current:
            return UPGRADE_TO_LOWER
        return None
    if operation.kind == OperationKind.DOWNGRADE:
        if target >= current:
            return DOWNGRADE_TO_NEWER
        return None
    # disabling an already-disabled feature is a no-op, not a newer-version request
    if target > current:
        return DOWNGRADE_TO_NEWER
    return None


def success_message(operation: RequestedOperation) -> str:
    _, past = _VERBS[operation.kind]
    name = operation.feature_name
    prefix = f"{name} can be {past}" if operation.dry_run else f"{name} was {past}"
    if operation.kind == OperationKind.DISABLE:
        return f"{prefix}."
    return f"{prefix} to {operation.target_level}."


def failure_message(operation: RequestedOperation, reason: str) -> str:
    verb, _ = _VERBS[operation.kind]
    lead = "Can not" if operation.dry_run else "Could not"
    name = operation.feature_name
    if operation.kind == OperationKind.DISABLE:
        return f"{lead} {verb} {name}. {reason}"
    return f"{lead} {verb} {name} to {operation.target_level}. {reason}"


def outcome_for(operation: RequestedOperation, error: str | None) -> OperationOutcome:
    if error is None:
        return OperationOutcome(operation.feature_name, True, success_message(operation))
    return OperationOutcome(operation.feature_name, False, failure_message(operation, error))


def execute_operation(
    operation: RequestedOperation,
    state: ClusterFeatureState,
    admin: FeatureAdmin,
) -> OperationOutcome:
    """Validate locally, then issue at most one update call (validate-only on dry run)."""
    error = local_check(operation, state)
    if error is None:
        results = admin.update_features(
            {operation.feature_name: operation.to_update()},
            validate_only=operation.dry_run,
        )
        if operation.feature_name in results:
            error = results[operation.feature_name]
        else:
            error = MISSING_RESULT
    logger.debug(
        "operation_evaluated",
        feature=operation.feature_name,
        kind=operation.kind.value,
        target=operation.target_level,
        dry_run=operation.dry_run,
        error=error,
    )
    return outcome_for(operation, error)
