"""Turn raw command arguments into validated operations.

All parsing happens up front, so a bad argument aborts the invocation before
any operation reaches the control plane.
"""

from __future__ import annotations

from typing import Sequence

from featurekeeper.catalog import metadata_version as mvc
from featurekeeper.catalog.levels import metadata_versions_to_string, parse_name_and_level
from featurekeeper.catalog.metadata_version import MetadataVersion
from featurekeeper.core.operations import OperationKind, RequestedOperation, UpgradeType
from featurekeeper.errors import ParseError


def resolve_metadata_argument(text: str) -> MetadataVersion:
    try:
        return MetadataVersion.from_version_string(text)
    except ValueError as exc:
        supported = metadata_versions_to_string(
            mvc.MINIMUM_BOOTSTRAP_VERSION, mvc.latest_production()
        )
        raise ParseError(
            f"Unsupported metadata version {text}. Supported metadata versions are {supported}"
        ) from exc


def _collect_levels(
    features: Sequence[str] | None,
    metadata: str | None,
) -> list[tuple[str, int]]:
    requested: list[tuple[str, int]] = []
    seen: set[str] = set()

    def _add(name: str, level: int) -> None:
        if name in seen:
            raise ParseError(f"Feature {name} was specified more than once.")
        seen.add(name)
        requested.append((name, level))

    for spec in features or []:
        name, level = parse_name_and_level(spec)
        _add(name, level)
    if metadata is not None:
        _add(mvc.FEATURE_NAME, resolve_metadata_argument(metadata).feature_level)
    return requested


def build_upgrades(
    features: Sequence[str] | None,
    metadata: str | None,
    *,
    dry_run: bool = False,
) -> list[RequestedOperation]:
    requested = _collect_levels(features, metadata)
    if not requested:
        raise ParseError("You must specify at least one feature to upgrade")
    return [
        RequestedOperation(name, level, OperationKind.UPGRADE, dry_run=dry_run)
        for name, level in requested
    ]


def build_downgrades(
    features: Sequence[str] | None,
    metadata: str | None,
    *,
    safety: UpgradeType = UpgradeType.SAFE_DOWNGRADE,
    dry_run: bool = False,
) -> list[RequestedOperation]:
    requested = _collect_levels(features, metadata)
    if not requested:
        raise ParseError("You must specify at least one feature to downgrade")
    return [
        RequestedOperation(name, level, OperationKind.DOWNGRADE, safety, dry_run)
        for name, level in requested
    ]


def build_disables(
    names: Sequence[str] | None,
    *,
    safety: UpgradeType = UpgradeType.SAFE_DOWNGRADE,
    dry_run: bool = False,
) -> list[RequestedOperation]:
    operations: list[RequestedOperation] = []
    seen: set[str] = set()
    for raw in names or []:
        name = raw.strip()
        if not name:
            raise ParseError("Feature names must not be empty.")
        if name in seen:
            raise ParseError(f"Feature {name} was specified more than once.")
        seen.add(name)
        operations.append(RequestedOperation(name, 0, OperationKind.DISABLE, safety, dry_run))
    if not operations:
        raise ParseError("You must specify at least one feature to disable")
    return operations
