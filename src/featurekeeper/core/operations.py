from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class UpgradeType(str, Enum):
    UPGRADE = "UPGRADE"
    SAFE_DOWNGRADE = "SAFE_DOWNGRADE"
    UNSAFE_DOWNGRADE = "UNSAFE_DOWNGRADE"


class OperationKind(str, Enum):
    UPGRADE = "UPGRADE"
    DOWNGRADE = "DOWNGRADE"
    DISABLE = "DISABLE"


@dataclass(frozen=True)
class FeatureUpdate:
    """One entry of an ``update_features`` call to the control plane."""

    max_version_level: int
    upgrade_type: UpgradeType

    def is_downgrade(self) -> bool:
        return self.upgrade_type in (UpgradeType.SAFE_DOWNGRADE, UpgradeType.UNSAFE_DOWNGRADE)


@dataclass(frozen=True)
class RequestedOperation:
    feature_name: str
    target_level: int
    kind: OperationKind
    downgrade_safety: UpgradeType = UpgradeType.SAFE_DOWNGRADE
    dry_run: bool = False

    def to_update(self) -> FeatureUpdate:
        if self.kind == OperationKind.UPGRADE:
            return FeatureUpdate(self.target_level, UpgradeType.UPGRADE)
        return FeatureUpdate(self.target_level, self.downgrade_safety)

    def to_dict(self) -> dict:
        return {
            "feature": self.feature_name,
            "target_level": self.target_level,
            "kind": self.kind.value,
            "downgrade_safety": self.downgrade_safety.value,
            "dry_run": self.dry_run,
        }


@dataclass(frozen=True)
class OperationOutcome:
    feature_name: str
    succeeded: bool
    message: str

    def to_dict(self) -> dict:
        return {
            "feature": self.feature_name,
            "succeeded": self.succeeded,
            "message": self.message,
        }


@dataclass(frozen=True)
class BatchResult:
    outcomes: tuple[OperationOutcome, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "failed": self.failed,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }
