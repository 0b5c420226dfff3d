from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import structlog

from featurekeeper.admin.base import ClusterFeatureState, FeatureAdmin, FeatureDescriptor
from featurekeeper.catalog import metadata_version as mvc
from featurekeeper.core.operations import FeatureUpdate, UpgradeType
from featurekeeper.errors import ControlPlaneError

logger = structlog.get_logger(__name__)


@dataclass
class FeatureRange:
    min_level: int
    max_level: int
    finalized_level: int

    def allows(self, target: int) -> bool:
        return self.min_level <= target <= self.max_level


class InMemoryFeatureAdmin(FeatureAdmin):
    """Simulated control plane holding supported ranges and finalized levels in memory.

    Without a ``controller_id`` range errors use the short form
    ("Can't downgrade below N"); with one they are attributed to that controller
    the way a quorum controller reports them.
    """

    def __init__(
        self,
        features: Mapping[str, FeatureRange] | None = None,
        *,
        epoch: int = 0,
        controller_id: int | None = None,
        unsafe_downgrade_supported: bool = False,
    ) -> None:
        self._features: dict[str, FeatureRange] = dict(features or {})
        self.epoch = int(epoch)
        self.controller_id = controller_id
        self.unsafe_downgrade_supported = bool(unsafe_downgrade_supported)

    @classmethod
    def from_levels(
        cls,
        *,
        min_levels: Mapping[str, int],
        finalized_levels: Mapping[str, int],
        max_levels: Mapping[str, int],
        **kwargs,
    ) -> "InMemoryFeatureAdmin":
        names = set(min_levels) | set(finalized_levels) | set(max_levels)
        features = {
            name: FeatureRange(
                min_level=int(min_levels.get(name, 0)),
                max_level=int(max_levels.get(name, 0)),
                finalized_level=int(finalized_levels.get(name, 0)),
            )
            for name in names
        }
        return cls(features, **kwargs)

    def feature_range(self, name: str) -> FeatureRange | None:
        return self._features.get(name)

    def describe_features(self) -> ClusterFeatureState:
        return ClusterFeatureState(
            {
                name: FeatureDescriptor(
                    name=name,
                    supported_min_level=item.min_level,
                    supported_max_level=item.max_level,
                    finalized_level=item.finalized_level,
                    epoch=self.epoch,
                )
                for name, item in self._features.items()
            }
        )

    def _range_error(self, name: str, target: int, item: FeatureRange) -> str | None:
        if item.allows(target):
            return None
        if self.controller_id is not None:
            return (
                f"Invalid update version {target} for feature {name}. "
                f"Local controller {self.controller_id} only supports versions "
                f"{item.min_level}-{item.max_level}"
            )
        if target < item.min_level:
            return f"Can't downgrade below {item.min_level}"
        return f"Can't upgrade above {item.max_level}"

    def _metadata_downgrade_error(self, current: int, update: FeatureUpdate) -> str | None:
        target = update.max_version_level
        if target >= current:
            return None
        if update.upgrade_type == UpgradeType.UNSAFE_DOWNGRADE:
            if self.unsafe_downgrade_supported:
                return None
            return (
                f"Invalid metadata.version {target}. "
                "Unsafe metadata downgrade is not supported in this version."
            )
        if mvc.metadata_changed_between(current, target):
            return (
                f"Invalid metadata.version {target}. "
                "Refusing to perform the requested downgrade because it might delete "
                "metadata information."
            )
        return None

    def _check_update(self, name: str, update: FeatureUpdate) -> str | None:
        item = self._features.get(name) or FeatureRange(0, 0, 0)
        current = item.finalized_level
        target = update.max_version_level
        if update.upgrade_type == UpgradeType.UPGRADE and target < current:
            return "Can't upgrade to lower version."
        if update.is_downgrade() and target > current:
            return "Can't downgrade to newer version."
        error = self._range_error(name, target, item)
        if error is not None:
            return error
        if name == mvc.FEATURE_NAME and update.is_downgrade():
            return self._metadata_downgrade_error(current, update)
        return None

    def update_features(
        self,
        updates: Mapping[str, FeatureUpdate],
        *,
        validate_only: bool = False,
    ) -> dict[str, str | None]:
        results: dict[str, str | None] = {}
        previous: dict[str, int] = {}
        for name, update in updates.items():
            error = self._check_update(name, update)
            results[name] = error
            logger.debug(
                "feature_update_checked",
                feature=name,
                target=update.max_version_level,
                upgrade_type=update.upgrade_type.value,
                validate_only=validate_only,
                error=error,
            )
            if error is not None or validate_only:
                continue
            item = self._features.get(name)
            if item is None:
                # unknown features only pass the 0-0 range check, i.e. already disabled
                continue
            previous.setdefault(name, item.finalized_level)
            item.finalized_level = update.max_version_level
        if previous:
            self.epoch += 1
            try:
                self._on_applied()
            except ControlPlaneError as exc:
                self._rollback(previous)
                for name in previous:
                    results[name] = str(exc)
                logger.warning("feature_update_rolled_back", features=sorted(previous), error=str(exc))
        return results

    def _rollback(self, previous: Mapping[str, int]) -> None:
        self.epoch -= 1
        for name, level in previous.items():
            self._features[name].finalized_level = level

    def _on_applied(self) -> None:
        """Hook for subclasses that persist state after a successful mutation.

        Raising ``ControlPlaneError`` undoes the mutation and reports the error
        for every feature in the call.
        """
