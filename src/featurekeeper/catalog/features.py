"""Registry of declared cluster features, their levels and inter-feature dependencies.

Built once at import and validated; a registry that references an undeclared
feature or level is an internal error (``FeatureTableError``), not a user error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from featurekeeper.catalog import metadata_version as mvc
from featurekeeper.catalog.metadata_version import MetadataVersion
from featurekeeper.errors import FeatureTableError, UnknownFeatureError, UnknownFeatureLevelError


@dataclass(frozen=True)
class FeatureLevelSpec:
    level: int
    bootstrap_metadata_version: MetadataVersion
    dependencies: tuple[tuple[str, int], ...] = ()


@dataclass(frozen=True)
class FeatureSpec:
    name: str
    levels: tuple[FeatureLevelSpec, ...] = field(default_factory=tuple)

    def level_spec(self, level: int) -> FeatureLevelSpec | None:
        for item in self.levels:
            if item.level == level:
                return item
        return None

    def default_value(self, metadata_version: MetadataVersion) -> int:
        """Highest level bootstrapped at or before ``metadata_version``."""
        best = 0
        for item in self.levels:
            if item.bootstrap_metadata_version <= metadata_version:
                best = max(best, item.level)
        return best


class FeatureRegistry:
    def __init__(self, features: list[FeatureSpec]) -> None:
        self._features: dict[str, FeatureSpec] = {}
        for spec in features:
            if spec.name in self._features:
                raise FeatureTableError(f"feature declared twice: {spec.name}")
            self._features[spec.name] = spec
        self._validate()

    def _validate(self) -> None:
        errors: list[str] = []
        for spec in self._features.values():
            seen: set[int] = set()
            for item in spec.levels:
                if item.level in seen:
                    errors.append(f"{spec.name}: duplicate level {item.level}")
                seen.add(item.level)
                for dep_name, dep_level in item.dependencies:
                    path = f"{spec.name}={item.level}"
                    if dep_name == spec.name:
                        errors.append(f"{path}: feature cannot depend on itself")
                        continue
                    if not self._has_level(dep_name, dep_level):
                        errors.append(f"{path}: depends on undeclared {dep_name}={dep_level}")
        if errors:
            raise FeatureTableError("; ".join(errors))

    def _has_level(self, name: str, level: int) -> bool:
        if name == mvc.FEATURE_NAME:
            try:
                mvc.MetadataVersion.from_feature_level(level)
            except ValueError:
                return False
            return True
        spec = self._features.get(name)
        return spec is not None and spec.level_spec(level) is not None

    def list_names(self) -> list[str]:
        return list(self._features.keys())

    def dependencies_of(self, name: str, level: int) -> list[tuple[str, int]]:
        if name == mvc.FEATURE_NAME:
            if not self._has_level(name, level):
                raise UnknownFeatureLevelError(name, level)
            return []
        spec = self._features.get(name)
        if spec is None:
            raise UnknownFeatureError(name)
        item = spec.level_spec(level)
        if item is None:
            raise UnknownFeatureLevelError(name, level)
        return list(item.dependencies)

    def default_levels(self, metadata_version: MetadataVersion) -> Mapping[str, int]:
        return MappingProxyType(
            {name: spec.default_value(metadata_version) for name, spec in self._features.items()}
        )


def _lvl(
    level: int,
    bootstrap: MetadataVersion,
    *deps: tuple[str, int],
) -> FeatureLevelSpec:
    return FeatureLevelSpec(level=level, bootstrap_metadata_version=bootstrap, dependencies=tuple(deps))


TEST_FEATURE_VERSION = FeatureSpec(
    name="test.feature.version",
    levels=(
        _lvl(0, mvc.MINIMUM_KRAFT_VERSION),
        _lvl(1, mvc.IBP_3_3_IV0),
        _lvl(2, mvc.LATEST_TESTING, (mvc.FEATURE_NAME, mvc.LATEST_TESTING.feature_level)),
    ),
)

KRAFT_VERSION = FeatureSpec(
    name="kraft.version",
    levels=(
        _lvl(0, mvc.MINIMUM_KRAFT_VERSION),
        _lvl(1, mvc.IBP_3_9_IV0, (mvc.FEATURE_NAME, mvc.IBP_3_9_IV0.feature_level)),
    ),
)

TRANSACTION_VERSION = FeatureSpec(
    name="transaction.version",
    levels=(
        _lvl(0, mvc.MINIMUM_KRAFT_VERSION),
        _lvl(1, mvc.IBP_4_0_IV2),
        _lvl(2, mvc.IBP_4_0_IV2),
    ),
)

GROUP_VERSION = FeatureSpec(
    name="group.version",
    levels=(
        _lvl(0, mvc.MINIMUM_KRAFT_VERSION),
        _lvl(1, mvc.IBP_4_0_IV0),
    ),
)

DEFAULT_REGISTRY = FeatureRegistry(
    [
        TEST_FEATURE_VERSION,
        KRAFT_VERSION,
        TRANSACTION_VERSION,
        GROUP_VERSION,
    ]
)
