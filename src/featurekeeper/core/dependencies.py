from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TextIO

from featurekeeper.catalog import metadata_version as mvc
from featurekeeper.catalog.features import DEFAULT_REGISTRY, FeatureRegistry
from featurekeeper.catalog.levels import level_to_string, parse_name_and_level


@dataclass(frozen=True)
class DependencyReport:
    feature: str
    level: int
    requires: tuple[tuple[str, int], ...]

    def lines(self) -> list[str]:
        head = _annotated(self.feature, self.level)
        if not self.requires:
            return [f"{head} has no dependencies."]
        return [f"{head} requires:"] + [
            f"    {_annotated(name, level)}" for name, level in self.requires
        ]


def _annotated(name: str, level: int) -> str:
    if name == mvc.FEATURE_NAME:
        return f"{name}={level} ({level_to_string(name, level)})"
    return f"{name}={level}"


def dependencies_of(
    feature: str,
    level: int,
    registry: FeatureRegistry = DEFAULT_REGISTRY,
) -> DependencyReport:
    return DependencyReport(feature, level, tuple(registry.dependencies_of(feature, level)))


def write_feature_dependencies(
    specs: Sequence[str],
    out: TextIO,
    registry: FeatureRegistry = DEFAULT_REGISTRY,
) -> list[DependencyReport]:
    """Resolve every ``name=level`` first, then print the reports in request order."""
    parsed = [parse_name_and_level(spec) for spec in specs]
    reports = [dependencies_of(name, level, registry) for name, level in parsed]
    for report in reports:
        for line in report.lines():
            print(line, file=out)
    return reports
