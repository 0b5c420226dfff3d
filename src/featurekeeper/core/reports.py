from __future__ import annotations

from typing import TextIO

from featurekeeper.admin.base import ClusterFeatureState, FeatureDescriptor
from featurekeeper.catalog import metadata_version as mvc
from featurekeeper.catalog.features import DEFAULT_REGISTRY, FeatureRegistry
from featurekeeper.catalog.levels import level_to_string
from featurekeeper.catalog.metadata_version import MetadataVersion
from featurekeeper.errors import UnknownReleaseVersionError


def describe_line(descriptor: FeatureDescriptor) -> str:
    name = descriptor.name
    return (
        f"Feature: {name}\t"
        f"SupportedMinVersion: {level_to_string(name, descriptor.supported_min_level)}\t"
        f"SupportedMaxVersion: {level_to_string(name, descriptor.supported_max_level)}\t"
        f"FinalizedVersionLevel: {level_to_string(name, descriptor.finalized_level)}\t"
        f"Epoch: {descriptor.epoch}"
    )


def write_describe(state: ClusterFeatureState, out: TextIO) -> list[str]:
    lines = sorted(describe_line(descriptor) for descriptor in state.descriptors())
    for line in lines:
        print(line, file=out)
    return lines


def resolve_release_version(release_version: str | None) -> MetadataVersion:
    text = release_version if release_version is not None else mvc.latest_production().version()
    try:
        version = MetadataVersion.from_version_string(text)
    except ValueError:
        version = None
    if (
        version is None
        or version < mvc.MINIMUM_BOOTSTRAP_VERSION
        or version > mvc.latest_production()
    ):
        raise UnknownReleaseVersionError(
            f"Unknown release version '{text}'. Supported versions are: "
            f"{mvc.MINIMUM_BOOTSTRAP_VERSION} to {mvc.latest_production()}"
        )
    return version


def write_version_mapping(
    release_version: str | None,
    out: TextIO,
    registry: FeatureRegistry = DEFAULT_REGISTRY,
) -> MetadataVersion:
    version = resolve_release_version(release_version)
    print(f"{mvc.FEATURE_NAME}={version.feature_level} ({version.version()})", file=out)
    for name, level in registry.default_levels(version).items():
        print(f"{name}={level}", file=out)
    return version
