from featurekeeper.catalog.features import DEFAULT_REGISTRY, FeatureRegistry, FeatureSpec
from featurekeeper.catalog.levels import (
    level_to_string,
    metadata_versions_to_string,
    parse_name_and_level,
)
from featurekeeper.catalog.metadata_version import FEATURE_NAME as METADATA_VERSION_FEATURE
from featurekeeper.catalog.metadata_version import MetadataVersion

__all__ = [
    "DEFAULT_REGISTRY",
    "FeatureRegistry",
    "FeatureSpec",
    "METADATA_VERSION_FEATURE",
    "MetadataVersion",
    "level_to_string",
    "metadata_versions_to_string",
    "parse_name_and_level",
]
