"""Static catalog of metadata.version feature levels and their release strings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

from featurekeeper.errors import FeatureTableError

FEATURE_NAME = "metadata.version"

_VERSION_PATTERN = re.compile(r"(?P<release>\d+\.\d+)(?:-(?P<iv>IV\d+))?")


@total_ordering
@dataclass(frozen=True)
class MetadataVersion:
    feature_level: int
    release: str
    sub_version: str
    did_metadata_change: bool

    def version(self) -> str:
        return f"{self.release}-{self.sub_version}"

    def __str__(self) -> str:
        return self.version()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, MetadataVersion):
            return NotImplemented
        return self.feature_level < other.feature_level

    @staticmethod
    def from_feature_level(level: int) -> "MetadataVersion":
        found = _BY_LEVEL.get(level)
        if found is None:
            raise ValueError(f"No MetadataVersion with feature level {level}")
        return found

    @staticmethod
    def from_version_string(text: str) -> "MetadataVersion":
        """Resolve ``3.3-IV1`` exactly, or ``3.3`` to the newest IV of that release."""
        match = _VERSION_PATTERN.fullmatch(text) if isinstance(text, str) else None
        if match is None:
            raise ValueError(f"Unknown metadata.version '{text}'")
        release = match.group("release")
        iv = match.group("iv")
        if iv is not None:
            found = _BY_VERSION.get(f"{release}-{iv}")
            if found is None:
                raise ValueError(f"Unknown metadata.version '{text}'")
            return found
        candidates = [mv for mv in ALL_VERSIONS if mv.release == release]
        if not candidates:
            raise ValueError(f"Unknown metadata.version '{text}'")
        return candidates[-1]


def _mv(level: int, release: str, iv: str, changed: bool) -> MetadataVersion:
    return MetadataVersion(
        feature_level=level,
        release=release,
        sub_version=iv,
        did_metadata_change=changed,
    )


IBP_3_0_IV1 = _mv(1, "3.0", "IV1", True)
IBP_3_1_IV0 = _mv(2, "3.1", "IV0", False)
IBP_3_2_IV0 = _mv(3, "3.2", "IV0", True)
IBP_3_3_IV0 = _mv(4, "3.3", "IV0", False)
IBP_3_3_IV1 = _mv(5, "3.3", "IV1", True)
IBP_3_3_IV2 = _mv(6, "3.3", "IV2", True)
IBP_3_3_IV3 = _mv(7, "3.3", "IV3", False)
IBP_3_4_IV0 = _mv(8, "3.4", "IV0", True)
IBP_3_5_IV0 = _mv(9, "3.5", "IV0", False)
IBP_3_5_IV1 = _mv(10, "3.5", "IV1", True)
IBP_3_5_IV2 = _mv(11, "3.5", "IV2", True)
IBP_3_6_IV0 = _mv(12, "3.6", "IV0", False)
IBP_3_6_IV1 = _mv(13, "3.6", "IV1", False)
IBP_3_6_IV2 = _mv(14, "3.6", "IV2", True)
IBP_3_7_IV0 = _mv(15, "3.7", "IV0", True)
IBP_3_7_IV1 = _mv(16, "3.7", "IV1", False)
IBP_3_7_IV2 = _mv(17, "3.7", "IV2", True)
IBP_3_7_IV3 = _mv(18, "3.7", "IV3", False)
IBP_3_7_IV4 = _mv(19, "3.7", "IV4", False)
IBP_3_8_IV0 = _mv(20, "3.8", "IV0", False)
IBP_3_9_IV0 = _mv(21, "3.9", "IV0", False)
IBP_4_0_IV0 = _mv(22, "4.0", "IV0", True)
IBP_4_0_IV1 = _mv(23, "4.0", "IV1", False)
IBP_4_0_IV2 = _mv(24, "4.0", "IV2", False)
IBP_4_0_IV3 = _mv(25, "4.0", "IV3", False)

ALL_VERSIONS: tuple[MetadataVersion, ...] = (
    IBP_3_0_IV1,
    IBP_3_1_IV0,
    IBP_3_2_IV0,
    IBP_3_3_IV0,
    IBP_3_3_IV1,
    IBP_3_3_IV2,
    IBP_3_3_IV3,
    IBP_3_4_IV0,
    IBP_3_5_IV0,
    IBP_3_5_IV1,
    IBP_3_5_IV2,
    IBP_3_6_IV0,
    IBP_3_6_IV1,
    IBP_3_6_IV2,
    IBP_3_7_IV0,
    IBP_3_7_IV1,
    IBP_3_7_IV2,
    IBP_3_7_IV3,
    IBP_3_7_IV4,
    IBP_3_8_IV0,
    IBP_3_9_IV0,
    IBP_4_0_IV0,
    IBP_4_0_IV1,
    IBP_4_0_IV2,
    IBP_4_0_IV3,
)

MINIMUM_KRAFT_VERSION = IBP_3_0_IV1
MINIMUM_BOOTSTRAP_VERSION = IBP_3_3_IV0
LATEST_PRODUCTION = IBP_3_9_IV0
LATEST_TESTING = ALL_VERSIONS[-1]

_BY_LEVEL = {mv.feature_level: mv for mv in ALL_VERSIONS}
_BY_VERSION = {mv.version(): mv for mv in ALL_VERSIONS}


def _check_catalog() -> None:
    # level <-> string must stay a bijection over the declared range
    if not len(_BY_LEVEL) == len(ALL_VERSIONS) == len(_BY_VERSION):
        raise FeatureTableError("metadata.version catalog has duplicate levels or version strings")
    levels = [mv.feature_level for mv in ALL_VERSIONS]
    if levels != sorted(levels):
        raise FeatureTableError("metadata.version catalog must be declared in ascending level order")


_check_catalog()


def latest_production() -> MetadataVersion:
    return LATEST_PRODUCTION


def latest_testing() -> MetadataVersion:
    return LATEST_TESTING


def versions_between(low: MetadataVersion, high: MetadataVersion) -> list[MetadataVersion]:
    return [mv for mv in ALL_VERSIONS if low.feature_level <= mv.feature_level <= high.feature_level]


def metadata_changed_between(current: int, target: int) -> bool:
    """True when any version above ``target`` up to ``current`` changed the metadata format."""
    low, high = min(current, target), max(current, target)
    return any(
        mv.did_metadata_change
        for mv in ALL_VERSIONS
        if low < mv.feature_level <= high
    )
