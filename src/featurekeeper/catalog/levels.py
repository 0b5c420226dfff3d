from __future__ import annotations

import re

from featurekeeper.catalog import metadata_version as mvc
from featurekeeper.catalog.metadata_version import MetadataVersion
from featurekeeper.errors import ParseError

SHORT_MIN = -32768
SHORT_MAX = 32767

_SHORT_PATTERN = re.compile(r"[+-]?\d+")


def parse_short(text: str) -> int | None:
    if not _SHORT_PATTERN.fullmatch(text):
        return None
    value = int(text)
    if value < SHORT_MIN or value > SHORT_MAX:
        return None
    return value


def parse_name_and_level(spec: str) -> tuple[str, int]:
    """Split ``name=level`` on the first ``=`` and parse the level as a short."""
    name, sep, raw_level = spec.partition("=")
    if not sep:
        raise ParseError(f"Can't parse feature=level string {spec}: equals sign not found.")
    level = parse_short(raw_level)
    if level is None:
        raise ParseError(
            f"Can't parse feature=level string {spec}: unable to parse {raw_level} as a short."
        )
    return name, level


def level_to_string(feature: str, level: int) -> str:
    if feature == mvc.FEATURE_NAME:
        try:
            return MetadataVersion.from_feature_level(level).version()
        except ValueError:
            return f"UNKNOWN {level}"
    return str(level)


def metadata_versions_to_string(low: MetadataVersion, high: MetadataVersion) -> str:
    return ", ".join(mv.version() for mv in mvc.versions_between(low, high))
