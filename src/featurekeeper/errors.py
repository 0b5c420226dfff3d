"""Error taxonomy shared by the catalog, core and CLI layers."""

from __future__ import annotations


class TerseError(Exception):
    """User-facing failure; the CLI prints the message verbatim and exits 1."""


class UsageError(TerseError):
    """Raised by the argument parser in place of its own exit."""


class ParseError(TerseError):
    """Raised for malformed feature arguments, before any operation runs."""


class UnknownFeatureError(TerseError):
    def __init__(self, feature: str) -> None:
        super().__init__(f"Unknown feature: {feature}")
        self.feature = feature


class UnknownFeatureLevelError(TerseError, ValueError):
    def __init__(self, feature: str, level: int) -> None:
        super().__init__(f"No feature:{feature} with feature level {level}")
        self.feature = feature
        self.level = level


class UnknownReleaseVersionError(TerseError):
    pass


class ControlPlaneError(TerseError):
    """Raised when the control plane cannot be reached or returns unusable state."""


class BatchFailedError(TerseError):
    def __init__(self, failed: int, total: int) -> None:
        super().__init__(f"{failed} out of {total} operation(s) failed.")
        self.failed = failed
        self.total = total


class FeatureTableError(RuntimeError):
    """Internal inconsistency in the static feature tables. Never shown as a user error."""
