from __future__ import annotations

from collections.abc import Mapping

from featurekeeper.core.operations import UpgradeType


def downgrade_type(options: object) -> UpgradeType:
    """UNSAFE_DOWNGRADE only when the ``unsafe`` option is explicitly true."""
    if isinstance(options, Mapping):
        unsafe = options.get("unsafe")
    else:
        unsafe = getattr(options, "unsafe", None)
    if unsafe is True:
        return UpgradeType.UNSAFE_DOWNGRADE
    return UpgradeType.SAFE_DOWNGRADE
