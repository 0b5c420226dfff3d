from __future__ import annotations

from pathlib import Path

from featurekeeper.admin.base import FeatureAdmin
from featurekeeper.admin.file_backed import FileFeatureAdmin
from featurekeeper.config import CommandConfig
from featurekeeper.errors import ControlPlaneError

_FILE_SCHEME = "file:"


def _file_path_for(endpoint: str) -> Path | None:
    text = endpoint.strip()
    if text.startswith(_FILE_SCHEME):
        rest = text[len(_FILE_SCHEME):]
        if rest.startswith("//"):
            rest = rest[2:]
        return Path(rest) if rest else None
    if text.endswith(".json"):
        return Path(text)
    return None


def connect(endpoint: str, command_config: CommandConfig | None = None) -> FeatureAdmin:
    """Map an endpoint selector onto a control-plane collaborator."""
    config = command_config or CommandConfig()
    path = _file_path_for(endpoint)
    if path is None:
        raise ControlPlaneError(f"No control-plane connector for endpoint {endpoint}")
    return FileFeatureAdmin(
        path,
        controller_id=config.controller_id,
        unsafe_downgrade_supported=config.unsafe_downgrade_supported,
    )
