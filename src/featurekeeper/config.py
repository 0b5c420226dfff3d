"""Environment and command-config resolution."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from featurekeeper.errors import TerseError

BOOTSTRAP_SERVER_ENV = "FEATUREKEEPER_BOOTSTRAP_SERVER"
COMMAND_CONFIG_ENV = "FEATUREKEEPER_COMMAND_CONFIG"
EXPLAIN_PATH_ENV = "FEATUREKEEPER_EXPLAIN_PATH"
LOG_LEVEL_ENV = "FEATUREKEEPER_LOG_LEVEL"


def env_str(name: str) -> str | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


@dataclass(frozen=True)
class CommandConfig:
    controller_id: int | None = None
    unsafe_downgrade_supported: bool | None = None


def load_command_config(path: str | None) -> CommandConfig:
    """Read the optional JSON command config; the CLI flag wins over the env var."""
    resolved = path or env_str(COMMAND_CONFIG_ENV)
    if resolved is None:
        return CommandConfig()
    config_path = Path(resolved)
    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise TerseError(f"{config_path}: command config not found") from exc
    except json.JSONDecodeError as exc:
        raise TerseError(f"{config_path}: invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise TerseError(f"{config_path}: top-level JSON must be an object")

    controller_id = payload.get("controller_id")
    if controller_id is not None and (isinstance(controller_id, bool) or not isinstance(controller_id, int)):
        raise TerseError(f"{config_path}: controller_id must be int")
    unsafe = payload.get("unsafe_downgrade_supported")
    if unsafe is not None and not isinstance(unsafe, bool):
        raise TerseError(f"{config_path}: unsafe_downgrade_supported must be bool")
    return CommandConfig(controller_id=controller_id, unsafe_downgrade_supported=unsafe)


def explain_path() -> Path | None:
    raw = env_str(EXPLAIN_PATH_ENV)
    return Path(raw) if raw else None


def log_level() -> str:
    return (env_str(LOG_LEVEL_ENV) or "WARNING").upper()
