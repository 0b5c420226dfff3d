from __future__ import annotations

import json
import os
from pathlib import Path

import structlog

from featurekeeper.admin.memory import FeatureRange, InMemoryFeatureAdmin
from featurekeeper.errors import ControlPlaneError

logger = structlog.get_logger(__name__)

STATE_SCHEMA_VERSION = "cluster_features.v1"


def _expect_int(value: object, *, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ControlPlaneError(f"{path} must be int")
    return value


def _parse_features(payload: object, *, source: str) -> dict[str, FeatureRange]:
    if not isinstance(payload, dict):
        raise ControlPlaneError(f"{source}: features must be an object")
    features: dict[str, FeatureRange] = {}
    for name, item in payload.items():
        path = f"{source}: features.{name}"
        if not isinstance(item, dict):
            raise ControlPlaneError(f"{path} must be an object")
        min_level = _expect_int(item.get("min", 0), path=f"{path}.min")
        max_level = _expect_int(item.get("max", 0), path=f"{path}.max")
        finalized = _expect_int(item.get("finalized", 0), path=f"{path}.finalized")
        if min_level > max_level:
            raise ControlPlaneError(f"{path}: min must be <= max")
        features[name] = FeatureRange(
            min_level=min_level,
            max_level=max_level,
            finalized_level=finalized,
        )
    return features


class FileFeatureAdmin(InMemoryFeatureAdmin):
    """Control plane persisted as a JSON document, rewritten after each applied update."""

    def __init__(
        self,
        path: Path,
        *,
        controller_id: int | None = None,
        unsafe_downgrade_supported: bool | None = None,
    ) -> None:
        self.path = Path(path)
        payload = self._load()
        file_controller = payload.get("controller_id")
        if file_controller is not None:
            file_controller = _expect_int(file_controller, path=f"{self.path}: controller_id")
        file_unsafe = payload.get("unsafe_downgrade_supported", False)
        if not isinstance(file_unsafe, bool):
            raise ControlPlaneError(f"{self.path}: unsafe_downgrade_supported must be bool")
        self._file_controller_id = file_controller
        self._file_unsafe = file_unsafe
        super().__init__(
            _parse_features(payload.get("features", {}), source=str(self.path)),
            epoch=_expect_int(payload.get("epoch", 0), path=f"{self.path}: epoch"),
            controller_id=controller_id if controller_id is not None else file_controller,
            unsafe_downgrade_supported=(
                unsafe_downgrade_supported
                if unsafe_downgrade_supported is not None
                else file_unsafe
            ),
        )

    def _load(self) -> dict:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ControlPlaneError(f"{self.path}: cluster state file not found") from exc
        except json.JSONDecodeError as exc:
            raise ControlPlaneError(f"{self.path}: invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise ControlPlaneError(f"{self.path}: top-level JSON must be an object")
        schema = payload.get("schema_version", STATE_SCHEMA_VERSION)
        if schema != STATE_SCHEMA_VERSION:
            raise ControlPlaneError(f"{self.path}: schema_version must be '{STATE_SCHEMA_VERSION}'")
        return payload

    def to_dict(self) -> dict:
        state = self.describe_features()
        payload: dict = {
            "schema_version": STATE_SCHEMA_VERSION,
            "epoch": self.epoch,
            "unsafe_downgrade_supported": self._file_unsafe,
            "features": {d.name: d.to_dict() for d in state.descriptors()},
        }
        if self._file_controller_id is not None:
            payload["controller_id"] = self._file_controller_id
        return payload

    def _on_applied(self) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        text = json.dumps(self.to_dict(), indent=2, ensure_ascii=False, sort_keys=True) + "\n"
        created = False
        try:
            tmp_path.write_text(text, encoding="utf-8")
            created = True
            os.replace(tmp_path, self.path)
            created = False
        except OSError as exc:
            raise ControlPlaneError(f"{self.path}: failed to write cluster state: {exc}") from exc
        finally:
            if created:
                tmp_path.unlink(missing_ok=True)
        logger.info("cluster_state_written", path=str(self.path), epoch=self.epoch)
