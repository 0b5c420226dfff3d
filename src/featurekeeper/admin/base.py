from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from featurekeeper.core.operations import FeatureUpdate


@dataclass(frozen=True)
class FeatureDescriptor:
    name: str
    supported_min_level: int
    supported_max_level: int
    finalized_level: int
    epoch: int

    def to_dict(self) -> dict:
        return {
            "min": self.supported_min_level,
            "max": self.supported_max_level,
            "finalized": self.finalized_level,
        }


class ClusterFeatureState:
    """Read-only snapshot of the control plane's feature table for one invocation."""

    def __init__(self, descriptors: Mapping[str, FeatureDescriptor]) -> None:
        self._descriptors = MappingProxyType(dict(descriptors))

    def get(self, name: str) -> FeatureDescriptor | None:
        return self._descriptors.get(name)

    def finalized_level(self, name: str) -> int:
        descriptor = self._descriptors.get(name)
        return descriptor.finalized_level if descriptor is not None else 0

    def names(self) -> list[str]:
        return sorted(self._descriptors.keys())

    def descriptors(self) -> list[FeatureDescriptor]:
        return [self._descriptors[name] for name in self.names()]

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


class FeatureAdmin:
    """Control-plane collaborator: one describe call and one per-feature update call."""

    def describe_features(self) -> ClusterFeatureState:
        raise NotImplementedError

    def update_features(
        self,
        updates: Mapping[str, FeatureUpdate],
        *,
        validate_only: bool = False,
    ) -> dict[str, str | None]:
        """Return ``{feature: None}`` on success or ``{feature: error message}``."""
        raise NotImplementedError
