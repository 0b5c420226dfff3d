from featurekeeper.admin.base import ClusterFeatureState, FeatureAdmin, FeatureDescriptor
from featurekeeper.admin.connect import connect
from featurekeeper.admin.file_backed import FileFeatureAdmin
from featurekeeper.admin.memory import FeatureRange, InMemoryFeatureAdmin

__all__ = [
    "ClusterFeatureState",
    "FeatureAdmin",
    "FeatureDescriptor",
    "FeatureRange",
    "FileFeatureAdmin",
    "InMemoryFeatureAdmin",
    "connect",
]
