import argparse

from featurekeeper.core.operations import UpgradeType
from featurekeeper.core.policy import downgrade_type


def test_downgrade_type_from_mapping() -> None:
    assert downgrade_type({"unsafe": False}) == UpgradeType.SAFE_DOWNGRADE
    assert downgrade_type({"unsafe": True}) == UpgradeType.UNSAFE_DOWNGRADE
    assert downgrade_type({}) == UpgradeType.SAFE_DOWNGRADE


def test_downgrade_type_from_namespace() -> None:
    assert downgrade_type(argparse.Namespace(unsafe=True)) == UpgradeType.UNSAFE_DOWNGRADE
    assert downgrade_type(argparse.Namespace(unsafe=False)) == UpgradeType.SAFE_DOWNGRADE
    assert downgrade_type(argparse.Namespace()) == UpgradeType.SAFE_DOWNGRADE


def test_downgrade_type_requires_explicit_true() -> None:
    assert downgrade_type({"unsafe": "true"}) == UpgradeType.SAFE_DOWNGRADE
    assert downgrade_type({"unsafe": None}) == UpgradeType.SAFE_DOWNGRADE
