import pytest

from featurekeeper.catalog import metadata_version as mvc
from featurekeeper.catalog.features import (
    DEFAULT_REGISTRY,
    FeatureLevelSpec,
    FeatureRegistry,
    FeatureSpec,
    _lvl,
)
from featurekeeper.errors import FeatureTableError, UnknownFeatureError, UnknownFeatureLevelError


def test_declared_feature_order() -> None:
    assert DEFAULT_REGISTRY.list_names() == [
        "test.feature.version",
        "kraft.version",
        "transaction.version",
        "group.version",
    ]


def test_dependencies_of_declared_levels() -> None:
    assert DEFAULT_REGISTRY.dependencies_of("test.feature.version", 2) == [
        (mvc.FEATURE_NAME, mvc.LATEST_TESTING.feature_level)
    ]
    assert DEFAULT_REGISTRY.dependencies_of("kraft.version", 1) == [(mvc.FEATURE_NAME, 21)]
    assert DEFAULT_REGISTRY.dependencies_of("transaction.version", 2) == []
    assert DEFAULT_REGISTRY.dependencies_of(mvc.FEATURE_NAME, 17) == []


def test_dependencies_of_unknown_feature() -> None:
    with pytest.raises(UnknownFeatureError) as exc:
        DEFAULT_REGISTRY.dependencies_of("unknown.feature", 1)
    assert str(exc.value) == "Unknown feature: unknown.feature"


def test_dependencies_of_unknown_level() -> None:
    with pytest.raises(UnknownFeatureLevelError) as exc:
        DEFAULT_REGISTRY.dependencies_of("transaction.version", 1000)
    assert str(exc.value) == "No feature:transaction.version with feature level 1000"
    assert isinstance(exc.value, ValueError)

    with pytest.raises(UnknownFeatureLevelError):
        DEFAULT_REGISTRY.dependencies_of(mvc.FEATURE_NAME, 0)


def test_default_levels_follow_bootstrap_versions() -> None:
    assert dict(DEFAULT_REGISTRY.default_levels(mvc.IBP_3_3_IV3)) == {
        "test.feature.version": 1,
        "kraft.version": 0,
        "transaction.version": 0,
        "group.version": 0,
    }
    assert dict(DEFAULT_REGISTRY.default_levels(mvc.IBP_4_0_IV3)) == {
        "test.feature.version": 2,
        "kraft.version": 1,
        "transaction.version": 2,
        "group.version": 1,
    }


def test_default_levels_view_is_read_only() -> None:
    levels = DEFAULT_REGISTRY.default_levels(mvc.IBP_3_9_IV0)
    with pytest.raises(TypeError):
        levels["kraft.version"] = 5  # type: ignore[index]


def test_registry_rejects_dependency_on_undeclared_level() -> None:
    broken = FeatureSpec(
        name="broken.version",
        levels=(
            FeatureLevelSpec(
                level=1,
                bootstrap_metadata_version=mvc.IBP_3_3_IV0,
                dependencies=(("group.version", 9),),
            ),
        ),
    )
    with pytest.raises(FeatureTableError) as exc:
        FeatureRegistry([broken])
    assert "broken.version=1: depends on undeclared group.version=9" in str(exc.value)


def test_registry_rejects_self_dependency_and_duplicates() -> None:
    looped = FeatureSpec(
        name="loop.version",
        levels=(
            FeatureLevelSpec(0, mvc.IBP_3_3_IV0),
            FeatureLevelSpec(1, mvc.IBP_3_3_IV0, (("loop.version", 0),)),
        ),
    )
    with pytest.raises(FeatureTableError):
        FeatureRegistry([looped])
    with pytest.raises(FeatureTableError):
        FeatureRegistry([FeatureSpec("dup"), FeatureSpec("dup")])


def test_dependency_names_are_taken_verbatim() -> None:
    base = FeatureSpec(name="share_group.version", levels=(_lvl(0, mvc.IBP_3_3_IV0), _lvl(1, mvc.IBP_3_3_IV0)))
    dependent = FeatureSpec(
        name="streams.version",
        levels=(
            _lvl(0, mvc.IBP_3_3_IV0),
            _lvl(1, mvc.IBP_3_3_IV0, ("share_group.version", 1), (mvc.FEATURE_NAME, 7)),
        ),
    )
    registry = FeatureRegistry([base, dependent])
    assert registry.dependencies_of("streams.version", 1) == [("share_group.version", 1), (mvc.FEATURE_NAME, 7)]
