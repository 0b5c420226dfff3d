import io

import pytest

from featurekeeper.catalog import metadata_version as mvc
from featurekeeper.core.dependencies import dependencies_of, write_feature_dependencies
from featurekeeper.errors import ParseError, UnknownFeatureError, UnknownFeatureLevelError


def _output(specs: list[str]) -> str:
    out = io.StringIO()
    write_feature_dependencies(specs, out)
    return out.getvalue()


def test_feature_with_dependencies() -> None:
    latest = mvc.latest_testing()
    assert _output(["test.feature.version=2"]) == (
        f"test.feature.version=2 requires:\n"
        f"    metadata.version={latest.feature_level} ({latest.version()})\n"
    )


def test_feature_with_no_dependencies() -> None:
    assert _output(["metadata.version=17"]) == "metadata.version=17 (3.7-IV2) has no dependencies.\n"


def test_unknown_feature() -> None:
    with pytest.raises(UnknownFeatureError) as exc:
        _output(["unknown.feature=1"])
    assert str(exc.value) == "Unknown feature: unknown.feature"


def test_unknown_feature_level() -> None:
    with pytest.raises(UnknownFeatureLevelError) as exc:
        _output(["transaction.version=1000"])
    assert str(exc.value) == "No feature:transaction.version with feature level 1000"


def test_invalid_level_format() -> None:
    with pytest.raises(ParseError) as exc:
        _output(["metadata.version=invalid"])
    assert str(exc.value) == (
        "Can't parse feature=level string metadata.version=invalid: unable to parse invalid as a short."
    )


def test_multiple_features_in_request_order() -> None:
    latest = mvc.latest_testing()
    assert _output(["transaction.version=2", "group.version=1", "test.feature.version=2"]) == (
        "transaction.version=2 has no dependencies.\n"
        "group.version=1 has no dependencies.\n"
        "test.feature.version=2 requires:\n"
        f"    metadata.version={latest.feature_level} ({latest.version()})\n"
    )


def test_failure_in_any_feature_prints_nothing() -> None:
    out = io.StringIO()
    with pytest.raises(UnknownFeatureError):
        write_feature_dependencies(["group.version=1", "nope=1"], out)
    assert out.getvalue() == ""


def test_dependencies_of_returns_declared_pairs() -> None:
    report = dependencies_of("kraft.version", 1)
    assert report.requires == ((mvc.FEATURE_NAME, mvc.IBP_3_9_IV0.feature_level),)
    assert report.lines() == ["kraft.version=1 requires:", "    metadata.version=21 (3.9-IV0)"]
