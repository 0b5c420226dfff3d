import pytest

from featurekeeper.catalog import metadata_version as mvc
from featurekeeper.catalog.levels import (
    level_to_string,
    metadata_versions_to_string,
    parse_name_and_level,
)
from featurekeeper.errors import ParseError, TerseError


def test_level_to_string() -> None:
    assert level_to_string("foo.bar", 5) == "5"
    assert level_to_string(mvc.FEATURE_NAME, mvc.IBP_3_3_IV0.feature_level) == "3.3-IV0"


def test_level_to_string_unknown_metadata_level_is_rendered_not_raised() -> None:
    assert level_to_string(mvc.FEATURE_NAME, 0) == "UNKNOWN 0"
    assert level_to_string(mvc.FEATURE_NAME, 999) == "UNKNOWN 999"


def test_metadata_versions_to_string() -> None:
    assert (
        metadata_versions_to_string(mvc.IBP_3_3_IV0, mvc.IBP_3_3_IV3)
        == "3.3-IV0, 3.3-IV1, 3.3-IV2, 3.3-IV3"
    )
    assert metadata_versions_to_string(mvc.IBP_3_9_IV0, mvc.IBP_3_9_IV0) == "3.9-IV0"


@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        ("foo.bar=5", ("foo.bar", 5)),
        ("quux=0", ("quux", 0)),
        ("neg=-3", ("neg", -3)),
        ("a=b=1", None),
        ("max=32767", ("max", 32767)),
    ],
)
def test_parse_name_and_level(spec: str, expected) -> None:
    if expected is None:
        with pytest.raises(ParseError):
            parse_name_and_level(spec)
        return
    assert parse_name_and_level(spec) == expected


def test_parse_name_and_level_without_equals_sign() -> None:
    with pytest.raises(ParseError) as exc:
        parse_name_and_level("baaz")
    assert "Can't parse feature=level string baaz: equals sign not found." in str(exc.value)
    assert isinstance(exc.value, TerseError)


@pytest.mark.parametrize(
    ("spec", "bad"),
    [
        ("w=tf", "tf"),
        ("w=", ""),
        ("w=32768", "32768"),
        ("w= 5", " 5"),
        ("w=1.5", "1.5"),
        ("w=5\n", "5\n"),
        ("w=+-5", "+-5"),
    ],
)
def test_parse_name_and_level_rejects_non_short(spec: str, bad: str) -> None:
    with pytest.raises(ParseError) as exc:
        parse_name_and_level(spec)
    assert f"Can't parse feature=level string {spec}: unable to parse {bad} as a short." in str(exc.value)
