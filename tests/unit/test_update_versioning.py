from __future__ import annotations

import pytest

from services.update import (
    InvalidVersionError,
    Version,
    format_version,
    is_version_newer,
    parse_version,
    try_parse_version,
)


@pytest.mark.parametrize("text", ["0.0.0", "1.0.0", "1.1.109", "2.0.15", "10.20.30", "01.002.3"])
def test_parse_and_format_round_trip(text: str) -> None:
    version = parse_version(text)

    assert format_version(version) == text
    assert parse_version(format_version(version)) == version


@pytest.mark.parametrize(
    "text",
    [
        "",
        "1.0",
        "1.0.0.0",
        " 1.0.0",
        "1.0.0 ",
        "1.0.0\n",
        "v1.0.0",
        "1.0.0-rc1",
        "1.a.0",
        "1..0",
        "١.٠.٠",
        "Version: 1.0.0",
    ],
)
def test_parse_rejects_malformed_strings(text: str) -> None:
    with pytest.raises(InvalidVersionError):
        parse_version(text)


@pytest.mark.parametrize("value", [None, 1, 1.0, ["1.0.0"], {"version": "1.0.0"}])
def test_parse_rejects_non_strings(value: object) -> None:
    with pytest.raises(InvalidVersionError):
        parse_version(value)


def test_parse_extracts_numeric_components() -> None:
    version = parse_version("2.10.3")

    assert (version.major, version.minor, version.patch) == (2, 10, 3)
    assert version == Version(2, 10, 3)
    assert str(Version(2, 10, 3)) == "2.10.3"


def test_ordering_is_numeric_not_lexicographic() -> None:
    assert parse_version("1.10.0") > parse_version("1.9.0")
    assert parse_version("1.1.9") < parse_version("1.1.10")
    assert parse_version("2.0.0") > parse_version("1.99.99")
    assert sorted([parse_version("1.10.0"), parse_version("1.2.0"), parse_version("1.9.5")]) == [
        Version(1, 2, 0),
        Version(1, 9, 5),
        Version(1, 10, 0),
    ]


def test_equality_ignores_leading_zeros_in_source_text() -> None:
    padded = parse_version("1.01.0")
    plain = parse_version("1.1.0")

    assert padded == plain
    assert hash(padded) == hash(plain)
    assert str(padded) == "1.01.0"


def test_version_rejects_negative_components() -> None:
    with pytest.raises(ValueError):
        Version(1, -1, 0)


def test_is_version_newer() -> None:
    assert is_version_newer(parse_version("1.0.0"), parse_version("1.0.1")) is True
    assert is_version_newer(parse_version("1.0.1"), parse_version("1.0.0")) is False
    assert is_version_newer(parse_version("1.0.0"), parse_version("1.0.0")) is False


def test_try_parse_version_returns_tagged_result() -> None:
    ok = try_parse_version("1.2.3")
    err = try_parse_version("nope")

    assert ok.is_ok()
    assert ok.unwrap() == Version(1, 2, 3)
    assert err.is_err()
    assert isinstance(err.error, InvalidVersionError)
    with pytest.raises(InvalidVersionError):
        err.unwrap()
