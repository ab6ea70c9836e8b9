"""Helpers for parsing, formatting and comparing release versions."""

from __future__ import annotations

import re
from typing import Any

from packaging.version import InvalidVersion
from packaging.version import Version as _PackagingVersion

from services.update.constants import VERSION_PATTERN
from services.update.errors import InvalidVersionError
from services.update.models import Version
from shared.result import Result


__all__ = [
    "compare_versions",
    "format_version",
    "is_version_newer",
    "parse_version",
    "try_parse_version",
]

_VERSION_RE = re.compile(VERSION_PATTERN)


def parse_version(text: Any) -> Version:
    """Parse ``text`` into a :class:`Version`.

    Only three dot-separated groups of ASCII digits are accepted; surrounding
    whitespace, a trailing newline, pre-release suffixes or a ``v`` prefix are
    all rejected with :class:`InvalidVersionError`.
    """

    if not isinstance(text, str) or _VERSION_RE.fullmatch(text) is None:
        raise InvalidVersionError(text)
    try:
        release = _PackagingVersion(text).release
    except InvalidVersion as exc:  # pragma: no cover - the pattern already guards this
        raise InvalidVersionError(text) from exc
    major, minor, patch = release
    return Version(major, minor, patch, text=text)


def try_parse_version(value: Any) -> Result[Version, InvalidVersionError]:
    """Return a :class:`Result` instead of raising on malformed input."""

    try:
        return Result.ok(parse_version(value))
    except InvalidVersionError as exc:
        return Result.err(exc)


def format_version(version: Version) -> str:
    return str(version)


def compare_versions(current_version: Version, candidate: Version) -> int:
    """Compare ``candidate`` against ``current_version``.

    Returns ``1`` when ``candidate`` is newer, ``-1`` when it is older and ``0``
    when the versions are equivalent.
    """

    if candidate == current_version:
        return 0
    if candidate > current_version:
        return 1
    return -1


def is_version_newer(current_version: Version, candidate: Version) -> bool:
    """Return ``True`` if ``candidate`` is newer than ``current_version``."""

    return compare_versions(current_version, candidate) > 0
