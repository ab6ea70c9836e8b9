"""Strict parsers converting decoded remote JSON into typed records.

Each parser returns a :class:`shared.result.Result` holding either the typed
value or a :class:`RemoteDataShapeError` that keeps the offending document.
Business logic only ever sees the typed values.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from services.update.constants import DOWNLOAD_URL_PREFIX
from services.update.errors import (
    InvalidVersionError,
    LinkResolutionError,
    MissingBuildError,
    MissingChannelError,
    MissingPackageError,
    RemoteDataShapeError,
    WrongShapeError,
)
from services.update.models import BuildTag, PackageIdentity, ReleaseChannel, UpdateEdge, Version
from services.update.versioning import try_parse_version
from shared.result import Result


_LOGGER = logging.getLogger(__name__)


def parse_release_feed(
    document: Any, channel: ReleaseChannel, build: BuildTag
) -> Result[Version, RemoteDataShapeError]:
    """Extract the latest version of ``build`` on ``channel`` from ``document``."""

    if not isinstance(document, Mapping) or channel.value not in document:
        return Result.err(
            MissingChannelError(f"Release feed does not contain the channel '{channel.value}'", document)
        )
    section = document[channel.value]
    if not isinstance(section, Mapping):
        return Result.err(
            WrongShapeError(f"Release feed channel '{channel.value}' is not a mapping", document)
        )
    if build.value not in section:
        return Result.err(
            MissingBuildError(
                f"Release feed channel '{channel.value}' does not contain the build '{build.value}'",
                document,
            )
        )
    parsed = try_parse_version(section[build.value])
    if parsed.is_err():
        return Result.err(InvalidVersionError(section[build.value], document))
    return Result.ok(parsed.unwrap())


def read_latest_version(document: Any, channel: ReleaseChannel, build: BuildTag) -> Version:
    """Return the latest release version, raising on malformed documents."""

    return parse_release_feed(document, channel, build).unwrap()


def parse_edge_list(
    document: Any, package: PackageIdentity
) -> Result[tuple[UpdateEdge, ...], RemoteDataShapeError]:
    """Return the update edges published for ``package`` in feed order.

    Entries that are not ``{"from": ..., "to": ...}`` pairs of valid versions
    are skipped rather than rejecting the whole document.
    """

    if not isinstance(document, Mapping):
        return Result.err(WrongShapeError("Edge list is not a mapping", document))
    if package.value not in document:
        return Result.err(
            MissingPackageError(f"Edge list does not contain the package '{package.value}'", document)
        )
    entries = document[package.value]
    if not isinstance(entries, list):
        return Result.err(
            WrongShapeError(f"Edge list for package '{package.value}' is not a list", document)
        )

    edges: list[UpdateEdge] = []
    for entry in entries:
        edge = _parse_edge(entry)
        if edge is None:
            _LOGGER.debug("Skipping malformed update entry %r", entry)
            continue
        edges.append(edge)
    _LOGGER.debug(
        "Edge list for %s holds %d usable entries out of %d", package.value, len(edges), len(entries)
    )
    return Result.ok(tuple(edges))


def _parse_edge(entry: Any) -> UpdateEdge | None:
    if not isinstance(entry, Mapping):
        return None
    from_version = try_parse_version(entry.get("from"))
    to_version = try_parse_version(entry.get("to"))
    if from_version.is_err() or to_version.is_err():
        return None
    return UpdateEdge(from_version.unwrap(), to_version.unwrap())


def parse_link_response(
    document: Any, *, trusted_prefix: str | None = DOWNLOAD_URL_PREFIX
) -> Result[str, RemoteDataShapeError]:
    """Return the download URL from a download-link response.

    ``trusted_prefix`` of ``None`` disables the host check; only the self-test
    does that.
    """

    if not isinstance(document, list) or not document:
        return Result.err(LinkResolutionError("Update link is not a non-empty array", document))
    link = document[0]
    if not isinstance(link, str):
        return Result.err(LinkResolutionError("Update link's first item is not a string", document))
    if trusted_prefix is not None and not link.startswith(trusted_prefix):
        return Result.err(
            LinkResolutionError(f"Update link does not start with '{trusted_prefix}'", document)
        )
    return Result.ok(link)


__all__ = [
    "parse_edge_list",
    "parse_link_response",
    "parse_release_feed",
    "read_latest_version",
]
