"""Parse the executable's self-reported version into installation metadata."""

from __future__ import annotations

import logging
import re

from services.update.errors import (
    UnparsableOutputError,
    UnsupportedBuildTagError,
    UnsupportedPlatformError,
)
from services.update.models import BuildTag, LocalInstallationState
from services.update.versioning import parse_version


_LOGGER = logging.getLogger(__name__)

_REPORT_PATTERN = re.compile(
    r"Version: (?P<version>[0-9]+\.[0-9]+\.[0-9]+) "
    r"\(build (?P<build_number>[0-9]+), (?P<platform>[^,\n]+), (?P<build_tag>[^)\n]+)\)"
)


def parse_version_report(
    output: str, *, expected_platform: str, expected_build: BuildTag
) -> LocalInstallationState:
    """Return the installation state described by ``output``.

    Only the first line is inspected; it must read
    ``Version: <x.y.z> (build <N>, <platform>, <build tag>)``.
    """

    first_line = output.splitlines()[0] if output else ""
    match = _REPORT_PATTERN.match(first_line)
    if match is None:
        raise UnparsableOutputError(
            "The output of the program does not contain a version string", output
        )

    platform_tag = match.group("platform")
    if platform_tag != expected_platform:
        raise UnsupportedPlatformError(f"Unsupported platform '{platform_tag}'", output)

    build_tag = match.group("build_tag")
    if build_tag != expected_build.value:
        raise UnsupportedBuildTagError(f"Unsupported build '{build_tag}'", output)

    state = LocalInstallationState(
        version=parse_version(match.group("version")),
        build_number=match.group("build_number"),
        platform_tag=platform_tag,
        build_tag=build_tag,
    )
    _LOGGER.debug(
        "Local installation reports version %s (build %s, %s, %s)",
        state.version,
        state.build_number,
        state.platform_tag,
        state.build_tag,
    )
    return state


__all__ = ["parse_version_report"]
