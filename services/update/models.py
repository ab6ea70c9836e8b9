"""Data models used by the update service."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from services.update.constants import EXPECTED_PLATFORM
from services.update.errors import UpdateError


class ReleaseChannel(str, Enum):
    """Release tracks published by the release feed."""

    STABLE = "stable"
    EXPERIMENTAL = "experimental"


class BuildTag(str, Enum):
    """Product variants reported by the feed and by the executable."""

    ALPHA = "alpha"
    DEMO = "demo"
    EXPANSION = "expansion"
    HEADLESS = "headless"


class PackageIdentity(str, Enum):
    """Platform and architecture combinations that receive update packages."""

    CORE_LINUX32 = "core-linux32"
    CORE_LINUX64 = "core-linux64"
    CORE_LINUX_HEADLESS64 = "core-linux_headless64"
    CORE_MAC = "core-mac"
    CORE_MAC_ARM64 = "core-mac-arm64"
    CORE_MAC_X64 = "core-mac-x64"
    CORE_WIN32 = "core-win32"
    CORE_WIN64 = "core-win64"
    CORE_EXPANSION_LINUX64 = "core_expansion-linux64"
    CORE_EXPANSION_MAC = "core_expansion-mac"
    CORE_EXPANSION_WIN64 = "core_expansion-win64"


class UpdateOutcome(str, Enum):
    """Terminal states of a single update run."""

    UP_TO_DATE = "up_to_date"
    UPDATED = "updated"
    NO_INSTALL_REQUESTED = "no_install_requested"
    FAILED = "failed"


@dataclass(frozen=True, order=True)
class Version:
    """A ``major.minor.patch`` release number ordered numerically.

    Instances are normally produced by :func:`services.update.versioning.parse_version`,
    which also records the source text so that formatting reproduces it exactly.
    """

    major: int
    minor: int
    patch: int
    text: str | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        for part in (self.major, self.minor, self.patch):
            if isinstance(part, bool) or not isinstance(part, int) or part < 0:
                raise ValueError(f"Version components must be non-negative integers, got {part!r}")

    def __str__(self) -> str:
        if self.text is not None:
            return self.text
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class UpdateEdge:
    """One atomic, installable patch from ``from_version`` to ``to_version``."""

    from_version: Version
    to_version: Version

    def __str__(self) -> str:
        return f"{self.from_version} -> {self.to_version}"


UpdateSequence = Tuple[UpdateEdge, ...]


@dataclass(frozen=True)
class LocalInstallationState:
    """Metadata reported by the local executable about itself."""

    version: Version
    build_number: str
    platform_tag: str
    build_tag: str


@dataclass(frozen=True)
class Credentials:
    """Account credentials used to request download links."""

    username: str
    token: str = field(repr=False)


@dataclass(frozen=True)
class RunOptions:
    """Per-run settings threaded through the orchestration."""

    channel: ReleaseChannel = ReleaseChannel.STABLE
    package: PackageIdentity = PackageIdentity.CORE_LINUX_HEADLESS64
    build: BuildTag = BuildTag.HEADLESS
    platform: str = EXPECTED_PLATFORM
    no_install: bool = False
    trusted_test_mode: bool = False


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of asking the executable to apply an update package."""

    exit_code: int
    output: str


@dataclass(frozen=True)
class RunResult:
    """Summary of an update run and its terminal state."""

    outcome: UpdateOutcome
    local_version: Version | None = None
    remote_version: Version | None = None
    sequence: UpdateSequence = ()
    error: UpdateError | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is not UpdateOutcome.FAILED

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1


__all__ = [
    "ApplyResult",
    "BuildTag",
    "Credentials",
    "LocalInstallationState",
    "PackageIdentity",
    "ReleaseChannel",
    "RunOptions",
    "RunResult",
    "UpdateEdge",
    "UpdateOutcome",
    "UpdateSequence",
    "Version",
]
