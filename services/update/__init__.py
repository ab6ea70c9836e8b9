"""Public API for the update service package.

:mod:`services.update.builder` and :mod:`services.update.selftest` are not
re-exported here because they depend on :mod:`app.config`, which itself reads
the enumerations defined in this package.
"""

from __future__ import annotations

from services.update.constants import (
    AVAILABLE_VERSIONS_URL,
    DOWNLOAD_LINK_URL,
    DOWNLOAD_URL_PREFIX,
    EXECUTABLE_RELATIVE_PATH,
    EXPECTED_PLATFORM,
    LATEST_RELEASES_URL,
    TOKEN_ENV,
    USERNAME_ENV,
)
from services.update.errors import (
    ApplyError,
    CycleDetectedError,
    DownloadError,
    ErrorCategory,
    InputValidationError,
    InvalidVersionError,
    LinkResolutionError,
    MissingBuildError,
    MissingChannelError,
    MissingPackageError,
    NetworkError,
    NoPathFoundError,
    PersistError,
    PostconditionMismatchError,
    ProbeError,
    RemoteDataShapeError,
    ResolutionError,
    UnparsableOutputError,
    UnsupportedBuildTagError,
    UnsupportedPlatformError,
    UpdateError,
    UpdateTimeoutError,
    WrongShapeError,
)
from services.update.feeds import parse_edge_list, parse_link_response, parse_release_feed, read_latest_version
from services.update.installers import HeadlessExecutable, Installation
from services.update.models import (
    ApplyResult,
    BuildTag,
    Credentials,
    LocalInstallationState,
    PackageIdentity,
    ReleaseChannel,
    RunOptions,
    RunResult,
    UpdateEdge,
    UpdateOutcome,
    UpdateSequence,
    Version,
)
from services.update.pipeline import UpdatePipeline
from services.update.probe import parse_version_report
from services.update.providers import FeedClient, HttpFeedClient
from services.update.sequence import resolve_update_sequence
from services.update.service import SequenceRunner, UpdateService
from services.update.versioning import format_version, is_version_newer, parse_version, try_parse_version

__all__ = [
    "AVAILABLE_VERSIONS_URL",
    "DOWNLOAD_LINK_URL",
    "DOWNLOAD_URL_PREFIX",
    "EXECUTABLE_RELATIVE_PATH",
    "EXPECTED_PLATFORM",
    "LATEST_RELEASES_URL",
    "TOKEN_ENV",
    "USERNAME_ENV",
    "ApplyError",
    "ApplyResult",
    "BuildTag",
    "Credentials",
    "CycleDetectedError",
    "DownloadError",
    "ErrorCategory",
    "FeedClient",
    "HeadlessExecutable",
    "HttpFeedClient",
    "InputValidationError",
    "Installation",
    "InvalidVersionError",
    "LinkResolutionError",
    "LocalInstallationState",
    "MissingBuildError",
    "MissingChannelError",
    "MissingPackageError",
    "NetworkError",
    "NoPathFoundError",
    "PackageIdentity",
    "PersistError",
    "PostconditionMismatchError",
    "ProbeError",
    "ReleaseChannel",
    "RemoteDataShapeError",
    "ResolutionError",
    "RunOptions",
    "RunResult",
    "SequenceRunner",
    "UnparsableOutputError",
    "UnsupportedBuildTagError",
    "UnsupportedPlatformError",
    "UpdateEdge",
    "UpdateError",
    "UpdateOutcome",
    "UpdatePipeline",
    "UpdateSequence",
    "UpdateService",
    "UpdateTimeoutError",
    "Version",
    "WrongShapeError",
    "format_version",
    "is_version_newer",
    "parse_edge_list",
    "parse_link_response",
    "parse_release_feed",
    "parse_version",
    "parse_version_report",
    "read_latest_version",
    "resolve_update_sequence",
    "try_parse_version",
]
