"""Exception hierarchy raised by the update service.

Every error derives from :class:`UpdateError` and carries an
:class:`ErrorCategory` so the orchestration layer can report which kind of
step failed.  Errors raised while reading remote documents keep the
offending document, probe errors keep the raw executable output and apply
errors keep the captured process output, so a failed run can be diagnosed
from the log alone.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Coarse classification of update failures."""

    INPUT_VALIDATION = "input_validation"
    REMOTE_DATA_SHAPE = "remote_data_shape"
    NETWORK = "network"
    TIMEOUT = "timeout"
    PROBE = "probe"
    RESOLUTION = "resolution"
    PERSIST = "persist"
    APPLY = "apply"
    POSTCONDITION = "postcondition"


class UpdateError(RuntimeError):
    """Raised when an update cannot be discovered, downloaded or applied."""

    category: ErrorCategory = ErrorCategory.NETWORK


class InputValidationError(UpdateError):
    """Raised for invalid command-line options, credentials or root directories."""

    category = ErrorCategory.INPUT_VALIDATION


class RemoteDataShapeError(UpdateError):
    """Raised when a remote document does not have the expected structure."""

    category = ErrorCategory.REMOTE_DATA_SHAPE

    def __init__(self, message: str, document: Any = None) -> None:
        self.document = document
        if document is not None:
            message = f"{message} (document: {_preview(document)})"
        super().__init__(message)


class MissingChannelError(RemoteDataShapeError):
    """The release feed lacks the requested channel."""


class WrongShapeError(RemoteDataShapeError):
    """A document section is not of the expected type."""


class MissingBuildError(RemoteDataShapeError):
    """The release feed channel lacks the requested build tag."""


class MissingPackageError(RemoteDataShapeError):
    """The edge list lacks the requested package identity."""


class InvalidVersionError(RemoteDataShapeError):
    """A value does not parse as a ``major.minor.patch`` version."""

    def __init__(self, value: Any, document: Any = None) -> None:
        self.value = value
        super().__init__(f"{value!r} is not a valid version string", document)


class LinkResolutionError(RemoteDataShapeError):
    """The download-link service returned an unusable response."""


class NetworkError(UpdateError):
    """Raised when a remote fetch produced no data."""

    category = ErrorCategory.NETWORK


class DownloadError(NetworkError):
    """The patch payload could not be downloaded."""


class UpdateTimeoutError(UpdateError):
    """Raised when a remote fetch or subprocess exceeds its time limit."""

    category = ErrorCategory.TIMEOUT


class ProbeError(UpdateError):
    """Raised when the local installation cannot be identified."""

    category = ErrorCategory.PROBE

    def __init__(self, message: str, output: str | None = None) -> None:
        self.output = output
        if output is not None:
            message = f"{message}\n<output>\n{output}\n</output>"
        super().__init__(message)


class UnparsableOutputError(ProbeError):
    """The executable's version report does not match the expected pattern."""


class UnsupportedPlatformError(ProbeError):
    """The installation targets a different platform."""


class UnsupportedBuildTagError(ProbeError):
    """The installation is a different product build."""


class ResolutionError(UpdateError):
    """Raised when no chain of updates connects two versions."""

    category = ErrorCategory.RESOLUTION

    def __init__(self, message: str, version: Any) -> None:
        self.version = version
        super().__init__(message)


class NoPathFoundError(ResolutionError):
    def __init__(self, version: Any, target: Any = None) -> None:
        self.target = target
        message = f"No update starts at version {version}"
        if target is not None:
            message += f" on the way to {target}"
        super().__init__(message, version)


class CycleDetectedError(ResolutionError):
    def __init__(self, version: Any) -> None:
        super().__init__(f"Update chain loops back to version {version}", version)


class PersistError(UpdateError):
    """Raised when a downloaded payload could not be written to disk."""

    category = ErrorCategory.PERSIST


class ApplyError(UpdateError):
    """Raised when the executable rejects an update package."""

    category = ErrorCategory.APPLY

    def __init__(self, exit_code: int, output: str) -> None:
        self.exit_code = exit_code
        self.output = output
        super().__init__(
            f"Update failed with exit code {exit_code}\n<output>\n{output}\n</output>"
        )


class PostconditionMismatchError(UpdateError):
    """Raised when the installation did not reach the target version."""

    category = ErrorCategory.POSTCONDITION

    def __init__(self, expected: Any, actual: Any) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Local version is {actual} but the latest release is {expected} after applying all updates"
        )


def _preview(document: Any, limit: int = 2000) -> str:
    text = repr(document)
    if len(text) > limit:
        return text[:limit] + "..."
    return text


__all__ = [
    "ApplyError",
    "CycleDetectedError",
    "DownloadError",
    "ErrorCategory",
    "InputValidationError",
    "InvalidVersionError",
    "LinkResolutionError",
    "MissingBuildError",
    "MissingChannelError",
    "MissingPackageError",
    "NetworkError",
    "NoPathFoundError",
    "PersistError",
    "PostconditionMismatchError",
    "ProbeError",
    "RemoteDataShapeError",
    "ResolutionError",
    "UnparsableOutputError",
    "UnsupportedBuildTagError",
    "UnsupportedPlatformError",
    "UpdateError",
    "UpdateTimeoutError",
    "WrongShapeError",
]
