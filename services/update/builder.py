"""Helpers for validating inputs and constructing the update service."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path

from app.config import UpdaterConfig, get_updater_config
from services.update.constants import TOKEN_ENV, TOKEN_PATTERN, USERNAME_ENV, USERNAME_PATTERN
from services.update.errors import InputValidationError
from services.update.installers import HeadlessExecutable, Installation
from services.update.models import Credentials, RunOptions
from services.update.pipeline import UpdatePipeline
from services.update.providers import FeedClient, HttpFeedClient
from services.update.service import UpdateService


_LOGGER = logging.getLogger(__name__)

_USERNAME_RE = re.compile(USERNAME_PATTERN)
_TOKEN_RE = re.compile(TOKEN_PATTERN)


def load_credentials(environ: Mapping[str, str] | None = None) -> Credentials:
    """Read and validate the account credentials from the environment."""

    env = os.environ if environ is None else environ
    username = env.get(USERNAME_ENV)
    if not isinstance(username, str) or _USERNAME_RE.fullmatch(username) is None:
        raise InputValidationError(f"Environment variable {USERNAME_ENV} has an invalid value")
    token = env.get(TOKEN_ENV)
    if not isinstance(token, str) or _TOKEN_RE.fullmatch(token) is None:
        raise InputValidationError(f"Environment variable {TOKEN_ENV} has an invalid value")
    return Credentials(username=username, token=token)


def executable_path(install_root: str | Path, parts: tuple[str, ...]) -> Path:
    return Path(install_root).joinpath(*parts)


def validate_install_root(rootdir: str, executable: tuple[str, ...]) -> Path:
    """Return ``rootdir`` as a path after checking it holds a usable installation.

    The path must end with the platform path separator, point at a readable
    and writable directory and contain the executable at ``executable``.
    """

    if not rootdir:
        raise InputValidationError("Missing installation root directory")
    root = Path(rootdir)
    if not root.exists():
        raise InputValidationError(f"Rootdir '{rootdir}' does not exist")
    if not root.is_dir():
        raise InputValidationError(f"Rootdir '{rootdir}' is not a directory")
    if not os.access(root, os.R_OK):
        raise InputValidationError(f"Rootdir '{rootdir}' is not readable")
    if not os.access(root, os.W_OK):
        raise InputValidationError(f"Rootdir '{rootdir}' is not writable")
    if not rootdir.endswith(os.sep):
        raise InputValidationError(f"Rootdir '{rootdir}' does not end with '{os.sep}'")
    binary = executable_path(root, executable)
    if not binary.is_file():
        raise InputValidationError(f"Executable file '{binary}' does not exist")
    if not os.access(binary, os.X_OK):
        raise InputValidationError(f"Executable file '{binary}' is not executable")
    return root


def build_update_service(
    rootdir: str,
    *,
    options: RunOptions,
    config: UpdaterConfig | None = None,
    credentials: Credentials | None = None,
    feed_client: FeedClient | None = None,
    installation: Installation | None = None,
) -> UpdateService:
    """Construct an :class:`UpdateService` for a validated installation.

    Input problems raise :class:`InputValidationError` before any network
    activity happens.
    """

    config = config or get_updater_config()
    install_root = validate_install_root(rootdir, config.target.executable)
    credentials = credentials or load_credentials()
    _LOGGER.debug("Using installation at %s for user %s", install_root, credentials.username)

    feed_client = feed_client or HttpFeedClient(timeout=config.timeouts.network_seconds)
    installation = installation or HeadlessExecutable(
        executable_path(install_root, config.target.executable),
        timeout=config.timeouts.process_seconds,
    )
    pipeline = UpdatePipeline(
        feed_client,
        installation,
        credentials=credentials,
        package=options.package,
        install_root=install_root,
        link_template=config.endpoints.download_link_url,
        trusted_prefix=config.endpoints.download_url_prefix,
        trusted_test_mode=options.trusted_test_mode,
    )
    return UpdateService(
        feed_client,
        installation,
        pipeline,
        options=options,
        latest_releases_url=config.endpoints.latest_releases_url,
        available_versions_url=config.endpoints.available_versions_url,
    )


def default_run_options(config: UpdaterConfig | None = None, **overrides: object) -> RunOptions:
    """Return :class:`RunOptions` seeded from the configured target."""

    target = (config or get_updater_config()).target
    values: dict[str, object] = {
        "channel": target.channel,
        "package": target.package,
        "build": target.build,
        "platform": target.platform,
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    return RunOptions(**values)  # type: ignore[arg-type]


__all__ = [
    "build_update_service",
    "default_run_options",
    "executable_path",
    "load_credentials",
    "validate_install_root",
]
