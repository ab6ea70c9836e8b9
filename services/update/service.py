"""Service responsible for discovering and installing updates."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from services.update.constants import AVAILABLE_VERSIONS_URL, LATEST_RELEASES_URL
from services.update.errors import PostconditionMismatchError, UpdateError
from services.update.feeds import parse_edge_list, read_latest_version
from services.update.installers import Installation
from services.update.models import (
    LocalInstallationState,
    RunOptions,
    RunResult,
    UpdateEdge,
    UpdateOutcome,
    UpdateSequence,
    Version,
)
from services.update.probe import parse_version_report
from services.update.providers import FeedClient
from services.update.sequence import resolve_update_sequence
from services.update.versioning import is_version_newer


_LOGGER = logging.getLogger(__name__)


class SequenceRunner(Protocol):
    """Protocol describing the component that applies a resolved sequence."""

    def execute(self, sequence: Sequence[UpdateEdge]) -> None:
        """Apply ``sequence``, raising :class:`UpdateError` on the first failure."""


class UpdateService:
    """Coordinate version discovery, sequence resolution and installation."""

    def __init__(
        self,
        feed_client: FeedClient,
        installation: Installation,
        pipeline: SequenceRunner,
        *,
        options: RunOptions,
        latest_releases_url: str = LATEST_RELEASES_URL,
        available_versions_url: str = AVAILABLE_VERSIONS_URL,
    ) -> None:
        self._feed_client = feed_client
        self._installation = installation
        self._pipeline = pipeline
        self._options = options
        self._latest_releases_url = latest_releases_url
        self._available_versions_url = available_versions_url

    @property
    def options(self) -> RunOptions:
        return self._options

    def probe_local_state(self) -> LocalInstallationState:
        output = self._installation.report_version()
        return parse_version_report(
            output,
            expected_platform=self._options.platform,
            expected_build=self._options.build,
        )

    def fetch_latest_version(self) -> Version:
        document = self._feed_client.fetch_json(self._latest_releases_url)
        return read_latest_version(document, self._options.channel, self._options.build)

    def fetch_update_edges(self) -> tuple[UpdateEdge, ...]:
        document = self._feed_client.fetch_json(self._available_versions_url)
        return parse_edge_list(document, self._options.package).unwrap()

    def run(self) -> RunResult:
        """Bring the local installation up to the latest release on the configured channel."""

        local_version: Version | None = None
        remote_version: Version | None = None
        sequence: UpdateSequence = ()
        try:
            local_version = self.probe_local_state().version
            _LOGGER.info("Local version is %s", local_version)

            remote_version = self.fetch_latest_version()
            _LOGGER.info(
                "Latest %s version is %s", self._options.channel.value, remote_version
            )

            if remote_version == local_version:
                _LOGGER.info("Local version is the latest one")
                return RunResult(UpdateOutcome.UP_TO_DATE, local_version, remote_version)

            if is_version_newer(remote_version, local_version):
                _LOGGER.warning(
                    "Latest release %s is older than the installed version %s; downgrades are not supported",
                    remote_version,
                    local_version,
                )

            if self._options.no_install:
                _LOGGER.info("Found a new version, but no-install was requested")
                return RunResult(UpdateOutcome.NO_INSTALL_REQUESTED, local_version, remote_version)

            _LOGGER.info("Update available: %s -> %s", local_version, remote_version)
            edges = self.fetch_update_edges()
            sequence = resolve_update_sequence(edges, local_version, remote_version)
            self._pipeline.execute(sequence)

            final_version = self.probe_local_state().version
            if final_version != remote_version:
                raise PostconditionMismatchError(remote_version, final_version)
        except UpdateError as exc:
            _LOGGER.error("Update run failed [%s]: %s", exc.category.value, exc)
            return RunResult(
                UpdateOutcome.FAILED,
                local_version,
                remote_version,
                sequence,
                error=exc,
            )

        _LOGGER.info("All good, the installation is now at version %s", remote_version)
        return RunResult(UpdateOutcome.UPDATED, local_version, remote_version, sequence)


__all__ = ["SequenceRunner", "UpdateService"]
