"""Download and apply each step of an update sequence."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from urllib.parse import quote

from services.update.constants import DOWNLOAD_LINK_URL, DOWNLOAD_URL_PREFIX, UPDATE_FILE_TEMPLATE
from services.update.errors import ApplyError, DownloadError, NetworkError, PersistError
from services.update.feeds import parse_link_response
from services.update.installers import Installation
from services.update.models import Credentials, PackageIdentity, UpdateEdge
from services.update.providers import FeedClient


_LOGGER = logging.getLogger(__name__)


def _remove_file(path: Path) -> None:
    path.unlink(missing_ok=True)


class UpdatePipeline:
    """Fetch, persist and apply update packages one edge at a time.

    The first failing step aborts the run; later edges are never attempted.
    Downloaded packages are written inside ``install_root`` and removed once
    the run ends, except for any recorded path that lies outside the root.
    """

    def __init__(
        self,
        feed_client: FeedClient,
        installation: Installation,
        *,
        credentials: Credentials,
        package: PackageIdentity,
        install_root: Path,
        link_template: str = DOWNLOAD_LINK_URL,
        trusted_prefix: str = DOWNLOAD_URL_PREFIX,
        trusted_test_mode: bool = False,
        remove_file: Callable[[Path], None] = _remove_file,
    ) -> None:
        self._feed_client = feed_client
        self._installation = installation
        self._credentials = credentials
        self._package = package
        self._install_root = Path(install_root)
        self._link_template = link_template
        self._trusted_prefix = trusted_prefix
        self._trusted_test_mode = trusted_test_mode
        self._remove_file = remove_file
        self._temp_files: list[Path] = []

    @property
    def temp_files(self) -> tuple[Path, ...]:
        return tuple(self._temp_files)

    def execute(self, sequence: Sequence[UpdateEdge]) -> None:
        """Apply every edge of ``sequence`` in order, cleaning up afterwards."""

        try:
            total = len(sequence)
            for index, edge in enumerate(sequence, start=1):
                _LOGGER.info("Update step %d/%d: %s", index, total, edge)
                self._apply_edge(edge)
        finally:
            self.cleanup()

    def track(self, path: Path) -> None:
        """Record ``path`` as a temporary file owned by this run."""

        self._temp_files.append(Path(path))

    def cleanup(self) -> None:
        """Delete recorded temporary files that live inside the installation root."""

        root = self._install_root.resolve()
        for path in self._temp_files:
            if not _is_within(path, root):
                _LOGGER.warning(
                    "Not deleting %s because it is outside of the installation root %s", path, root
                )
                continue
            _LOGGER.info("Deleting temporary file %s", path)
            try:
                self._remove_file(path)
            except OSError as exc:
                _LOGGER.warning("Unable to delete temporary file %s: %s", path, exc)
        self._temp_files.clear()

    def _apply_edge(self, edge: UpdateEdge) -> None:
        link = self._resolve_link(edge)
        payload = self._download(link)
        package_path = self._install_root / UPDATE_FILE_TEMPLATE.format(
            from_version=edge.from_version, to_version=edge.to_version
        )
        self.track(package_path)
        self._persist(package_path, payload)

        result = self._installation.apply_update(package_path)
        if result.exit_code != 0:
            raise ApplyError(result.exit_code, result.output)
        _LOGGER.info("Applied update %s", edge)

    def _resolve_link(self, edge: UpdateEdge) -> str:
        _LOGGER.info("Requesting download link for %s", edge)
        url = self._link_template.format(
            username=quote(self._credentials.username, safe=""),
            token=quote(self._credentials.token, safe=""),
            package=quote(self._package.value, safe=""),
            from_version=quote(str(edge.from_version), safe=""),
            to_version=quote(str(edge.to_version), safe=""),
        )
        document = self._feed_client.fetch_json(url, secret=True)
        prefix = None if self._trusted_test_mode else self._trusted_prefix
        return parse_link_response(document, trusted_prefix=prefix).unwrap()

    def _download(self, link: str) -> bytes:
        _LOGGER.info("Downloading update package from %s", link)
        try:
            payload = self._feed_client.fetch_bytes(link)
        except NetworkError as exc:
            raise DownloadError(f"Cannot download update package from {link}: {exc}") from exc
        if not isinstance(payload, bytes) or not payload:
            raise DownloadError(f"Downloading {link} did not produce any data")
        return payload

    def _persist(self, package_path: Path, payload: bytes) -> None:
        _LOGGER.info("Saving update package to %s", package_path)
        try:
            package_path.write_bytes(payload)
        except OSError as exc:
            raise PersistError(f"Cannot write update package {package_path}: {exc}") from exc
        if not package_path.is_file():
            raise PersistError(f"Update package {package_path} does not exist after writing")


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root)
    except ValueError:
        return False
    return True


__all__ = ["UpdatePipeline"]
