"""Offline self-test running the whole update flow against simulated collaborators."""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from services.update.errors import NetworkError
from services.update.models import ApplyResult, Credentials, ReleaseChannel, RunOptions, UpdateOutcome
from services.update.pipeline import UpdatePipeline
from services.update.service import UpdateService
from services.update.versioning import parse_version


_LOGGER = logging.getLogger(__name__)

SELF_TEST_CREDENTIALS = Credentials(username="AZaz09", token="123456789012345678901234567890")
SELF_TEST_START_VERSION = "1.0.0"

_LATEST_URL = "memory://latest-releases"
_AVAILABLE_URL = "memory://available-versions"
_LINK_TEMPLATE = (
    "memory://download-link/{package}/{from_version}/{to_version}"
    "?username={username}&token={token}"
)
_PAYLOAD_TEMPLATE = "memory://payload/{from_version}/{to_version}"

_LATEST_RELEASES = {
    "experimental": {"alpha": "1.1.1", "demo": "1.1.1", "expansion": "1.1.1", "headless": "1.1.1"},
    "stable": {"alpha": "1.1.0", "demo": "1.1.0", "expansion": "1.1.0", "headless": "1.1.0"},
}
_EDGES = [("1.0.0", "1.0.1"), ("1.0.1", "1.1.0"), ("1.1.0", "1.1.1")]


class InMemoryFeedClient:
    """Serve canned documents and payloads keyed by URL (query strings ignored)."""

    def __init__(self, documents: Mapping[str, Any], payloads: Mapping[str, bytes]) -> None:
        self._documents = dict(documents)
        self._payloads = dict(payloads)

    def fetch_json(self, url: str, *, secret: bool = False) -> Any:
        key = url.split("?", 1)[0]
        if key not in self._documents:
            raise NetworkError(f"Cannot fetch {'<hidden>' if secret else url}")
        return self._documents[key]

    def fetch_bytes(self, url: str) -> bytes:
        if url not in self._payloads:
            raise NetworkError(f"Cannot fetch {url}")
        return self._payloads[url]


class SimulatedInstallation:
    """Pretend executable whose version advances to whatever a package names."""

    def __init__(self, version: str, *, platform: str = "linux64", build: str = "headless") -> None:
        self.version = version
        self._platform = platform
        self._build = build
        self.applied: list[Path] = []

    def report_version(self) -> str:
        return (
            f"Version: {self.version} (build 1, {self._platform}, {self._build})\n"
            "Version: 64\n"
            f"Map input version: {self.version}-0\n"
            f"Map output version: {self.version}-0"
        )

    def apply_update(self, package_path: Path) -> ApplyResult:
        target = package_path.read_text(encoding="utf-8").strip()
        parse_version(target)
        self.applied.append(package_path)
        self.version = target
        return ApplyResult(exit_code=0, output=f"Applied update to {target}")


def build_self_test_feed(package: str) -> InMemoryFeedClient:
    documents: dict[str, Any] = {
        _LATEST_URL: _LATEST_RELEASES,
        _AVAILABLE_URL: {
            package: [{"from": old, "to": new} for old, new in _EDGES] + [{"stable": "1.1.0"}],
        },
    }
    payloads: dict[str, bytes] = {}
    for old, new in _EDGES:
        link_key = _LINK_TEMPLATE.split("?", 1)[0].format(
            package=package, from_version=old, to_version=new
        )
        payload_url = _PAYLOAD_TEMPLATE.format(from_version=old, to_version=new)
        documents[link_key] = [payload_url]
        payloads[payload_url] = new.encode("utf-8")
    return InMemoryFeedClient(documents, payloads)


def run_self_test(options: RunOptions | None = None) -> int:
    """Run the update flow once per release channel; return a process exit code."""

    base = options or RunOptions()
    for channel in ReleaseChannel:
        run_options = RunOptions(
            channel=channel,
            package=base.package,
            build=base.build,
            platform=base.platform,
            no_install=False,
            trusted_test_mode=True,
        )
        _LOGGER.info("Running self-test on the %s channel", channel.value)
        with tempfile.TemporaryDirectory(prefix="factorio-updater-selftest-") as workdir:
            install_root = Path(workdir)
            feed = build_self_test_feed(run_options.package.value)
            installation = SimulatedInstallation(
                SELF_TEST_START_VERSION, platform=run_options.platform, build=run_options.build.value
            )
            pipeline = UpdatePipeline(
                feed,
                installation,
                credentials=SELF_TEST_CREDENTIALS,
                package=run_options.package,
                install_root=install_root,
                link_template=_LINK_TEMPLATE,
                trusted_test_mode=True,
            )
            service = UpdateService(
                feed,
                installation,
                pipeline,
                options=run_options,
                latest_releases_url=_LATEST_URL,
                available_versions_url=_AVAILABLE_URL,
            )
            result = service.run()
            leftovers = sorted(install_root.glob("upd_*.zip"))

        if result.outcome is not UpdateOutcome.UPDATED:
            _LOGGER.error("Self-test failed on the %s channel: %s", channel.value, result.error)
            return 1
        if leftovers:
            _LOGGER.error("Self-test left temporary files behind: %s", leftovers)
            return 1
    _LOGGER.info("All self-tests were successful")
    return 0


__all__ = [
    "InMemoryFeedClient",
    "SELF_TEST_CREDENTIALS",
    "SimulatedInstallation",
    "build_self_test_feed",
    "run_self_test",
]
