from __future__ import annotations

from pathlib import Path

from services.update import BuildTag, RunOptions
from services.update.selftest import (
    SELF_TEST_CREDENTIALS,
    SimulatedInstallation,
    build_self_test_feed,
    run_self_test,
)


def test_self_test_passes_for_every_channel() -> None:
    assert run_self_test() == 0


def test_self_test_honours_build_option() -> None:
    assert run_self_test(RunOptions(build=BuildTag.EXPANSION)) == 0


def test_self_test_credentials_are_well_formed() -> None:
    assert len(SELF_TEST_CREDENTIALS.token) == 30


def test_simulated_installation_advances_to_package_version(tmp_path: Path) -> None:
    installation = SimulatedInstallation("1.0.0")
    package = tmp_path / "upd_1.0.0_1.0.1.zip"
    package.write_bytes(b"1.0.1")

    result = installation.apply_update(package)

    assert result.exit_code == 0
    assert installation.version == "1.0.1"
    assert installation.report_version().startswith("Version: 1.0.1 (build 1, linux64, headless)")


def test_self_test_feed_serves_link_for_each_edge() -> None:
    feed = build_self_test_feed("core-linux_headless64")

    link = feed.fetch_json(
        "memory://download-link/core-linux_headless64/1.0.0/1.0.1?username=AZaz09&token=x", secret=True
    )

    assert link == ["memory://payload/1.0.0/1.0.1"]
    assert feed.fetch_bytes(link[0]) == b"1.0.1"
