from __future__ import annotations

import os
from pathlib import Path

import pytest

from app import cli
from services.update import BuildTag, PackageIdentity, ReleaseChannel, RunResult, UpdateOutcome


class _StubService:
    def __init__(self, outcome: UpdateOutcome) -> None:
        self.outcome = outcome
        self.runs = 0

    def run(self) -> RunResult:
        self.runs += 1
        return RunResult(self.outcome)


def test_self_test_flag_runs_offline_self_test() -> None:
    assert cli.main(["--test", "--quiet"]) == 0


def test_missing_rootdir_is_an_input_error() -> None:
    assert cli.main(["--quiet"]) == 1


def test_invalid_rootdir_is_an_input_error(tmp_path: Path) -> None:
    assert cli.main(["--quiet", "--rootdir", str(tmp_path / "missing") + os.sep]) == 1


def test_unknown_channel_is_a_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--stable", "nightly"])

    assert excinfo.value.code == 2


def test_version_flag_prints_version(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(cli, "get_app_version", lambda: "9.8.7")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])

    assert excinfo.value.code == 0
    assert "9.8.7" in capsys.readouterr().out


@pytest.mark.parametrize(
    ("outcome", "expected"),
    [
        (UpdateOutcome.UPDATED, 0),
        (UpdateOutcome.UP_TO_DATE, 0),
        (UpdateOutcome.NO_INSTALL_REQUESTED, 0),
        (UpdateOutcome.FAILED, 1),
    ],
)
def test_exit_code_follows_run_outcome(
    monkeypatch: pytest.MonkeyPatch, outcome: UpdateOutcome, expected: int
) -> None:
    captured: dict[str, object] = {}
    stub = _StubService(outcome)

    def _fake_build(rootdir, *, options, config):  # noqa: ANN001 - mirrors build_update_service
        captured["rootdir"] = rootdir
        captured["options"] = options
        return stub

    monkeypatch.setattr(cli, "build_update_service", _fake_build)

    exit_code = cli.main(
        ["-q", "-r", "/srv/factorio/", "-s", "experimental", "-p", "core-linux64", "-b", "expansion", "-n"]
    )

    assert exit_code == expected
    assert stub.runs == 1
    assert captured["rootdir"] == "/srv/factorio/"
    options = captured["options"]
    assert options.channel is ReleaseChannel.EXPERIMENTAL
    assert options.package is PackageIdentity.CORE_LINUX64
    assert options.build is BuildTag.EXPANSION
    assert options.no_install is True


def test_options_default_to_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def _fake_build(rootdir, *, options, config):  # noqa: ANN001 - mirrors build_update_service
        captured["options"] = options
        return _StubService(UpdateOutcome.UP_TO_DATE)

    monkeypatch.setattr(cli, "build_update_service", _fake_build)

    assert cli.main(["-q", "-r", "/srv/factorio/"]) == 0
    options = captured["options"]
    assert options.channel is ReleaseChannel.STABLE
    assert options.package is PackageIdentity.CORE_LINUX_HEADLESS64
    assert options.build is BuildTag.HEADLESS
    assert options.no_install is False
