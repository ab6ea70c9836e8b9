from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest

from services.update import ApplyError, HeadlessExecutable, ProbeError, UpdateTimeoutError


def _install_run(monkeypatch: pytest.MonkeyPatch, outcome: object) -> list[dict[str, object]]:
    calls: list[dict[str, object]] = []

    def _fake_run(command, **kwargs):
        calls.append({"command": command, **kwargs})
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    monkeypatch.setattr("services.update.installers.subprocess.run", _fake_run)
    return calls


def test_report_version_runs_executable(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    binary = tmp_path / "factorio"
    calls = _install_run(
        monkeypatch,
        subprocess.CompletedProcess([], 0, stdout="Version: 1.1.0 (build 1, linux64, headless)\n"),
    )

    output = HeadlessExecutable(binary, timeout=12).report_version()

    assert output == "Version: 1.1.0 (build 1, linux64, headless)\n"
    assert calls[0]["command"] == [str(binary), "--version"]
    assert calls[0]["timeout"] == 12
    assert calls[0]["stderr"] is subprocess.STDOUT
    assert calls[0]["stdin"] is subprocess.DEVNULL
    assert calls[0]["encoding"] == "utf-8"
    assert calls[0]["errors"] == "replace"


def test_apply_update_returns_exit_code_and_output(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    binary = tmp_path / "factorio"
    package = tmp_path / "upd_1.0.0_1.0.1.zip"
    calls = _install_run(
        monkeypatch, subprocess.CompletedProcess([], 1, stdout="Error: update package is damaged\n")
    )

    result = HeadlessExecutable(binary).apply_update(package)

    assert calls[0]["command"] == [str(binary), "--apply-update", str(package)]
    assert result.exit_code == 1
    assert result.output == "Error: update package is damaged\n"


def test_timeouts_are_reported(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _install_run(monkeypatch, subprocess.TimeoutExpired(["factorio"], 1))

    with pytest.raises(UpdateTimeoutError):
        HeadlessExecutable(tmp_path / "factorio", timeout=1).report_version()


def test_missing_executable_fails_probe(tmp_path: Path) -> None:
    with pytest.raises(ProbeError):
        HeadlessExecutable(tmp_path / "missing").report_version()


def test_missing_executable_fails_apply(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _install_run(monkeypatch, PermissionError("denied"))

    with pytest.raises(ApplyError) as excinfo:
        HeadlessExecutable(tmp_path / "factorio").apply_update(tmp_path / "upd.zip")

    assert excinfo.value.exit_code == -1


def _write_script(path: Path, body: str) -> Path:
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(0o755)
    return path


@pytest.mark.skipif(os.name == "nt", reason="requires a POSIX shell")
def test_undecodable_output_is_kept_with_replacement_characters(tmp_path: Path) -> None:
    binary = _write_script(tmp_path / "factorio", "printf 'bad \\377\\376 bytes\\n'\nexit 3\n")

    result = HeadlessExecutable(binary, timeout=30).apply_update(tmp_path / "upd_1.0.0_1.0.1.zip")

    assert result.exit_code == 3
    assert result.output == "bad \ufffd\ufffd bytes\n"
