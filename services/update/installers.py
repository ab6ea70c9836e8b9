"""Invocation of the locally installed executable."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from services.update.constants import PROCESS_TIMEOUT_SECONDS
from services.update.errors import ApplyError, ProbeError, UpdateTimeoutError
from services.update.models import ApplyResult

_LOGGER = logging.getLogger(__name__)


class Installation(Protocol):
    """Protocol describing the operations the updater needs from the executable."""

    def report_version(self) -> str:
        """Return the raw text the executable prints for ``--version``."""

    def apply_update(self, package_path: Path) -> ApplyResult:
        """Apply the update package stored at ``package_path``."""


class HeadlessExecutable:
    """Run the headless server binary as a subprocess."""

    def __init__(self, executable: Path, *, timeout: float = PROCESS_TIMEOUT_SECONDS) -> None:
        self._executable = Path(executable)
        self._timeout = timeout

    @property
    def executable(self) -> Path:
        return self._executable

    def report_version(self) -> str:
        try:
            completed = self._run("--version")
        except OSError as exc:
            raise ProbeError(f"Cannot run {self._executable}: {exc}") from exc
        return completed.stdout

    def apply_update(self, package_path: Path) -> ApplyResult:
        _LOGGER.info("Applying update package %s", package_path)
        try:
            completed = self._run("--apply-update", str(package_path))
        except OSError as exc:
            raise ApplyError(-1, f"Cannot run {self._executable}: {exc}") from exc
        return ApplyResult(exit_code=completed.returncode, output=completed.stdout)

    def _run(self, *arguments: str) -> subprocess.CompletedProcess[str]:
        command = [str(self._executable), *arguments]
        _LOGGER.debug("Running %s", command)
        try:
            return subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise UpdateTimeoutError(
                f"{self._executable} did not finish within {self._timeout}s"
            ) from exc


__all__ = ["HeadlessExecutable", "Installation"]
