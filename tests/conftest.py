from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()


@pytest.fixture(autouse=True)
def _isolated_updater_environment(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """Keep log files and credentials from leaking between tests and the real user."""

    from app.config import reset_updater_config_cache
    from shared import logging_config

    log_dir = tmp_path_factory.mktemp("logs")
    monkeypatch.setenv("FACTORIO_UPDATER_LOG_DIR", str(log_dir))
    monkeypatch.delenv("FACTORIO_UPDATER_LOG_FILE", raising=False)
    monkeypatch.delenv("FACTORIO_USERNAME", raising=False)
    monkeypatch.delenv("FACTORIO_TOKEN", raising=False)
    logging_config._reset_for_tests()
    reset_updater_config_cache()

    yield

    logging_config._reset_for_tests()
    reset_updater_config_cache()
