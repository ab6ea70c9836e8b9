from __future__ import annotations

from importlib import resources

from app.version import get_app_version


def _reset_cache() -> None:
    get_app_version.cache_clear()  # type: ignore[attr-defined]


def test_get_app_version_prefers_environment(monkeypatch) -> None:
    monkeypatch.setenv("FACTORIO_UPDATER_VERSION", "v1.2.3")
    _reset_cache()

    assert get_app_version() == "1.2.3"
    _reset_cache()


def test_get_app_version_falls_back_to_version_file(monkeypatch) -> None:
    monkeypatch.delenv("FACTORIO_UPDATER_VERSION", raising=False)
    _reset_cache()

    version_file = resources.files("app").joinpath("VERSION")
    expected = version_file.read_text(encoding="utf-8").strip()
    assert expected
    assert get_app_version() == expected


def test_unreadable_version_resource_falls_back(monkeypatch) -> None:
    from app import version as version_module

    def _broken_files(package):  # noqa: ANN001 - mirrors importlib.resources.files
        raise NotADirectoryError("MultiplexedPath only supports directories")

    monkeypatch.delenv("FACTORIO_UPDATER_VERSION", raising=False)
    monkeypatch.setattr(version_module.resources, "files", _broken_files)
    _reset_cache()

    assert version_module._read_version_file() is None
    assert get_app_version()
    _reset_cache()


def test_app_package_resources_resolve() -> None:
    assert resources.files("app").joinpath("VERSION").is_file()
    assert resources.files("app.config").joinpath("updater.json").is_file()
