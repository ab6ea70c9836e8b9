"""Updater configuration loaded from JSON resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from importlib import resources
from math import isfinite
from pathlib import Path
from typing import Any, Mapping

from services.update.constants import (
    AVAILABLE_VERSIONS_URL,
    DOWNLOAD_LINK_URL,
    DOWNLOAD_URL_PREFIX,
    EXECUTABLE_RELATIVE_PATH,
    EXPECTED_PLATFORM,
    LATEST_RELEASES_URL,
    NETWORK_TIMEOUT_SECONDS,
    PROCESS_TIMEOUT_SECONDS,
)
from services.update.models import BuildTag, PackageIdentity, ReleaseChannel

_CONFIG_RESOURCE = "updater.json"
_UPDATER_CONFIG_CACHE: UpdaterConfig | None = None


@dataclass(frozen=True)
class EndpointConfig:
    """Remote endpoints queried during an update run."""

    latest_releases_url: str = LATEST_RELEASES_URL
    available_versions_url: str = AVAILABLE_VERSIONS_URL
    download_link_url: str = DOWNLOAD_LINK_URL
    download_url_prefix: str = DOWNLOAD_URL_PREFIX


@dataclass(frozen=True)
class TimeoutConfig:
    """Upper bounds for network requests and executable invocations."""

    network_seconds: float = NETWORK_TIMEOUT_SECONDS
    process_seconds: float = PROCESS_TIMEOUT_SECONDS


@dataclass(frozen=True)
class TargetConfig:
    """Which installation flavour the updater maintains."""

    package: PackageIdentity = PackageIdentity.CORE_LINUX_HEADLESS64
    build: BuildTag = BuildTag.HEADLESS
    platform: str = EXPECTED_PLATFORM
    channel: ReleaseChannel = ReleaseChannel.STABLE
    executable: tuple[str, ...] = EXECUTABLE_RELATIVE_PATH


@dataclass(frozen=True)
class UpdaterConfig:
    """Structured configuration values for the updater."""

    endpoints: EndpointConfig
    timeouts: TimeoutConfig
    target: TargetConfig


def get_updater_config() -> UpdaterConfig:
    """Return the cached updater configuration."""

    global _UPDATER_CONFIG_CACHE
    if _UPDATER_CONFIG_CACHE is None:
        _UPDATER_CONFIG_CACHE = load_updater_config()
    return _UPDATER_CONFIG_CACHE


def reset_updater_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _UPDATER_CONFIG_CACHE
    _UPDATER_CONFIG_CACHE = None


def load_updater_config(path: str | Path | None = None) -> UpdaterConfig:
    """Load configuration from ``path`` or the bundled JSON resource."""

    data = _read_config_data(path)
    return UpdaterConfig(
        endpoints=_parse_endpoints_section(data.get("endpoints")),
        timeouts=_parse_timeouts_section(data.get("timeouts")),
        target=_parse_target_section(data.get("target")),
    )


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _parse_endpoints_section(section: Any) -> EndpointConfig:
    defaults = EndpointConfig()
    if not isinstance(section, Mapping):
        return defaults
    return EndpointConfig(
        latest_releases_url=_coerce_url(section.get("latest_releases"), default=defaults.latest_releases_url),
        available_versions_url=_coerce_url(
            section.get("available_versions"), default=defaults.available_versions_url
        ),
        download_link_url=_coerce_url(section.get("download_link"), default=defaults.download_link_url),
        download_url_prefix=_coerce_url(section.get("download_prefix"), default=defaults.download_url_prefix),
    )


def _parse_timeouts_section(section: Any) -> TimeoutConfig:
    defaults = TimeoutConfig()
    if not isinstance(section, Mapping):
        return defaults
    return TimeoutConfig(
        network_seconds=_coerce_positive_float(section.get("network_seconds"), default=defaults.network_seconds),
        process_seconds=_coerce_positive_float(section.get("process_seconds"), default=defaults.process_seconds),
    )


def _parse_target_section(section: Any) -> TargetConfig:
    defaults = TargetConfig()
    if not isinstance(section, Mapping):
        return defaults
    platform = section.get("platform")
    return TargetConfig(
        package=_coerce_enum(PackageIdentity, section.get("package"), default=defaults.package),
        build=_coerce_enum(BuildTag, section.get("build"), default=defaults.build),
        platform=platform.strip() if isinstance(platform, str) and platform.strip() else defaults.platform,
        channel=_coerce_enum(ReleaseChannel, section.get("channel"), default=defaults.channel),
        executable=_coerce_path_parts(section.get("executable"), default=defaults.executable),
    )


def _coerce_url(value: Any, *, default: str) -> str:
    if isinstance(value, str) and value.strip().startswith("https://"):
        return value.strip()
    return default


def _coerce_positive_float(value: Any, *, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        candidate = float(value)
    elif isinstance(value, str):
        try:
            candidate = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if not isfinite(candidate) or candidate <= 0:
        return default
    return candidate


def _coerce_enum(enum_type: Any, value: Any, *, default: Any) -> Any:
    if not isinstance(value, str):
        return default
    try:
        return enum_type(value.strip().lower())
    except ValueError:
        return default


def _coerce_path_parts(value: Any, *, default: tuple[str, ...]) -> tuple[str, ...]:
    if not isinstance(value, str):
        return default
    parts = tuple(part for part in value.replace("\\", "/").split("/") if part and part != "..")
    return parts or default


__all__ = [
    "EndpointConfig",
    "TargetConfig",
    "TimeoutConfig",
    "UpdaterConfig",
    "get_updater_config",
    "load_updater_config",
    "reset_updater_config_cache",
]
