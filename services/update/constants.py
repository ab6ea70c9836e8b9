"""Constants shared across the update service modules."""

from __future__ import annotations

LATEST_RELEASES_URL = "https://factorio.com/api/latest-releases"
AVAILABLE_VERSIONS_URL = "https://updater.factorio.com/get-available-versions"
DOWNLOAD_LINK_URL = (
    "https://updater.factorio.com/get-download-link"
    "?username={username}&token={token}&package={package}&from={from_version}&to={to_version}"
)
DOWNLOAD_URL_PREFIX = "https://dl.factorio.com/"

VERSION_PATTERN = r"[0-9]+\.[0-9]+\.[0-9]+"
USERNAME_PATTERN = r"[A-Za-z0-9_-]+"
TOKEN_PATTERN = r"[0-9a-f]{30}"

EXECUTABLE_RELATIVE_PATH = ("bin", "x64", "factorio")
EXPECTED_PLATFORM = "linux64"
UPDATE_FILE_TEMPLATE = "upd_{from_version}_{to_version}.zip"

NETWORK_TIMEOUT_SECONDS = 60.0
PROCESS_TIMEOUT_SECONDS = 600.0

USERNAME_ENV = "FACTORIO_USERNAME"
TOKEN_ENV = "FACTORIO_TOKEN"
