"""Remote document and payload fetchers."""

from __future__ import annotations

import http.client
import json
import logging
import socket
from typing import Any, Protocol
from urllib.error import URLError
from urllib.request import urlopen

from services.update.constants import NETWORK_TIMEOUT_SECONDS
from services.update.errors import NetworkError, RemoteDataShapeError, UpdateTimeoutError


_LOGGER = logging.getLogger(__name__)

_HIDDEN_URL = "<hidden>"


class FeedClient(Protocol):
    """Protocol describing how remote documents and payloads are retrieved."""

    def fetch_json(self, url: str, *, secret: bool = False) -> Any:
        """Return the decoded JSON document served at ``url``."""

    def fetch_bytes(self, url: str) -> bytes:
        """Return the raw payload served at ``url``."""


class HttpFeedClient:
    """Fetch documents over HTTPS with a bounded timeout per request."""

    def __init__(self, *, timeout: float = NETWORK_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout

    def fetch_json(self, url: str, *, secret: bool = False) -> Any:
        label = _HIDDEN_URL if secret else url
        raw = self._read(url, label)
        try:
            text = raw.decode("utf-8")
            return json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise RemoteDataShapeError(
                f"Cannot parse JSON downloaded from {label}: {exc}",
                raw[:2000].decode("utf-8", errors="replace"),
            ) from exc

    def fetch_bytes(self, url: str) -> bytes:
        return self._read(url, url)

    def _read(self, url: str, label: str) -> bytes:
        _LOGGER.debug("Requesting %s (timeout=%ss)", label, self._timeout)
        try:
            with urlopen(url, timeout=self._timeout) as response:  # nosec - HTTPS endpoints from configuration
                payload = response.read()
        except (socket.timeout, TimeoutError) as exc:
            raise UpdateTimeoutError(f"Timed out after {self._timeout}s fetching {label}") from exc
        except URLError as exc:
            if isinstance(exc.reason, (socket.timeout, TimeoutError)):
                raise UpdateTimeoutError(f"Timed out after {self._timeout}s fetching {label}") from exc
            raise NetworkError(f"Cannot fetch {label}: {exc.reason}") from exc
        except (OSError, ValueError, http.client.HTTPException) as exc:
            raise NetworkError(f"Cannot fetch {label}: {exc}") from exc
        if not isinstance(payload, bytes):
            raise NetworkError(f"Fetching {label} did not return any data")
        _LOGGER.debug("Received %d bytes from %s", len(payload), label)
        return payload


__all__ = ["FeedClient", "HttpFeedClient"]
