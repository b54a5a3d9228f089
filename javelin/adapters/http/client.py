"""
HTTP transport — blocking GETs against the file server with urllib.
"""

from __future__ import annotations

import http.client
import json
import logging
import shutil
import urllib.request
from pathlib import Path
from typing import Any

from javelin.adapters.base import HttpTransport

logger = logging.getLogger(__name__)

_USER_AGENT = "javelin/1.0"
_CHUNK_SIZE = 1024 * 1024


class UrllibTransport(HttpTransport):
    """HttpTransport built on ``urllib.request``.

    Non-2xx responses surface as ``urllib.error.HTTPError``, which is an
    OSError like every other transport failure. Protocol errors from
    ``http.client`` (bad status line, truncated body) are re-raised as
    OSError too, so callers only ever handle one exception family.

    Args:
        headers: Extra request headers (e.g. a Host override).
        timeout: Socket timeout in seconds. None blocks indefinitely.
    """

    def __init__(self, headers: dict[str, str] | None = None, timeout: float | None = None):
        self._headers = {"User-Agent": _USER_AGENT, **(headers or {})}
        self._timeout = timeout

    def _open(self, url: str):
        req = urllib.request.Request(url, headers=self._headers)
        if self._timeout is None:
            return urllib.request.urlopen(req)
        return urllib.request.urlopen(req, timeout=self._timeout)

    def get_json(self, url: str) -> Any:
        logger.debug("GET %s", url)
        try:
            with self._open(url) as resp:
                body = resp.read()
        except http.client.HTTPException as e:
            raise OSError(f"HTTP protocol error from {url}: {e!r}") from e
        return json.loads(body.decode("utf-8"))

    def download(self, url: str, dest: Path) -> int:
        logger.debug("GET %s → %s", url, dest)
        try:
            with self._open(url) as resp, open(dest, "wb") as out:
                expected = _content_length(resp)
                shutil.copyfileobj(resp, out, _CHUNK_SIZE)
                written = out.tell()
        except http.client.HTTPException as e:
            raise OSError(f"HTTP protocol error from {url}: {e!r}") from e

        # A server that closes early is not an error to http.client
        if expected is not None and written != expected:
            raise OSError(f"incomplete body: {written} of {expected} bytes")
        return written


def _content_length(resp) -> int | None:
    """Declared body size, or None when the header is absent or unusable."""
    value = resp.headers.get("Content-Length") if resp.headers is not None else None
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
