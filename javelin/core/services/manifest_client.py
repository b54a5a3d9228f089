"""
Manifest client — fetch the remote file list.

    GET <base_url>/getAll  →  ["a.txt", "extensions/python/x.vsix", ...]

Anything other than a JSON array of strings is fatal for the run.
"""

from __future__ import annotations

import logging
import urllib.parse

from javelin.adapters.base import HttpTransport
from javelin.core.errors import ManifestFetchError
from javelin.core.models.manifest import Manifest

logger = logging.getLogger(__name__)

LIST_ENDPOINT = "getAll"
FILE_ENDPOINT = "getFile"


def list_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}/{LIST_ENDPOINT}"


def file_url(base_url: str, entry: str) -> str:
    """URL of one manifest entry; the relative path is percent-quoted."""
    return f"{base_url.rstrip('/')}/{FILE_ENDPOINT}/{urllib.parse.quote(entry, safe='/')}"


def fetch_manifest(transport: HttpTransport, base_url: str) -> Manifest:
    """Retrieve and partition the manifest.

    Raises:
        ManifestFetchError: On transport failure or a malformed payload.
    """
    url = list_url(base_url)
    logger.info("Fetching file list from %s", url)

    try:
        payload = transport.get_json(url)
    except (OSError, ValueError) as e:
        raise ManifestFetchError(f"Cannot fetch file list from {url}: {e}") from e

    if not isinstance(payload, list) or not all(isinstance(p, str) for p in payload):
        raise ManifestFetchError(
            f"Expected a JSON array of paths from {url}, got {type(payload).__name__}"
        )

    manifest = Manifest.from_entries(payload)
    logger.debug(
        "Manifest: %d entries, %d base files, %d extension categories",
        len(manifest.entries),
        len(manifest.base_files),
        len(manifest.extension_categories),
    )
    return manifest
