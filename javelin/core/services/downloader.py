"""
Downloader — mirror the selected files into the working directory.

    GET <base_url>/getFile/<entry>  →  <workdir>/<entry>

Files are fetched one at a time in selection order. A failure on one
file is logged and recorded; the next file is still attempted.
"""

from __future__ import annotations

import logging
from pathlib import Path

from javelin.adapters.base import HttpTransport
from javelin.core.errors import ItemError
from javelin.core.models.outcome import ItemOutcome, StageReport
from javelin.core.services.manifest_client import file_url

logger = logging.getLogger(__name__)

STAGE = "download"


def local_path(workdir: Path, entry: str) -> Path:
    """Where a manifest entry lives once downloaded."""
    return workdir.joinpath(*entry.split("/"))


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.debug("Could not remove partial file %s: %s", path, e)


def download_one(transport: HttpTransport, base_url: str, workdir: Path, entry: str) -> int:
    """Fetch one entry, replacing any stale local copy.

    Raises:
        ItemError: If any step fails. No partial file is kept.
    """
    dest = local_path(workdir, entry)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.unlink(missing_ok=True)
    except OSError as e:
        raise ItemError(entry, str(e)) from e

    try:
        return transport.download(file_url(base_url, entry), dest)
    except OSError as e:
        _discard(dest)
        raise ItemError(entry, str(e)) from e


def download_all(
    transport: HttpTransport,
    base_url: str,
    workdir: Path,
    targets: tuple[str, ...] | list[str],
) -> StageReport:
    """Download every target, isolating per-file failures."""
    report = StageReport(stage=STAGE)
    if not targets:
        return report

    logger.info("Starting downloads...")
    total = len(targets)
    for i, entry in enumerate(targets, start=1):
        logger.info("[%d/%d] Downloading %s", i, total, entry)
        try:
            size = download_one(transport, base_url, workdir, entry)
        except ItemError as e:
            logger.warning("Skipping %s: download failed: %s", entry, e.reason)
            report.add(ItemOutcome.failure(entry, STAGE, e.reason))
            continue
        logger.info("✓ %s downloaded", entry)
        report.add(ItemOutcome.success(entry, STAGE, f"{size} bytes"))

    return report
