"""
Archive extraction — unpack downloaded .tar.gz and .zip files in place.

Archives are recognised by a case-insensitive ``.gz`` or ``.zip``
substring in the entry name. Each one is extracted into the working
directory root, after the operator confirms. Only directories and
regular files are recreated, with default permissions.
"""

from __future__ import annotations

import logging
import shutil
import tarfile
import zipfile
from pathlib import Path

from javelin.adapters.base import Confirmer
from javelin.core.errors import ItemError
from javelin.core.models.outcome import ItemOutcome, StageReport
from javelin.core.services.downloader import local_path

logger = logging.getLogger(__name__)

STAGE = "extract"

GZIP_MARKER = ".gz"
ZIP_MARKER = ".zip"


def archive_kind(entry: str) -> str | None:
    """Return ``"tar.gz"``, ``"zip"`` or None for a manifest entry."""
    lower = entry.lower()
    if GZIP_MARKER in lower:
        return "tar.gz"
    if ZIP_MARKER in lower:
        return "zip"
    return None


def _safe_target(dest: Path, name: str) -> Path:
    """Resolve an archive member name under ``dest``, refusing escapes."""
    root = dest.resolve()
    target = (root / name).resolve()
    if target != root and root not in target.parents:
        raise ValueError(f"entry escapes the working directory: {name}")
    return target


def extract_tar_gz(archive: Path, dest: Path) -> int:
    """Extract a gzip tarball under ``dest``. Returns the number of files written."""
    written = 0
    with tarfile.open(archive, "r:gz") as tar:
        for member in tar:
            if member.isdir():
                _safe_target(dest, member.name).mkdir(parents=True, exist_ok=True)
            elif member.isfile():
                target = _safe_target(dest, member.name)
                target.parent.mkdir(parents=True, exist_ok=True)
                src = tar.extractfile(member)
                if src is None:
                    continue
                with src, open(target, "wb") as out:
                    shutil.copyfileobj(src, out)
                written += 1
            else:
                logger.debug("Ignoring non-regular tar entry %s", member.name)
    return written


def extract_zip(archive: Path, dest: Path) -> int:
    """Extract a zip archive under ``dest``. Returns the number of files written."""
    written = 0
    with zipfile.ZipFile(archive) as zf:
        for info in zf.infolist():
            target = _safe_target(dest, info.filename)
            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info) as src, open(target, "wb") as out:
                shutil.copyfileobj(src, out)
            written += 1
    return written


def extract_one(workdir: Path, entry: str) -> int:
    """Extract one downloaded archive into ``workdir``.

    Raises:
        ItemError: If the archive is missing, corrupt, or unsafe.
    """
    kind = archive_kind(entry)
    archive = local_path(workdir, entry)
    try:
        if kind == "tar.gz":
            return extract_tar_gz(archive, workdir)
        if kind == "zip":
            return extract_zip(archive, workdir)
    except (OSError, tarfile.TarError, zipfile.BadZipFile, ValueError, EOFError) as e:
        raise ItemError(entry, str(e)) from e
    raise ItemError(entry, "not an archive")


def extract_archives(
    workdir: Path,
    downloaded: list[str],
    confirmer: Confirmer,
) -> StageReport:
    """Extract every downloaded archive the operator agrees to."""
    report = StageReport(stage=STAGE)
    archives = [e for e in downloaded if archive_kind(e)]
    if not archives:
        return report

    logger.info("Processing archives...")
    for entry in archives:
        if not confirmer.confirm(f"Extract {entry}?"):
            logger.info("Skipping extraction of %s", entry)
            report.add(ItemOutcome.skip(entry, STAGE, "declined"))
            continue

        try:
            count = extract_one(workdir, entry)
        except ItemError as e:
            logger.warning("Skipping %s: extraction failed: %s", entry, e.reason)
            report.add(ItemOutcome.failure(entry, STAGE, e.reason))
            continue

        logger.info("✓ %s extracted", entry)
        report.add(ItemOutcome.success(entry, STAGE, f"{count} files"))

    return report
