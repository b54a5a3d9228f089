"""
Environment registrar — add newly installed bin directories to PATH.

Flow:
    scan bin dirs → diff against the pre-run snapshot → confirm
        → back up the store → merge into PATH → write PATH

A bin directory is ``<workdir>/<child>/bin``. Only directories that
appeared during this run are registered, so a re-run with nothing new
writes nothing. Every failure after confirmation is fatal.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from javelin.adapters.base import Confirmer, EnvironmentStore
from javelin.core.errors import EnvironmentSetupError

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".reg"
ROTATED_SUFFIX = ".bak"


@dataclass
class RegistrationResult:
    """What the registrar did."""

    new_bin_dirs: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)
    backup_path: Path | None = None
    new_value: str | None = None
    declined: bool = False

    @property
    def written(self) -> bool:
        return self.new_value is not None

    def to_dict(self) -> dict:
        return {
            "new_bin_dirs": self.new_bin_dirs,
            "added": self.added,
            "backup_path": str(self.backup_path) if self.backup_path else None,
            "written": self.written,
            "declined": self.declined,
        }


def scan_bin_dirs(workdir: Path) -> frozenset[str]:
    """Return every ``<workdir>/<child>/bin`` directory that exists.

    Raises:
        EnvironmentSetupError: If ``workdir`` cannot be listed.
    """
    if not workdir.is_dir():
        return frozenset()
    try:
        children = list(workdir.iterdir())
    except OSError as e:
        raise EnvironmentSetupError(f"Cannot list {workdir}: {e}") from e
    found = set()
    for child in children:
        bin_dir = child / "bin"
        if child.is_dir() and bin_dir.is_dir():
            found.add(str(bin_dir))
    return frozenset(found)


def merge_path(current: str, additions: list[str], separator: str = ";") -> str:
    """Append ``additions`` to a PATH value.

    Entries already present are not repeated, blank segments are
    dropped, and the result always ends with the separator.
    """
    segments = current.split(separator) if current else []
    for entry in additions:
        if entry not in segments:
            segments.append(entry)
    kept = [s for s in segments if s.strip()]
    return separator.join(kept) + separator


def backup_path_for(workdir: Path, prefix: str, now: datetime | None = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y%m%d")
    return workdir / f"{prefix}{stamp}{BACKUP_SUFFIX}"


def write_backup(store: EnvironmentStore, target: Path) -> Path:
    """Snapshot the store to ``target``, rotating a same-named file to ``.bak``.

    Raises:
        EnvironmentSetupError: If the rotation or the export fails.
    """
    if target.exists():
        rotated = target.with_name(target.name + ROTATED_SUFFIX)
        try:
            os.replace(target, rotated)
        except OSError as e:
            raise EnvironmentSetupError(f"Cannot rotate backup {target}: {e}") from e
        logger.debug("Rotated previous backup to %s", rotated)

    store.snapshot(target)
    return target


def register_paths(
    workdir: Path,
    existing_bin_dirs: frozenset[str],
    store: EnvironmentStore,
    confirmer: Confirmer,
    path_variable: str = "Path",
    separator: str = ";",
    backup_prefix: str = "env_",
    now: datetime | None = None,
) -> RegistrationResult:
    """Register bin directories introduced since ``existing_bin_dirs`` was taken.

    Raises:
        EnvironmentSetupError: If the backup, the read, or the write fails.
    """
    new_dirs = sorted(scan_bin_dirs(workdir) - existing_bin_dirs)
    result = RegistrationResult(new_bin_dirs=new_dirs)
    if not new_dirs:
        logger.debug("No new bin directories; %s left unchanged", path_variable)
        return result

    logger.info("Registering new bin directories in %s...", path_variable)
    if not confirmer.confirm(f"Add {', '.join(new_dirs)} to {path_variable}?"):
        logger.info("Skipping %s registration for %s", path_variable, ", ".join(new_dirs))
        result.declined = True
        return result

    result.backup_path = write_backup(store, backup_path_for(workdir, backup_prefix, now))
    logger.info("✓ Current environment backed up to %s", result.backup_path)

    current = store.read(path_variable)
    present = current.split(separator)
    result.added = [d for d in new_dirs if d not in present]
    result.new_value = merge_path(current, new_dirs, separator)

    store.write(path_variable, result.new_value)
    logger.info("✓ %s updated", path_variable)
    return result
