"""
Working directory resolution — pick the installation root for the run.

Decision table, in priority order:

    primary  secondary  →  choice
    yes      yes           secondary
    yes      no            primary
    no       yes           secondary
    no       no            secondary if its volume is reachable, else primary
                           (created in both cases)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from javelin.core.errors import EnvironmentSetupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkDir:
    """The chosen root and whether this run created it."""

    path: Path
    created: bool = False


def resolve_workdir(primary: Path, secondary: Path, secondary_volume: Path) -> WorkDir:
    """Choose, and if needed create, the working directory.

    Raises:
        EnvironmentSetupError: If the chosen directory cannot be created.
    """
    primary_exists = primary.is_dir()
    secondary_exists = secondary.is_dir()

    if primary_exists and secondary_exists:
        logger.info("Both %s and %s exist; using %s", primary, secondary, secondary)
        return WorkDir(secondary)
    if primary_exists:
        logger.info("Using existing %s", primary)
        return WorkDir(primary)
    if secondary_exists:
        logger.info("Using existing %s", secondary)
        return WorkDir(secondary)

    logger.info("Neither %s nor %s exists", primary, secondary)
    target = secondary if secondary_volume.is_dir() else primary
    _create(target)
    logger.info("✓ Created %s", target)
    return WorkDir(target, created=True)


def _create(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise EnvironmentSetupError(f"Cannot create {path}: {e}") from e


def is_empty_dir(path: Path) -> bool:
    """True when ``path`` has no files or subdirectories.

    Raises:
        EnvironmentSetupError: If ``path`` cannot be listed.
    """
    try:
        return not any(path.iterdir())
    except OSError as e:
        raise EnvironmentSetupError(f"Cannot list {path}: {e}") from e
