"""
Installer — run silent executable installers and editor extension installs.

Executables are matched to a silent-install profile by a substring of
their name. Names that match no profile are left for a manual install;
that is a notice, not a failure.

Extensions (``.vsix``) are installed with one blanket confirmation for
the whole batch, one editor command invocation per file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from javelin.adapters.base import Confirmer, ProcessRunner
from javelin.core.models.outcome import ItemOutcome, StageReport
from javelin.core.services.downloader import local_path

logger = logging.getLogger(__name__)

EXE_MARKER = ".exe"
VSIX_MARKER = ".vsix"

INSTALL_STAGE = "install"
EXTENSION_STAGE = "extensions"


@dataclass(frozen=True)
class InstallProfile:
    """Silent-install recipe for one vendor's installer."""

    name: str
    match: str            # lower-case substring of the installer file name
    install_dir: str      # directory under the working directory
    flags: tuple[str, ...]

    def args(self, workdir: Path) -> list[str]:
        return [*self.flags, f"/Dir={workdir / self.install_dir}"]


# Matched in order; the first hit wins.
INSTALL_PROFILES: tuple[InstallProfile, ...] = (
    InstallProfile(
        name="editor",
        match="vscode",
        install_dir="Microsoft VS Code",
        flags=("/VERYSILENT", "/MERGETASKS=!runcode"),
    ),
    InstallProfile(
        name="version-control",
        match="git",
        install_dir="git",
        flags=(
            "/VERYSILENT",
            "/NORESTART",
            "/NOCANCEL",
            "/SP-",
            "/CLOSEAPPLICATIONS",
            "/RESTARTAPPLICATIONS",
            "/COMPONENTS=icons,ext\\reg\\shellhere,assoc,assoc_sh",
        ),
    ),
)


def match_profile(entry: str) -> InstallProfile | None:
    lower = entry.lower()
    for profile in INSTALL_PROFILES:
        if profile.match in lower:
            return profile
    return None


def install_executables(
    workdir: Path,
    downloaded: list[str],
    confirmer: Confirmer,
    runner: ProcessRunner,
) -> StageReport:
    """Silently install every downloaded ``.exe`` the operator agrees to."""
    report = StageReport(stage=INSTALL_STAGE)
    executables = [e for e in downloaded if EXE_MARKER in e.lower()]
    if not executables:
        return report

    logger.info("Installing executables...")
    for entry in executables:
        if not confirmer.confirm(f"Install {entry} automatically?"):
            logger.info("Skipping automatic install of %s", entry)
            report.add(ItemOutcome.skip(entry, INSTALL_STAGE, "declined"))
            continue

        profile = match_profile(entry)
        if profile is None:
            logger.info("%s is not supported for automatic install; please install it manually", entry)
            report.add(ItemOutcome.skip(entry, INSTALL_STAGE, "unsupported installer"))
            continue

        install_dir = workdir / profile.install_dir
        logger.info("Installing %s into %s", entry, install_dir)
        result = runner.run(str(local_path(workdir, entry)), profile.args(workdir))
        if not result.ok:
            reason = result.describe_failure()
            logger.warning("Install of %s failed: %s", entry, reason)
            report.add(ItemOutcome.failure(entry, INSTALL_STAGE, reason))
            continue

        logger.info("✓ %s installed", entry)
        report.add(ItemOutcome.success(entry, INSTALL_STAGE, str(install_dir)))

    return report


def install_extensions(
    workdir: Path,
    downloaded: list[str],
    confirmer: Confirmer,
    runner: ProcessRunner,
    editor_command: str = "code",
) -> StageReport:
    """Install every downloaded ``.vsix`` after one confirmation for the batch."""
    report = StageReport(stage=EXTENSION_STAGE)
    extensions = [e for e in downloaded if VSIX_MARKER in e.lower()]
    if not extensions:
        return report

    logger.info("Installing editor extensions...")
    if not confirmer.confirm("Install editor extensions automatically?"):
        logger.info("Skipping automatic extension install")
        for entry in extensions:
            report.add(ItemOutcome.skip(entry, EXTENSION_STAGE, "declined"))
        return report

    total = len(extensions)
    for i, entry in enumerate(extensions, start=1):
        logger.info("[%d/%d] Installing %s", i, total, entry)
        result = runner.run(editor_command, ["--install-extension", str(local_path(workdir, entry))])
        if not result.ok:
            reason = result.describe_failure()
            logger.warning("Skipping %s: extension install failed: %s", entry, reason)
            report.add(ItemOutcome.failure(entry, EXTENSION_STAGE, reason))
            continue
        logger.info("✓ %s installed", entry)
        report.add(ItemOutcome.success(entry, EXTENSION_STAGE))

    return report
