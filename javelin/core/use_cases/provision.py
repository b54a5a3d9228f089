"""
Provision use case — run the whole pipeline once.

    resolve workdir → fetch manifest → select → download → extract
        → install executables → install extensions → register PATH

Each stage takes the previous stage's output and returns a new value;
nothing is shared between stages except the working directory tree and
the persistent environment store. Fatal errors stop the run and land in
``ProvisionResult.error``; per-file failures stay in the stage reports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from javelin.adapters.base import Confirmer, EnvironmentStore, HttpTransport, ProcessRunner
from javelin.core.config.loader import ProvisionConfig
from javelin.core.errors import ProvisionError
from javelin.core.models.manifest import Manifest, SelectionResult
from javelin.core.models.outcome import StageReport
from javelin.core.services.archive import extract_archives
from javelin.core.services.downloader import download_all
from javelin.core.services.installer import install_executables, install_extensions
from javelin.core.services.manifest_client import fetch_manifest
from javelin.core.services.registrar import RegistrationResult, register_paths, scan_bin_dirs
from javelin.core.services.selection import log_selection, materialize_categories, select_targets
from javelin.core.services.workdir import WorkDir, is_empty_dir, resolve_workdir

logger = logging.getLogger(__name__)


@dataclass
class ProvisionResult:
    """Result of one provisioning run."""

    workdir: Path | None = None
    existing_bin_dirs: frozenset[str] = frozenset()
    manifest: Manifest | None = None
    selection: SelectionResult | None = None
    reports: list[StageReport] = field(default_factory=list)
    registration: RegistrationResult | None = None
    cancelled: bool = False
    completed: bool = False
    error: str | None = None

    def report(self, stage: str) -> StageReport | None:
        for r in self.reports:
            if r.stage == stage:
                return r
        return None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
        result["workdir"] = str(self.workdir) if self.workdir else None
        result["cancelled"] = self.cancelled
        result["completed"] = self.completed
        if self.selection:
            result["selection"] = self.selection.to_dict()
        result["stages"] = [r.to_dict() for r in self.reports]
        if self.registration:
            result["registration"] = self.registration.to_dict()
        return result


@dataclass
class Collaborators:
    """The outside world, as the pipeline sees it."""

    transport: HttpTransport
    runner: ProcessRunner
    store: EnvironmentStore
    confirmer: Confirmer


def _prepare_workdir(config: ProvisionConfig, confirmer: Confirmer, result: ProvisionResult) -> WorkDir | None:
    """Resolve the working directory and ask the run-level questions.

    Returns None when the operator declines.
    """
    workdir = resolve_workdir(
        Path(config.primary_root),
        Path(config.secondary_root),
        Path(config.secondary_volume),
    )
    result.workdir = workdir.path
    logger.info("Working directory: %s", workdir.path)

    if not confirmer.confirm(f"Working directory is {workdir.path}. Continue?"):
        logger.info("Cancelled.")
        return None

    if not workdir.created and not is_empty_dir(workdir.path):
        if not confirmer.confirm(f"{workdir.path} already contains files or folders. Continue?"):
            logger.info("Please check %s and run again.", workdir.path)
            return None

    return workdir


def run_provision(config: ProvisionConfig, collaborators: Collaborators) -> ProvisionResult:
    """Provision the workstation described by ``config``.

    Args:
        config: Resolved configuration (base URL, roots, policy knobs).
        collaborators: Network, process, environment and prompt adapters.

    Returns:
        ProvisionResult. ``error`` is set when a fatal error aborted the run.
    """
    result = ProvisionResult()
    c = collaborators
    logger.info("Server URL: %s", config.base_url)

    try:
        workdir = _prepare_workdir(config, c.confirmer, result)
        if workdir is None:
            result.cancelled = True
            return result
        root = workdir.path

        # Snapshot before anything lands in the tree
        result.existing_bin_dirs = frozenset() if workdir.created else scan_bin_dirs(root)

        # ── Manifest & selection ─────────────────────────────────
        manifest = fetch_manifest(c.transport, config.base_url)
        result.manifest = manifest

        selection = select_targets(manifest, config.toolchain_marker)
        result.selection = selection
        log_selection(selection)
        materialize_categories(root, manifest, selection)

        # ── Download ─────────────────────────────────────────────
        downloads = download_all(c.transport, config.base_url, root, selection.target_files)
        result.reports.append(downloads)
        downloaded = downloads.ok_items

        # ── Extract & install ────────────────────────────────────
        result.reports.append(extract_archives(root, downloaded, c.confirmer))
        result.reports.append(install_executables(root, downloaded, c.confirmer, c.runner))
        result.reports.append(
            install_extensions(root, downloaded, c.confirmer, c.runner, config.editor_command)
        )

        # ── PATH ─────────────────────────────────────────────────
        result.registration = register_paths(
            root,
            result.existing_bin_dirs,
            c.store,
            c.confirmer,
            path_variable=config.path_variable,
            separator=config.path_separator,
            backup_prefix=config.backup_prefix,
        )

    except ProvisionError as e:
        logger.debug("Run aborted", exc_info=True)
        result.error = str(e)
        return result

    result.completed = True
    logger.info("All installation steps completed.")
    return result
