"""
Selection policy — decide which manifest entries get installed.

The operator does not pick files; the policy does:

1. Every base file that does not start with the toolchain marker.
2. The first toolchain file in plain ascending order, if there is one.
3. Every extension category except ``common``, then ``common`` itself.
4. Every extension entry of each selected category, category by category.
"""

from __future__ import annotations

import logging
from pathlib import Path

from javelin.core.errors import EnvironmentSetupError
from javelin.core.models.manifest import (
    COMMON_CATEGORY,
    EXTENSIONS_PREFIX,
    Manifest,
    SelectionResult,
)

logger = logging.getLogger(__name__)


def _unique(items: list[str]) -> list[str]:
    """Drop duplicates, keeping first-seen order."""
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def select_targets(manifest: Manifest, toolchain_marker: str) -> SelectionResult:
    """Apply the selection policy to ``manifest``. Pure and deterministic."""
    regular = [f for f in manifest.base_files if not f.startswith(toolchain_marker)]
    toolchains = sorted(f for f in manifest.base_files if f.startswith(toolchain_marker))
    toolchain = toolchains[0] if toolchains else None

    categories = [c for c in manifest.extension_categories if c != COMMON_CATEGORY]
    categories = _unique([*categories, COMMON_CATEGORY])

    targets = list(regular)
    if toolchain is not None:
        targets.append(toolchain)
    for category in categories:
        targets.extend(manifest.entries_in_category(category))

    return SelectionResult(
        target_files=tuple(_unique(targets)),
        target_categories=tuple(categories),
        toolchain_file=toolchain,
    )


def log_selection(selection: SelectionResult) -> None:
    """Announce the automatic choices to the operator."""
    base = [
        f for f in selection.target_files
        if not f.startswith(EXTENSIONS_PREFIX) and f != selection.toolchain_file
    ]
    if base:
        logger.info("The following files will be downloaded and installed:")
        for name in base:
            logger.info("  - %s", name)
    if selection.toolchain_file:
        logger.info("Toolchain selected automatically: %s", selection.toolchain_file)

    extra = [c for c in selection.target_categories if c != COMMON_CATEGORY]
    if extra:
        logger.info("Editor extension categories selected automatically:")
        for category in extra:
            logger.info("  - %s", category)


def materialize_categories(workdir: Path, manifest: Manifest, selection: SelectionResult) -> list[Path]:
    """Create ``<workdir>/extensions/<category>`` for selected categories the manifest has.

    Raises:
        EnvironmentSetupError: If a directory cannot be created.
    """
    created: list[Path] = []
    for category in selection.target_categories:
        if category not in manifest.extension_categories:
            continue
        target = workdir / "extensions" / category
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise EnvironmentSetupError(f"Cannot create {target}: {e}") from e
        created.append(target)
    return created
