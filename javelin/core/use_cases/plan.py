"""
Plan use case — show what a run would install, without installing it.

Fetches the manifest and applies the selection policy. Nothing is
created on disk and no prompt is shown.
"""

from __future__ import annotations

from dataclasses import dataclass

from javelin.adapters.base import HttpTransport
from javelin.core.errors import ManifestFetchError
from javelin.core.models.manifest import Manifest, SelectionResult
from javelin.core.services.manifest_client import fetch_manifest
from javelin.core.services.selection import select_targets


@dataclass
class PlanResult:
    base_url: str = ""
    manifest: Manifest | None = None
    selection: SelectionResult | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"base_url": self.base_url, "error": self.error}
        assert self.manifest is not None and self.selection is not None
        return {
            "base_url": self.base_url,
            "manifest": self.manifest.to_dict(),
            "selection": self.selection.to_dict(),
        }


def build_plan(transport: HttpTransport, base_url: str, toolchain_marker: str) -> PlanResult:
    result = PlanResult(base_url=base_url)
    try:
        result.manifest = fetch_manifest(transport, base_url)
    except ManifestFetchError as e:
        result.error = str(e)
        return result
    result.selection = select_targets(result.manifest, toolchain_marker)
    return result
