"""
Domain models — Pydantic types for the provisioning pipeline.

All models are re-exported here for convenient access:

    from javelin.core.models import Manifest, SelectionResult, ItemOutcome
"""

from javelin.core.models.manifest import (
    COMMON_CATEGORY,
    EXTENSIONS_PREFIX,
    Manifest,
    SelectionResult,
    extension_category,
)
from javelin.core.models.outcome import ItemOutcome, StageReport

__all__ = [
    # manifest.py
    "COMMON_CATEGORY",
    "EXTENSIONS_PREFIX",
    # outcome.py
    "ItemOutcome",
    "Manifest",
    "SelectionResult",
    "StageReport",
    "extension_category",
]
