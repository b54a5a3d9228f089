"""
Manifest and SelectionResult — the read-only values a run is built on.

The manifest is fetched once per run and never changes afterwards. The
selection is derived from it once by the selection policy. Both models
are frozen: later stages read them, they never edit them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# Entries under this prefix are editor extensions grouped by category
EXTENSIONS_PREFIX = "extensions/"

# Category that is always installed, whatever else gets selected
COMMON_CATEGORY = "common"


def extension_category(entry: str) -> str | None:
    """Return the category segment of an extension entry, or None.

    ``extensions/python/ms-python.vsix`` → ``python``.

    A file placed directly under ``extensions/`` is read as its own
    category: ``extensions/foo.vsix`` → ``foo.vsix``. Its category directory
    then occupies the download path, so that entry fails to download.
    """
    if not entry.startswith(EXTENSIONS_PREFIX):
        return None
    parts = entry.split("/")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


class Manifest(BaseModel):
    """The full file list served for one run, partitioned.

    ``entries`` keeps the server order. ``base_files`` is sorted on the
    lower-cased name, ``extension_categories`` case-sensitively.
    """

    model_config = ConfigDict(frozen=True)

    entries: tuple[str, ...] = ()
    base_files: tuple[str, ...] = ()
    extension_entries: tuple[str, ...] = ()
    extension_categories: tuple[str, ...] = ()

    @classmethod
    def from_entries(cls, entries: list[str] | tuple[str, ...]) -> Manifest:
        """Partition raw server entries into base files and extensions."""
        base: list[str] = []
        extensions: list[str] = []
        categories: set[str] = set()

        for entry in entries:
            category = extension_category(entry)
            if category is None:
                base.append(entry)
            else:
                extensions.append(entry)
                categories.add(category)

        return cls(
            entries=tuple(entries),
            base_files=tuple(sorted(base, key=str.lower)),
            extension_entries=tuple(extensions),
            extension_categories=tuple(sorted(categories)),
        )

    def entries_in_category(self, category: str) -> list[str]:
        """Extension entries of one category, in server order."""
        return [e for e in self.extension_entries if extension_category(e) == category]

    def to_dict(self) -> dict:
        return {
            "entries": list(self.entries),
            "base_files": list(self.base_files),
            "extension_categories": list(self.extension_categories),
        }


class SelectionResult(BaseModel):
    """What the selection policy decided to install."""

    model_config = ConfigDict(frozen=True)

    target_files: tuple[str, ...] = ()
    target_categories: tuple[str, ...] = (COMMON_CATEGORY,)
    toolchain_file: str | None = None

    def to_dict(self) -> dict:
        return {
            "target_files": list(self.target_files),
            "target_categories": list(self.target_categories),
            "toolchain_file": self.toolchain_file,
        }
