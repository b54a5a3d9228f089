"""
Registry environment store — per-user variables via reg.exe and setx.

    read      → reg query  <key> /v <name>
    write     → setx <name> <value>
    snapshot  → reg export <key> <file>

All three go through a ProcessRunner. Any failure raises
EnvironmentSetupError.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from javelin.adapters.base import EnvironmentStore, ProcessRunner
from javelin.core.errors import EnvironmentSetupError

logger = logging.getLogger(__name__)

DEFAULT_KEY = "HKCU\\Environment"


def parse_reg_query(output: str, name: str) -> str | None:
    """Extract the data of value ``name`` from ``reg query`` output.

    Lines look like ``    Path    REG_EXPAND_SZ    C:\\x;C:\\y``.
    """
    pattern = re.compile(
        rf"^\s*{re.escape(name)}\s+REG_(?:EXPAND_)?SZ(?:[ \t]+(.*))?$",
        re.IGNORECASE,
    )
    for line in output.splitlines():
        match = pattern.match(line.rstrip("\r"))
        if match:
            return (match.group(1) or "").strip()
    return None


class RegistryEnvironmentStore(EnvironmentStore):
    """EnvironmentStore backed by the current user's registry hive."""

    def __init__(self, runner: ProcessRunner, key: str = DEFAULT_KEY):
        self._runner = runner
        self._key = key

    def read(self, name: str) -> str:
        result = self._runner.run("reg", ["query", self._key, "/v", name])
        if not result.ok:
            raise EnvironmentSetupError(
                f"Cannot read {self._key}\\{name}: {result.describe_failure()}"
            )
        value = parse_reg_query(result.stdout, name)
        if value is None:
            raise EnvironmentSetupError(f"{self._key}\\{name} not found in registry output")
        return value

    def write(self, name: str, value: str) -> None:
        result = self._runner.run("setx", [name, value])
        if not result.ok:
            raise EnvironmentSetupError(f"Cannot set {name}: {result.describe_failure()}")
        logger.debug("setx %s (%d chars)", name, len(value))

    def snapshot(self, path: Path) -> None:
        result = self._runner.run("reg", ["export", self._key, str(path)])
        if not result.ok:
            raise EnvironmentSetupError(
                f"Cannot export {self._key} to {path}: {result.describe_failure()}"
            )
