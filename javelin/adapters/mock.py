"""
Mock adapters — test doubles for every capability interface.

Each double records what it was asked to do so tests can assert on the
exact calls, and can be configured to fail for chosen inputs.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from javelin.adapters.base import (
    Confirmer,
    EnvironmentStore,
    HttpTransport,
    ProcessResult,
    ProcessRunner,
)
from javelin.core.errors import EnvironmentSetupError


class RecordingRunner(ProcessRunner):
    """Records invocations instead of running anything.

    By default every command succeeds. ``set_failure`` makes every call
    whose command or arguments contain ``needle`` fail.
    """

    def __init__(self, default_stdout: str = ""):
        self._default_stdout = default_stdout
        self._failures: dict[str, int] = {}
        self._responses: dict[str, ProcessResult] = {}
        self._call_log: list[tuple[str, list[str]]] = []

    @property
    def call_log(self) -> list[tuple[str, list[str]]]:
        """All (command, args) pairs this runner has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_failure(self, needle: str, returncode: int = 1) -> None:
        """Fail every call mentioning ``needle`` with ``returncode``."""
        self._failures[needle] = returncode

    def set_response(self, command: str, result: ProcessResult) -> None:
        """Return ``result`` for every call to ``command``."""
        self._responses[command] = result

    def run(self, command: str, args: list[str]) -> ProcessResult:
        self._call_log.append((command, list(args)))

        if command in self._responses:
            return self._responses[command]

        joined = " ".join([command, *args])
        for needle, returncode in self._failures.items():
            if needle in joined:
                return ProcessResult(
                    command=command,
                    args=list(args),
                    returncode=returncode,
                    stderr="[mock] failure",
                )

        return ProcessResult(command=command, args=list(args), stdout=self._default_stdout)

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._call_log.clear()
        self._failures.clear()
        self._responses.clear()


class ScriptedConfirmer(Confirmer):
    """Answers questions from a script, then falls back to ``default``."""

    def __init__(self, answers: list[bool] | None = None, default: bool = True):
        self._answers = list(answers or [])
        self._default = default
        self.prompts: list[str] = []

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        if self._answers:
            return self._answers.pop(0)
        return self._default


class InMemoryEnvironmentStore(EnvironmentStore):
    """Dictionary-backed environment store.

    Reading an unknown variable raises EnvironmentSetupError, like the
    registry store does when ``reg query`` finds nothing.
    """

    def __init__(self, values: dict[str, str] | None = None, fail_on: set[str] | None = None):
        self.values: dict[str, str] = dict(values or {})
        self.writes: list[tuple[str, str]] = []
        self.snapshots: list[Path] = []
        self._fail_on = set(fail_on or ())

    def read(self, name: str) -> str:
        if "read" in self._fail_on or name not in self.values:
            raise EnvironmentSetupError(f"{name} not found")
        return self.values[name]

    def write(self, name: str, value: str) -> None:
        if "write" in self._fail_on:
            raise EnvironmentSetupError(f"Cannot set {name}: [mock] failure")
        self.writes.append((name, value))
        self.values[name] = value

    def snapshot(self, path: Path) -> None:
        if "snapshot" in self._fail_on:
            raise EnvironmentSetupError(f"Cannot export to {path}: [mock] failure")
        path.write_text(json.dumps(self.values, indent=2), encoding="utf-8")
        self.snapshots.append(path)


class FakeTransport(HttpTransport):
    """Serves canned responses keyed by URL.

    ``files`` maps URL → body bytes for downloads; ``json_bodies`` maps
    URL → decoded JSON. Unknown URLs and URLs in ``failing`` raise OSError.
    """

    def __init__(
        self,
        json_bodies: dict[str, Any] | None = None,
        files: dict[str, bytes] | None = None,
        failing: set[str] | None = None,
    ):
        self.json_bodies = dict(json_bodies or {})
        self.files = dict(files or {})
        self.failing = set(failing or ())
        self.requested: list[str] = []

    def get_json(self, url: str) -> Any:
        self.requested.append(url)
        if url in self.failing or url not in self.json_bodies:
            raise OSError(f"HTTP Error 404: {url}")
        body = self.json_bodies[url]
        if isinstance(body, (bytes, str)):
            return json.loads(body)
        return body

    def download(self, url: str, dest: Path) -> int:
        self.requested.append(url)
        if url in self.failing or url not in self.files:
            raise OSError(f"HTTP Error 404: {url}")
        data = self.files[url]
        dest.write_bytes(data)
        return len(data)
