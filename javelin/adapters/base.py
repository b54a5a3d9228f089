"""
Adapter base — the capability contracts between pipeline and outside world.

The pipeline never talks to processes, the network, the console or the
persistent environment directly. It goes through these four interfaces,
so every stage can run against the doubles in ``javelin.adapters.mock``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class ProcessResult(BaseModel):
    """Outcome of running one external command.

    Runners NEVER raise for a failed command. A command that could not
    even be launched has ``returncode`` -1 and ``error`` set.
    """

    command: str
    args: list[str] = Field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the command ran and exited with status 0."""
        return self.returncode == 0 and self.error is None

    def describe_failure(self) -> str:
        """Short human-readable reason for a failed run."""
        if self.error:
            return self.error
        return self.stderr.strip() or f"Command exited with code {self.returncode}"


class ProcessRunner(ABC):
    """Runs an external command and waits for it to finish."""

    @abstractmethod
    def run(self, command: str, args: list[str]) -> ProcessResult:
        """Run ``command`` with ``args``.

        MUST never raise. Launch failures are captured in the result.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class Confirmer(ABC):
    """Asks the operator a yes/no question."""

    @abstractmethod
    def confirm(self, prompt: str) -> bool:
        """Return True to proceed, False to skip."""


class EnvironmentStore(ABC):
    """Persistent per-user environment variables.

    Implementations raise ``EnvironmentSetupError`` on any failure: a
    half-applied write to PATH is worse than an aborted run.
    """

    @abstractmethod
    def read(self, name: str) -> str:
        """Return the current value of variable ``name``."""

    @abstractmethod
    def write(self, name: str, value: str) -> None:
        """Persist ``value`` as the new value of variable ``name``."""

    @abstractmethod
    def snapshot(self, path: Path) -> None:
        """Export the whole store to a file at ``path``."""


class HttpTransport(ABC):
    """Blocking HTTP GET access to the file server."""

    @abstractmethod
    def get_json(self, url: str) -> Any:
        """GET ``url`` and decode the body as JSON.

        Raises:
            OSError: transport failure or non-2xx status.
            ValueError: body is not valid JSON.
        """

    @abstractmethod
    def download(self, url: str, dest: Path) -> int:
        """GET ``url`` and stream the body into ``dest``.

        Returns:
            Number of bytes written.

        Raises:
            OSError: transport failure, non-2xx status, or write error.
        """
