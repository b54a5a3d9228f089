"""Adapters — bindings for processes, console, network and environment store.

Public re-exports for convenient access.
"""

from javelin.adapters.base import (
    Confirmer,
    EnvironmentStore,
    HttpTransport,
    ProcessResult,
    ProcessRunner,
)
from javelin.adapters.mock import (
    FakeTransport,
    InMemoryEnvironmentStore,
    RecordingRunner,
    ScriptedConfirmer,
)

__all__ = [
    "Confirmer",
    "EnvironmentStore",
    "FakeTransport",
    "HttpTransport",
    "InMemoryEnvironmentStore",
    "ProcessResult",
    "ProcessRunner",
    "RecordingRunner",
    "ScriptedConfirmer",
]
