"""
Shared test fixtures and configuration.
"""

import io
import tarfile
import zipfile
from pathlib import Path

import pytest

from javelin.adapters.mock import (
    FakeTransport,
    InMemoryEnvironmentStore,
    RecordingRunner,
    ScriptedConfirmer,
)

BASE_URL = "http://files.test"


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Return an existing, empty working directory."""
    root = tmp_path / "projects"
    root.mkdir()
    return root


@pytest.fixture
def confirm_all() -> ScriptedConfirmer:
    """A confirmer that accepts every question."""
    return ScriptedConfirmer()


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def store() -> InMemoryEnvironmentStore:
    return InMemoryEnvironmentStore({"Path": "C:\\x;"})


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


def _write_tar_gz(path: Path, members: dict[str, bytes]) -> Path:
    """Write a gzip tarball with the given file members."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as tar:
        for name, data in members.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return path


def _write_zip(path: Path, members: dict[str, bytes]) -> Path:
    """Write a zip archive with the given file members."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return path


@pytest.fixture
def make_tar_gz():
    """Factory fixture: ``make_tar_gz(path, {name: bytes})``."""
    return _write_tar_gz


@pytest.fixture
def make_zip():
    """Factory fixture: ``make_zip(path, {name: bytes})``."""
    return _write_zip
