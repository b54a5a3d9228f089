"""
Integration tests for the provision use case, run entirely against doubles.
"""

from pathlib import Path

import pytest

from javelin.adapters.mock import (
    FakeTransport,
    InMemoryEnvironmentStore,
    RecordingRunner,
    ScriptedConfirmer,
)
from javelin.core.config.loader import ProvisionConfig
from javelin.core.services.manifest_client import file_url, list_url
from javelin.core.use_cases.provision import Collaborators, run_provision

ENTRIES = [
    "a.txt",
    "Git-2.45.1-64-bit.exe",
    "extensions/python/ext.vsix",
    "extensions/common/base.vsix",
    "microsoft-jdk-11.zip",
    "microsoft-jdk-17.zip",
]


@pytest.fixture
def config(tmp_path: Path, base_url: str) -> ProvisionConfig:
    return ProvisionConfig(
        base_url=base_url,
        primary_root=str(tmp_path / "primary"),
        secondary_root=str(tmp_path / "secondary"),
        secondary_volume=str(tmp_path / "no-such-volume"),
    )


@pytest.fixture
def server(tmp_path: Path, base_url: str, make_zip) -> FakeTransport:
    jdk = make_zip(tmp_path / "build" / "jdk.zip", {"jdk-11/bin/java.exe": b"MZ"})
    files = {name: name.encode() for name in ENTRIES}
    files["microsoft-jdk-11.zip"] = jdk.read_bytes()
    return FakeTransport(
        json_bodies={list_url(base_url): ENTRIES},
        files={file_url(base_url, name): data for name, data in files.items()},
    )


def _collaborators(transport, confirmer=None, store=None, runner=None) -> Collaborators:
    return Collaborators(
        transport=transport,
        runner=runner or RecordingRunner(),
        store=store or InMemoryEnvironmentStore({"Path": "C:\\x;"}),
        confirmer=confirmer or ScriptedConfirmer(),
    )


class TestFullRun:
    def test_happy_path(self, config: ProvisionConfig, server: FakeTransport, tmp_path: Path):
        c = _collaborators(server)
        result = run_provision(config, c)

        root = tmp_path / "primary"
        assert result.error is None
        assert result.completed
        assert result.workdir == root

        # Lowest-sorting toolchain only
        assert result.selection.toolchain_file == "microsoft-jdk-11.zip"
        assert "microsoft-jdk-17.zip" not in result.selection.target_files
        assert (root / "extensions" / "python" / "ext.vsix").is_file()

        # Archive unpacked into the root
        assert (root / "jdk-11" / "bin" / "java.exe").is_file()

        # One installer, two extensions
        commands = [cmd for cmd, _ in c.runner.call_log]
        assert commands == [str(root / "Git-2.45.1-64-bit.exe"), "code", "code"]

        # New bin dir registered once, with a backup
        jdk_bin = str(root / "jdk-11" / "bin")
        assert result.registration.added == [jdk_bin]
        assert c.store.values["Path"] == f"C:\\x;{jdk_bin};"
        assert result.registration.backup_path.parent == root

    def test_stage_reports(self, config: ProvisionConfig, server: FakeTransport):
        result = run_provision(config, _collaborators(server))
        assert [r.stage for r in result.reports] == ["download", "extract", "install", "extensions"]
        assert result.report("download").succeeded == 5
        assert result.report("extract").succeeded == 1
        assert result.report("extensions").succeeded == 2

    def test_download_failure_does_not_abort(self, config: ProvisionConfig, server: FakeTransport, base_url: str):
        server.failing.add(file_url(base_url, "extensions/python/ext.vsix"))
        c = _collaborators(server)
        result = run_provision(config, c)
        assert result.completed
        assert result.report("download").failed == 1
        # The missing extension is not handed to the editor
        assert result.report("extensions").total == 1

    def test_second_run_leaves_path_alone(self, config: ProvisionConfig, server: FakeTransport):
        store = InMemoryEnvironmentStore({"Path": "C:\\x;"})
        run_provision(config, _collaborators(server, store=store))
        second = run_provision(config, _collaborators(server, store=store))
        assert second.completed
        assert not second.registration.written
        assert len(store.writes) == 1

    def test_to_dict(self, config: ProvisionConfig, server: FakeTransport):
        data = run_provision(config, _collaborators(server)).to_dict()
        assert data["completed"] is True
        assert "error" not in data
        assert data["registration"]["written"] is True


class TestRunLevelQuestions:
    def test_declining_workdir_cancels(self, config: ProvisionConfig, server: FakeTransport):
        result = run_provision(config, _collaborators(server, confirmer=ScriptedConfirmer([False])))
        assert result.cancelled
        assert not result.completed
        assert server.requested == []

    def test_non_empty_existing_dir_asks_again(self, config: ProvisionConfig, server: FakeTransport, tmp_path: Path):
        root = tmp_path / "primary"
        root.mkdir()
        (root / "notes.txt").write_text("hi")
        confirmer = ScriptedConfirmer([True, False])

        result = run_provision(config, _collaborators(server, confirmer=confirmer))

        assert result.cancelled
        assert len(confirmer.prompts) == 2
        assert "already contains" in confirmer.prompts[1]
        assert server.requested == []

    def test_created_dir_asks_once(self, config: ProvisionConfig, server: FakeTransport):
        confirmer = ScriptedConfirmer()
        run_provision(config, _collaborators(server, confirmer=confirmer))
        assert not any("already contains" in p for p in confirmer.prompts)

    def test_existing_bin_dirs_not_registered(self, config: ProvisionConfig, server: FakeTransport, tmp_path: Path):
        root = tmp_path / "primary"
        (root / "old" / "bin").mkdir(parents=True)
        result = run_provision(config, _collaborators(server))
        assert result.registration.new_bin_dirs == [str(root / "jdk-11" / "bin")]


class TestFatalErrors:
    def test_manifest_failure(self, config: ProvisionConfig):
        result = run_provision(config, _collaborators(FakeTransport()))
        assert result.error
        assert "Cannot fetch file list" in result.error
        assert not result.completed
        assert result.reports == []

    def test_malformed_manifest(self, config: ProvisionConfig, base_url: str):
        transport = FakeTransport(json_bodies={list_url(base_url): {"files": []}})
        result = run_provision(config, _collaborators(transport))
        assert "Expected a JSON array" in result.error

    def test_store_failure_after_installs(self, config: ProvisionConfig, server: FakeTransport):
        store = InMemoryEnvironmentStore({"Path": "C:\\x;"}, fail_on={"write"})
        result = run_provision(config, _collaborators(server, store=store))
        assert result.error
        assert not result.completed
        assert result.report("download").succeeded == 5
