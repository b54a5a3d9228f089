"""
Tests for the downloader: per-file failure isolation and local mirroring.
"""

from pathlib import Path

from javelin.adapters.mock import FakeTransport
from javelin.core.models import Manifest
from javelin.core.services.downloader import download_all, local_path
from javelin.core.services.manifest_client import file_url
from javelin.core.services.selection import materialize_categories, select_targets


def _transport(base_url: str, files: dict[str, bytes], failing: set[str] = frozenset()) -> FakeTransport:
    return FakeTransport(
        files={file_url(base_url, name): data for name, data in files.items()},
        failing={file_url(base_url, name) for name in failing},
    )


class TestDownloadAll:
    def test_mirrors_relative_paths(self, workdir: Path, base_url: str):
        transport = _transport(base_url, {"a.txt": b"A", "extensions/java/x.vsix": b"X"})
        report = download_all(transport, base_url, workdir, ["a.txt", "extensions/java/x.vsix"])
        assert report.succeeded == 2
        assert (workdir / "a.txt").read_bytes() == b"A"
        assert (workdir / "extensions" / "java" / "x.vsix").read_bytes() == b"X"

    def test_failure_isolated_to_one_item(self, workdir: Path, base_url: str):
        names = [f"f{i}.bin" for i in range(1, 6)]
        transport = _transport(
            base_url,
            {n: n.encode() for n in names},
            failing={"f2.bin"},
        )
        report = download_all(transport, base_url, workdir, names)

        # Every item was attempted, in order
        assert transport.requested == [file_url(base_url, n) for n in names]
        assert report.ok_items == ["f1.bin", "f3.bin", "f4.bin", "f5.bin"]
        assert report.failed == 1
        assert not (workdir / "f2.bin").exists()
        assert (workdir / "f5.bin").read_bytes() == b"f5.bin"

    def test_stale_copy_replaced(self, workdir: Path, base_url: str):
        (workdir / "a.txt").write_text("old")
        transport = _transport(base_url, {"a.txt": b"new"})
        download_all(transport, base_url, workdir, ["a.txt"])
        assert (workdir / "a.txt").read_bytes() == b"new"

    def test_stale_copy_removed_when_download_fails(self, workdir: Path, base_url: str):
        (workdir / "a.txt").write_text("old")
        transport = _transport(base_url, {}, failing={"a.txt"})
        report = download_all(transport, base_url, workdir, ["a.txt"])
        assert report.failed == 1
        assert not (workdir / "a.txt").exists()

    def test_directory_error_is_per_item(self, workdir: Path, base_url: str):
        (workdir / "blocked").write_text("a file where a directory should be")
        transport = _transport(base_url, {"blocked/x.bin": b"x", "ok.bin": b"ok"})
        report = download_all(transport, base_url, workdir, ["blocked/x.bin", "ok.bin"])
        assert report.ok_items == ["ok.bin"]
        assert report.outcomes[0].failed

    def test_empty_targets(self, workdir: Path, base_url: str):
        assert download_all(FakeTransport(), base_url, workdir, []).total == 0


class TestLocalPath:
    def test_nested(self, workdir: Path):
        assert local_path(workdir, "extensions/java/x.vsix") == workdir / "extensions" / "java" / "x.vsix"


class TestTopLevelExtensionEntry:
    def test_fails_alone_after_category_dirs_created(self, workdir: Path, base_url: str):
        m = Manifest.from_entries(["extensions/foo.vsix", "a.txt"])
        selection = select_targets(m, "microsoft-jdk")
        materialize_categories(workdir, m, selection)
        assert (workdir / "extensions" / "foo.vsix").is_dir()

        transport = _transport(base_url, {"extensions/foo.vsix": b"V", "a.txt": b"A"})
        report = download_all(transport, base_url, workdir, selection.target_files)

        assert report.ok_items == ["a.txt"]
        assert report.failed == 1
        assert report.outcomes[-1].item == "extensions/foo.vsix"
