"""
Tests for configuration loading: javelin.yml parsing and overrides.
"""

import textwrap
from pathlib import Path

import pytest

from javelin.core.config.loader import (
    DEFAULT_BASE_URL,
    ConfigError,
    find_config_file,
    load_config,
)


@pytest.fixture(autouse=True)
def _isolate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep the real environment and any real javelin.yml out of the way."""
    monkeypatch.delenv("JAVELIN_URL", raising=False)
    isolated = tmp_path / "cwd"
    isolated.mkdir()
    monkeypatch.chdir(isolated)


class TestLoadConfig:
    def test_defaults_without_file(self):
        config = load_config()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.toolchain_marker == "microsoft-jdk"
        assert config.path_separator == ";"
        assert config.request_timeout is None

    def test_flat_file(self, tmp_path: Path):
        path = tmp_path / "javelin.yml"
        path.write_text(textwrap.dedent("""\
            base_url: http://mirror.local/javelin
            primary_root: /tmp/p1
            headers:
              Host: files.example.com
        """))
        config = load_config(path)
        assert config.base_url == "http://mirror.local/javelin"
        assert config.primary_root == "/tmp/p1"
        assert config.headers == {"Host": "files.example.com"}

    def test_wrapped_file(self, tmp_path: Path):
        path = tmp_path / "javelin.yml"
        path.write_text("javelin:\n  toolchain_marker: openjdk\n")
        assert load_config(path).toolchain_marker == "openjdk"

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "javelin.yml"
        path.write_text("")
        assert load_config(path).base_url == DEFAULT_BASE_URL

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        path = tmp_path / "javelin.yml"
        path.write_text("base_url: http://file\n")
        monkeypatch.setenv("JAVELIN_URL", "http://env")
        assert load_config(path).base_url == "http://env"

    def test_cli_overrides_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("JAVELIN_URL", "http://env")
        assert load_config(base_url="http://cli").base_url == "http://cli"

    def test_trailing_slash_removed(self):
        assert load_config(base_url="http://cli/").base_url == "http://cli"

    def test_auto_discovered_file(self, tmp_path: Path):
        (tmp_path / "cwd" / "javelin.yml").write_text("editor_command: code-insiders\n")
        assert load_config().editor_command == "code-insiders"

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / "javelin.yml"
        path.write_text(":: invalid: yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path: Path):
        path = tmp_path / "javelin.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(path)

    def test_invalid_value_raises(self, tmp_path: Path):
        path = tmp_path / "javelin.yml"
        path.write_text("request_timeout: soon\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)


class TestFindConfigFile:
    def test_find_in_parent(self, tmp_path: Path):
        (tmp_path / "javelin.yml").write_text("{}\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == (tmp_path / "javelin.yml").resolve()

    def test_not_found(self, tmp_path: Path):
        # tmp_path's ancestors are outside our control, so only check a hit or None
        found = find_config_file(tmp_path / "cwd")
        assert found is None or found.name == "javelin.yml"
