"""
Configuration loader — reads javelin.yml into a ProvisionConfig.

Every setting has a working default, so the file is optional. Values
are resolved in precedence order:

    CLI --url  >  JAVELIN_URL env var  >  javelin.yml  >  model defaults
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "javelin.yml"

DEFAULT_BASE_URL = "https://ncs.nova.sktelecom.com"

URL_ENV_VAR = "JAVELIN_URL"


class ConfigError(Exception):
    """Raised when the configuration file is invalid or unreadable."""


class ProvisionConfig(BaseModel):
    """Tunables for one provisioning run."""

    base_url: str = DEFAULT_BASE_URL
    headers: dict[str, str] = Field(default_factory=dict)
    request_timeout: float | None = None  # None = block until the server answers

    # Working directory candidates
    primary_root: str = "C:\\projects"
    secondary_root: str = "D:\\projects"
    secondary_volume: str = "D:\\"

    # Selection policy
    toolchain_marker: str = "microsoft-jdk"

    # Installation
    editor_command: str = "code"

    # Persistent environment
    environment_key: str = "HKCU\\Environment"
    path_variable: str = "Path"
    path_separator: str = ";"
    backup_prefix: str = "env_"

    def with_base_url(self, base_url: str | None) -> ProvisionConfig:
        """Return a copy using ``base_url`` when one is given."""
        if not base_url:
            return self
        return self.model_copy(update={"base_url": base_url})


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for javelin.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to javelin.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None, base_url: str | None = None) -> ProvisionConfig:
    """Load and validate the provisioning configuration.

    Args:
        path: Explicit path to javelin.yml. If None, searches upward and
            falls back to defaults when nothing is found.
        base_url: Base URL from the command line; wins over every other source.

    Returns:
        Validated ProvisionConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file()

    data: dict = {}
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        data = _read_yaml(path)

    env_url = os.environ.get(URL_ENV_VAR)
    if env_url:
        data["base_url"] = env_url

    try:
        config = ProvisionConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    config = config.with_base_url(base_url)
    config = config.model_copy(update={"base_url": config.base_url.rstrip("/")})
    logger.debug("Using base URL %s", config.base_url)
    return config


def _read_yaml(path: Path) -> dict:
    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "javelin" key or be flat
    section = data.get("javelin", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected a mapping under 'javelin' in {path}")
    return dict(section)
