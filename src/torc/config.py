"""User configuration for torc."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from torc.errors import ConfigError

logger = logging.getLogger(__name__)

# Default configuration location
CONFIG_DIR = Path.home() / ".torc"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Environment variable that points at an alternate config file
CONFIG_ENV_VAR = "TORC_CONFIG"

DEFAULT_REPO_URL = "https://github.com/Noah-Moller/tea-or-coffee.git"
DEFAULT_RELEASES_API_URL = (
    "https://api.github.com/repos/Noah-Moller/tea-or-coffee/releases/latest"
)
DEFAULT_RELEASE_DOWNLOAD_URL = (
    "https://github.com/Noah-Moller/tea-or-coffee/releases/download"
)


class Settings(BaseModel):
    """Tunable settings.

    Every field has a default, so an absent config file means stock behavior.
    """

    model_config = ConfigDict(extra="forbid")

    repo_url: str = DEFAULT_REPO_URL
    releases_api_url: str = DEFAULT_RELEASES_API_URL
    release_download_url: str = DEFAULT_RELEASE_DOWNLOAD_URL
    scratch_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    clone_dir_name: str = "tea-or-coffee"
    update_clone_dir_name: str = "tea-or-coffee-update"
    service_label: str = "com.teacoffee.torc"
    unit_name: str = "torc-server"
    order_port: int = 8080
    admin_port: int = 9090
    log_lines: int = Field(default=10, ge=0)
    build_marker: str = "main.go"
    toolchain: str = "go"
    install_root: Path | None = None
    service_path: Path | None = None

    @property
    def clone_dir(self) -> Path:
        """Scratch checkout used by install when no local source exists."""
        return self.scratch_dir / self.clone_dir_name

    @property
    def update_clone_dir(self) -> Path:
        """Scratch checkout used by server update."""
        return self.scratch_dir / self.update_clone_dir_name


def config_path() -> Path:
    """Resolve which config file to read.

    Returns:
        $TORC_CONFIG if set, otherwise ~/.torc/config.yaml.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override).expanduser() if override else CONFIG_FILE


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a YAML file.

    Args:
        path: Config file. Defaults to config_path().

    Returns:
        Parsed Settings, or defaults if the file does not exist.

    Raises:
        ConfigError: If the file is not valid YAML or fails validation.
    """
    path = path or config_path()
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return Settings()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
