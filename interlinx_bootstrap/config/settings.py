"""Installer settings for the Interlinx bootstrap installer.

Provides InstallerSettings dataclass and SettingsManager for loading
an optional JSON settings file.
"""

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from interlinx_bootstrap.exceptions import ConfigurationError
from interlinx_bootstrap.utils.validators import validate_repository, validate_timeout


# Environment variable pointing at a settings file
CONFIG_ENV_VAR = "INTERLINX_BOOTSTRAP_CONFIG"


@dataclass
class InstallerSettings:
    """Settings for one bootstrap run."""

    # Release sources
    controller_repo: str = "interlinx-io/interlinx-controller"
    agent_repo: str = "interlinx-io/downloads"
    api_base: str = "https://api.github.com"

    # Controller archive
    install_dir: str = "/opt"
    platform_tag: str = "linux-x64"

    # Agent executable
    agent_asset_name: str = "agent--linux.run"
    agent_platform_suffix: str = "linux.run"

    # Request timeout in seconds
    timeout: int = 30

    def __post_init__(self):
        """Validate settings after initialization."""
        for field_name in (
            "controller_repo", "agent_repo", "api_base", "install_dir",
            "platform_tag", "agent_asset_name", "agent_platform_suffix",
        ):
            if not isinstance(getattr(self, field_name), str):
                raise ConfigurationError(f"{field_name}: must be a string")
        for field_name in ("controller_repo", "agent_repo"):
            is_valid, error = validate_repository(getattr(self, field_name))
            if not is_valid:
                raise ConfigurationError(f"{field_name}: {error}")
        is_valid, error = validate_timeout(self.timeout)
        if not is_valid:
            raise ConfigurationError(f"timeout: {error}")
        self.timeout = int(self.timeout)
        if not self.install_dir:
            raise ConfigurationError("install_dir: Install directory is required")

    @property
    def install_root(self) -> Path:
        """Root directory controller archives are expanded into."""
        return Path(self.install_dir)

    def to_dict(self) -> dict:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "InstallerSettings":
        """Create settings from dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)


class SettingsManager:
    """Loads installer settings from an optional JSON file."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            config_path: Optional settings file, defaults to $INTERLINX_BOOTSTRAP_CONFIG
        """
        if config_path is None and os.environ.get(CONFIG_ENV_VAR):
            config_path = Path(os.environ[CONFIG_ENV_VAR])
        self._config_path = config_path

    @property
    def config_path(self) -> Optional[Path]:
        """Path to settings file, if any."""
        return self._config_path

    def load(self, **overrides) -> InstallerSettings:
        """
        Load settings from disk and apply overrides.

        Args:
            **overrides: Field values that take precedence over the file
                (None values are ignored)

        Returns:
            InstallerSettings instance (defaults if no file configured)

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        data = {}
        if self._config_path is not None:
            if not self._config_path.exists():
                raise ConfigurationError(f"Settings file not found: {self._config_path}")
            try:
                with open(self._config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                raise ConfigurationError(
                    f"Invalid settings file {self._config_path}", e
                )
            if not isinstance(data, dict):
                raise ConfigurationError(
                    f"Settings file {self._config_path} must contain a JSON object"
                )

        for key, value in overrides.items():
            if value is not None:
                data[key] = value

        try:
            return InstallerSettings.from_dict(data)
        except TypeError as e:
            raise ConfigurationError("Invalid settings", e)
