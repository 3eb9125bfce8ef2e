"""
Project configuration loading.

An optional build-tools.json in the project root provides default
option values and extra shell-command tasks:

    {
        "version": "1.0",
        "options": {"buildFolder": "./dist/"},
        "commands": [
            {"name": "lint", "run": "eslint src", "description": "Lint sources",
             "watchable": true}
        ]
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from build_tools.constants import BUILD_TOOLS_CONFIG, DEFAULT_CONFIG_FILE
from build_tools.errors import ConfigError
from build_tools.models import BuildConfig, ProjectConfig


logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads the project configuration file."""

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            config_file: Path to configuration file. Falls back to
                BUILD_TOOLS_CONFIG, then ./build-tools.json

        Raises:
            ConfigError: If the file exists but cannot be parsed
        """
        self.config_file = Path(config_file or BUILD_TOOLS_CONFIG or DEFAULT_CONFIG_FILE)
        self.config = self._load_config()

    def _load_config(self) -> ProjectConfig:
        if not self.config_file.exists():
            logger.debug(f"No configuration file at {self.config_file}, using defaults")
            return ProjectConfig()

        try:
            data = json.loads(self.config_file.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to read {self.config_file}: {e}") from e

        try:
            config = ProjectConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {self.config_file}: {e}") from e

        logger.debug(
            f"Loaded {self.config_file}: {len(config.options)} options, "
            f"{len(config.commands)} commands"
        )
        return config

    def build_config(self, overrides: Optional[Dict[str, Any]] = None) -> BuildConfig:
        """
        Create the run configuration for this invocation.

        Command-line options override the file's defaults.
        """
        data = dict(self.config.options)
        data.update(overrides or {})
        try:
            return BuildConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid options: {e}") from e
