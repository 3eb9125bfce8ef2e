"""Tests for project configuration loading."""

import json
from unittest.mock import patch

import pytest

from build_tools.config import ConfigManager
from build_tools.errors import ConfigError
from build_tools.models import WatchCategory


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_missing_file_uses_defaults(self, temp_dir):
        manager = ConfigManager(temp_dir / "build-tools.json")

        assert manager.config.options == {}
        assert manager.config.commands == []

    def test_loads_options_and_commands(self, temp_dir):
        config_file = temp_dir / "build-tools.json"
        config_file.write_text(json.dumps({
            "version": "1.0",
            "options": {"buildFolder": "./dist/"},
            "commands": [
                {"name": "lint", "run": ["eslint", "src"], "watchable": True}
            ]
        }))

        manager = ConfigManager(config_file)

        assert manager.config.options == {"buildFolder": "./dist/"}
        assert manager.config.commands[0].name == "lint"
        assert manager.config.commands[0].watchable is True

    def test_invalid_json(self, temp_dir):
        config_file = temp_dir / "build-tools.json"
        config_file.write_text("{not json")

        with pytest.raises(ConfigError, match="Failed to read"):
            ConfigManager(config_file)

    def test_invalid_schema(self, temp_dir):
        config_file = temp_dir / "build-tools.json"
        config_file.write_text(json.dumps({"commands": [{"name": "lint"}]}))

        with pytest.raises(ConfigError, match="Invalid configuration"):
            ConfigManager(config_file)

    def test_env_config_path(self, temp_dir):
        """BUILD_TOOLS_CONFIG is used when no path is given."""
        config_file = temp_dir / "custom.json"
        config_file.write_text(json.dumps({"options": {"js": "lib/index.js"}}))

        with patch("build_tools.config.BUILD_TOOLS_CONFIG", str(config_file)):
            manager = ConfigManager()

        assert manager.config_file == config_file
        assert manager.config.options["js"] == "lib/index.js"

    def test_build_config_overrides_defaults(self, temp_dir):
        """Command-line options win over file defaults."""
        config_file = temp_dir / "build-tools.json"
        config_file.write_text(json.dumps({
            "options": {"buildFolder": "./dist/", "sass": "src/main.scss"}
        }))
        manager = ConfigManager(config_file)

        config = manager.build_config({"buildFolder": "./out/", "watch": True})

        assert config.watch is True
        assert config.get("buildFolder") == "./out/"
        assert config.get("sass") == "src/main.scss"

    def test_build_config_returns_fresh_instances(self, temp_dir):
        manager = ConfigManager(temp_dir / "missing.json")

        first = manager.build_config()
        first.watching = WatchCategory.SCRIPT

        assert manager.build_config().watching is None

    def test_build_config_rejects_bad_reserved_option(self, temp_dir):
        manager = ConfigManager(temp_dir / "missing.json")

        with pytest.raises(ConfigError, match="Invalid options"):
            manager.build_config({"watching": "css"})

    def test_file_option_with_bad_watch_value(self, temp_dir):
        config_file = temp_dir / "build-tools.json"
        config_file.write_text(json.dumps({"options": {"watch": "maybe"}}))
        manager = ConfigManager(config_file)

        with pytest.raises(ConfigError, match="Invalid options"):
            manager.build_config()
