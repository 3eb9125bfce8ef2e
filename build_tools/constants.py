"""
Environment variable names and default values for build-tools.

All environment variables are optional and have sensible defaults.
"""

import os

# Configuration
BUILD_TOOLS_CONFIG = os.getenv("BUILD_TOOLS_CONFIG", "")
BUILD_TOOLS_LOG_LEVEL = os.getenv("BUILD_TOOLS_LOG_LEVEL", "INFO").upper()

# Watch Settings
BUILD_TOOLS_WATCH_DEBOUNCE_MS = int(os.getenv("BUILD_TOOLS_WATCH_DEBOUNCE_MS", "500"))

# Default paths
DEFAULT_CONFIG_FILE = "build-tools.json"

# Entry point group scanned for task plugins
TASK_ENTRY_POINT_GROUP = "build_tools.tasks"

# Synthetic command the --version flag is rewritten to
VERSION_COMMAND = "--version"

# Exit codes
EXIT_OK = 0
EXIT_TASK_FAILURE = 1
EXIT_USAGE = 2

DOCS_URL = "http://git.io/bBjMNw"

# Files that re-trigger a watched task
WATCH_INCLUDE_GLOBS = [
    "**/*.js",
    "**/*.scss",
    "**/*.mustache",
    "**/*.json",
]

# Generated output, dependencies and scratch files
WATCH_EXCLUDE_GLOBS = [
    "build/**",
    "node_modules/**",
    "bower_components/**",
    "demos/*",
    "demos/local/*",
    "origami.json",
    "bower.json",
    "package.json",
    "**/tmp-src.scss",
]
