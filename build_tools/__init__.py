"""
Build Tools - Task dispatcher with watch mode for front-end components.

Runs named build tasks and reports their completion uniformly:
- Tasks return Immediate, Deferred or Stream completion signals
- The result normalizer turns each signal into one Outcome
- Watch mode re-runs a task whenever a source file changes
"""

__version__ = "1.0.0"
__author__ = "Origami Team"

from build_tools.models import (
    BuildConfig,
    BuildRuntime,
    ChangeEvent,
    ChangeKind,
    CommandSpec,
    Outcome,
    ProjectConfig,
    TaskDescriptor,
    WatchCategory,
    WatchState,
)
from build_tools.signals import CompletionSignal, Deferred, Immediate, Stream
from build_tools.errors import (
    BuildToolsError,
    ConfigError,
    MultipleErrors,
    TaskFailure,
    UnknownCommand,
)
from build_tools.config import ConfigManager
from build_tools.registry import TaskRegistry
from build_tools.normalizer import ResultNormalizer, format_error
from build_tools.watcher import WatchSupervisor, classify_change
from build_tools.dispatcher import CommandDispatcher, exit_code_for, resolve_command
from build_tools.tasks import load_registry

__all__ = [
    # Models
    "BuildConfig",
    "BuildRuntime",
    "ChangeEvent",
    "ChangeKind",
    "CommandSpec",
    "Outcome",
    "ProjectConfig",
    "TaskDescriptor",
    "WatchCategory",
    "WatchState",
    # Signals
    "CompletionSignal",
    "Deferred",
    "Immediate",
    "Stream",
    # Errors
    "BuildToolsError",
    "ConfigError",
    "MultipleErrors",
    "TaskFailure",
    "UnknownCommand",
    # Components
    "ConfigManager",
    "TaskRegistry",
    "ResultNormalizer",
    "format_error",
    "WatchSupervisor",
    "classify_change",
    "CommandDispatcher",
    "exit_code_for",
    "resolve_command",
    "load_registry",
]
