"""
Task sources.

The registry is populated, in order, from:
1. the built-in ``--version`` task
2. plugins exposed through the ``build_tools.tasks`` entry point group
3. shell commands declared in the project configuration
"""

import logging
from collections import abc
from importlib.metadata import entry_points
from typing import Any, List, Optional

from build_tools import __version__, log
from build_tools.constants import TASK_ENTRY_POINT_GROUP, VERSION_COMMAND
from build_tools.models import BuildConfig, BuildRuntime, ProjectConfig, TaskDescriptor
from build_tools.registry import TaskRegistry
from build_tools.shell import command_task
from build_tools.signals import Immediate


logger = logging.getLogger(__name__)


def print_version(runtime: BuildRuntime, config: BuildConfig) -> Immediate:
    log.primary(__version__)
    return Immediate()


VERSION_TASK = TaskDescriptor(
    name=VERSION_COMMAND,
    run=print_version,
    description="Print the build-tools version"
)


def _descriptors_from(obj: Any, source: str) -> List[TaskDescriptor]:
    """Accept a descriptor, an iterable of them, or a factory returning either."""
    if not isinstance(obj, TaskDescriptor) and callable(obj):
        obj = obj()

    if isinstance(obj, TaskDescriptor):
        return [obj]

    if isinstance(obj, abc.Iterable) and not isinstance(obj, (str, bytes)):
        descriptors = []
        for item in obj:
            if isinstance(item, TaskDescriptor):
                descriptors.append(item)
            else:
                logger.warning(f"Ignoring non-task {item!r} from plugin {source}")
        return descriptors

    logger.warning(f"Plugin {source} did not provide any tasks")
    return []


def load_plugin_tasks(group: str = TASK_ENTRY_POINT_GROUP) -> List[TaskDescriptor]:
    """
    Load task descriptors from installed entry points.

    Plugins that fail to import are skipped with a warning.
    """
    descriptors = []
    for entry_point in entry_points(group=group):
        try:
            loaded = entry_point.load()
            descriptors.extend(_descriptors_from(loaded, entry_point.name))
        except Exception as e:
            logger.warning(f"Could not load task plugin {entry_point.name}: {e}")
    return descriptors


def load_registry(
    project_config: Optional[ProjectConfig] = None,
    include_plugins: bool = True
) -> TaskRegistry:
    """
    Build the task registry for this process.

    Args:
        project_config: Project configuration with shell-command tasks
        include_plugins: Whether to load entry point plugins

    Returns:
        Populated TaskRegistry
    """
    registry = TaskRegistry([VERSION_TASK])

    candidates = load_plugin_tasks() if include_plugins else []
    if project_config is not None:
        candidates.extend(command_task(spec) for spec in project_config.commands)

    for descriptor in candidates:
        try:
            registry.register(descriptor)
        except ValueError as e:
            logger.warning(f"Skipping task: {e}")

    return registry
