"""
Task registry.

Maps command names to task descriptors. Populated once at start-up,
read-only afterwards.
"""

import logging
from typing import Dict, Iterable, List, Optional

from build_tools.errors import UnknownCommand
from build_tools.models import TaskDescriptor


logger = logging.getLogger(__name__)


class TaskRegistry:
    """Ordered mapping of command name to TaskDescriptor."""

    def __init__(self, descriptors: Optional[Iterable[TaskDescriptor]] = None):
        # dict keeps registration order, which the usage table relies on
        self._tasks: Dict[str, TaskDescriptor] = {}
        for descriptor in descriptors or ():
            self.register(descriptor)

    def register(self, descriptor: TaskDescriptor) -> TaskDescriptor:
        """
        Register a task.

        Args:
            descriptor: Task to register

        Returns:
            The registered descriptor

        Raises:
            ValueError: If a task with the same name already exists
        """
        if descriptor.name in self._tasks:
            raise ValueError(f"Task '{descriptor.name}' already exists")

        self._tasks[descriptor.name] = descriptor
        logger.debug(f"Registered task {descriptor.name}")
        return descriptor

    def is_valid(self, name: Optional[str]) -> bool:
        """Check whether name is a non-empty registered command."""
        return bool(name) and name in self._tasks

    def get(self, name: str) -> TaskDescriptor:
        """
        Get a task by name.

        Raises:
            UnknownCommand: If no task is registered under name
        """
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownCommand(name) from None

    def list_all(self) -> List[TaskDescriptor]:
        """All tasks in registration order."""
        return list(self._tasks.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)
