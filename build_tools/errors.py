"""Exception types raised by the dispatcher and by tasks."""

from typing import Iterable, List


class BuildToolsError(Exception):
    """Base class for build-tools errors."""


class UnknownCommand(BuildToolsError, KeyError):
    """Requested command is not registered."""

    def __init__(self, command: str):
        super().__init__(command)
        self.command = command

    def __str__(self) -> str:
        return f"{self.command} is not a valid command"


class TaskFailure(BuildToolsError):
    """
    A task finished unsuccessfully.

    Tasks raise this from a Deferred or Stream (or directly) to report
    one or more human-readable messages.
    """

    def __init__(self, *messages: str):
        super().__init__(*messages)
        self.messages: List[str] = [str(m) for m in messages]

    def __str__(self) -> str:
        return "\n".join(self.messages)


class MultipleErrors(TaskFailure):
    """A task failure carrying several messages, rendered one per line."""

    def __init__(self, messages: Iterable[str]):
        super().__init__(*messages)


class ConfigError(BuildToolsError):
    """Project configuration file could not be loaded."""
