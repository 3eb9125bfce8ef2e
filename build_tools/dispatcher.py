"""
Command dispatcher.

Resolves the requested command against the registry, runs it once or
hands it to the watch supervisor, and decides the process exit code.
The dispatcher never exits the process itself.
"""

import asyncio
import logging
from typing import Callable, Optional

from build_tools import log
from build_tools.constants import EXIT_OK, EXIT_TASK_FAILURE, EXIT_USAGE, VERSION_COMMAND
from build_tools.errors import UnknownCommand
from build_tools.models import BuildConfig, BuildRuntime, Outcome, TaskDescriptor
from build_tools.normalizer import ResultNormalizer, format_error
from build_tools.registry import TaskRegistry
from build_tools.usage import format_usage
from build_tools.watcher import WatchSupervisor


logger = logging.getLogger(__name__)


def resolve_command(command: Optional[str], version_requested: bool = False) -> Optional[str]:
    """Rewrite the --version flag into the synthetic --version command."""
    if version_requested:
        return VERSION_COMMAND
    return command


def exit_code_for(outcome: Optional[Outcome]) -> int:
    """Exit code for an invocation's outcome (None means nothing to report)."""
    if outcome is None or outcome.success:
        return EXIT_OK
    return EXIT_TASK_FAILURE


class CommandDispatcher:
    """Top-level control for a single build-tools invocation."""

    def __init__(
        self,
        registry: TaskRegistry,
        runtime: Optional[BuildRuntime] = None,
        normalizer: Optional[ResultNormalizer] = None,
        supervisor_factory: Callable[..., WatchSupervisor] = WatchSupervisor
    ):
        self.registry = registry
        self.runtime = runtime or BuildRuntime()
        self.normalizer = normalizer or ResultNormalizer()
        self.supervisor_factory = supervisor_factory

    def report(self, outcome: Outcome) -> None:
        """Print an invocation's outcome."""
        if outcome.success:
            log.primary(f"\nFinished running {outcome.command}")
        elif outcome.error:
            log.primary_error(outcome.error)

    def print_usage(self) -> None:
        print(format_usage(self.registry.list_all()))

    async def run(self, command: Optional[str], config: BuildConfig) -> int:
        """
        Dispatch a command.

        Args:
            command: Requested command name (may be None or empty)
            config: Run configuration shared with the task

        Returns:
            Process exit code
        """
        if not self.registry.is_valid(command):
            if command:
                log.primary_error(str(UnknownCommand(command)))
            self.print_usage()
            return EXIT_USAGE

        descriptor = self.registry.get(command)
        self.runtime.loop = asyncio.get_running_loop()

        if config.watch and descriptor.watchable:
            supervisor = self.supervisor_factory(
                descriptor=descriptor,
                config=config,
                runtime=self.runtime,
                reporter=self.report,
                normalizer=self.normalizer
            )
            await supervisor.run()
            return EXIT_OK

        if config.watch:
            logger.debug(f"{command} does not support watch mode, running once")

        outcome = await self.invoke(descriptor, config)
        if outcome is not None:
            self.report(outcome)
        return exit_code_for(outcome)

    async def invoke(self, descriptor: TaskDescriptor, config: BuildConfig) -> Optional[Outcome]:
        """Run a task once and wait for its outcome."""
        try:
            signal = descriptor.run(self.runtime, config)
        except Exception as e:
            logger.debug(f"Task {descriptor.name} raised", exc_info=True)
            return Outcome.failed(descriptor.name, format_error(e))

        return await self.normalizer.settle(signal, descriptor.name)
