"""Tasks that run an external command and stream its output."""

import asyncio
import logging
import os
import shlex
from typing import AsyncIterator, List, Optional

from build_tools import log
from build_tools.errors import TaskFailure
from build_tools.models import BuildConfig, BuildRuntime, CommandSpec, TaskDescriptor
from build_tools.signals import Stream


logger = logging.getLogger(__name__)

WATCHING_ENV = "BUILD_TOOLS_WATCHING"
READ_CHUNK_SIZE = 64 * 1024


def command_argv(spec: CommandSpec) -> List[str]:
    if isinstance(spec.run, str):
        return shlex.split(spec.run)
    return list(spec.run)


def command_task(spec: CommandSpec) -> TaskDescriptor:
    """
    Build a task descriptor that runs spec's command.

    The task returns a Stream of the command's output lines. A non-zero
    exit status fails the task.
    """
    argv = command_argv(spec)

    def run(runtime: BuildRuntime, config: BuildConfig) -> Stream:
        # Read now: the generator body only starts once the stream is drained
        watching = config.watching.value if config.watching else None
        return Stream(stream_command(spec.name, argv, runtime, watching))

    return TaskDescriptor(
        name=spec.name,
        run=run,
        watchable=spec.watchable,
        description=spec.description or shlex.join(argv)
    )


async def stream_command(
    name: str,
    argv: List[str],
    runtime: BuildRuntime,
    watching: Optional[str] = None
) -> AsyncIterator[str]:
    """
    Run argv in the project root, yielding each output line.

    Raises:
        TaskFailure: If the command cannot be started or exits non-zero
    """
    env = os.environ.copy()
    if watching:
        env[WATCHING_ENV] = watching
    else:
        env.pop(WATCHING_ENV, None)

    logger.debug(f"Running {shlex.join(argv)} in {runtime.cwd}")

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            cwd=str(runtime.cwd),
            env=env
        )
    except FileNotFoundError:
        raise TaskFailure(f"{name}: command not found: {argv[0]}") from None

    try:
        # Chunked reads: StreamReader.readline() fails on lines over its limit
        pending = b""
        while True:
            chunk = await process.stdout.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            *lines, pending = (pending + chunk).split(b"\n")
            for raw in lines:
                yield _output_line(raw)
        if pending:
            yield _output_line(pending)

        returncode = await process.wait()
    finally:
        if process.returncode is None:
            logger.debug(f"Stopping {name} (pid {process.pid})")
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()

    if returncode != 0:
        raise TaskFailure(f"{name} exited with code {returncode}")


def _output_line(raw: bytes) -> str:
    line = raw.decode(errors="replace").rstrip()
    log.secondary(line)
    return line
