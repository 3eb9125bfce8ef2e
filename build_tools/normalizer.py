"""
Result normalizer.

Reduces whatever a task returned to a single Outcome, regardless of
whether the task finished immediately, returned a Deferred computation
or a Stream of events.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from build_tools.errors import TaskFailure
from build_tools.models import Outcome
from build_tools.signals import Deferred, Immediate, Stream


logger = logging.getLogger(__name__)


def format_error(error: Any) -> str:
    """
    Render a task error as a human-readable message.

    Sequences of messages (a list, a tuple or a TaskFailure carrying
    several) are joined with newlines in order; anything else is used
    verbatim.
    """
    if isinstance(error, TaskFailure):
        return "\n".join(error.messages)
    if isinstance(error, (list, tuple)):
        return "\n".join(str(e) for e in error)
    return str(error)


class ResultNormalizer:
    """
    Converts a CompletionSignal into exactly one Outcome.

    Stream sources are drained to exhaustion so that tasks waiting for
    their consumer always reach the end event.
    """

    async def settle(self, signal: Any, command: str) -> Optional[Outcome]:
        """
        Wait for a task's completion signal and produce its Outcome.

        Args:
            signal: Value returned by the task
            command: Command name, recorded on the Outcome

        Returns:
            Outcome, or None when the task returned no signal
        """
        if signal is None:
            return None

        if isinstance(signal, Immediate):
            return Outcome.succeeded(command)

        try:
            if isinstance(signal, Deferred):
                await signal.as_future()
            elif isinstance(signal, Stream):
                count = await self._drain(signal)
                logger.debug(f"Stream for {command} ended after {count} events")
            else:
                return Outcome.failed(
                    command,
                    f"{command} returned an unsupported result: {type(signal).__name__}"
                )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.debug(f"Task {command} failed", exc_info=True)
            return Outcome.failed(command, format_error(e))

        return Outcome.succeeded(command)

    def watch(
        self,
        signal: Any,
        command: str,
        callback: Callable[[Outcome], None]
    ) -> Optional[asyncio.Task]:
        """
        Settle a signal in the background and hand its Outcome to callback.

        Must be called from within a running event loop. Immediate signals
        are reported before this method returns.

        Returns:
            The scheduled task, or None when nothing is pending
        """
        if signal is None:
            return None

        if isinstance(signal, Immediate):
            callback(Outcome.succeeded(command))
            return None

        async def _settle_and_report():
            outcome = await self.settle(signal, command)
            if outcome is not None:
                callback(outcome)
            return outcome

        return asyncio.ensure_future(_settle_and_report())

    async def _drain(self, stream: Stream) -> int:
        count = 0
        if stream.is_async:
            async for _ in stream.source:
                count += 1
        else:
            for _ in stream.source:
                count += 1
                # Let other invocations progress between events
                await asyncio.sleep(0)
        return count
