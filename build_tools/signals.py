"""
Completion signals returned by tasks.

A task tells the dispatcher how it finishes by returning one of:

- Immediate: the work is already done.
- Deferred: an awaitable (coroutine, asyncio future/task, or a
  concurrent.futures.Future) that resolves or raises.
- Stream: a sync or async iterable of events. Each item is a data event,
  an exception raised while iterating is the error event, and exhaustion
  is the end event.

Returning None means the task manages its own lifecycle and nothing is
reported for it.
"""

import asyncio
import concurrent.futures
import inspect
from collections import abc
from dataclasses import dataclass
from typing import Any, AsyncIterable, Awaitable, Iterable, Union


@dataclass(frozen=True)
class Immediate:
    """Task completed synchronously."""


@dataclass(frozen=True)
class Deferred:
    """Task completes when the wrapped awaitable settles."""

    awaitable: Union[Awaitable[Any], concurrent.futures.Future]

    def __post_init__(self):
        if not (
            inspect.isawaitable(self.awaitable)
            or isinstance(self.awaitable, concurrent.futures.Future)
        ):
            raise TypeError(
                f"Deferred expects an awaitable, got {type(self.awaitable).__name__}"
            )

    def as_future(self) -> asyncio.Future:
        """Wrap the awaitable as a future bound to the running loop."""
        if isinstance(self.awaitable, concurrent.futures.Future):
            return asyncio.wrap_future(self.awaitable)
        return asyncio.ensure_future(self.awaitable)


@dataclass(frozen=True)
class Stream:
    """Task completes when the wrapped event source is exhausted."""

    source: Union[Iterable[Any], AsyncIterable[Any]]

    def __post_init__(self):
        if not (self.is_async or isinstance(self.source, abc.Iterable)):
            raise TypeError(
                f"Stream expects an iterable, got {type(self.source).__name__}"
            )

    @property
    def is_async(self) -> bool:
        return isinstance(self.source, abc.AsyncIterable)


CompletionSignal = Union[Immediate, Deferred, Stream]
