"""
Watch mode.

Re-runs a task every time a relevant source file changes:
- SourceChangeHandler receives watchdog events on the observer thread,
  filters and debounces them, and hands them to the event loop.
- WatchSupervisor owns the observer, classifies each change, updates the
  shared BuildConfig and re-invokes the task.

Overlapping invocations are not serialized: a change that arrives while a
previous run is still settling starts a new run right away, and each run
reports its own outcome.
"""

import asyncio
import functools
import logging
import os
import re
import threading
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from build_tools import log
from build_tools.constants import (
    BUILD_TOOLS_WATCH_DEBOUNCE_MS,
    WATCH_EXCLUDE_GLOBS,
    WATCH_INCLUDE_GLOBS,
)
from build_tools.models import (
    BuildConfig,
    BuildRuntime,
    ChangeEvent,
    ChangeKind,
    Outcome,
    TaskDescriptor,
    WatchCategory,
    WatchState,
)
from build_tools.normalizer import ResultNormalizer, format_error


logger = logging.getLogger(__name__)

EXTENSION_CATEGORIES = {
    ".js": WatchCategory.SCRIPT,
    ".scss": WatchCategory.STYLE,
}

DEBOUNCE_CLEANUP_THRESHOLD = 256


def classify_change(path: str) -> Optional[WatchCategory]:
    """Watch category for a changed path, or None for other files."""
    return EXTENSION_CATEGORIES.get(os.path.splitext(path)[1])


@functools.lru_cache(maxsize=None)
def _glob_pattern(pattern: str) -> "re.Pattern[str]":
    # "*" and "?" stay within one path segment; "**" spans any number of them
    parts = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(parts))


def _glob_match(path: str, pattern: str) -> bool:
    return _glob_pattern(pattern).fullmatch(path) is not None


def matches_watch_globs(
    relative_path: str,
    include: Optional[List[str]] = None,
    exclude: Optional[List[str]] = None
) -> bool:
    """
    Check a project-relative, "/"-separated path against the watch globs.

    Args:
        relative_path: Path relative to the project root
        include: Patterns a path must match (defaults to WATCH_INCLUDE_GLOBS)
        exclude: Patterns that reject a path (defaults to WATCH_EXCLUDE_GLOBS)
    """
    include = WATCH_INCLUDE_GLOBS if include is None else include
    exclude = WATCH_EXCLUDE_GLOBS if exclude is None else exclude

    if not any(_glob_match(relative_path, p) for p in include):
        return False
    return not any(_glob_match(relative_path, p) for p in exclude)


class DebounceTracker:
    """
    Tracks file events to prevent duplicate processing.

    Editors often emit several events for a single save.
    """

    def __init__(self, debounce_ms: int = 500):
        self.debounce_seconds = debounce_ms / 1000.0
        self._pending_events: Dict[str, float] = {}
        self._lock = threading.Lock()

    def should_process(self, file_path: str) -> bool:
        """Return True if the event is outside the debounce window."""
        now = time.time()
        with self._lock:
            last = self._pending_events.get(file_path)
            if last is not None and now - last < self.debounce_seconds:
                return False
            self._pending_events[file_path] = now
            return True

    def cleanup_old_events(self, max_age_seconds: float = 60) -> None:
        """Forget events older than max_age_seconds."""
        cutoff = time.time() - max_age_seconds
        with self._lock:
            for path in [p for p, t in self._pending_events.items() if t <= cutoff]:
                del self._pending_events[path]

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending_events)


class SourceChangeHandler(FileSystemEventHandler):
    """
    Watchdog handler for the project source tree.

    Runs on the observer thread. Matching changes are turned into
    ChangeEvents and passed to callback.
    """

    def __init__(
        self,
        root: Path,
        callback: Callable[[ChangeEvent], None],
        debounce_ms: int = BUILD_TOOLS_WATCH_DEBOUNCE_MS,
        include: Optional[List[str]] = None,
        exclude: Optional[List[str]] = None
    ):
        super().__init__()
        self.root = Path(root).resolve()
        self.callback = callback
        self.include = include
        self.exclude = exclude
        self.debounce = DebounceTracker(debounce_ms)

    def on_created(self, event):
        if not event.is_directory:
            self._handle_file_event(os.fsdecode(event.src_path), ChangeKind.CREATED)

    def on_modified(self, event):
        if not event.is_directory:
            self._handle_file_event(os.fsdecode(event.src_path), ChangeKind.MODIFIED)

    def on_deleted(self, event):
        if not event.is_directory:
            self._handle_file_event(os.fsdecode(event.src_path), ChangeKind.DELETED)

    def on_moved(self, event):
        if not event.is_directory:
            self._handle_file_event(os.fsdecode(event.src_path), ChangeKind.DELETED)
            self._handle_file_event(os.fsdecode(event.dest_path), ChangeKind.CREATED)

    def relative_path(self, file_path: str) -> str:
        return Path(os.path.relpath(file_path, self.root)).as_posix()

    def _handle_file_event(self, file_path: str, kind: ChangeKind) -> None:
        if not matches_watch_globs(self.relative_path(file_path), self.include, self.exclude):
            return

        if not self.debounce.should_process(file_path):
            logger.debug(f"Debounced {kind.value} event for {file_path}")
            return

        if len(self.debounce) > DEBOUNCE_CLEANUP_THRESHOLD:
            # Entries outside the debounce window no longer suppress anything
            self.debounce.cleanup_old_events(self.debounce.debounce_seconds)

        try:
            self.callback(ChangeEvent(path=file_path, kind=kind))
        except Exception as e:
            logger.error(f"Error handling change to {file_path}: {e}")


class WatchSupervisor:
    """
    Re-invokes a watchable task whenever the source tree changes.

    The task runs once when the observer is ready and again for every
    relevant change. Failures are reported and the watch keeps going.
    """

    def __init__(
        self,
        descriptor: TaskDescriptor,
        config: BuildConfig,
        runtime: BuildRuntime,
        reporter: Callable[[Outcome], None],
        normalizer: Optional[ResultNormalizer] = None,
        debounce_ms: int = BUILD_TOOLS_WATCH_DEBOUNCE_MS,
        observer_factory: Callable[[], Observer] = Observer
    ):
        """
        Initialize supervisor.

        Args:
            descriptor: Task to re-run (must be watchable)
            config: Shared configuration; its ``watching`` field is updated
                before each re-run
            runtime: Runtime handle passed to the task
            reporter: Called with each invocation's Outcome
            normalizer: Result normalizer (creates default if None)
            debounce_ms: Per-file debounce window
            observer_factory: Creates the watchdog observer
        """
        if not descriptor.watchable:
            raise ValueError(f"Task '{descriptor.name}' does not support watch mode")

        self.descriptor = descriptor
        self.config = config
        self.runtime = runtime
        self.reporter = reporter
        self.normalizer = normalizer or ResultNormalizer()
        self.debounce_ms = debounce_ms
        self.observer_factory = observer_factory

        self.state = WatchState.IDLE
        self.in_flight: Set[asyncio.Future] = set()

        self._observer = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stopped: Optional[asyncio.Event] = None

    def start(self) -> None:
        """Attach the filesystem watcher and run the task once."""
        if self.state is WatchState.WATCHING:
            logger.debug("Watch already active")
            return

        self._loop = asyncio.get_running_loop()
        root = Path(self.runtime.cwd).resolve()

        handler = SourceChangeHandler(
            root=root,
            callback=self._dispatch_threadsafe,
            debounce_ms=self.debounce_ms
        )
        observer = self.observer_factory()
        observer.schedule(handler, str(root), recursive=True)
        observer.start()

        self._observer = observer
        self.state = WatchState.WATCHING
        logger.info(f"Watching {root} for changes")

        self.on_ready()

    def stop(self) -> None:
        """Detach the filesystem watcher."""
        if self._observer is not None:
            try:
                self._observer.stop()
                self._observer.join(timeout=5.0)
            except Exception as e:
                logger.warning(f"Error stopping observer: {e}")
            self._observer = None

        self.state = WatchState.IDLE
        if self._stopped is not None:
            self._stopped.set()

    async def run(self) -> None:
        """
        Watch until stopped or cancelled.

        In-flight invocations are awaited before returning. Cancellation is
        passed on to them first.
        """
        self._stopped = asyncio.Event()
        self.start()
        try:
            await self._stopped.wait()
        except asyncio.CancelledError:
            for pending in list(self.in_flight):
                pending.cancel()
            raise
        finally:
            self.stop()
            await self.drain()

    async def drain(self) -> None:
        """Wait until every in-flight invocation has settled."""
        while self.in_flight:
            await asyncio.gather(*list(self.in_flight), return_exceptions=True)

    def on_ready(self) -> Optional[asyncio.Future]:
        log.secondary("Running tasks...")
        return self._invoke()

    def on_change(self, event: ChangeEvent) -> Optional[asyncio.Future]:
        log.secondary(f"File {event.path} was {event.kind.value}, running tasks...")

        category = classify_change(event.path)
        if category is not None:
            self.config.watching = category

        return self._invoke()

    def _dispatch_threadsafe(self, event: ChangeEvent) -> None:
        self._loop.call_soon_threadsafe(self.on_change, event)

    def _invoke(self) -> Optional[asyncio.Future]:
        name = self.descriptor.name
        try:
            signal = self.descriptor.run(self.runtime, self.config)
        except Exception as e:
            logger.debug(f"Task {name} raised", exc_info=True)
            self.reporter(Outcome.failed(name, format_error(e)))
            return None

        pending = self.normalizer.watch(signal, name, self.reporter)
        if pending is not None:
            self.in_flight.add(pending)
            pending.add_done_callback(self.in_flight.discard)
        return pending
