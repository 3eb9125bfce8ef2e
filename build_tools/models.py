"""
Data models for build-tools.

Pydantic models for task descriptors, the shared run configuration,
file change events, task outcomes and the project configuration file.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WatchCategory(str, Enum):
    """Kind of source file that triggered the current watch run."""
    SCRIPT = "js"
    STYLE = "sass"


class ChangeKind(str, Enum):
    """Kind of filesystem change."""
    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"


class WatchState(str, Enum):
    """Watch supervisor state."""
    IDLE = "idle"
    WATCHING = "watching"


@dataclass
class BuildRuntime:
    """
    Runtime handle passed to every task invocation.

    Attributes:
        cwd: Project root the task operates on
        loop: Event loop the task is invoked on (None outside a loop)
    """
    cwd: Path = field(default_factory=Path.cwd)
    loop: Optional[asyncio.AbstractEventLoop] = None


class TaskDescriptor(BaseModel):
    """
    A registered build task.

    The callable receives the runtime handle and the shared BuildConfig
    and returns a CompletionSignal (or None).
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1)
    run: Callable[..., Any]
    watchable: bool = False
    description: str = ""


class BuildConfig(BaseModel):
    """
    Options for a single process invocation.

    Only ``watch`` and ``watching`` are interpreted here; every other
    option is kept verbatim as an extra field for the tasks to read.
    """
    model_config = ConfigDict(extra="allow")

    watch: bool = False
    watching: Optional[WatchCategory] = None

    def get(self, name: str, default: Any = None) -> Any:
        """Get an option by name, including pass-through options."""
        if name in type(self).model_fields:
            return getattr(self, name)
        return (self.model_extra or {}).get(name, default)

    @property
    def options(self) -> Dict[str, Any]:
        """Pass-through options not interpreted by the dispatcher."""
        return dict(self.model_extra or {})


class ChangeEvent(BaseModel):
    """A filesystem change relevant to the watched glob set."""
    path: str
    kind: ChangeKind


class Outcome(BaseModel):
    """Terminal result of one task invocation."""
    success: bool
    command: str
    error: Optional[str] = None

    @classmethod
    def succeeded(cls, command: str) -> "Outcome":
        return cls(success=True, command=command)

    @classmethod
    def failed(cls, command: str, error: str) -> "Outcome":
        return cls(success=False, command=command, error=error)


class CommandSpec(BaseModel):
    """A shell command exposed as a task by the project configuration."""
    name: str = Field(..., min_length=1)
    run: Union[str, List[str]]
    description: str = ""
    watchable: bool = False

    @field_validator("run")
    @classmethod
    def run_not_empty(cls, v):
        if not v:
            raise ValueError("run must not be empty")
        return v


class ProjectConfig(BaseModel):
    """Contents of build-tools.json."""
    version: str = "1.0"
    options: Dict[str, Any] = Field(default_factory=dict)
    commands: List[CommandSpec] = Field(default_factory=list)

    def get_command(self, name: str) -> Optional[CommandSpec]:
        """Get a command spec by name."""
        for spec in self.commands:
            if spec.name == name:
                return spec
        return None
