"""Models for collection shapes, configuration and deferred calls."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Shape(str, Enum):
    """The two collection shapes every traversal understands."""
    SEQUENCE = "sequence"
    MAPPING = "mapping"


class DelayBackend(str, Enum):
    """Where delayed invocations are run."""
    AUTO = "auto"
    THREAD = "thread"
    LOOP = "loop"


@dataclass(frozen=True)
class Entry:
    """One enumerated (value, key) pair of a collection."""
    value: Any
    key: Hashable

    def __iter__(self):
        yield self.value
        yield self.key


class Settings(BaseModel):
    """Library-wide configuration."""
    log_level: str = Field(
        default="WARNING",
        description="Level for the library logger"
    )
    delay_backend: DelayBackend = Field(
        default=DelayBackend.AUTO,
        description="Scheduler used by delay() when none is given"
    )
    timer_daemon: bool = Field(
        default=True,
        description="Run timer threads as daemons"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Accept standard level names in any case."""
        level = str(v).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from UNDERSCORE_* environment variables."""
        values: Dict[str, Any] = {}
        if 'UNDERSCORE_LOG_LEVEL' in os.environ:
            values['log_level'] = os.environ['UNDERSCORE_LOG_LEVEL']
        if 'UNDERSCORE_DELAY_BACKEND' in os.environ:
            values['delay_backend'] = os.environ['UNDERSCORE_DELAY_BACKEND'].lower()
        if 'UNDERSCORE_TIMER_DAEMON' in os.environ:
            values['timer_daemon'] = os.environ['UNDERSCORE_TIMER_DAEMON']
        return cls(**values)


class DelayRequest(BaseModel):
    """A single deferred invocation: what to call, with what, and when."""
    model_config = ConfigDict(frozen=True)

    func: Callable[..., Any] = Field(..., description="Callable to invoke")
    wait_ms: float = Field(
        ...,
        ge=0,
        description="Minimum delay before invocation, in milliseconds"
    )
    args: Tuple[Any, ...] = Field(default=())
    kwargs: Dict[str, Any] = Field(default_factory=dict)

    @property
    def wait_seconds(self) -> float:
        return self.wait_ms / 1000.0

    def invoke(self):
        return self.func(*self.args, **self.kwargs)
