"""Events emitted to log collaborators.

The core only announces that something happened; sinks decide how to
show or store it.
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import List, Protocol

logger = logging.getLogger(__name__)


class EventCategory(Enum):
    """Source tag shown in front of an event line."""
    SYSTEM = "SYSTEM"
    COMMAND = "COMMAND"
    CONFIG = "CONFIG"
    MAVLINK = "MAVLINK"
    CONSENSUS = "CONSENSUS"


@dataclass(frozen=True)
class SwarmEvent:
    """Something that happened in the simulation.

    Attributes:
        category: Source tag
        message: Human-readable description
        sim_time: Simulation time when the event occurred
    """
    category: EventCategory
    message: str
    sim_time: float = 0.0

    def __str__(self) -> str:
        return f"[{self.category.value}] {self.message}"


class EventSink(Protocol):
    """Anything that accepts events."""

    def emit(self, event: SwarmEvent) -> None:
        ...


class EventLog:
    """Bounded in-memory event log, newest first.

    Example:
        log = EventLog(capacity=100)
        scheduler.add_sink(log)
        ...
        for line in log.lines():
            print(line)
    """

    def __init__(self, capacity: int = 100):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._events: deque = deque(maxlen=capacity)

    def emit(self, event: SwarmEvent) -> None:
        self._events.appendleft(event)

    @property
    def events(self) -> List[SwarmEvent]:
        return list(self._events)

    def lines(self) -> List[str]:
        return [str(e) for e in self._events]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)


class LoggingEventSink:
    """Forwards events to a stdlib logger."""

    def __init__(self, log: logging.Logger = logger, level: int = logging.INFO):
        self._log = log
        self._level = level

    def emit(self, event: SwarmEvent) -> None:
        self._log.log(self._level, f"t={event.sim_time:.2f}s {event}")
