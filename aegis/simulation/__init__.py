"""Simulation engine for the swarm.

This module provides:
- The pure per-tick transition (step/advance/run)
- Point-mass physics, separation and battery model
- Operator commands and the events they produce
- A fixed-rate scheduler and a stub hardware bridge
"""

from .bridge import HardwareBridge
from .commands import (
    Arm,
    Command,
    CommandResult,
    Disarm,
    EmergencyStop,
    Land,
    RepositionFleet,
    RepositionUnit,
    SetAlgorithm,
    Takeoff,
    UploadFleetMission,
    UploadUnitMission,
    apply_command,
)
from .engine import advance, run, step
from .events import EventCategory, EventLog, EventSink, LoggingEventSink, SwarmEvent
from .physics import (
    IntegrationResult,
    drain_battery,
    integrate,
    power_draw,
    record_trail,
    separation_acceleration,
)
from .scheduler import TickScheduler

__all__ = [
    # Engine
    "step",
    "advance",
    "run",
    # Physics
    "IntegrationResult",
    "integrate",
    "separation_acceleration",
    "drain_battery",
    "power_draw",
    "record_trail",
    # Commands
    "Command",
    "CommandResult",
    "apply_command",
    "Arm",
    "Disarm",
    "EmergencyStop",
    "Takeoff",
    "Land",
    "SetAlgorithm",
    "UploadFleetMission",
    "UploadUnitMission",
    "RepositionFleet",
    "RepositionUnit",
    # Events
    "EventCategory",
    "EventLog",
    "EventSink",
    "LoggingEventSink",
    "SwarmEvent",
    # Runtime
    "TickScheduler",
    "HardwareBridge",
]
