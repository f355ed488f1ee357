"""Operator commands applied between ticks.

Each command is a small frozen value. ``apply_command`` turns it into an
atomic replacement of specific fields of the snapshot and, when the
command is accepted, an event for the log sinks.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from ..coordination.missions import sanitize_waypoints
from ..core.config import SimConfig
from ..core.fleet import ArmingState, Fleet, SwarmAlgorithm
from ..core.geometry import Vector3
from ..core.unit import FlightMode, Unit, UnitStatus
from .events import EventCategory, SwarmEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Arm:
    """Arm the fleet and every unit."""


@dataclass(frozen=True)
class Disarm:
    """Kill motors: every unit to STANDBY/STABILIZED, missions cleared."""


@dataclass(frozen=True)
class EmergencyStop:
    """Disarm with the fleet latched in E-STOP."""


@dataclass(frozen=True)
class Takeoff:
    """Climb every unit to ``altitude`` (config default if None)."""
    altitude: Optional[float] = None


@dataclass(frozen=True)
class Land:
    """Descend every unit to the ground."""


@dataclass(frozen=True)
class SetAlgorithm:
    algorithm: SwarmAlgorithm


@dataclass(frozen=True)
class UploadFleetMission:
    """Broadcast one waypoint list to every unit."""
    waypoints: Tuple


@dataclass(frozen=True)
class UploadUnitMission:
    unit_id: str
    waypoints: Tuple


@dataclass(frozen=True)
class RepositionFleet:
    """Teleport every unit (position and target) to ``point``."""
    point: Vector3


@dataclass(frozen=True)
class RepositionUnit:
    unit_id: str
    point: Vector3


Command = Union[
    Arm,
    Disarm,
    EmergencyStop,
    Takeoff,
    Land,
    SetAlgorithm,
    UploadFleetMission,
    UploadUnitMission,
    RepositionFleet,
    RepositionUnit,
]


@dataclass(frozen=True)
class CommandResult:
    """Outcome of applying a command.

    Attributes:
        fleet: Snapshot after the command
        event: Event for log sinks, None if the command was ignored
    """
    fleet: Fleet
    event: Optional[SwarmEvent] = None

    @property
    def accepted(self) -> bool:
        return self.event is not None


def _event(fleet: Fleet, category: EventCategory, message: str) -> SwarmEvent:
    return SwarmEvent(category=category, message=message, sim_time=fleet.simulation_time)


def _ground_unit(unit: Unit) -> Unit:
    return replace(
        unit,
        status=UnitStatus.STANDBY,
        flight_mode=FlightMode.STABILIZED,
        mission_path=(),
    )


def _with_mission(unit: Unit, waypoints: Tuple[Vector3, ...], config: SimConfig) -> Unit:
    status = unit.status
    if unit.altitude > config.airborne_threshold:
        status = UnitStatus.FLYING
    return replace(
        unit,
        mission_path=waypoints,
        flight_mode=FlightMode.MISSION,
        status=status,
    )


def _clamp_point(point) -> Vector3:
    point = Vector3.of(point)
    if point.z < 0.0:
        logger.debug(f"Clamping reposition altitude {point.z:.2f}m to 0")
        point = point.with_z(0.0)
    return point


def _arm(fleet: Fleet, command: Arm, config: SimConfig) -> CommandResult:
    logger.info("Arming fleet")
    fleet = replace(
        fleet.with_units(replace(u, status=UnitStatus.ARMED) for u in fleet.units),
        arming_state=ArmingState.ARMED,
    )
    return CommandResult(fleet, _event(fleet, EventCategory.SYSTEM, "FLEET ARMED: MOTORS IDLE"))


def _disarm(fleet: Fleet, command: Disarm, config: SimConfig) -> CommandResult:
    logger.info("Disarming fleet")
    fleet = replace(
        fleet.with_units(_ground_unit(u) for u in fleet.units),
        arming_state=ArmingState.DISARMED,
        global_flight_mode=FlightMode.STABILIZED,
    )
    return CommandResult(fleet, _event(fleet, EventCategory.SYSTEM, "FLEET DISARMED: MOTORS KILLED"))


def _emergency_stop(fleet: Fleet, command: EmergencyStop, config: SimConfig) -> CommandResult:
    logger.warning("Emergency stop")
    fleet = replace(
        fleet.with_units(_ground_unit(u) for u in fleet.units),
        arming_state=ArmingState.EMERGENCY_STOP,
        global_flight_mode=FlightMode.STABILIZED,
    )
    return CommandResult(fleet, _event(fleet, EventCategory.SYSTEM, "EMERGENCY STOP: ALL MOTORS KILLED"))


def _takeoff(fleet: Fleet, command: Takeoff, config: SimConfig) -> CommandResult:
    altitude = config.default_takeoff_altitude if command.altitude is None else command.altitude
    altitude = max(0.0, altitude)
    logger.info(f"Taking off all units to {altitude}m")
    fleet = replace(
        fleet.with_units(
            replace(
                u,
                flight_mode=FlightMode.TAKEOFF,
                status=UnitStatus.FLYING,
                target=u.position.with_z(altitude),
                mission_path=(),
            )
            for u in fleet.units
        ),
        global_flight_mode=FlightMode.TAKEOFF,
    )
    return CommandResult(fleet, _event(fleet, EventCategory.COMMAND, "EXECUTING GLOBAL TAKEOFF"))


def _land(fleet: Fleet, command: Land, config: SimConfig) -> CommandResult:
    logger.info("Landing all units")
    fleet = replace(
        fleet.with_units(
            replace(
                u,
                flight_mode=FlightMode.LAND,
                target=u.position.with_z(0.0),
                mission_path=(),
            )
            for u in fleet.units
        ),
        global_flight_mode=FlightMode.LAND,
    )
    return CommandResult(fleet, _event(fleet, EventCategory.COMMAND, "EXECUTING GLOBAL LANDING"))


def _set_algorithm(fleet: Fleet, command: SetAlgorithm, config: SimConfig) -> CommandResult:
    logger.info(f"Swarm algorithm: {fleet.algorithm.value} -> {command.algorithm.value}")
    fleet = replace(fleet, algorithm=command.algorithm)
    return CommandResult(
        fleet, _event(fleet, EventCategory.CONFIG, f"SWARM ALGORITHM: {command.algorithm.value}")
    )


def _upload_fleet_mission(
    fleet: Fleet, command: UploadFleetMission, config: SimConfig
) -> CommandResult:
    waypoints = sanitize_waypoints(command.waypoints)
    if not waypoints:
        logger.warning("Ignoring empty fleet mission upload")
        return CommandResult(fleet)

    logger.info(f"Broadcasting mission with {len(waypoints)} waypoints")
    fleet = replace(
        fleet.with_units(_with_mission(u, waypoints, config) for u in fleet.units),
        global_flight_mode=FlightMode.MISSION,
    )
    return CommandResult(
        fleet,
        _event(fleet, EventCategory.MAVLINK, f"BROADCAST MISSION UPLOAD: {len(waypoints)} WAYPOINTS"),
    )


def _upload_unit_mission(
    fleet: Fleet, command: UploadUnitMission, config: SimConfig
) -> CommandResult:
    index = fleet.index_of(command.unit_id)
    if index is None:
        logger.warning(f"Ignoring mission upload for unknown unit {command.unit_id}")
        return CommandResult(fleet)

    waypoints = sanitize_waypoints(command.waypoints)
    if not waypoints:
        logger.warning(f"Ignoring empty mission upload for {command.unit_id}")
        return CommandResult(fleet)

    unit = fleet.units[index]
    logger.info(f"{unit.callsign}: mission with {len(waypoints)} waypoints")
    fleet = fleet.replace_unit(index, _with_mission(unit, waypoints, config))
    return CommandResult(
        fleet,
        _event(
            fleet,
            EventCategory.MAVLINK,
            f"MISSION UPLOAD TO {unit.callsign}: {len(waypoints)} WAYPOINTS",
        ),
    )


def _reposition_fleet(fleet: Fleet, command: RepositionFleet, config: SimConfig) -> CommandResult:
    point = _clamp_point(command.point)
    logger.info(f"Repositioning fleet to ({point.x:.1f}, {point.y:.1f}, {point.z:.1f})")
    fleet = fleet.with_units(replace(u, position=point, target=point) for u in fleet.units)
    return CommandResult(
        fleet,
        _event(fleet, EventCategory.SYSTEM, f"FLEET REDEPLOYED TO {point.x:.1f}, {point.y:.1f}"),
    )


def _reposition_unit(fleet: Fleet, command: RepositionUnit, config: SimConfig) -> CommandResult:
    index = fleet.index_of(command.unit_id)
    if index is None:
        logger.warning(f"Ignoring reposition for unknown unit {command.unit_id}")
        return CommandResult(fleet)

    point = _clamp_point(command.point)
    unit = fleet.units[index]
    fleet = fleet.replace_unit(index, replace(unit, position=point, target=point))
    return CommandResult(
        fleet,
        _event(
            fleet,
            EventCategory.SYSTEM,
            f"{unit.callsign} REDEPLOYED TO {point.x:.1f}, {point.y:.1f}",
        ),
    )


_HANDLERS = {
    Arm: _arm,
    Disarm: _disarm,
    EmergencyStop: _emergency_stop,
    Takeoff: _takeoff,
    Land: _land,
    SetAlgorithm: _set_algorithm,
    UploadFleetMission: _upload_fleet_mission,
    UploadUnitMission: _upload_unit_mission,
    RepositionFleet: _reposition_fleet,
    RepositionUnit: _reposition_unit,
}


def apply_command(fleet: Fleet, command: Command, config: SimConfig) -> CommandResult:
    """Apply one command to a snapshot.

    Args:
        fleet: Snapshot between ticks
        command: Command to apply
        config: Simulation configuration

    Returns:
        CommandResult with the new snapshot and the event, if accepted

    Raises:
        TypeError: If ``command`` is not a known command type.
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unknown command: {command!r}")
    return handler(fleet, command, config)
