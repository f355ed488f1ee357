"""Per-unit flight-mode state machine.

Two orthogonal axes per unit: lifecycle status (UnitStatus) and
behavioral mode (FlightMode). Each tick a unit goes through:

1. Frozen check: STANDBY units, and ARMED units still on the ground, are
   held with zero velocity and acceleration and skip everything else.
2. Mission: in MISSION mode with waypoints queued the front waypoint is
   the target; it is popped on arrival and an emptied queue drops the
   unit into POSITION.
3. Formation: FLYING units not taking off or landing get their target
   from the formation controller.
4. Settle (after physics): LAND completes on touchdown, TAKEOFF completes
   at the target altitude.
"""

import logging
from dataclasses import dataclass, replace
from typing import Tuple

from ..core.config import SimConfig
from ..core.geometry import Vector3
from ..core.unit import FlightMode, Unit, UnitStatus
from .missions import advance_mission

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickPlan:
    """Behavioral intent of a unit for one tick.

    Attributes:
        target: Target before any formation override
        flight_mode: Mode after mission handling
        mission_path: Queue after mission handling
        needs_formation: Whether the formation controller sets the target
    """
    target: Vector3
    flight_mode: FlightMode
    mission_path: Tuple[Vector3, ...]
    needs_formation: bool


@dataclass(frozen=True)
class SettledState:
    """Unit state after post-integration transitions."""
    status: UnitStatus
    flight_mode: FlightMode
    mission_path: Tuple[Vector3, ...]
    position: Vector3
    velocity: Vector3


def is_frozen(unit: Unit, config: SimConfig) -> bool:
    """Check whether the unit is held on the ground this tick."""
    if unit.status == UnitStatus.STANDBY:
        return True
    return unit.status == UnitStatus.ARMED and unit.altitude < config.ground_threshold


def freeze(unit: Unit) -> Unit:
    """Zero the unit's motion, leaving everything else untouched."""
    return replace(unit, velocity=Vector3.zero(), acceleration=Vector3.zero())


def plan_tick(unit: Unit, config: SimConfig) -> TickPlan:
    """Decide the unit's intent for this tick (rules 2 and 3).

    Args:
        unit: Unit at the start of the tick, not frozen
        config: Simulation configuration

    Returns:
        TickPlan describing target, mode and queue
    """
    if unit.flight_mode == FlightMode.MISSION and unit.mission_path:
        step = advance_mission(unit.position, unit.mission_path, config.waypoint_tolerance)
        mode = FlightMode.POSITION if step.is_complete else FlightMode.MISSION
        if step.is_complete:
            logger.debug(f"{unit.callsign}: mission complete, holding position")
        return TickPlan(
            target=step.target,
            flight_mode=mode,
            mission_path=step.remaining,
            needs_formation=False,
        )

    needs_formation = (
        unit.status == UnitStatus.FLYING and
        unit.flight_mode not in (FlightMode.TAKEOFF, FlightMode.LAND)
    )
    return TickPlan(
        target=unit.target,
        flight_mode=unit.flight_mode,
        mission_path=unit.mission_path,
        needs_formation=needs_formation,
    )


def settle(
    status: UnitStatus,
    plan: TickPlan,
    target: Vector3,
    position: Vector3,
    velocity: Vector3,
    config: SimConfig,
    callsign: str = "",
) -> SettledState:
    """Apply post-integration transitions (rule 4).

    Args:
        status: Lifecycle status at the start of the tick
        plan: Intent computed by plan_tick
        target: Target actually steered toward this tick
        position: Position after integration
        velocity: Velocity after integration
        config: Simulation configuration
        callsign: Used for log messages only

    Returns:
        SettledState with final status, mode, queue and kinematics
    """
    mode = plan.flight_mode

    if mode == FlightMode.LAND and position.z < config.ground_threshold:
        logger.debug(f"{callsign}: touchdown")
        return SettledState(
            status=UnitStatus.STANDBY,
            flight_mode=FlightMode.STABILIZED,
            mission_path=(),
            position=position.with_z(0.0),
            velocity=Vector3.zero(),
        )

    if mode == FlightMode.TAKEOFF and abs(position.z - target.z) < config.takeoff_tolerance:
        logger.debug(f"{callsign}: takeoff complete at {position.z:.1f}m")
        mode = FlightMode.POSITION

    return SettledState(
        status=status,
        flight_mode=mode,
        mission_path=plan.mission_path,
        position=position,
        velocity=velocity,
    )
