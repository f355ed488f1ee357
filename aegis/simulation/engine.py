"""Pure tick transition for the swarm simulation.

``step`` maps one Fleet snapshot to the next. It never mutates its input,
reads neighbours only from the previous snapshot, and uses the simulation
clock rather than wall time, so a run is reproducible tick for tick.
"""

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple

from ..coordination.election import run_election, score_units
from ..coordination.flight_modes import freeze, is_frozen, plan_tick, settle
from ..coordination.formations import FormationController
from ..core.config import DEFAULT_SIM_CONFIG, SimConfig
from ..core.fleet import Fleet
from ..core.geometry import local_to_geodetic
from ..core.unit import Unit, UnitStatus
from .commands import Command, apply_command
from .events import SwarmEvent
from .physics import drain_battery, integrate, record_trail

logger = logging.getLogger(__name__)

_DEFAULT_FORMATION = FormationController()


def _step_unit(
    index: int,
    unit: Unit,
    scored: Sequence[Unit],
    leader_id: Optional[str],
    fleet: Fleet,
    config: SimConfig,
    formation: FormationController,
) -> Unit:
    if is_frozen(unit, config):
        return freeze(unit)

    plan = plan_tick(unit, config)
    target = plan.target
    if plan.needs_formation:
        formation_target = formation.compute_target(
            fleet.algorithm, index, scored, leader_id, fleet.simulation_time
        )
        if formation_target is not None:
            target = formation_target

    result = integrate(unit, target, scored, config, config.dt)
    settled = settle(
        unit.status, plan, target, result.position, result.velocity, config,
        callsign=unit.callsign,
    )

    battery = drain_battery(
        unit.sensors.battery, settled.status, result.demand_magnitude, config
    )
    trail = unit.trail
    if settled.status == UnitStatus.FLYING:
        trail = record_trail(trail, settled.position, config.trail_capacity)

    lat, lon, alt = local_to_geodetic(*settled.position)
    gps = replace(unit.sensors.gps, lat=lat, lon=lon, alt=alt)

    return replace(
        unit,
        status=settled.status,
        flight_mode=settled.flight_mode,
        position=settled.position,
        velocity=settled.velocity,
        acceleration=result.acceleration,
        target=target,
        mission_path=settled.mission_path,
        trail=trail,
        sensors=replace(unit.sensors, battery=battery, gps=gps),
    )


def step(
    fleet: Fleet,
    config: Optional[SimConfig] = None,
    formation: Optional[FormationController] = None,
) -> Fleet:
    """Advance the simulation by one fixed step.

    Order within a tick: rescore every unit, run the election if an epoch
    is due, then per unit apply the flight-mode rules, formation targets,
    physics and battery/trail bookkeeping.

    Args:
        fleet: Snapshot at the start of the tick
        config: Simulation configuration (defaults if None)
        formation: Formation controller (defaults if None)

    Returns:
        New snapshot, simulation time advanced by ``config.dt``
    """
    config = config or DEFAULT_SIM_CONFIG
    formation = formation or _DEFAULT_FORMATION

    scored = score_units(fleet.units, config)
    leader_id, last_epoch_time = run_election(fleet, scored, config)

    units = tuple(
        _step_unit(i, unit, scored, leader_id, fleet, config, formation)
        for i, unit in enumerate(scored)
    )

    return replace(
        fleet,
        units=units,
        leader_id=leader_id,
        last_epoch_time=last_epoch_time,
        simulation_time=fleet.simulation_time + config.dt,
        tick=fleet.tick + 1,
    )


def advance(
    fleet: Fleet,
    commands: Iterable[Command] = (),
    config: Optional[SimConfig] = None,
    formation: Optional[FormationController] = None,
) -> Tuple[Fleet, List[SwarmEvent]]:
    """Apply pending commands, then run one tick.

    Args:
        fleet: Snapshot between ticks
        commands: Commands to apply in order
        config: Simulation configuration (defaults if None)
        formation: Formation controller (defaults if None)

    Returns:
        Tuple of (new snapshot, events for accepted commands)
    """
    config = config or DEFAULT_SIM_CONFIG
    events = []
    for command in commands:
        result = apply_command(fleet, command, config)
        fleet = result.fleet
        if result.event is not None:
            events.append(result.event)

    return step(fleet, config, formation), events


def run(
    fleet: Fleet,
    ticks: int,
    config: Optional[SimConfig] = None,
    formation: Optional[FormationController] = None,
) -> Fleet:
    """Run ``ticks`` steps without commands."""
    for _ in range(ticks):
        fleet = step(fleet, config, formation)
    return fleet
