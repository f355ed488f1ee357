"""Fitness scoring and threshold-consensus leader election.

Scores are recomputed every tick for display. The election itself only
runs once per epoch so that momentary score noise does not make the
leader thrash. When the current leader is out-scored (or no longer
flying) the best flying unit is promoted in place: a hot-swap.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from ..core.config import SimConfig
from ..core.fleet import ArmingState, Fleet
from ..core.unit import Unit, UnitStatus

logger = logging.getLogger(__name__)


def compute_score(unit: Unit, config: SimConfig) -> float:
    """Weighted fitness of a unit in [0, 1].

    score = w_b * battery + w_s * signal + w_v * stability, where signal
    maps rssi linearly from the floor (0) to floor + span (1) and stability
    falls from 1 at rest to 0 at max velocity.
    """
    battery = min(1.0, max(0.0, unit.battery_percent / 100.0))
    signal = min(1.0, max(0.0, (unit.rssi - config.rssi_floor) / config.rssi_span))
    stability = max(0.0, 1.0 - unit.speed / config.max_velocity)

    return (
        config.battery_weight * battery +
        config.signal_weight * signal +
        config.stability_weight * stability
    )


def score_units(units: Sequence[Unit], config: SimConfig) -> Tuple[Unit, ...]:
    """Return copies of ``units`` with refreshed scores."""
    return tuple(replace(u, score=compute_score(u, config)) for u in units)


def is_epoch_due(fleet: Fleet, config: SimConfig) -> bool:
    """Check whether an election should run on this tick.

    Fires whenever at least one election period has elapsed since the last
    election and the fleet is armed. The check happens once per tick, so
    elections are "at least every period", not exactly periodic.
    """
    if fleet.arming_state != ArmingState.ARMED:
        return False
    return fleet.simulation_time - fleet.last_epoch_time >= config.election_period


def elect_leader(
    units: Sequence[Unit],
    current_leader_id: Optional[str],
) -> Optional[str]:
    """Pick the leader among flying units.

    The best candidate is the first unit in roster order with the maximum
    score. It replaces the current leader when the current leader is not
    a flying candidate or when it scores strictly higher. Ties with the
    current leader keep the current leader.

    Args:
        units: Roster with up-to-date scores
        current_leader_id: Id of the current leader (may dangle)

    Returns:
        Id of the leader after the election. Unchanged if nobody is flying.
    """
    candidates = [u for u in units if u.status == UnitStatus.FLYING]
    if not candidates:
        return current_leader_id

    best = candidates[0]
    for unit in candidates[1:]:
        if unit.score > best.score:
            best = unit

    if best.id == current_leader_id:
        return current_leader_id

    incumbent = next((u for u in candidates if u.id == current_leader_id), None)
    if incumbent is not None and best.score <= incumbent.score:
        return current_leader_id

    return best.id


def run_election(
    fleet: Fleet,
    scored_units: Sequence[Unit],
    config: SimConfig,
) -> Tuple[Optional[str], float]:
    """Run the election step of a tick.

    Args:
        fleet: Snapshot at the start of the tick
        scored_units: Roster with this tick's scores
        config: Simulation configuration

    Returns:
        Tuple of (leader_id, last_epoch_time) for the next snapshot.
    """
    if not is_epoch_due(fleet, config):
        return fleet.leader_id, fleet.last_epoch_time

    leader_id = elect_leader(scored_units, fleet.leader_id)
    if leader_id != fleet.leader_id:
        logger.info(
            f"Leader hot-swap at t={fleet.simulation_time:.2f}s: "
            f"{fleet.leader_id} -> {leader_id}"
        )
    else:
        logger.debug(f"Election at t={fleet.simulation_time:.2f}s kept {leader_id}")

    return leader_id, fleet.simulation_time
