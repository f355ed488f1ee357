"""Coordination modules for swarm behaviors.

This package provides:
- Fitness scoring and epoch-based leader election with hot-swap
- Per-unit flight-mode state machine
- Formation targets (pheromone chain, leader-follower grid)
- Waypoint mission queues
"""

from .election import (
    compute_score,
    elect_leader,
    is_epoch_due,
    run_election,
    score_units,
)

from .flight_modes import (
    SettledState,
    TickPlan,
    freeze,
    is_frozen,
    plan_tick,
    settle,
)

from .formations import (
    FormationConfig,
    FormationController,
    grid_slots,
)

from .missions import (
    MissionStep,
    advance_mission,
    patrol_route,
    sanitize_waypoints,
)

__all__ = [
    # Election
    "compute_score",
    "elect_leader",
    "is_epoch_due",
    "run_election",
    "score_units",
    # Flight modes
    "SettledState",
    "TickPlan",
    "freeze",
    "is_frozen",
    "plan_tick",
    "settle",
    # Formations
    "FormationConfig",
    "FormationController",
    "grid_slots",
    # Missions
    "MissionStep",
    "advance_mission",
    "patrol_route",
    "sanitize_waypoints",
]
