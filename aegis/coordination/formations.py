"""Formation targets for swarm coordination.

Computes the point each flying unit steers toward from its role (leader
or follower) and the active coordination algorithm.

Available patterns:
- BTP_ANT_COLONY: Leader explores on a parametric orbit, every follower
  trails its roster predecessor at a fixed standoff (pheromone chain)
- LEADER_FOLLOWER: Leader flies the same orbit, followers keep fixed
  grid offsets from the leader
- Anything else: no formation target, units hold their current target
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..core.fleet import SwarmAlgorithm
from ..core.geometry import Vector3
from ..core.unit import Unit

logger = logging.getLogger(__name__)

# Horizontal grid slot: (x, y) in meters relative to the grid centre
GridSlot = Tuple[float, float]


@dataclass(frozen=True)
class FormationConfig:
    """Configuration for formation geometry.

    Attributes:
        orbit_radius: Horizontal radius of the leader's exploration orbit
        orbit_rate_x: Angular rate of the x component (rad/s)
        orbit_rate_y: Angular rate of the y component (rad/s)
        orbit_altitude: Mean leader altitude
        orbit_altitude_amplitude: Altitude swing around the mean
        orbit_rate_z: Angular rate of the altitude swing (rad/s)
        chain_gap: Standoff behind the predecessor in chain formation
        grid_spacing: Distance between adjacent slots in leader-follower
    """
    orbit_radius: float = 35.0
    orbit_rate_x: float = 0.08
    orbit_rate_y: float = 0.1
    orbit_altitude: float = 25.0
    orbit_altitude_amplitude: float = 5.0
    orbit_rate_z: float = 0.15
    chain_gap: float = 6.0
    grid_spacing: float = 6.0


def grid_slots(num_units: int, spacing: float) -> List[GridSlot]:
    """Rectangular grid slots centred on the origin.

    Creates a roughly square grid filled row by row in roster order.
    """
    if num_units <= 0:
        return []

    cols = math.ceil(math.sqrt(num_units))
    rows = math.ceil(num_units / cols)
    x_offset = (cols - 1) * spacing / 2
    y_offset = (rows - 1) * spacing / 2

    slots = []
    for i in range(num_units):
        row, col = divmod(i, cols)
        slots.append((col * spacing - x_offset, y_offset - row * spacing))
    return slots


class FormationController:
    """Calculates formation targets.

    Leader lookups always go through ``leader_id`` and re-resolve it
    against the roster; a dangling id leaves anchored followers holding.

    Example:
        controller = FormationController()
        target = controller.compute_target(
            SwarmAlgorithm.BTP_ANT_COLONY, index=2, units=fleet.units,
            leader_id=fleet.leader_id, sim_time=fleet.simulation_time,
        )
        if target is None:
            target = unit.target  # hold
    """

    def __init__(self, config: Optional[FormationConfig] = None):
        self.config = config or FormationConfig()
        self._strategies: Dict[SwarmAlgorithm, Callable] = {
            SwarmAlgorithm.BTP_ANT_COLONY: self._chain_target,
            SwarmAlgorithm.LEADER_FOLLOWER: self._grid_target,
        }

    def supports(self, algorithm: SwarmAlgorithm) -> bool:
        """Whether ``algorithm`` produces formation targets."""
        return algorithm in self._strategies

    def compute_target(
        self,
        algorithm: SwarmAlgorithm,
        index: int,
        units: Sequence[Unit],
        leader_id: Optional[str],
        sim_time: float,
    ) -> Optional[Vector3]:
        """Calculate the formation target for the unit at ``index``.

        Args:
            algorithm: Active coordination pattern
            index: Roster slot of the unit
            units: Roster at the start of the tick
            leader_id: Current leader id (may dangle)
            sim_time: Simulation time (seconds)

        Returns:
            Target position, or None if the unit should hold its target
        """
        strategy = self._strategies.get(algorithm)
        if strategy is None:
            return None
        return strategy(index, units, leader_id, sim_time)

    def orbit_target(self, sim_time: float) -> Vector3:
        """Leader exploration trajectory at ``sim_time``."""
        cfg = self.config
        return Vector3(
            math.sin(sim_time * cfg.orbit_rate_x) * cfg.orbit_radius,
            math.cos(sim_time * cfg.orbit_rate_y) * cfg.orbit_radius,
            cfg.orbit_altitude + math.sin(sim_time * cfg.orbit_rate_z) * cfg.orbit_altitude_amplitude,
        )

    def standoff_target(self, anchor: Unit) -> Vector3:
        """Point ``chain_gap`` meters behind ``anchor`` along its heading."""
        heading = anchor.heading
        return Vector3(
            anchor.position.x - math.cos(heading) * self.config.chain_gap,
            anchor.position.y - math.sin(heading) * self.config.chain_gap,
            anchor.position.z,
        )

    def _resolve_leader(
        self, units: Sequence[Unit], leader_id: Optional[str]
    ) -> Optional[int]:
        if leader_id is None:
            return None
        for i, unit in enumerate(units):
            if unit.id == leader_id:
                return i
        logger.debug(f"Leader {leader_id} not in roster")
        return None

    def _chain_target(
        self,
        index: int,
        units: Sequence[Unit],
        leader_id: Optional[str],
        sim_time: float,
    ) -> Optional[Vector3]:
        leader_index = self._resolve_leader(units, leader_id)
        if index == leader_index:
            return self.orbit_target(sim_time)

        if index > 0:
            anchor = units[index - 1]
        elif leader_index is not None:
            anchor = units[leader_index]
        else:
            return None  # unled

        return self.standoff_target(anchor)

    def _grid_target(
        self,
        index: int,
        units: Sequence[Unit],
        leader_id: Optional[str],
        sim_time: float,
    ) -> Optional[Vector3]:
        leader_index = self._resolve_leader(units, leader_id)
        if leader_index is None:
            return None
        if index == leader_index:
            return self.orbit_target(sim_time)

        slots = grid_slots(len(units), self.config.grid_spacing)
        leader = units[leader_index]
        dx = slots[index][0] - slots[leader_index][0]
        dy = slots[index][1] - slots[leader_index][1]
        return Vector3(leader.position.x + dx, leader.position.y + dy, leader.position.z)
