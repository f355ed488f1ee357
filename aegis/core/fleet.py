"""Fleet snapshot for the swarm simulation.

A Fleet is an immutable value: the roster of units plus shared arming,
mode, algorithm and environment state. Every tick replaces it wholesale,
so observers may read a snapshot while the next one is computed.

Example:
    from aegis.core import FleetConfig, create_fleet
    from aegis.simulation import step

    fleet = create_fleet(FleetConfig(num_units=4))
    fleet = step(fleet)
    print(fleet.get_status())
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, Optional, Tuple

from .config import FleetConfig
from .geometry import Vector3
from .unit import FlightMode, Squadron, Unit, UnitStatus

logger = logging.getLogger(__name__)


class ArmingState(Enum):
    """Fleet-wide arming state."""
    DISARMED = "DISARMED"
    ARMING = "ARMING..."
    ARMED = "ARMED"
    EMERGENCY_STOP = "E-STOP"


class SwarmAlgorithm(Enum):
    """Coordination pattern selectors."""
    LEADER_FOLLOWER = "LEADER_FOLLOWER"
    BOIDS_FLOCKING = "BOIDS_FLOCKING"
    GRID_SEARCH = "GRID_SEARCH"
    ORBIT_TARGET = "ORBIT_TARGET"
    AGGREGATE = "AGGREGATE"
    THRESHOLD_CONSENSUS = "THRESHOLD_CONSENSUS"
    BTP_ANT_COLONY = "BTP_ANT_COLONY"


@dataclass(frozen=True)
class Environment:
    """Read-only environmental inputs.

    Attributes:
        wind: Horizontal wind vector (m/s)
        wind_speed: Wind speed (m/s)
        rain: Rain intensity (0-1)
        interference: RF interference level (0-1)
    """
    wind: Tuple[float, float] = (0.5, 0.2)
    wind_speed: float = 1.0
    rain: float = 0.0
    interference: float = 0.05


@dataclass(frozen=True)
class FleetStatus:
    """Status summary of the fleet."""

    total: int
    armed: int
    flying: int
    grounded: int
    leader_id: Optional[str] = None

    @property
    def all_flying(self) -> bool:
        return self.flying == self.total

    @property
    def all_grounded(self) -> bool:
        return self.grounded == self.total


@dataclass(frozen=True)
class Fleet:
    """Immutable snapshot of the whole swarm.

    Roster order is significant: the unit at index i follows the unit at
    index i-1 in chain formations, and the first unit follows the leader.

    Attributes:
        units: Ordered roster
        leader_id: Id of the elected leader. Held by id only and
            re-resolved on every read, so it may dangle.
        link_active: Whether the ground link is up
        simulation_time: Simulation clock (seconds)
        last_epoch_time: Simulation time of the last election
        tick: Number of ticks computed so far
        arming_state: Fleet-wide arming state
        global_flight_mode: Last fleet-wide mode requested
        algorithm: Active coordination pattern
        environment: Environmental inputs
    """
    units: Tuple[Unit, ...]
    leader_id: Optional[str] = None
    link_active: bool = True
    simulation_time: float = 0.0
    last_epoch_time: float = 0.0
    tick: int = 0
    arming_state: ArmingState = ArmingState.DISARMED
    global_flight_mode: FlightMode = FlightMode.STABILIZED
    algorithm: SwarmAlgorithm = SwarmAlgorithm.BTP_ANT_COLONY
    environment: Environment = field(default_factory=Environment)

    def index_of(self, unit_id: Optional[str]) -> Optional[int]:
        """Roster slot of ``unit_id``, or None if absent."""
        if unit_id is None:
            return None
        for i, unit in enumerate(self.units):
            if unit.id == unit_id:
                return i
        return None

    def get_unit(self, unit_id: Optional[str]) -> Optional[Unit]:
        index = self.index_of(unit_id)
        return None if index is None else self.units[index]

    @property
    def leader(self) -> Optional[Unit]:
        """Current leader, or None if leader_id does not resolve."""
        return self.get_unit(self.leader_id)

    def is_leader(self, unit_id: str) -> bool:
        return unit_id == self.leader_id

    @property
    def is_armed(self) -> bool:
        return self.arming_state == ArmingState.ARMED

    def flying_units(self) -> list[Unit]:
        return [u for u in self.units if u.status == UnitStatus.FLYING]

    def with_units(self, units) -> "Fleet":
        return replace(self, units=tuple(units))

    def replace_unit(self, index: int, unit: Unit) -> "Fleet":
        """Return a new snapshot with the unit at ``index`` swapped out."""
        units = list(self.units)
        units[index] = unit
        return replace(self, units=tuple(units))

    def get_status(self) -> FleetStatus:
        """Get current fleet status summary."""
        armed = sum(1 for u in self.units if u.status == UnitStatus.ARMED)
        flying = sum(1 for u in self.units if u.status == UnitStatus.FLYING)
        grounded = sum(1 for u in self.units if u.altitude <= 0.0)
        return FleetStatus(
            total=len(self.units),
            armed=armed,
            flying=flying,
            grounded=grounded,
            leader_id=self.leader_id,
        )

    # Container protocol support

    def __len__(self) -> int:
        return len(self.units)

    def __getitem__(self, index: int) -> Unit:
        return self.units[index]

    def __iter__(self) -> Iterator[Unit]:
        return iter(self.units)


def create_unit(config: FleetConfig, index: int) -> Unit:
    """Create the grounded unit for roster slot ``index``."""
    spawn = Vector3.of(config.get_spawn_position(index))
    return Unit(
        id=config.get_unit_id(index),
        callsign=config.get_callsign(index),
        squadron=Squadron.for_index(index),
        position=spawn,
        target=spawn,
        rssi=config.initial_rssi,
        latency=config.base_latency_ms,
    )


def create_fleet(
    config: Optional[FleetConfig] = None,
    environment: Optional[Environment] = None,
) -> Fleet:
    """Create the initial fleet snapshot.

    All units start grounded in STANDBY/STABILIZED on the spawn grid and
    the first unit is the initial leader.

    Args:
        config: Fleet configuration. Uses defaults if not provided.
        environment: Environmental inputs. Uses defaults if not provided.

    Returns:
        Fleet snapshot at simulation time 0.
    """
    config = config or FleetConfig()
    logger.info(f"Creating fleet with {config.num_units} units")

    units = tuple(create_unit(config, i) for i in range(config.num_units))
    return Fleet(
        units=units,
        leader_id=units[0].id,
        environment=environment or Environment(),
    )
