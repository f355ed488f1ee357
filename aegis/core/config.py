"""Configuration management for the swarm simulation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SimConfig:
    """Tuning constants for the tick transition.

    Defaults give the stock 60 Hz ground-station behavior. All
    distances are meters, times seconds, rates Hz.
    """

    # Scheduling
    tick_rate_hz: float = 60.0

    # Kinematic limits
    max_velocity: float = 10.0  # m/s
    max_acceleration: float = 4.0  # m/s^2
    drag_coeff_linear: float = 0.15
    attraction_gain: float = 2.0

    # Separation (collision avoidance)
    separation_radius: float = 5.0
    separation_min_distance: float = 0.1  # closer than this contributes nothing
    separation_gain: float = 10.0
    separation_min_altitude: float = 1.0  # only airborne units repel

    # Battery model
    battery_drain_base: float = 0.00005  # percent per unit draw per tick
    flying_base_draw: float = 0.8
    flying_accel_draw: float = 0.5
    armed_draw: float = 0.1
    sag_per_draw: float = 0.1

    # Leader election
    election_period: float = 5.0  # T_PERIOD_SEC
    battery_weight: float = 0.5
    signal_weight: float = 0.3
    stability_weight: float = 0.2
    rssi_floor: float = -95.0  # dBm mapped to signal 0
    rssi_span: float = 65.0  # dBm above the floor mapped to signal 1

    # Flight modes
    default_takeoff_altitude: float = 10.0
    ground_threshold: float = 0.1  # below this a unit counts as grounded
    waypoint_tolerance: float = 2.5
    takeoff_tolerance: float = 0.5
    airborne_threshold: float = 1.0  # mission upload promotes units above this

    # Display trail
    trail_capacity: int = 50

    def __post_init__(self):
        if self.tick_rate_hz <= 0:
            raise ValueError(f"tick_rate_hz must be positive, got {self.tick_rate_hz}")
        if self.max_velocity <= 0 or self.max_acceleration <= 0:
            raise ValueError("Kinematic limits must be positive")
        if self.trail_capacity < 0:
            raise ValueError(f"trail_capacity must be >= 0, got {self.trail_capacity}")

    @property
    def dt(self) -> float:
        """Fixed simulation step in seconds."""
        return 1.0 / self.tick_rate_hz


@dataclass(frozen=True)
class FleetConfig:
    """Configuration for the simulated roster.

    Units are laid out on a grid centred near the origin:
    x = (index % grid_columns) * grid_spacing - grid_offset,
    y = (index // grid_columns) * grid_spacing - grid_offset.
    """

    num_units: int = 12
    grid_columns: int = 4
    grid_spacing: float = 5.0  # meters between units at spawn
    grid_offset: float = 7.5
    id_prefix: str = "uav"
    callsign_prefix: str = "UAV"

    # Initial radio/link model
    initial_rssi: float = -45.0  # dBm
    base_latency_ms: float = 15.0

    def __post_init__(self):
        if self.num_units <= 0:
            raise ValueError(f"num_units must be positive, got {self.num_units}")
        if self.grid_columns <= 0:
            raise ValueError(f"grid_columns must be positive, got {self.grid_columns}")

    def get_unit_id(self, index: int) -> str:
        """Stable identifier for the unit in roster slot ``index``."""
        return f"{self.id_prefix}-{index}"

    def get_callsign(self, index: int) -> str:
        """Display callsign, 1-based and zero padded (UAV-01, UAV-02, ...)."""
        return f"{self.callsign_prefix}-{index + 1:02d}"

    def get_spawn_position(self, index: int) -> tuple[float, float, float]:
        """Get spawn position for a unit.

        Args:
            index: Roster slot (0-indexed).

        Returns:
            Tuple of (x, y, z) coordinates in meters.
        """
        x = (index % self.grid_columns) * self.grid_spacing - self.grid_offset
        y = (index // self.grid_columns) * self.grid_spacing - self.grid_offset
        return (x, y, 0.0)

    def get_all_spawn_positions(self) -> list[tuple[float, float, float]]:
        """Get spawn positions for all units."""
        return [self.get_spawn_position(i) for i in range(self.num_units)]


DEFAULT_SIM_CONFIG = SimConfig()
