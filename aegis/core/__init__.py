"""Core swarm components."""

from .config import DEFAULT_SIM_CONFIG, FleetConfig, SimConfig
from .fleet import (
    ArmingState,
    Environment,
    Fleet,
    FleetStatus,
    SwarmAlgorithm,
    create_fleet,
    create_unit,
)
from .geometry import Vector3, clamp_magnitude, local_to_geodetic
from .unit import (
    BatteryState,
    FlightMode,
    GpsFix,
    ImuReading,
    LidarReading,
    SensorSuite,
    Squadron,
    Unit,
    UnitStatus,
)

__all__ = [
    # Config
    "SimConfig",
    "FleetConfig",
    "DEFAULT_SIM_CONFIG",
    # Fleet
    "ArmingState",
    "Environment",
    "Fleet",
    "FleetStatus",
    "SwarmAlgorithm",
    "create_fleet",
    "create_unit",
    # Geometry
    "Vector3",
    "clamp_magnitude",
    "local_to_geodetic",
    # Units
    "BatteryState",
    "FlightMode",
    "GpsFix",
    "ImuReading",
    "LidarReading",
    "SensorSuite",
    "Squadron",
    "Unit",
    "UnitStatus",
]
