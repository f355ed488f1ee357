"""Simulated aerial unit state.

A Unit is an immutable record; each tick produces a new one with
``dataclasses.replace``.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Tuple

from .geometry import Vector3


class UnitStatus(Enum):
    """Unit lifecycle state."""
    STANDBY = "STANDBY"
    ARMED = "ARMED"
    FLYING = "FLYING"
    RTL = "RTL"
    FAILED = "FAILED"
    LOST = "LOST"


class FlightMode(Enum):
    """Behavioral mode, independent of lifecycle status."""
    MANUAL = "MANUAL"
    STABILIZED = "STABILIZED"
    POSITION = "POSITION"
    MISSION = "MISSION"
    TAKEOFF = "TAKEOFF"
    LAND = "LAND"
    RTL = "RTL"
    HOLD = "HOLD"
    OFFBOARD = "OFFBOARD"


class Squadron(Enum):
    ALPHA = "ALPHA"
    BRAVO = "BRAVO"
    CHARLIE = "CHARLIE"

    @classmethod
    def for_index(cls, index: int) -> "Squadron":
        """Round-robin squadron assignment by roster slot."""
        return (cls.ALPHA, cls.BRAVO, cls.CHARLIE)[index % 3]


@dataclass(frozen=True)
class ImuReading:
    accel: Vector3 = field(default_factory=Vector3.zero)
    gyro: Vector3 = field(default_factory=Vector3.zero)
    drift: float = 0.0


@dataclass(frozen=True)
class LidarReading:
    """Coarse ranging samples."""
    points: Tuple[float, ...] = ()
    max_range: float = 80.0
    noise_floor: float = 0.01


@dataclass(frozen=True)
class GpsFix:
    lat: float = 37.77
    lon: float = -122.42
    alt: float = 0.0
    hdop: float = 0.65
    sats: int = 14
    fix_type: int = 3


@dataclass(frozen=True)
class BatteryState:
    """Battery telemetry.

    Attributes:
        voltage: Pack voltage (V)
        current: Current draw (A)
        percentage: Remaining charge (0-100)
        sag: Voltage sag from the last tick's draw
    """
    voltage: float = 12.6
    current: float = 0.1
    percentage: float = 100.0
    sag: float = 0.0


@dataclass(frozen=True)
class SensorSuite:
    imu: ImuReading = field(default_factory=ImuReading)
    lidar: LidarReading = field(default_factory=LidarReading)
    gps: GpsFix = field(default_factory=GpsFix)
    battery: BatteryState = field(default_factory=BatteryState)


@dataclass(frozen=True)
class Unit:
    """One fleet member.

    Attributes:
        id: Stable identifier ("uav-0")
        callsign: Display name ("UAV-01")
        squadron: Squadron tag
        status: Lifecycle state
        flight_mode: Behavioral state
        position: Current position (meters, z up)
        velocity: Current velocity (m/s)
        acceleration: Acceleration applied on the last tick (m/s^2)
        target: Point the unit is currently steering toward
        mission_path: Remaining waypoints, front is the next target
        sensors: Sensor bundle
        rssi: Link signal strength (dBm)
        score: Last computed fitness in [0, 1]
        latency: Link latency (ms)
        trail: Recent positions for display, oldest first
    """
    id: str
    callsign: str
    squadron: Squadron
    status: UnitStatus = UnitStatus.STANDBY
    flight_mode: FlightMode = FlightMode.STABILIZED
    position: Vector3 = field(default_factory=Vector3.zero)
    velocity: Vector3 = field(default_factory=Vector3.zero)
    acceleration: Vector3 = field(default_factory=Vector3.zero)
    target: Vector3 = field(default_factory=Vector3.zero)
    mission_path: Tuple[Vector3, ...] = ()
    sensors: SensorSuite = field(default_factory=SensorSuite)
    rssi: float = -45.0
    score: float = 1.0
    latency: float = 15.0
    trail: Tuple[Vector3, ...] = ()

    @property
    def altitude(self) -> float:
        return self.position.z

    @property
    def speed(self) -> float:
        return self.velocity.magnitude

    @property
    def battery_percent(self) -> float:
        return self.sensors.battery.percentage

    @property
    def heading(self) -> float:
        """Direction of horizontal travel in radians (0 when stationary)."""
        if self.velocity.horizontal_magnitude < 1e-9:
            return 0.0
        return math.atan2(self.velocity.y, self.velocity.x)

    @property
    def is_flying(self) -> bool:
        return self.status == UnitStatus.FLYING

    def with_battery(self, battery: BatteryState) -> "Unit":
        return replace(self, sensors=replace(self.sensors, battery=battery))
