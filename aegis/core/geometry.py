"""Vector and coordinate utilities.

Positions are in a local ENU-style frame: x east, y north, z up (meters).
"""

import math
from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np

# Station origin used to project local meters onto the map
ORIGIN_LAT = 37.7893
ORIGIN_LON = -122.4012
METERS_PER_DEGREE_LAT = 111111.0
METERS_PER_DEGREE_LON = METERS_PER_DEGREE_LAT * math.cos(math.radians(ORIGIN_LAT))


@dataclass(frozen=True)
class Vector3:
    """Immutable 3D vector.

    Attributes:
        x: East component (meters)
        y: North component (meters)
        z: Up component (meters)
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def zero(cls) -> "Vector3":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "Vector3":
        """Build from a length-3 numpy array."""
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    @classmethod
    def of(cls, point) -> "Vector3":
        """Coerce a Vector3 or an (x, y, z) sequence."""
        if isinstance(point, Vector3):
            return point
        x, y, z = point
        return cls(float(x), float(y), float(z))

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    @property
    def horizontal_magnitude(self) -> float:
        """Magnitude ignoring the vertical component."""
        return math.hypot(self.x, self.y)

    def distance_to(self, other: "Vector3") -> float:
        return math.sqrt(
            (self.x - other.x) ** 2 +
            (self.y - other.y) ** 2 +
            (self.z - other.z) ** 2
        )

    def with_z(self, z: float) -> "Vector3":
        return Vector3(self.x, self.y, z)

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))


def clamp_magnitude(vec: np.ndarray, limit: float) -> np.ndarray:
    """Scale ``vec`` down so its norm does not exceed ``limit``.

    Zero-length vectors are returned unchanged.
    """
    norm = float(np.linalg.norm(vec))
    if norm > limit and norm > 0.0:
        return vec * (limit / norm)
    return vec


def local_to_geodetic(x: float, y: float, alt: float) -> Tuple[float, float, float]:
    """Project local meters onto (latitude, longitude, altitude).

    Args:
        x: East offset from the station origin (meters)
        y: North offset from the station origin (meters)
        alt: Altitude above ground (meters)

    Returns:
        Tuple of (latitude, longitude, altitude)
    """
    return (
        ORIGIN_LAT + y / METERS_PER_DEGREE_LAT,
        ORIGIN_LON + x / METERS_PER_DEGREE_LON,
        alt,
    )
