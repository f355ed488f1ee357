"""Shared pytest configuration and fixtures for swarm tests.

This module provides:
- Custom markers for test categorization
- Shared fixtures for fleets and configuration
- Helpers for building hand-crafted units
"""

import logging
import os
from dataclasses import replace
from pathlib import Path

import pytest

from aegis.core import (
    ArmingState,
    FleetConfig,
    FlightMode,
    SimConfig,
    SwarmAlgorithm,
    Unit,
    UnitStatus,
    Vector3,
    create_fleet,
)

logger = logging.getLogger(__name__)

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Pure Python tests, no external services")
    config.addinivalue_line("markers", "slow: Tests that simulate long stretches of flight")


@pytest.fixture
def num_units() -> int:
    """Get fleet size from environment."""
    return int(os.environ.get("AEGIS_NUM_UNITS", "5"))


@pytest.fixture
def sim_config() -> SimConfig:
    return SimConfig()


@pytest.fixture
def fleet(num_units):
    """Grounded, disarmed fleet."""
    return create_fleet(FleetConfig(num_units=num_units))


@pytest.fixture
def flying_fleet(fleet):
    """Armed fleet with every unit hovering at 10m in POSITION mode.

    Uses a hold-only algorithm so that targets stay where they are.
    """
    units = tuple(
        make_flying(u, Vector3(u.position.x, u.position.y, 10.0))
        for u in fleet.units
    )
    return replace(
        fleet,
        units=units,
        arming_state=ArmingState.ARMED,
        algorithm=SwarmAlgorithm.AGGREGATE,
    )


def make_flying(unit: Unit, position: Vector3, **changes) -> Unit:
    """Return ``unit`` airborne at ``position`` holding that point."""
    fields = dict(
        status=UnitStatus.FLYING,
        flight_mode=FlightMode.POSITION,
        position=position,
        target=position,
    )
    fields.update(changes)
    return replace(unit, **fields)


@pytest.fixture
def airborne():
    """Factory fixture wrapping make_flying."""
    return make_flying


def pytest_collection_modifyitems(config, items):
    """Auto-add markers based on test location."""
    for item in items:
        if "tests/unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
