"""Unit tests for formation targets.

Run with: python scripts/run_tests.py --unit
"""

import math
from dataclasses import replace

import pytest

from aegis.coordination import FormationConfig, FormationController, grid_slots
from aegis.core import SwarmAlgorithm, Vector3


@pytest.fixture
def controller():
    return FormationController()


def place(fleet, index, position, velocity=None):
    """Return the roster with unit ``index`` moved."""
    unit = replace(fleet[index], position=position, velocity=velocity or Vector3.zero())
    return fleet.replace_unit(index, unit).units


class TestOrbit:
    """Tests for the leader exploration trajectory."""

    def test_orbit_at_zero(self, controller):
        assert controller.orbit_target(0.0) == Vector3(0.0, 35.0, 25.0)

    def test_orbit_shape(self, controller):
        t = 12.0
        target = controller.orbit_target(t)

        assert target.x == pytest.approx(math.sin(0.08 * t) * 35.0)
        assert target.y == pytest.approx(math.cos(0.1 * t) * 35.0)
        assert target.z == pytest.approx(25.0 + 5.0 * math.sin(0.15 * t))

    def test_orbit_altitude_band(self, controller):
        for t in range(0, 200, 7):
            assert 20.0 <= controller.orbit_target(float(t)).z <= 30.0

    def test_custom_radius(self):
        controller = FormationController(FormationConfig(orbit_radius=10.0))
        assert controller.orbit_target(0.0).y == pytest.approx(10.0)


class TestChain:
    """Tests for the pheromone chain."""

    def test_leader_orbits(self, controller, flying_fleet):
        target = controller.compute_target(
            SwarmAlgorithm.BTP_ANT_COLONY, 0, flying_fleet.units, "uav-0", 4.0
        )
        assert target == controller.orbit_target(4.0)

    def test_follower_trails_predecessor(self, controller, flying_fleet):
        units = place(
            flying_fleet, 1, Vector3(10.0, 0.0, 5.0), velocity=Vector3(1.0, 0.0, 0.0)
        )
        target = controller.compute_target(
            SwarmAlgorithm.BTP_ANT_COLONY, 2, units, "uav-0", 0.0
        )

        assert target.x == pytest.approx(4.0)
        assert target.y == pytest.approx(0.0)
        assert target.z == pytest.approx(5.0)

    def test_standoff_along_heading(self, controller, flying_fleet):
        units = place(
            flying_fleet, 0, Vector3(0.0, 0.0, 10.0), velocity=Vector3(0.0, 2.0, 0.0)
        )
        target = controller.compute_target(
            SwarmAlgorithm.BTP_ANT_COLONY, 1, units, "uav-3", 0.0
        )

        assert target.x == pytest.approx(0.0, abs=1e-9)
        assert target.y == pytest.approx(-6.0)

    def test_stationary_anchor_uses_zero_heading(self, controller, flying_fleet):
        units = place(flying_fleet, 0, Vector3(0.0, 0.0, 10.0))
        target = controller.compute_target(
            SwarmAlgorithm.BTP_ANT_COLONY, 1, units, "uav-3", 0.0
        )

        assert target == Vector3(-6.0, 0.0, 10.0)

    def test_first_unit_follows_leader(self, controller, flying_fleet):
        units = place(flying_fleet, 2, Vector3(20.0, 20.0, 15.0))
        target = controller.compute_target(
            SwarmAlgorithm.BTP_ANT_COLONY, 0, units, "uav-2", 0.0
        )

        assert target == Vector3(14.0, 20.0, 15.0)

    def test_unled_first_unit_holds(self, controller, flying_fleet):
        """A dangling leader id leaves the head of the chain without a target."""
        target = controller.compute_target(
            SwarmAlgorithm.BTP_ANT_COLONY, 0, flying_fleet.units, "ghost", 0.0
        )
        assert target is None

    def test_unled_rest_of_chain_follows(self, controller, flying_fleet):
        target = controller.compute_target(
            SwarmAlgorithm.BTP_ANT_COLONY, 1, flying_fleet.units, "ghost", 0.0
        )
        assert target is not None


class TestLeaderFollowerGrid:
    """Tests for fixed grid offsets from the leader."""

    def test_grid_slots_square(self):
        slots = grid_slots(4, 6.0)
        assert slots == [(-3.0, 3.0), (3.0, 3.0), (-3.0, -3.0), (3.0, -3.0)]

    def test_grid_slots_empty(self):
        assert grid_slots(0, 6.0) == []

    def test_grid_slots_spacing(self):
        slots = grid_slots(9, 5.0)
        assert len(slots) == 9
        assert slots[1][0] - slots[0][0] == pytest.approx(5.0)

    def test_follower_offset(self, controller, flying_fleet):
        units = place(flying_fleet, 0, Vector3(100.0, 50.0, 20.0))
        slots = grid_slots(len(units), 6.0)

        target = controller.compute_target(
            SwarmAlgorithm.LEADER_FOLLOWER, 1, units, "uav-0", 0.0
        )

        assert target.x == pytest.approx(100.0 + slots[1][0] - slots[0][0])
        assert target.y == pytest.approx(50.0 + slots[1][1] - slots[0][1])
        assert target.z == pytest.approx(20.0)

    def test_leader_orbits(self, controller, flying_fleet):
        target = controller.compute_target(
            SwarmAlgorithm.LEADER_FOLLOWER, 0, flying_fleet.units, "uav-0", 3.0
        )
        assert target == controller.orbit_target(3.0)

    def test_no_leader_holds(self, controller, flying_fleet):
        target = controller.compute_target(
            SwarmAlgorithm.LEADER_FOLLOWER, 1, flying_fleet.units, None, 0.0
        )
        assert target is None


class TestHoldAlgorithms:
    """Algorithms without a formation leave targets alone."""

    @pytest.mark.parametrize("algorithm", [
        SwarmAlgorithm.BOIDS_FLOCKING,
        SwarmAlgorithm.GRID_SEARCH,
        SwarmAlgorithm.ORBIT_TARGET,
        SwarmAlgorithm.AGGREGATE,
        SwarmAlgorithm.THRESHOLD_CONSENSUS,
    ])
    def test_hold(self, controller, flying_fleet, algorithm):
        assert not controller.supports(algorithm)
        assert controller.compute_target(
            algorithm, 1, flying_fleet.units, "uav-0", 0.0
        ) is None

    def test_supported(self, controller):
        assert controller.supports(SwarmAlgorithm.BTP_ANT_COLONY)
        assert controller.supports(SwarmAlgorithm.LEADER_FOLLOWER)
