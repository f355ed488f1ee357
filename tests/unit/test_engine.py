"""Unit tests for the tick transition.

Covers whole-fleet behavior: invariants that must hold on every tick and
short flight scenarios driven through the command surface.
"""

from dataclasses import replace

import pytest

from aegis.core import (
    ArmingState,
    FleetConfig,
    FlightMode,
    SwarmAlgorithm,
    UnitStatus,
    Vector3,
    create_fleet,
    local_to_geodetic,
)
from aegis.simulation import Arm, Disarm, Takeoff, advance, run, step


class TestStep:
    """Tests for snapshot bookkeeping."""

    def test_advances_clock(self, fleet, sim_config):
        next_fleet = step(fleet, sim_config)

        assert next_fleet.simulation_time == pytest.approx(sim_config.dt)
        assert next_fleet.tick == 1

    def test_input_unchanged(self, flying_fleet, sim_config):
        before = flying_fleet
        step(flying_fleet, sim_config)

        assert flying_fleet == before
        assert flying_fleet.tick == 0

    def test_deterministic(self, flying_fleet, sim_config):
        fleet = replace(flying_fleet, algorithm=SwarmAlgorithm.BTP_ANT_COLONY)
        assert run(fleet, 120, sim_config) == run(fleet, 120, sim_config)

    def test_grounded_fleet_frozen(self, fleet, sim_config):
        next_fleet = run(fleet, 30, sim_config)

        for before, after in zip(fleet, next_fleet):
            assert after.position == before.position
            assert after.velocity == Vector3.zero()
            assert after.status == UnitStatus.STANDBY

    def test_gps_follows_position(self, flying_fleet, sim_config):
        next_fleet = step(flying_fleet, sim_config)

        for unit in next_fleet:
            lat, lon, alt = local_to_geodetic(*unit.position)
            assert unit.sensors.gps.lat == pytest.approx(lat)
            assert unit.sensors.gps.lon == pytest.approx(lon)
            assert unit.sensors.gps.alt == pytest.approx(alt)

    def test_trail_bounded(self, flying_fleet, sim_config):
        fleet = run(flying_fleet, 60, sim_config)
        assert all(len(u.trail) == sim_config.trail_capacity for u in fleet)

    def test_battery_drains_in_flight(self, flying_fleet, sim_config):
        fleet = run(flying_fleet, 60, sim_config)
        assert all(u.battery_percent < 100.0 for u in fleet)

    def test_advance_applies_commands_first(self, fleet, sim_config):
        next_fleet, events = advance(fleet, [Arm(), Takeoff(15.0)], sim_config)

        assert [e.message for e in events] == [
            "FLEET ARMED: MOTORS IDLE",
            "EXECUTING GLOBAL TAKEOFF",
        ]
        assert next_fleet.arming_state == ArmingState.ARMED
        assert all(u.position.z > 0.0 for u in next_fleet)


class TestInvariants:
    """Properties that hold on every tick."""

    @pytest.mark.parametrize("algorithm", [
        SwarmAlgorithm.BTP_ANT_COLONY,
        SwarmAlgorithm.LEADER_FOLLOWER,
        SwarmAlgorithm.AGGREGATE,
    ])
    def test_speed_and_altitude_bounds(self, flying_fleet, sim_config, algorithm):
        fleet = replace(flying_fleet, algorithm=algorithm)

        for _ in range(600):
            previous = fleet
            fleet = step(fleet, sim_config)
            for before, unit in zip(previous, fleet):
                assert unit.battery_percent <= before.battery_percent
                assert unit.speed <= sim_config.max_velocity + 1e-9
                assert unit.position.z >= 0.0
                assert unit.acceleration.magnitude <= sim_config.max_acceleration + 1e-9

    def test_disarm_stops_everything(self, flying_fleet, sim_config):
        fleet = run(flying_fleet, 30, sim_config)
        fleet, _ = advance(fleet, [Disarm()], sim_config)

        for unit in fleet:
            assert unit.status == UnitStatus.STANDBY
            assert unit.velocity == Vector3.zero()

    def test_disarm_twice_same_snapshot(self, flying_fleet, sim_config):
        once, _ = advance(flying_fleet, [Disarm()], sim_config)
        twice, _ = advance(flying_fleet, [Disarm(), Disarm()], sim_config)

        assert once == twice


class TestScenarios:
    """Short flights exercising the state machine end to end."""

    def test_one_waypoint_per_tick(self, flying_fleet, sim_config):
        unit = flying_fleet[0]
        here = unit.position
        above = Vector3(here.x, here.y, here.z + 0.5)
        unit = replace(unit, flight_mode=FlightMode.MISSION, mission_path=(here, above))
        fleet = flying_fleet.replace_unit(0, unit)

        fleet = step(fleet, sim_config)
        assert fleet[0].mission_path == (above,)
        assert fleet[0].flight_mode == FlightMode.MISSION

        fleet = step(fleet, sim_config)
        assert fleet[0].mission_path == ()
        assert fleet[0].flight_mode == FlightMode.POSITION

    def test_landing_at_ground_idempotent(self, flying_fleet, airborne, sim_config):
        unit = airborne(
            flying_fleet[0],
            Vector3(0.0, 0.0, 0.05),
            flight_mode=FlightMode.LAND,
            target=Vector3.zero(),
        )
        fleet = flying_fleet.replace_unit(0, unit)

        fleet = step(fleet, sim_config)
        landed = fleet[0]
        assert landed.status == UnitStatus.STANDBY
        assert landed.flight_mode == FlightMode.STABILIZED
        assert landed.position.z == 0.0

        fleet = step(fleet, sim_config)
        assert fleet[0].status == UnitStatus.STANDBY
        assert fleet[0].position == landed.position
        assert fleet[0].velocity == Vector3.zero()

    def test_close_units_separate(self, flying_fleet, airborne, sim_config):
        a = airborne(flying_fleet[0], Vector3(0.0, 0.0, 10.0))
        b = airborne(flying_fleet[1], Vector3(3.0, 0.0, 10.0))
        fleet = replace(
            flying_fleet.with_units([a, b]),
            algorithm=SwarmAlgorithm.AGGREGATE,
        )

        next_fleet = step(fleet, sim_config)

        assert next_fleet[0].position.distance_to(next_fleet[1].position) > 3.0
        assert next_fleet[0].velocity.x < 0.0
        assert next_fleet[1].velocity.x > 0.0
        assert next_fleet[0].acceleration.x < 0.0 < next_fleet[1].acceleration.x
        for unit in next_fleet:
            assert unit.acceleration.magnitude <= sim_config.max_acceleration + 1e-9

    def test_far_waypoint_drains_at_full_demand(self, airborne, sim_config):
        """Battery draw follows the requested acceleration, not the clamped one."""
        fleet = create_fleet(FleetConfig(num_units=1))
        here = Vector3(0.0, 0.0, 10.0)
        unit = airborne(
            fleet[0],
            here,
            flight_mode=FlightMode.MISSION,
            mission_path=(Vector3(100.0, 0.0, 10.0),),
        )
        fleet = replace(fleet.replace_unit(0, unit), arming_state=ArmingState.ARMED)

        next_fleet = step(fleet, sim_config)

        drained = 100.0 - next_fleet[0].battery_percent
        assert drained == pytest.approx(0.00005 * (0.8 + 0.5 * 200.0), abs=1e-9)
        assert next_fleet[0].acceleration.magnitude == pytest.approx(sim_config.max_acceleration)

    def test_best_unit_elected_at_epoch(self, sim_config):
        """Five flying units; the fittest takes over at t = 5s."""
        fleet = create_fleet(FleetConfig(num_units=5))
        units = []
        for i, unit in enumerate(fleet):
            percentage = 100.0 if i == 3 else 60.0
            unit = unit.with_battery(replace(unit.sensors.battery, percentage=percentage))
            units.append(replace(
                unit,
                status=UnitStatus.FLYING,
                flight_mode=FlightMode.POSITION,
                position=unit.position.with_z(10.0),
                target=unit.position.with_z(10.0),
            ))
        fleet = replace(
            fleet.with_units(units),
            arming_state=ArmingState.ARMED,
            algorithm=SwarmAlgorithm.AGGREGATE,
            simulation_time=5.0,
        )

        next_fleet = step(fleet, sim_config)

        assert next_fleet.leader_id == "uav-3"
        assert next_fleet.last_epoch_time == 5.0

    def test_no_election_before_epoch(self, flying_fleet, sim_config):
        units = list(flying_fleet.units)
        units[2] = replace(units[2], rssi=-30.0)
        fleet = replace(flying_fleet.with_units(units), simulation_time=4.9)

        assert step(fleet, sim_config).leader_id == "uav-0"

    @pytest.mark.slow
    def test_takeoff_converges(self, sim_config):
        fleet = create_fleet(FleetConfig(num_units=1))
        fleet, _ = advance(
            replace(fleet, algorithm=SwarmAlgorithm.AGGREGATE),
            [Arm(), Takeoff(10.0)],
            sim_config,
        )

        fleet = run(fleet, 7200, sim_config)

        unit = fleet[0]
        assert unit.status == UnitStatus.FLYING
        assert unit.flight_mode == FlightMode.POSITION
        assert unit.altitude == pytest.approx(10.0, abs=0.5)
        assert unit.speed < 0.5
