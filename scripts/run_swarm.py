#!/usr/bin/env python3
"""
Headless swarm flight using the simulation engine.

Runs a scripted sortie through the command surface and prints a
telemetry line once per simulated second.

Phases:
    1. Arm the fleet
    2. Take off to the requested altitude
    3. Fly the selected coordination algorithm
    4. Fly a patrol mission
    5. Land and disarm

Usage:
    # Default: 12 units, pheromone chain, as fast as possible
    python scripts/run_swarm.py

    # Real-time pacing, leader-follower grid, 6 units
    python scripts/run_swarm.py --num-units 6 --algorithm LEADER_FOLLOWER --realtime

Arguments:
    --num-units       Fleet size (default: $AEGIS_NUM_UNITS or 12)
    --altitude        Takeoff altitude in meters (default: 10.0)
    --algorithm       Coordination algorithm (default: BTP_ANT_COLONY)
    --formation-time  Seconds to fly the formation (default: 30.0)
    --mission-time    Seconds to fly the patrol mission (default: 60.0)
    --realtime        Pace ticks at the configured rate
    --log-level       Logging level (default: INFO)
"""

import argparse
import logging
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from aegis.advisory import OfflineAdvisor
from aegis.coordination import patrol_route
from aegis.core import FleetConfig, SimConfig, SwarmAlgorithm, create_fleet
from aegis.simulation import (
    Arm,
    Disarm,
    EventLog,
    HardwareBridge,
    Land,
    LoggingEventSink,
    SetAlgorithm,
    Takeoff,
    TickScheduler,
    UploadFleetMission,
)

PATROL_CORNERS = [(-40.0, -40.0), (40.0, -40.0), (40.0, 40.0), (-40.0, 40.0)]


def print_status(fleet) -> None:
    status = fleet.get_status()
    leader = fleet.leader
    mean_battery = sum(u.battery_percent for u in fleet.units) / len(fleet.units)
    mean_alt = sum(u.altitude for u in fleet.units) / len(fleet.units)
    print(
        f"  t={fleet.simulation_time:6.1f}s  flying={status.flying}/{status.total}  "
        f"alt={mean_alt:5.1f}m  batt={mean_battery:7.3f}%  "
        f"leader={leader.callsign if leader else 'NONE'}"
    )


def fly_phase(scheduler: TickScheduler, seconds: float, realtime: bool) -> None:
    ticks = int(seconds * scheduler.config.tick_rate_hz)
    scheduler.run(max_ticks=ticks, realtime=realtime)


def main():
    parser = argparse.ArgumentParser(description='Fly a simulated swarm sortie')
    parser.add_argument('--num-units', type=int,
                        default=int(os.environ.get('AEGIS_NUM_UNITS', '12')),
                        help='Fleet size')
    parser.add_argument('--altitude', type=float, default=10.0, help='Takeoff altitude (m)')
    parser.add_argument('--algorithm', type=str, default=SwarmAlgorithm.BTP_ANT_COLONY.value,
                        choices=[a.value for a in SwarmAlgorithm],
                        help='Coordination algorithm')
    parser.add_argument('--formation-time', type=float, default=30.0, help='Formation phase (s)')
    parser.add_argument('--mission-time', type=float, default=60.0, help='Mission phase (s)')
    parser.add_argument('--realtime', action='store_true', help='Pace ticks in real time')
    parser.add_argument('--log-level', type=str, default='INFO', help='Logging level')
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimConfig(
        tick_rate_hz=float(os.environ.get('AEGIS_TICK_RATE', '60')),
        default_takeoff_altitude=args.altitude,
    )
    fleet = create_fleet(FleetConfig(num_units=args.num_units))

    bridge = HardwareBridge()
    bridge.connect("ws://localhost:5760")
    scheduler = TickScheduler(fleet, config=config, bridge=bridge)
    event_log = EventLog()
    scheduler.add_sink(event_log)
    scheduler.add_sink(LoggingEventSink())

    every_second = max(1, int(config.tick_rate_hz))
    scheduler.on_snapshot(lambda f: print_status(f) if f.tick % every_second == 0 else None)

    print(f"\n{'='*60}")
    print("Simulated Swarm Sortie")
    print(f"{'='*60}")
    print(f"Units: {args.num_units}")
    print(f"Altitude: {args.altitude}m")
    print(f"Algorithm: {args.algorithm}")
    print(f"Tick rate: {config.tick_rate_hz:.0f} Hz")
    print(f"{'='*60}\n")

    try:
        print("[Phase 1] Arming...")
        scheduler.submit(Arm())
        scheduler.submit(SetAlgorithm(SwarmAlgorithm(args.algorithm)))
        fly_phase(scheduler, 1.0, args.realtime)

        print("[Phase 2] Taking off...")
        scheduler.submit(Takeoff(args.altitude))
        fly_phase(scheduler, 15.0, args.realtime)

        print(f"[Phase 3] Flying {args.algorithm} for {args.formation_time}s...")
        fly_phase(scheduler, args.formation_time, args.realtime)

        print("[Phase 4] Patrol mission...")
        scheduler.submit(UploadFleetMission(patrol_route(PATROL_CORNERS, altitude=20.0)))
        fly_phase(scheduler, args.mission_time, args.realtime)

        print("[Phase 5] Landing...")
        scheduler.submit(Land())
        fly_phase(scheduler, 30.0, args.realtime)
    except KeyboardInterrupt:
        print("\nInterrupted! Disarming...")
    finally:
        scheduler.submit(Disarm())
        scheduler.tick()

    print(f"\n{'='*60}")
    print("Event log (newest first):")
    for line in event_log.lines():
        print(f"  {line}")
    print(f"\nAdvisor: {OfflineAdvisor().sitrep(scheduler.snapshot)}")
    print(f"{'='*60}\n")
    return 0


if __name__ == '__main__':
    sys.exit(main())
