"""Situation reports for an operations advisor.

The advisor itself (a generative-language service) lives outside the
core. This module condenses a snapshot into the context such an advisor
needs and defines the interface it must offer. Nothing in the simulation
waits on an advisor.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol

from ..core.fleet import Fleet
from ..core.unit import UnitStatus

logger = logging.getLogger(__name__)

# IMU drift above this counts as needing calibration
DRIFT_THRESHOLD = 0.05

OFFLINE_SITREP = "Hardware sweep complete. Swarm adapting to current environmental variables."
OFFLINE_REPLY = "[COMM_ERROR]: Advisory link offline."


@dataclass(frozen=True)
class SituationReport:
    """Condensed view of a snapshot.

    Attributes:
        total: Units in the roster
        active: Units FLYING
        returning: Units in RTL
        failed: Units FAILED
        drifted: Units with IMU drift above DRIFT_THRESHOLD
        rain_percent: Rain intensity (0-100)
        wind_speed: Wind speed (m/s)
        leader: Leader callsign, or None if unresolved
        sim_time: Simulation time of the snapshot
    """
    total: int
    active: int
    returning: int
    failed: int
    drifted: int
    rain_percent: float
    wind_speed: float
    leader: Optional[str]
    sim_time: float


def build_situation_report(fleet: Fleet) -> SituationReport:
    """Summarize a snapshot."""
    leader = fleet.leader
    return SituationReport(
        total=len(fleet.units),
        active=sum(1 for u in fleet.units if u.status == UnitStatus.FLYING),
        returning=sum(1 for u in fleet.units if u.status == UnitStatus.RTL),
        failed=sum(1 for u in fleet.units if u.status == UnitStatus.FAILED),
        drifted=sum(1 for u in fleet.units if u.sensors.imu.drift > DRIFT_THRESHOLD),
        rain_percent=fleet.environment.rain * 100.0,
        wind_speed=fleet.environment.wind_speed,
        leader=leader.callsign if leader is not None else None,
        sim_time=fleet.simulation_time,
    )


def format_briefing(report: SituationReport) -> str:
    """Render a report as context text for an advisor."""
    return "\n".join([
        "SITUATION SUMMARY:",
        f"- Units: {report.total} total ({report.active} Active, "
        f"{report.returning} RTL, {report.failed} Failed)",
        f"- Calibration Status: {report.drifted} units exhibiting non-trivial IMU drift.",
        f"- Atmosphere: Rain Intensity {report.rain_percent:.0f}%, "
        f"Wind Speed {report.wind_speed:.1f} m/s.",
        f"- Current Leader: {report.leader or 'NONE'}",
    ])


class Advisor(Protocol):
    """Interface of an operations advisor."""

    def stream(self, fleet: Fleet, prompt: str) -> Iterator[str]:
        """Yield reply text in chunks."""
        ...

    def sitrep(self, fleet: Fleet) -> str:
        """Return a one-line background situation report."""
        ...


class OfflineAdvisor:
    """Advisor used when no advisory service is attached.

    Returns canned text so callers can treat every advisor alike.
    """

    def stream(self, fleet: Fleet, prompt: str) -> Iterator[str]:
        logger.debug(f"Offline advisor ignoring prompt: {prompt!r}")
        yield OFFLINE_REPLY

    def sitrep(self, fleet: Fleet) -> str:
        report = build_situation_report(fleet)
        return f"{OFFLINE_SITREP} ({report.active}/{report.total} active)"
