"""Fixed-rate tick scheduler.

Runs the pure transition at the configured rate on one thread. Commands
may be submitted from any thread; they are queued and applied only
between ticks, so a tick never observes a half-applied command.
"""

import logging
import queue
import time
from typing import Callable, List, Optional

from ..coordination.formations import FormationController
from ..core.config import DEFAULT_SIM_CONFIG, SimConfig
from ..core.fleet import Fleet
from .bridge import HardwareBridge
from .commands import Command, apply_command
from .engine import step
from .events import EventCategory, EventSink, SwarmEvent

logger = logging.getLogger(__name__)


class TickScheduler:
    """Drives the simulation and publishes snapshots.

    Example:
        scheduler = TickScheduler(create_fleet())
        scheduler.add_sink(EventLog())
        scheduler.on_snapshot(lambda fleet: render(fleet))

        scheduler.submit(Arm())
        scheduler.submit(Takeoff())
        scheduler.run(max_ticks=600)          # 10 s at 60 Hz, realtime

        scheduler.run(max_ticks=600, realtime=False)  # as fast as possible
    """

    def __init__(
        self,
        fleet: Fleet,
        config: Optional[SimConfig] = None,
        formation: Optional[FormationController] = None,
        bridge: Optional[HardwareBridge] = None,
    ):
        """Initialize scheduler.

        Args:
            fleet: Initial snapshot
            config: Simulation configuration (defaults if None)
            formation: Formation controller (defaults if None)
            bridge: Optional bridge that accepted commands are relayed to
        """
        self.config = config or DEFAULT_SIM_CONFIG
        self.formation = formation or FormationController()
        self.bridge = bridge

        self._snapshot = fleet
        self._commands: "queue.Queue[Command]" = queue.Queue()
        self._sinks: List[EventSink] = []
        self._subscribers: List[Callable[[Fleet], None]] = []
        self._running = False

    @property
    def snapshot(self) -> Fleet:
        """Most recently published snapshot."""
        return self._snapshot

    @property
    def is_running(self) -> bool:
        return self._running

    def add_sink(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def on_snapshot(self, callback: Callable[[Fleet], None]) -> None:
        """Register callback receiving every new snapshot.

        Callbacks run on the scheduler thread after each tick and must not
        block.
        """
        self._subscribers.append(callback)

    def submit(self, command: Command) -> None:
        """Queue a command for the next inter-tick window (thread-safe)."""
        self._commands.put(command)

    def _emit(self, event: SwarmEvent) -> None:
        for sink in self._sinks:
            sink.emit(event)

    def _drain_commands(self, fleet: Fleet) -> Fleet:
        while True:
            try:
                command = self._commands.get_nowait()
            except queue.Empty:
                return fleet

            result = apply_command(fleet, command, self.config)
            fleet = result.fleet
            if result.accepted:
                self._emit(result.event)
                if self.bridge is not None:
                    self.bridge.forward(command, [u.id for u in fleet.units])

    def tick(self) -> Fleet:
        """Apply queued commands, run one step and publish the result.

        Returns:
            The new snapshot
        """
        fleet = self._drain_commands(self._snapshot)
        next_fleet = step(fleet, self.config, self.formation)

        if next_fleet.leader_id != fleet.leader_id:
            old = fleet.get_unit(fleet.leader_id)
            new = next_fleet.get_unit(next_fleet.leader_id)
            old_name = old.callsign if old is not None else fleet.leader_id
            new_name = new.callsign if new is not None else next_fleet.leader_id
            self._emit(SwarmEvent(
                category=EventCategory.CONSENSUS,
                message=f"LEADER HOT-SWAP: {old_name} -> {new_name}",
                sim_time=fleet.simulation_time,
            ))

        self._snapshot = next_fleet
        for callback in self._subscribers:
            callback(next_fleet)
        return next_fleet

    def run(self, max_ticks: Optional[int] = None, realtime: bool = True) -> Fleet:
        """Run the tick loop until stopped or ``max_ticks`` ticks.

        Args:
            max_ticks: Stop after this many ticks (None = until stop())
            realtime: Pace ticks at the configured rate. When behind
                schedule the deadline is reset rather than catching up.

        Returns:
            Final snapshot
        """
        period = self.config.dt
        deadline = time.monotonic()
        ticks = 0
        self._running = True
        logger.info(f"Scheduler started at {self.config.tick_rate_hz:.0f} Hz")

        try:
            while self._running and (max_ticks is None or ticks < max_ticks):
                self.tick()
                ticks += 1

                if realtime:
                    deadline += period
                    delay = deadline - time.monotonic()
                    if delay > 0:
                        time.sleep(delay)
                    else:
                        deadline = time.monotonic()
        finally:
            self._running = False
            logger.info(
                f"Scheduler stopped after {ticks} ticks "
                f"(t={self._snapshot.simulation_time:.2f}s)"
            )

        return self._snapshot

    def stop(self) -> None:
        """Stop the loop after the current tick."""
        self._running = False
