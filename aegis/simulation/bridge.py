"""Stub hardware bridge.

Stands in for a telemetry relay to real vehicles. It only logs what it
would transmit; no radio or MAVLink traffic is produced.
"""

import logging
from typing import Optional

from .commands import Command, UploadFleetMission, UploadUnitMission

logger = logging.getLogger(__name__)


class HardwareBridge:
    """Logs outbound commands instead of transmitting them.

    Example:
        bridge = HardwareBridge()
        bridge.connect("ws://localhost:5760")
        scheduler = TickScheduler(fleet, bridge=bridge)
    """

    def __init__(self):
        self._url: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self._url is not None

    def connect(self, url: str) -> None:
        logger.info(f"Connecting to telemetry relay at {url}...")
        self._url = url

    def disconnect(self) -> None:
        self._url = None
        logger.info("Telemetry relay disconnected")

    def send_mission(self, unit_id: str, waypoints) -> None:
        logger.info(f"Uploading {len(waypoints)} waypoints to {unit_id} via radio link")

    def send_global_command(self, command: str, params: Optional[dict] = None) -> None:
        logger.info(f"Broadcast {command} {params or {}}")

    def forward(self, command: Command, unit_ids) -> None:
        """Relay an accepted command.

        Args:
            command: Command accepted by the simulation
            unit_ids: Roster ids, used to fan out fleet missions
        """
        if isinstance(command, UploadUnitMission):
            self.send_mission(command.unit_id, command.waypoints)
        elif isinstance(command, UploadFleetMission):
            for unit_id in unit_ids:
                self.send_mission(unit_id, command.waypoints)
        else:
            self.send_global_command(type(command).__name__.upper(), dict(vars(command)))
