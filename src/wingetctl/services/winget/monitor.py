"""Tracks whether winget is reachable and notifies subscribers when that changes."""

import asyncio
from dataclasses import dataclass
from enum import Enum

from wingetctl.logger import get_logger
from wingetctl.services.winget.runner import ProcessRunner

logger = get_logger(__name__)


class ConnectionStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    CHECKING = "checking"


_MESSAGES = {
    ConnectionStatus.CONNECTED: "✓ Connected - winget available",
    ConnectionStatus.DISCONNECTED: "✗ Disconnected - check winget or internet",
    ConnectionStatus.CHECKING: "⟳ Checking connection...",
}

_INDICATORS = {
    ConnectionStatus.CONNECTED: "●",
    ConnectionStatus.DISCONNECTED: "○",
    ConnectionStatus.CHECKING: "⟳",
}


def message_for(status: ConnectionStatus) -> str:
    return _MESSAGES.get(status, "Unknown status")


def indicator_for(status: ConnectionStatus) -> str:
    return _INDICATORS.get(status, "?")


@dataclass(frozen=True)
class StatusChange:
    status: ConnectionStatus
    message: str


class ConnectionMonitor:
    """Liveness state of winget, refreshed on demand by :meth:`check`.

    Subscribers receive a :class:`StatusChange` on their queue each time the
    status actually changes.
    """

    def __init__(self, runner: ProcessRunner, probe_timeout: float | None = None) -> None:
        self._runner = runner
        self._probe_timeout = probe_timeout
        self._status = ConnectionStatus.CHECKING
        self._subscribers: list[asyncio.Queue[StatusChange]] = []

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def message(self) -> str:
        return message_for(self._status)

    @property
    def indicator(self) -> str:
        return indicator_for(self._status)

    def subscribe(self) -> asyncio.Queue[StatusChange]:
        """Return a new queue that receives status changes."""
        queue: asyncio.Queue[StatusChange] = asyncio.Queue()
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[StatusChange]) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def _set_status(self, status: ConnectionStatus) -> None:
        if status == self._status:
            return
        self._status = status
        change = StatusChange(status=status, message=message_for(status))
        logger.info(f"winget connection status: {status.value}")
        for queue in self._subscribers:
            queue.put_nowait(change)

    async def check(self) -> ConnectionStatus:
        """Probe winget and update the status."""
        self._set_status(ConnectionStatus.CHECKING)
        try:
            available = await self._runner.probe(self._probe_timeout)
        except Exception as e:
            logger.error(f"winget probe raised: {e}")
            available = False
        self._set_status(ConnectionStatus.CONNECTED if available else ConnectionStatus.DISCONNECTED)
        return self._status
