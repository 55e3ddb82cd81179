"""Data API aggregator - builds JSON payloads from the logs and monitor state."""

from __future__ import annotations

import time
from typing import Any

from sol_forwarder.ledger.transfer import sol
from sol_forwarder.models.snapshots import StatusSnapshot
from sol_forwarder.storage.memory import EventLog, SendDetailLog
from sol_forwarder.sweep.monitor import BalanceMonitor


class StatusAggregator:
    """Read-only view over the forwarder state.

    This is the sole interface between the daemon and the HTTP surface.
    Nothing here mutates the logs.
    """

    def __init__(
        self,
        events: EventLog,
        send_details: SendDetailLog,
        monitor: BalanceMonitor,
        wallet_address: str,
        destination_address: str,
        start_time: float | None = None,
    ) -> None:
        self._events = events
        self._send_details = send_details
        self._monitor = monitor
        self._wallet_address = wallet_address
        self._destination_address = destination_address
        self._start_time = start_time or time.monotonic()

    def get_logs(self) -> list[dict[str, Any]]:
        return [e.to_dict() for e in self._events.read_recent()]

    def get_send_details(self, limit: int | None = None) -> list[dict[str, Any]]:
        return [d.to_dict() for d in self._send_details.read_recent(limit)]

    def get_status(self) -> StatusSnapshot:
        balance = self._monitor.last_known_balance
        return StatusSnapshot(
            wallet_address=self._wallet_address,
            destination_address=self._destination_address,
            last_known_balance=balance,
            last_known_balance_sol=sol(balance),
            subscription_id=self._monitor.subscription_id,
            sweeps_in_flight=self._monitor.in_flight,
            uptime_seconds=int(time.monotonic() - self._start_time),
            event_log_size=len(self._events),
            send_detail_log_size=len(self._send_details),
        )
