"""JSON-serializable snapshot models for the status surface."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class StatusSnapshot:
    wallet_address: str
    destination_address: str
    last_known_balance: int  # lamports
    last_known_balance_sol: str  # "1.500000000 SOL"
    subscription_id: int | None
    sweeps_in_flight: int
    uptime_seconds: int
    event_log_size: int
    send_detail_log_size: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
