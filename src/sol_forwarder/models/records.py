"""Record types for the event log, send-detail log, and sweep run state."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class EventKind(str, Enum):
    """Category of an operational event."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SEND = "send"
    RECEIVE = "receive"


class SweepStage(str, Enum):
    """Where a sweep run ended up."""

    START = "start"
    INSUFFICIENT = "insufficient"  # balance does not cover the fee reserve
    SENT = "sent"
    SEND_FAILED = "send_failed"
    EXCEPTION = "exception"


@dataclass(frozen=True)
class EventRecord:
    """A single entry in the event log."""

    kind: EventKind
    message: str
    timestamp: str = field(default_factory=_now)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        # Extra fields are flattened next to the fixed ones
        return {
            "type": self.kind.value,
            "msg": self.message,
            "timestamp": self.timestamp,
            **self.extra,
        }


@dataclass(frozen=True)
class RpcLatency:
    """Latency of the RPC calls made while building and submitting a transfer."""

    get_blockhash_ms: int | None = None
    send_raw_ms: int | None = None


@dataclass(frozen=True)
class SendDetail:
    """Immutable timing/outcome snapshot of one sweep."""

    stage: SweepStage
    lamports_balance: int
    lamports_to_send: int | None = None
    rpc_latency: RpcLatency = field(default_factory=RpcLatency)
    signature: str | None = None
    error: str | None = None
    processed_ms: int | None = None
    confirmed_ms: int | None = None
    finalized_ms: int | None = None
    total_duration_ms: int | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: str = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["stage"] = self.stage.value
        return data


@dataclass
class SweepRun:
    """Mutable state threaded through one forwarding pipeline run.

    Never shared between concurrent runs. Call ``freeze()`` once the run
    reaches a terminal stage to get the record stored in the send-detail log.
    """

    lamports_balance: int
    stage: SweepStage = SweepStage.START
    lamports_to_send: int | None = None
    get_blockhash_ms: int | None = None
    send_raw_ms: int | None = None
    signature: str | None = None
    error: str | None = None
    processed_ms: int | None = None
    confirmed_ms: int | None = None
    finalized_ms: int | None = None
    total_duration_ms: int | None = None

    def freeze(self) -> SendDetail:
        return SendDetail(
            stage=self.stage,
            lamports_balance=self.lamports_balance,
            lamports_to_send=self.lamports_to_send,
            rpc_latency=RpcLatency(
                get_blockhash_ms=self.get_blockhash_ms,
                send_raw_ms=self.send_raw_ms,
            ),
            signature=self.signature,
            error=self.error,
            processed_ms=self.processed_ms,
            confirmed_ms=self.confirmed_ms,
            finalized_ms=self.finalized_ms,
            total_duration_ms=self.total_duration_ms,
        )
