"""Data models for the sol_forwarder daemon."""

from sol_forwarder.models.records import (
    EventKind,
    EventRecord,
    RpcLatency,
    SendDetail,
    SweepRun,
    SweepStage,
)
from sol_forwarder.models.config import ForwarderConfig
from sol_forwarder.models.snapshots import StatusSnapshot

__all__ = [
    "EventKind", "EventRecord", "RpcLatency", "SendDetail", "SweepRun", "SweepStage",
    "ForwarderConfig",
    "StatusSnapshot",
]
