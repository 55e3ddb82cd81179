"""Log protocols - bounded, most-recent-first history shared by monitor and pipeline."""

from __future__ import annotations

from typing import Any, Protocol

from sol_forwarder.models.records import EventKind, EventRecord, SendDetail, SweepRun


class EventStore(Protocol):
    """Append-only record of operational events."""

    def add(self, kind: EventKind, message: str, **extra: Any) -> EventRecord:
        """Build, append and return an event record."""
        ...

    def read_recent(self, limit: int | None = None) -> list[EventRecord]:
        """Most recent records first."""
        ...


class SendDetailStore(Protocol):
    """Append-only record of per-sweep snapshots."""

    def add(self, run: SweepRun) -> SendDetail:
        """Freeze ``run`` into a SendDetail and append it."""
        ...

    def read_recent(self, limit: int | None = None) -> list[SendDetail]:
        """Most recent records first."""
        ...
