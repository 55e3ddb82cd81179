"""In-memory bounded logs for operational events and per-sweep send details.

Both logs are append-only with newest entries at the front. Once a log is at
capacity, the oldest entry is evicted on every append. Nothing survives a
restart.
"""

from __future__ import annotations

import logging
from collections import deque
from itertools import islice
from typing import Any, Generic, TypeVar

from sol_forwarder.models.records import EventKind, EventRecord, SendDetail, SweepRun

log = logging.getLogger(__name__)

EVENT_LOG_CAPACITY = 1000
SEND_DETAIL_LOG_CAPACITY = 500
SEND_DETAIL_DEFAULT_LIMIT = 20

T = TypeVar("T")


class BoundedLog(Generic[T]):
    """Fixed-capacity history, most recent first."""

    def __init__(self, capacity: int, default_limit: int | None = None) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._records: deque[T] = deque(maxlen=capacity)
        self._default_limit = default_limit if default_limit is not None else capacity

    @property
    def capacity(self) -> int:
        return self._records.maxlen or 0

    def __len__(self) -> int:
        return len(self._records)

    def append(self, record: T) -> None:
        # maxlen drops from the right when appending on the left
        self._records.appendleft(record)

    def read_recent(self, limit: int | None = None) -> list[T]:
        if limit is None:
            limit = self._default_limit
        if limit <= 0:
            return []
        return list(islice(self._records, limit))


class EventLog(BoundedLog[EventRecord]):
    """Operational events: info, warning, error, send, receive."""

    def __init__(self, capacity: int = EVENT_LOG_CAPACITY) -> None:
        super().__init__(capacity)

    def add(self, kind: EventKind, message: str, **extra: Any) -> EventRecord:
        entry = EventRecord(kind=kind, message=message, extra=extra)
        self.append(entry)
        level = logging.ERROR if kind is EventKind.ERROR else (
            logging.WARNING if kind is EventKind.WARNING else logging.INFO
        )
        log.log(level, "[%s] %s - %s", kind.value.upper(), entry.timestamp, message)
        return entry


class SendDetailLog(BoundedLog[SendDetail]):
    """Timing/outcome snapshot of every sweep attempt."""

    def __init__(
        self,
        capacity: int = SEND_DETAIL_LOG_CAPACITY,
        default_limit: int = SEND_DETAIL_DEFAULT_LIMIT,
    ) -> None:
        super().__init__(capacity, default_limit)

    def add(self, run: SweepRun) -> SendDetail:
        detail = run.freeze()
        self.append(detail)
        log.info(
            "[SEND_DETAIL] stage=%s sig=%s total=%sms",
            detail.stage.value,
            detail.signature or "N/A",
            detail.total_duration_ms if detail.total_duration_ms is not None else "N/A",
        )
        return detail
