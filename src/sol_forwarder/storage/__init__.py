"""Bounded in-memory logs."""

from sol_forwarder.storage.memory import BoundedLog, EventLog, SendDetailLog

__all__ = ["BoundedLog", "EventLog", "SendDetailLog"]
