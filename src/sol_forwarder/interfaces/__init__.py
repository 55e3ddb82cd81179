"""Protocol interfaces for all sol_forwarder components."""

from sol_forwarder.interfaces.ledger import (
    FINALITY_LEVELS,
    BalanceCallback,
    BalanceSubscription,
    Finality,
    LedgerClient,
)
from sol_forwarder.interfaces.store import EventStore, SendDetailStore

__all__ = [
    "FINALITY_LEVELS", "BalanceCallback", "BalanceSubscription", "Finality", "LedgerClient",
    "EventStore", "SendDetailStore",
]
