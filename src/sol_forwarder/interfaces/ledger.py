"""LedgerClient protocol - the network capability consumed by the forwarder."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Protocol


class Finality(str, Enum):
    """Commitment levels, least durable first."""

    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"


FINALITY_LEVELS: tuple[Finality, ...] = (
    Finality.PROCESSED,
    Finality.CONFIRMED,
    Finality.FINALIZED,
)

BalanceCallback = Callable[[int], None]


class BalanceSubscription(Protocol):
    """Handle to an active balance-change subscription."""

    @property
    def subscription_id(self) -> int | None:
        ...

    async def close(self) -> None:
        ...


class LedgerClient(Protocol):
    """Balance queries, push subscription, transfer submission and finality polling."""

    async def get_balance(self, account: str, finality: Finality) -> int:
        """Current balance of ``account`` in lamports."""
        ...

    async def subscribe_balance(
        self, account: str, callback: BalanceCallback, finality: Finality,
    ) -> BalanceSubscription:
        """Invoke ``callback(lamports)`` on every balance change of ``account``."""
        ...

    async def get_transfer_anchor(self, finality: Finality) -> str:
        """Fetch a fresh blockhash to build a transfer against."""
        ...

    async def submit_transfer(
        self, raw: bytes, *, skip_preflight: bool, max_retries: int,
    ) -> str:
        """Send a signed transaction. Returns its signature."""
        ...

    async def await_finality(self, signature: str, finality: Finality) -> bool:
        """Wait until ``signature`` reaches ``finality``."""
        ...

    async def close(self) -> None:
        ...
