"""Balance monitor - turns balance-change notifications into sweeps."""

from __future__ import annotations

import asyncio
import logging

from sol_forwarder.interfaces.ledger import BalanceSubscription, Finality, LedgerClient
from sol_forwarder.interfaces.store import EventStore
from sol_forwarder.ledger.transfer import sol
from sol_forwarder.models.records import EventKind
from sol_forwarder.sweep.pipeline import ForwardingPipeline

log = logging.getLogger(__name__)


class BalanceMonitor:
    """Watches one account and sweeps whenever its balance changes to a positive value.

    Owns the last known balance and the push subscription. Sweeps run as
    independent tasks and are not serialized: two notifications in quick
    succession can both start a sweep against a balance that has since
    moved. The second submission then fails or sends less; either way it
    is recorded in the send-detail log.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        pipeline: ForwardingPipeline,
        events: EventStore,
        account: str,
        finality: Finality = Finality.PROCESSED,
    ) -> None:
        self._ledger = ledger
        self._pipeline = pipeline
        self._events = events
        self._account = account
        self._finality = finality
        self._last_balance = 0
        self._subscription: BalanceSubscription | None = None
        self._sweeps: set[asyncio.Task] = set()

    @property
    def last_known_balance(self) -> int:
        return self._last_balance

    @property
    def subscription_id(self) -> int | None:
        return self._subscription.subscription_id if self._subscription else None

    @property
    def in_flight(self) -> int:
        return len(self._sweeps)

    async def start(self) -> None:
        """Check the balance once, sweep if funded, then subscribe to changes."""
        try:
            self._last_balance = await self._ledger.get_balance(self._account, self._finality)
            self._events.add(EventKind.INFO, f"Initial balance: {sol(self._last_balance)}")
            if self._last_balance > 0:
                self._trigger(self._last_balance)

            self._subscription = await self._ledger.subscribe_balance(
                self._account, self.on_notification, self._finality,
            )
            log.info("Subscribed to balance changes (id=%s)", self.subscription_id)
        except Exception as exc:
            log.error("Monitor start failed: %s", exc, exc_info=True)
            self._events.add(EventKind.ERROR, f"Failed to start monitor: {exc}")

    async def stop(self) -> None:
        if self._subscription:
            await self._subscription.close()
            self._subscription = None

    def on_notification(self, new_balance: int) -> None:
        """Handle one pushed balance. Sweeps only on a change to a positive balance."""
        if new_balance > 0 and new_balance != self._last_balance:
            change = new_balance - self._last_balance
            delta = abs(change)
            sign = "+" if change > 0 else "-"
            self._events.add(
                EventKind.RECEIVE,
                f"New balance {sol(new_balance)} ({sign}{sol(delta)})",
                balance=new_balance,
                delta=delta,
            )
            self._trigger(new_balance)
        self._last_balance = new_balance

    async def wait_idle(self) -> None:
        """Wait for every in-flight sweep, including ones started meanwhile.

        Cancelling the wait leaves the sweeps themselves running.
        """
        while self._sweeps:
            await asyncio.wait(list(self._sweeps))

    def _trigger(self, balance: int) -> None:
        task = asyncio.create_task(self._pipeline.forward(balance))
        self._sweeps.add(task)
        task.add_done_callback(self._sweeps.discard)
