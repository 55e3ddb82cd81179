"""Forwarding pipeline - sweeps an observed balance to the fixed destination."""

from __future__ import annotations

import logging
import time

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from sol_forwarder.interfaces.ledger import FINALITY_LEVELS, Finality, LedgerClient
from sol_forwarder.interfaces.store import EventStore, SendDetailStore
from sol_forwarder.ledger.transfer import build_transfer, sol
from sol_forwarder.models.records import EventKind, SendDetail, SweepRun, SweepStage

log = logging.getLogger(__name__)

DESTINATION_ADDRESS = "FUMnrwov6NuztUmmZZP97587aDZEH4WuKn8bgG6UqjXG"
DEFAULT_FEE_RESERVE = 5000  # lamports
DEFAULT_MAX_RETRIES = 3


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class ForwardingPipeline:
    """Turns one observed balance into a submitted, finality-tracked transfer.

    Every run ends in exactly one send-detail record. Exceptions never
    escape ``forward()``: the notification handler calling it has to keep
    running for the life of the process.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        signer: Keypair,
        events: EventStore,
        send_details: SendDetailStore,
        destination: str = DESTINATION_ADDRESS,
        fee_reserve: int = DEFAULT_FEE_RESERVE,
        max_retries: int = DEFAULT_MAX_RETRIES,
        skip_preflight: bool = False,
    ) -> None:
        self._ledger = ledger
        self._signer = signer
        self._events = events
        self._send_details = send_details
        self._destination = Pubkey.from_string(destination)
        self._fee_reserve = fee_reserve
        self._max_retries = max_retries
        self._skip_preflight = skip_preflight

    @property
    def fee_reserve(self) -> int:
        return self._fee_reserve

    def sweep_amount(self, balance: int) -> int:
        """Lamports that would be sent for ``balance`` (<= 0 means nothing to send)."""
        return balance - self._fee_reserve

    async def forward(self, observed_balance: int) -> SendDetail:
        run = SweepRun(lamports_balance=observed_balance)
        t0 = time.monotonic()

        try:
            amount = self.sweep_amount(observed_balance)
            if amount <= 0:
                self._events.add(
                    EventKind.WARNING,
                    "Balance does not cover the fee reserve",
                    balance=observed_balance,
                )
                run.stage = SweepStage.INSUFFICIENT
                run.total_duration_ms = _elapsed_ms(t0)
                return self._send_details.add(run)
            run.lamports_to_send = amount

            # 1. Blockhash
            bh_start = time.monotonic()
            blockhash = await self._ledger.get_transfer_anchor(Finality.PROCESSED)
            run.get_blockhash_ms = _elapsed_ms(bh_start)

            # 2. Build and sign
            raw = build_transfer(self._signer, self._destination, amount, blockhash)

            # 3. Submit
            send_start = time.monotonic()
            try:
                signature = await self._ledger.submit_transfer(
                    raw,
                    skip_preflight=self._skip_preflight,
                    max_retries=self._max_retries,
                )
            except Exception as exc:
                run.error = str(exc)
                run.stage = SweepStage.SEND_FAILED
                self._events.add(EventKind.ERROR, f"sendRawTransaction failed: {exc}")
                run.total_duration_ms = _elapsed_ms(t0)
                return self._send_details.add(run)

            run.signature = signature
            run.send_raw_ms = _elapsed_ms(send_start)
            self._events.add(EventKind.SEND, f"Sent {sol(amount)}", signature=signature)
            run.stage = SweepStage.SENT

            # 4. Finality tracking, each level independent and best-effort
            for finality in FINALITY_LEVELS:
                duration = await self._time_finality(signature, finality)
                setattr(run, f"{finality.value}_ms", duration)

            run.total_duration_ms = _elapsed_ms(t0)
            return self._send_details.add(run)

        except Exception as exc:
            log.debug("Sweep of %d lamports raised", observed_balance, exc_info=True)
            run.error = str(exc)
            run.stage = SweepStage.EXCEPTION
            run.total_duration_ms = _elapsed_ms(t0)
            self._events.add(EventKind.ERROR, f"Exception during sweep: {exc}")
            return self._send_details.add(run)

    async def _time_finality(self, signature: str, finality: Finality) -> int | None:
        """Milliseconds until ``signature`` reached ``finality``, or None."""
        start = time.monotonic()
        try:
            reached = await self._ledger.await_finality(signature, finality)
        except Exception as exc:
            log.debug("%s not reached for %s: %s", finality.value, signature[:16], exc)
            return None
        if not reached:
            log.debug("%s not reached for %s", finality.value, signature[:16])
            return None
        return _elapsed_ms(start)
