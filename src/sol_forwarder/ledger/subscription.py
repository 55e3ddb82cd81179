"""Websocket account subscription - pushes lamport balance changes to a callback."""

from __future__ import annotations

import asyncio
import logging

from solana.rpc.commitment import Commitment
from solana.rpc.websocket_api import connect
from solders.pubkey import Pubkey
from solders.rpc.responses import AccountNotification

from sol_forwarder.interfaces.ledger import BalanceCallback

log = logging.getLogger(__name__)


class SolanaBalanceSubscription:
    """accountSubscribe over a websocket, with automatic resubscription.

    ``open()`` connects and waits for the subscription id, so setup failures
    surface to the caller. After that a background task reads notifications.
    If the socket drops it reconnects after ``reconnect_backoff`` seconds
    and subscribes again (the subscription id changes).
    """

    def __init__(
        self,
        ws_url: str,
        account: Pubkey,
        callback: BalanceCallback,
        commitment: Commitment,
        reconnect_backoff: float = 5,
    ) -> None:
        self._ws_url = ws_url
        self._account = account
        self._callback = callback
        self._commitment = commitment
        self._reconnect_backoff = reconnect_backoff
        self._ws = None
        self._subscription_id: int | None = None
        self._task: asyncio.Task | None = None
        self._closed = False

    @property
    def subscription_id(self) -> int | None:
        return self._subscription_id

    async def open(self) -> None:
        await self._connect()
        self._task = asyncio.create_task(self._read_loop())

    async def close(self) -> None:
        self._closed = True
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._ws is not None and self._subscription_id is not None:
            try:
                await self._ws.account_unsubscribe(self._subscription_id)
            except Exception as exc:
                log.debug("account_unsubscribe failed: %s", exc)
        await self._drop()
        log.info("Balance subscription closed")

    async def _connect(self) -> None:
        ws = await connect(self._ws_url)
        subscribed = False
        try:
            await ws.account_subscribe(self._account, commitment=self._commitment)
            first = await ws.recv()
            self._subscription_id = first[0].result
            subscribed = True
        finally:
            # also runs on cancellation from close() mid-handshake
            if not subscribed:
                await ws.close()
        self._ws = ws
        log.info(
            "Subscribed to %s (id=%s, commitment=%s)",
            self._account, self._subscription_id, self._commitment,
        )

    async def _drop(self) -> None:
        ws, self._ws = self._ws, None
        if ws is not None:
            try:
                await ws.close()
            except Exception as exc:
                log.debug("Websocket close failed: %s", exc)

    async def _read_loop(self) -> None:
        while not self._closed:
            try:
                if self._ws is None:
                    await self._connect()
                async for msgs in self._ws:
                    for msg in msgs:
                        if isinstance(msg, AccountNotification):
                            self._callback(msg.result.value.lamports)
                log.warning("Balance subscription %s closed by server", self._subscription_id)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                log.warning("Balance subscription error: %s", exc)

            await self._drop()
            if not self._closed:
                log.info("Resubscribing in %ss", self._reconnect_backoff)
                await asyncio.sleep(self._reconnect_backoff)
