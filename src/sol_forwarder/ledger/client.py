"""Solana RPC adapter implementing the LedgerClient protocol."""

from __future__ import annotations

import logging

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment, Processed
from solana.rpc.types import TxOpts
from solders.pubkey import Pubkey
from solders.signature import Signature

from sol_forwarder.interfaces.ledger import BalanceCallback, Finality
from sol_forwarder.ledger.subscription import SolanaBalanceSubscription

log = logging.getLogger(__name__)


def _commitment(finality: Finality) -> Commitment:
    # solana-py keys its commitment tables by the plain string
    return Commitment(finality.value)


class SolanaLedgerClient:
    """Thin wrapper over solana-py's AsyncClient and websocket API.

    Errors from the RPC are not caught here; callers decide how each
    failure is recorded.
    """

    def __init__(
        self,
        rpc_url: str,
        ws_url: str,
        timeout: float = 30,
        reconnect_backoff: float = 5,
    ) -> None:
        self._client = AsyncClient(rpc_url, commitment=Processed, timeout=timeout)
        self._ws_url = ws_url
        self._reconnect_backoff = reconnect_backoff
        self._subscriptions: list[SolanaBalanceSubscription] = []

    async def close(self) -> None:
        for sub in self._subscriptions:
            await sub.close()
        self._subscriptions.clear()
        await self._client.close()

    async def get_balance(self, account: str, finality: Finality) -> int:
        resp = await self._client.get_balance(
            Pubkey.from_string(account), commitment=_commitment(finality),
        )
        return resp.value

    async def subscribe_balance(
        self, account: str, callback: BalanceCallback, finality: Finality,
    ) -> SolanaBalanceSubscription:
        sub = SolanaBalanceSubscription(
            self._ws_url,
            Pubkey.from_string(account),
            callback,
            _commitment(finality),
            self._reconnect_backoff,
        )
        await sub.open()
        self._subscriptions.append(sub)
        return sub

    async def get_transfer_anchor(self, finality: Finality) -> str:
        resp = await self._client.get_latest_blockhash(commitment=_commitment(finality))
        return str(resp.value.blockhash)

    async def submit_transfer(
        self, raw: bytes, *, skip_preflight: bool, max_retries: int,
    ) -> str:
        opts = TxOpts(
            skip_preflight=skip_preflight,
            preflight_commitment=Processed,
            max_retries=max_retries,
        )
        resp = await self._client.send_raw_transaction(raw, opts=opts)
        return str(resp.value)

    async def await_finality(self, signature: str, finality: Finality) -> bool:
        """Poll signature status until ``finality`` is reached.

        Raises on timeout (solana-py's UnconfirmedTxError). Returns False if
        the transaction landed with an error.
        """
        resp = await self._client.confirm_transaction(
            Signature.from_string(signature), commitment=_commitment(finality),
        )
        status = resp.value[0] if resp.value else None
        if status is None:
            return False
        if status.err is not None:
            log.debug("Transaction %s landed with error: %s", signature[:16], status.err)
            return False
        return True
