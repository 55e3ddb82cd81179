"""Mock implementations of the ledger client facade and the solana-py objects behind it."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

from solders.hash import Hash
from solders.signature import Signature

from sol_forwarder.interfaces.ledger import BalanceCallback, Finality

MOCK_BLOCKHASH = str(Hash.default())
MOCK_SIGNATURE = "5mockSigVj2xYxN3q7cYh8fZ1aXgR4tK9bLwPe6uDsQnT"


class MockSubscription:
    """Implements BalanceSubscription protocol."""

    def __init__(self, account: str, callback: BalanceCallback, subscription_id: int) -> None:
        self.account = account
        self.callback = callback
        self._subscription_id = subscription_id
        self.closed = False

    @property
    def subscription_id(self) -> int | None:
        return self._subscription_id

    async def close(self) -> None:
        self.closed = True


class MockLedger:
    """Implements LedgerClient protocol. Records every call it receives.

    ``finality_results`` maps a Finality to True/False or an exception to
    raise; levels not listed succeed.
    """

    def __init__(
        self,
        balance: int = 0,
        blockhash: str = MOCK_BLOCKHASH,
        signature: str = MOCK_SIGNATURE,
        balance_error: Exception | None = None,
        subscribe_error: Exception | None = None,
        anchor_error: Exception | None = None,
        submit_error: Exception | None = None,
        finality_results: dict[Finality, bool | Exception] | None = None,
        submit_delay: float = 0,
    ) -> None:
        self.balance = balance
        self.blockhash = blockhash
        self.signature = signature
        self.balance_error = balance_error
        self.subscribe_error = subscribe_error
        self.anchor_error = anchor_error
        self.submit_error = submit_error
        self.finality_results = finality_results or {}
        self.submit_delay = submit_delay

        self.balance_calls: list[tuple[str, Finality]] = []
        self.anchor_calls: list[Finality] = []
        self.submit_calls: list[dict] = []
        self.finality_calls: list[tuple[str, Finality]] = []
        self.subscription: MockSubscription | None = None
        self.closed = False

    async def get_balance(self, account: str, finality: Finality) -> int:
        self.balance_calls.append((account, finality))
        if self.balance_error:
            raise self.balance_error
        return self.balance

    async def subscribe_balance(
        self, account: str, callback: BalanceCallback, finality: Finality,
    ) -> MockSubscription:
        if self.subscribe_error:
            raise self.subscribe_error
        self.subscription = MockSubscription(account, callback, subscription_id=42)
        return self.subscription

    async def get_transfer_anchor(self, finality: Finality) -> str:
        self.anchor_calls.append(finality)
        if self.anchor_error:
            raise self.anchor_error
        return self.blockhash

    async def submit_transfer(
        self, raw: bytes, *, skip_preflight: bool, max_retries: int,
    ) -> str:
        self.submit_calls.append(
            {"raw": raw, "skip_preflight": skip_preflight, "max_retries": max_retries}
        )
        if self.submit_delay:
            await asyncio.sleep(self.submit_delay)
        if self.submit_error:
            raise self.submit_error
        return self.signature

    async def await_finality(self, signature: str, finality: Finality) -> bool:
        self.finality_calls.append((signature, finality))
        result = self.finality_results.get(finality, True)
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        self.closed = True

    def push(self, lamports: int) -> None:
        """Test helper: deliver a balance notification to the subscriber."""
        assert self.subscription is not None, "no active subscription"
        self.subscription.callback(lamports)


# ── solana-py stand-ins for the adapter tests ────────────────────


class MockWebsocket:
    """Stands in for solana-py's websocket connection.

    Yields ``batches`` from ``async for`` and then either ends the stream
    (server closed the socket) or, with ``hold_open``, waits forever.
    ``block_recv`` makes the subscription handshake hang.
    """

    def __init__(
        self,
        subscription_id: int = 7,
        batches: list[list] | None = None,
        hold_open: bool = False,
        block_recv: bool = False,
        subscribe_error: Exception | None = None,
    ) -> None:
        self.subscription_id = subscription_id
        self.batches = batches or []
        self.hold_open = hold_open
        self.block_recv = block_recv
        self.subscribe_error = subscribe_error

        self.subscribe_calls: list[tuple] = []
        self.unsubscribe_calls: list[int] = []
        self.recv_started = asyncio.Event()
        self.closed = False

    async def account_subscribe(self, account, commitment=None, encoding=None) -> None:
        self.subscribe_calls.append((account, commitment))
        if self.subscribe_error:
            raise self.subscribe_error

    async def recv(self):
        self.recv_started.set()
        if self.block_recv:
            await asyncio.Event().wait()
        return [SimpleNamespace(result=self.subscription_id)]

    async def account_unsubscribe(self, subscription_id: int) -> None:
        self.unsubscribe_calls.append(subscription_id)

    async def close(self) -> None:
        self.closed = True

    def __aiter__(self):
        return self._stream()

    async def _stream(self):
        for batch in self.batches:
            yield batch
        if self.hold_open:
            await asyncio.Event().wait()


class MockConnector:
    """Replacement for ``websocket_api.connect``; hands out sockets in order."""

    def __init__(self, *sockets: MockWebsocket) -> None:
        self.sockets = list(sockets)
        self.handed_out: list[MockWebsocket] = []
        self.urls: list[str] = []

    async def __call__(self, url: str) -> MockWebsocket:
        self.urls.append(url)
        ws = self.sockets.pop(0)
        self.handed_out.append(ws)
        return ws


class MockAsyncClient:
    """Replacement for solana-py's AsyncClient recording every RPC call."""

    instances: list["MockAsyncClient"] = []

    def __init__(self, endpoint: str, commitment=None, timeout=None) -> None:
        self.endpoint = endpoint
        self.commitment = commitment
        self.timeout = timeout
        self.balance = 0
        self.blockhash = Hash.default()
        self.signature = Signature.default()
        self.statuses: list = [SimpleNamespace(err=None)]
        self.calls: list[tuple[str, dict]] = []
        self.closed = False
        MockAsyncClient.instances.append(self)

    async def get_balance(self, pubkey, commitment=None):
        self.calls.append(("get_balance", {"pubkey": pubkey, "commitment": commitment}))
        return SimpleNamespace(value=self.balance)

    async def get_latest_blockhash(self, commitment=None):
        self.calls.append(("get_latest_blockhash", {"commitment": commitment}))
        return SimpleNamespace(value=SimpleNamespace(blockhash=self.blockhash))

    async def send_raw_transaction(self, txn, opts=None):
        self.calls.append(("send_raw_transaction", {"txn": txn, "opts": opts}))
        return SimpleNamespace(value=self.signature)

    async def confirm_transaction(self, tx_sig, commitment=None):
        self.calls.append(("confirm_transaction", {"tx_sig": tx_sig, "commitment": commitment}))
        return SimpleNamespace(value=self.statuses)

    async def close(self) -> None:
        self.closed = True
