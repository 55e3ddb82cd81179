"""Solana integration components."""

from sol_forwarder.ledger.client import SolanaLedgerClient
from sol_forwarder.ledger.subscription import SolanaBalanceSubscription
from sol_forwarder.ledger.transfer import (
    LAMPORTS_PER_SOL,
    build_transfer,
    load_keypair,
    sol,
)

__all__ = [
    "SolanaLedgerClient", "SolanaBalanceSubscription",
    "LAMPORTS_PER_SOL", "build_transfer", "load_keypair", "sol",
]
