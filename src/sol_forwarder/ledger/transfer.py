"""Signing key loading and system-program transfer construction."""

from __future__ import annotations

import base58
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

from sol_forwarder.config import ConfigError

LAMPORTS_PER_SOL = 1_000_000_000


def sol(lamports: int) -> str:
    """Format lamports as a human-readable SOL string."""
    return f"{lamports / LAMPORTS_PER_SOL:.9f} SOL"


def load_keypair(encoded: str) -> Keypair:
    """Decode a base58 64-byte secret key into a Keypair."""
    try:
        raw = base58.b58decode(encoded.strip())
        return Keypair.from_bytes(raw)
    except Exception as exc:
        raise ConfigError(f"Invalid private key: {exc}") from exc


def build_transfer(
    signer: Keypair,
    destination: Pubkey,
    lamports: int,
    blockhash: str,
) -> bytes:
    """Build and sign a single transfer of ``lamports`` from signer to destination.

    The signer is also the fee payer. Returns the serialized wire transaction.
    """
    recent = Hash.from_string(blockhash)
    ix = transfer(
        TransferParams(
            from_pubkey=signer.pubkey(),
            to_pubkey=destination,
            lamports=lamports,
        )
    )
    message = Message.new_with_blockhash([ix], signer.pubkey(), recent)
    tx = Transaction([signer], message, recent)
    return bytes(tx)
