"""Synthetic record factories for testing."""

from __future__ import annotations

from solders.transaction import Transaction

from sol_forwarder.models.records import SweepRun, SweepStage


def make_sweep_run(
    lamports_balance: int = 10_000_000,
    stage: SweepStage = SweepStage.SENT,
    signature: str | None = "mock_sig",
    total_duration_ms: int | None = 1200,
    **fields,
) -> SweepRun:
    return SweepRun(
        lamports_balance=lamports_balance,
        stage=stage,
        lamports_to_send=lamports_balance - 5000 if stage is not SweepStage.INSUFFICIENT else None,
        signature=signature,
        total_duration_ms=total_duration_ms,
        **fields,
    )


def decode_transfer_lamports(raw: bytes) -> int:
    """Lamports moved by the single system transfer in a wire transaction.

    System program transfer data is a little-endian u32 instruction index (2)
    followed by a little-endian u64 amount.
    """
    tx = Transaction.from_bytes(raw)
    data = bytes(tx.message.instructions[0].data)
    assert int.from_bytes(data[:4], "little") == 2
    return int.from_bytes(data[4:12], "little")
