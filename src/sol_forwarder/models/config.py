"""Configuration models for the forwarder."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ForwarderConfig:
    """Complete forwarder configuration."""

    # Solana
    rpc_url: str = ""  # http(s) endpoint; ws(s) is normalized on load
    ws_url: str = ""  # derived from rpc_url when empty
    private_key: str = ""  # base58, loaded from env var SOL_FORWARDER_PRIVATE_KEY

    # Sweep
    fee_reserve: int = 5000  # lamports kept back for the transfer fee
    max_retries: int = 3  # passed through to sendTransaction
    skip_preflight: bool = False
    reconnect_backoff: int = 5  # seconds before resubscribing after a drop

    # HTTP status surface
    http_host: str = "0.0.0.0"
    http_port: int = 3000

    # Logging
    log_level: str = "info"
