"""sol_forwarder - watches one Solana account and sweeps every deposit onward."""

__version__ = "0.1.0"
