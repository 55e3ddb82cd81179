"""Balance monitoring and fund forwarding."""

from sol_forwarder.sweep.monitor import BalanceMonitor
from sol_forwarder.sweep.pipeline import DESTINATION_ADDRESS, ForwardingPipeline

__all__ = ["BalanceMonitor", "DESTINATION_ADDRESS", "ForwardingPipeline"]
