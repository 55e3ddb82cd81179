"""API components - status aggregator and HTTP surface."""

from sol_forwarder.api.data_api import StatusAggregator
from sol_forwarder.api.server import StatusServer, create_app

__all__ = ["StatusAggregator", "StatusServer", "create_app"]
