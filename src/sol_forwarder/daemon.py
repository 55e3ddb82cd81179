"""Main daemon - wires all components together."""

from __future__ import annotations

import asyncio
import logging
import signal
import time

from sol_forwarder.api.data_api import StatusAggregator
from sol_forwarder.api.server import StatusServer
from sol_forwarder.ledger.client import SolanaLedgerClient
from sol_forwarder.ledger.transfer import load_keypair
from sol_forwarder.models.config import ForwarderConfig
from sol_forwarder.storage.memory import EventLog, SendDetailLog
from sol_forwarder.sweep.monitor import BalanceMonitor
from sol_forwarder.sweep.pipeline import DESTINATION_ADDRESS, ForwardingPipeline

log = logging.getLogger(__name__)

SHUTDOWN_DRAIN_TIMEOUT = 10  # seconds to let in-flight sweeps finish


class ForwarderDaemon:
    """Sweeps every balance increase on the wallet to the fixed destination.

    Runs the balance monitor and the read-only status page until stopped.
    """

    def __init__(self, cfg: ForwarderConfig) -> None:
        self._cfg = cfg
        self._stopped = asyncio.Event()
        self._start_time = time.monotonic()

        keypair = load_keypair(cfg.private_key)
        self._public_key = str(keypair.pubkey())

        # Core components
        self.events = EventLog()
        self.send_details = SendDetailLog()
        self.ledger = SolanaLedgerClient(
            cfg.rpc_url, cfg.ws_url, reconnect_backoff=cfg.reconnect_backoff,
        )
        self.pipeline = ForwardingPipeline(
            self.ledger,
            keypair,
            self.events,
            self.send_details,
            destination=DESTINATION_ADDRESS,
            fee_reserve=cfg.fee_reserve,
            max_retries=cfg.max_retries,
            skip_preflight=cfg.skip_preflight,
        )
        self.monitor = BalanceMonitor(
            self.ledger,
            self.pipeline,
            self.events,
            self._public_key,
        )

        # Status surface
        self.data_api = StatusAggregator(
            self.events,
            self.send_details,
            self.monitor,
            self._public_key,
            DESTINATION_ADDRESS,
            self._start_time,
        )
        self.server = StatusServer(self.data_api, cfg.http_host, cfg.http_port)

    @property
    def public_key(self) -> str:
        return self._public_key

    async def start(self) -> None:
        """Start the status page and monitor, then run until stopped."""
        log.info("Starting sol-forwarder")
        log.info("  Wallet: %s", self._public_key)
        log.info("  Target: %s", DESTINATION_ADDRESS)
        log.info("  RPC: %s", self._cfg.rpc_url)
        log.info("  WS: %s", self._cfg.ws_url)
        log.info("  Fee reserve: %d lamports", self._cfg.fee_reserve)

        await self.server.start()
        try:
            await self.monitor.start()
            await self._stopped.wait()
        finally:
            await self.monitor.stop()
            try:
                await asyncio.wait_for(self.monitor.wait_idle(), SHUTDOWN_DRAIN_TIMEOUT)
            except asyncio.TimeoutError:
                log.warning("%d sweeps still in flight at shutdown", self.monitor.in_flight)
            await self.server.stop()
            await self.ledger.close()
            log.info("Forwarder shut down cleanly")

    async def stop(self) -> None:
        """Signal the daemon to stop gracefully."""
        log.info("Stop requested")
        self._stopped.set()


async def run_daemon(cfg: ForwarderConfig) -> None:
    """Entry point for running the daemon."""
    daemon = ForwarderDaemon(cfg)

    loop = asyncio.get_running_loop()

    def _signal_handler():
        asyncio.ensure_future(daemon.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    await daemon.start()
