"""Shared fixtures for sol_forwarder tests."""

from __future__ import annotations

import base58
import pytest
from pytest_metadata.plugin import metadata_key
from solders.keypair import Keypair

from sol_forwarder import daemon as daemon_module
from sol_forwarder.api.data_api import StatusAggregator
from sol_forwarder.daemon import ForwarderDaemon
from sol_forwarder.models.config import ForwarderConfig
from sol_forwarder.storage.memory import EventLog, SendDetailLog
from sol_forwarder.sweep.monitor import BalanceMonitor
from sol_forwarder.sweep.pipeline import DESTINATION_ADDRESS, ForwardingPipeline

from tests.mocks import MockLedger

FEE_RESERVE = 5000

# Env vars load_config reads; cleared so the runner's shell can't leak in
CONFIG_ENV_VARS = (
    "SOL_FORWARDER_RPC_URL",
    "SOL_FORWARDER_WS_URL",
    "SOL_FORWARDER_PRIVATE_KEY",
    "SOL_FORWARDER_PORT",
    "SOL_FORWARDER_FEE_RESERVE",
    "SOL_FORWARDER_MAX_RETRIES",
    "RPC_URL",
    "PRIVATE_KEY",
    "PORT",
)


# ── Report metadata ──────────────────────────────────────────────


def pytest_configure(config):
    """Add run info to the report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Network"] = "mocked (no RPC)"
    meta["Destination"] = DESTINATION_ADDRESS
    meta["Fee reserve"] = f"{FEE_RESERVE} lamports"


def make_test_config(**overrides) -> ForwarderConfig:
    """Build a ForwarderConfig suitable for testing."""
    defaults = dict(
        rpc_url="https://api.devnet.solana.com",
        ws_url="wss://api.devnet.solana.com",
        private_key="",
        fee_reserve=FEE_RESERVE,
        max_retries=3,
        http_host="127.0.0.1",
        http_port=3000,
    )
    defaults.update(overrides)
    return ForwarderConfig(**defaults)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every config env var for the duration of a test."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def keypair():
    return Keypair()


@pytest.fixture
def ledger():
    return MockLedger(balance=0)


@pytest.fixture
def events():
    return EventLog()


@pytest.fixture
def send_details():
    return SendDetailLog()


@pytest.fixture
def pipeline(ledger, keypair, events, send_details):
    """ForwardingPipeline wired to the mock ledger."""
    return ForwardingPipeline(
        ledger,
        keypair,
        events,
        send_details,
        fee_reserve=FEE_RESERVE,
        max_retries=3,
    )


@pytest.fixture
def monitor(ledger, pipeline, events, keypair):
    """BalanceMonitor watching the test keypair's account."""
    return BalanceMonitor(ledger, pipeline, events, str(keypair.pubkey()))


@pytest.fixture
def data_api(events, send_details, monitor, keypair):
    return StatusAggregator(
        events,
        send_details,
        monitor,
        str(keypair.pubkey()),
        DESTINATION_ADDRESS,
        start_time=0.0,
    )


@pytest.fixture
def daemon(monkeypatch, ledger, keypair):
    """Fully wired ForwarderDaemon on the mock ledger, status page on a free port."""
    monkeypatch.setattr(daemon_module, "SolanaLedgerClient", lambda *args, **kwargs: ledger)
    cfg = make_test_config(
        private_key=base58.b58encode(bytes(keypair)).decode(),
        http_port=0,
    )
    return ForwarderDaemon(cfg)
