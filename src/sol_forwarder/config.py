"""Configuration loading: TOML file + environment variables (+ .env)."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from dotenv import load_dotenv

from sol_forwarder.models.config import ForwarderConfig

log = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Missing or malformed configuration. Fatal at startup."""


def normalize_rpc_url(url: str) -> str:
    """Return a request/response endpoint for ``url``.

    Streaming schemes are rewritten (wss -> https, ws -> http) with a
    warning. Anything other than http(s)/ws(s) is rejected.
    """
    url = url.strip()
    if url.startswith("wss://"):
        log.warning("Rewriting RPC URL scheme wss:// -> https://")
        return "https://" + url[len("wss://"):]
    if url.startswith("ws://"):
        log.warning("Rewriting RPC URL scheme ws:// -> http://")
        return "http://" + url[len("ws://"):]
    if url.startswith(("http://", "https://")):
        return url
    raise ConfigError(f"RPC URL must start with http(s):// or ws(s)://: {url!r}")


def derive_ws_url(http_url: str) -> str:
    """Websocket endpoint paired with an http(s) RPC endpoint."""
    if http_url.startswith("https://"):
        return "wss://" + http_url[len("https://"):]
    if http_url.startswith("http://"):
        return "ws://" + http_url[len("http://"):]
    raise ConfigError(f"Cannot derive websocket URL from {http_url!r}")


def _env(prefix: str, name: str, fallback: str | None = None) -> str | None:
    """Prefixed env var, then the bare legacy name if given."""
    if v := os.environ.get(f"{prefix}{name}"):
        return v
    if fallback and (v := os.environ.get(fallback)):
        return v
    return None


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "SOL_FORWARDER_",
    dotenv: bool = True,
) -> ForwarderConfig:
    """Load forwarder configuration from TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (SOL_FORWARDER_PRIVATE_KEY, etc.)
        2. Unprefixed RPC_URL / PRIVATE_KEY / PORT
        3. TOML config file
        4. Defaults from ForwarderConfig

    URLs are normalized but presence of the RPC URL and key is not checked
    here; see ``require_credentials``.
    """
    if dotenv:
        load_dotenv()

    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = ForwarderConfig()

    # ── Forwarder section ──────────────────────────────────
    fwd = raw.get("forwarder", {})
    if (v := fwd.get("fee_reserve")) is not None:
        cfg.fee_reserve = int(v)
    if (v := fwd.get("max_retries")) is not None:
        cfg.max_retries = int(v)
    if (v := fwd.get("skip_preflight")) is not None:
        cfg.skip_preflight = bool(v)
    if v := fwd.get("reconnect_backoff"):
        cfg.reconnect_backoff = int(v)
    if v := fwd.get("log_level"):
        cfg.log_level = str(v)

    # ── Solana section ─────────────────────────────────────
    solana = raw.get("solana", {})
    if v := solana.get("rpc_url"):
        cfg.rpc_url = str(v)
    if v := solana.get("ws_url"):
        cfg.ws_url = str(v)
    if v := solana.get("private_key"):
        cfg.private_key = str(v)

    # ── HTTP section ───────────────────────────────────────
    http = raw.get("http", {})
    if v := http.get("host"):
        cfg.http_host = str(v)
    if v := http.get("port"):
        cfg.http_port = int(v)

    # ── Environment variable overrides (highest priority) ──
    if rpc := _env(env_prefix, "RPC_URL", "RPC_URL"):
        cfg.rpc_url = rpc
    if ws := _env(env_prefix, "WS_URL"):
        cfg.ws_url = ws
    if secret := _env(env_prefix, "PRIVATE_KEY", "PRIVATE_KEY"):
        cfg.private_key = secret
    if port := _env(env_prefix, "PORT", "PORT"):
        cfg.http_port = int(port)
    if reserve := _env(env_prefix, "FEE_RESERVE"):
        cfg.fee_reserve = int(reserve)
    if retries := _env(env_prefix, "MAX_RETRIES"):
        cfg.max_retries = int(retries)

    if cfg.rpc_url:
        cfg.rpc_url = normalize_rpc_url(cfg.rpc_url)
        if not cfg.ws_url:
            cfg.ws_url = derive_ws_url(cfg.rpc_url)

    return cfg


def require_credentials(cfg: ForwarderConfig) -> None:
    """Raise ConfigError unless both the RPC URL and signing key are set."""
    missing = []
    if not cfg.rpc_url:
        missing.append("RPC URL (SOL_FORWARDER_RPC_URL or RPC_URL)")
    if not cfg.private_key:
        missing.append("private key (SOL_FORWARDER_PRIVATE_KEY or PRIVATE_KEY)")
    if missing:
        raise ConfigError("Missing " + " and ".join(missing))
