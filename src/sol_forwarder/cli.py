"""CLI entry point for the sol-forwarder daemon."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from sol_forwarder.config import ConfigError, load_config, require_credentials
from sol_forwarder.daemon import run_daemon
from sol_forwarder.interfaces.ledger import Finality
from sol_forwarder.ledger.client import SolanaLedgerClient
from sol_forwarder.ledger.transfer import load_keypair, sol
from sol_forwarder.sweep.pipeline import DESTINATION_ADDRESS


def _load(ctx: click.Context, *, require: bool):
    """Load config, exiting with status 1 on any configuration error."""
    try:
        cfg = load_config(ctx.obj["config_path"])
        if require:
            require_credentials(cfg)
            load_keypair(cfg.private_key)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo("Set SOL_FORWARDER_RPC_URL and SOL_FORWARDER_PRIVATE_KEY (or .env).", err=True)
        sys.exit(1)

    if not ctx.obj["verbose"]:
        logging.getLogger().setLevel(cfg.log_level.upper())
    return cfg


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """sol-forwarder - Sweep every incoming SOL deposit to a fixed address."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Daemon ─────────────────────────────────────────────


@cli.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Start the forwarder and its status page."""
    cfg = _load(ctx, require=True)
    click.echo(f"Starting sol-forwarder (status page on port {cfg.http_port})")
    asyncio.run(run_daemon(cfg))


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show forwarder configuration."""
    cfg = _load(ctx, require=False)
    click.echo(f"RPC URL:      {cfg.rpc_url or '(not set)'}")
    click.echo(f"WS URL:       {cfg.ws_url or '(not set)'}")
    click.echo(f"Destination:  {DESTINATION_ADDRESS}")
    click.echo(f"Fee reserve:  {cfg.fee_reserve} lamports")
    click.echo(f"Max retries:  {cfg.max_retries}")
    click.echo(f"Preflight:    {'skipped' if cfg.skip_preflight else 'enabled'}")
    click.echo(f"HTTP:         {cfg.http_host}:{cfg.http_port}")
    click.echo(f"Secret:       {'***configured***' if cfg.private_key else '(not set)'}")


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Query the wallet's live balance and what a sweep would send."""
    cfg = _load(ctx, require=True)

    async def _info():
        public_key = str(load_keypair(cfg.private_key).pubkey())
        ledger = SolanaLedgerClient(cfg.rpc_url, cfg.ws_url)
        try:
            click.echo(f"Address:      {public_key}")
            click.echo(f"Destination:  {DESTINATION_ADDRESS}")
            balance = await ledger.get_balance(public_key, Finality.PROCESSED)
            click.echo(f"Balance:      {balance} lamports ({sol(balance)})")
            amount = balance - cfg.fee_reserve
            if amount > 0:
                click.echo(f"Sweepable:    {amount} lamports ({sol(amount)})")
            else:
                click.echo("Sweepable:    nothing (balance does not cover the fee reserve)")
        finally:
            await ledger.close()

    asyncio.run(_info())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
