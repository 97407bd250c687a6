"""CLI entry point for the autostake client."""

from __future__ import annotations

import asyncio
import logging
import sys
from decimal import Decimal

import click

from autostake.address import is_zero, short_address
from autostake.client import AutoStakeClient
from autostake.config import load_config
from autostake.models.config import ClientConfig
from autostake.models.records import MAX_UINT256
from autostake.models.snapshots import ClientSnapshot


def _units(amount: int, decimals: int, symbol: str) -> str:
    if amount == MAX_UINT256:
        return f"unlimited {symbol}"
    value = Decimal(amount).scaleb(-decimals).normalize()
    return f"{value:f} {symbol}"


def _require_contracts(cfg: ClientConfig) -> None:
    """Exit with error if contract addresses are not configured."""
    if not cfg.contracts.sale or not cfg.contracts.settlement_token:
        click.echo("Error: Contract addresses not configured.", err=True)
        click.echo(
            "Set [contracts] sale/settlement_token in config, or "
            "AUTOSTAKE_SALE_CONTRACT / AUTOSTAKE_TOKEN.",
            err=True,
        )
        sys.exit(1)


async def _connected(cfg: ClientConfig, page_url: str | None = None) -> tuple[AutoStakeClient, ClientSnapshot]:
    """Connect a client; exit non-zero if the session does not become ready."""
    client = AutoStakeClient.from_config(cfg)
    snap = await client.connect(page_url)
    if not snap.session.ready or snap.error:
        await client.close()
        click.echo(f"Error: {snap.message}", err=True)
        sys.exit(1)
    return client, snap


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """autostake - buy and auto-stake packages from your wallet."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show client configuration."""
    cfg = load_config(ctx.obj["config_path"])
    click.echo(f"Network:    {cfg.network.chain_name} ({cfg.network.chain_id})")
    click.echo(f"Wallet URL: {cfg.wallet_url}")
    click.echo(f"Account:    {cfg.account or '(first authorized)'}")
    click.echo(f"Sale:       {cfg.contracts.sale or '(not set)'}")
    click.echo(f"Token:      {cfg.contracts.settlement_token or '(not set)'}")
    click.echo(f"Ref param:  {cfg.referral_param}")


@cli.command()
@click.pass_context
def packages(ctx: click.Context) -> None:
    """List the packages exposed by the sale contract."""
    cfg = load_config(ctx.obj["config_path"])
    _require_contracts(cfg)
    tokens = cfg.tokens

    async def _packages():
        client, snap = await _connected(cfg)
        try:
            click.echo(f"Account: {snap.session.account}")
            for pkg in snap.packages:
                marker = "*" if snap.selected and snap.selected.id == pkg.id else " "
                state = "" if pkg.active else " (inactive)"
                click.echo(
                    f"{marker} #{pkg.id}: pay "
                    f"{_units(pkg.required_in, tokens.settlement_decimals, tokens.settlement_symbol)}"
                    f" -> {_units(pkg.mint_out, tokens.stake_decimals, tokens.stake_symbol)}{state}"
                )
        finally:
            await client.close()

    asyncio.run(_packages())


@cli.command()
@click.option("--package", "package_id", type=int, default=None, help="Package to check against")
@click.pass_context
def allowance(ctx: click.Context, package_id: int | None) -> None:
    """Show the token allowance granted to the sale contract."""
    cfg = load_config(ctx.obj["config_path"])
    _require_contracts(cfg)
    tokens = cfg.tokens

    async def _allowance():
        client, snap = await _connected(cfg)
        try:
            if package_id is not None:
                snap = await client.select(package_id)
                if snap.error:
                    click.echo(f"Error: {snap.message}", err=True)
                    sys.exit(1)
            check = client.allowance
            if check is None:
                click.echo("No package selected")
                return
            click.echo(
                f"Allowance: "
                f"{_units(check.state.amount, tokens.settlement_decimals, tokens.settlement_symbol)}"
            )
            click.echo(
                f"Required:  "
                f"{_units(check.required, tokens.settlement_decimals, tokens.settlement_symbol)}"
                f" (package #{client.selected_id})"
            )
            click.echo(f"Status:    {check.status.value}")
        finally:
            await client.close()

    asyncio.run(_allowance())


@cli.command()
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def approve(ctx: click.Context, yes: bool) -> None:
    """Approve the sale contract to spend the settlement token.

    The approval is for the maximum amount so a single approval covers any
    package. Revoke it from your wallet when you no longer need it.
    """
    cfg = load_config(ctx.obj["config_path"])
    _require_contracts(cfg)

    if not yes:
        click.confirm(
            f"This grants {cfg.contracts.sale} an UNLIMITED "
            f"{cfg.tokens.settlement_symbol} allowance. Continue?",
            abort=True,
        )

    async def _approve():
        client, _ = await _connected(cfg)
        try:
            result = await client.approve()
        finally:
            await client.close()
        if not result.success:
            click.echo(f"Approve failed: {result.message}", err=True)
            sys.exit(1)
        click.echo(f"Approved (block {result.block_number}, tx {result.tx_hash})")

    asyncio.run(_approve())


@cli.command()
@click.argument("package_id", type=int)
@click.option("--link", "page_url", default=None, help="Page URL carrying a referral parameter")
@click.option("--ref", "referrer", default=None, help="Referrer address")
@click.pass_context
def buy(ctx: click.Context, package_id: int, page_url: str | None, referrer: str | None) -> None:
    """Buy PACKAGE_ID and auto-stake the result."""
    cfg = load_config(ctx.obj["config_path"])
    _require_contracts(cfg)

    async def _buy():
        client, _ = await _connected(cfg, page_url)
        try:
            result = await client.buy(package_id, page_url=page_url, referrer=referrer)
        finally:
            await client.close()
        if not result.success:
            click.echo(f"Buy failed ({result.error.value}): {result.message}", err=True)
            sys.exit(1)
        ref = "none" if not result.referrer or is_zero(result.referrer) else short_address(result.referrer)
        click.echo(f"Bought package #{package_id} (referrer {ref})")
        click.echo(f"  Block: {result.block_number}")
        click.echo(f"  Tx:    {result.tx_hash}")

    asyncio.run(_buy())


@cli.command("ref-link")
@click.argument("base_url")
@click.pass_context
def ref_link(ctx: click.Context, base_url: str) -> None:
    """Print a shareable referral link for the connected account."""
    cfg = load_config(ctx.obj["config_path"])
    _require_contracts(cfg)

    async def _ref_link():
        client, _ = await _connected(cfg)
        try:
            click.echo(client.referral_link(base_url))
        finally:
            await client.close()

    asyncio.run(_ref_link())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
