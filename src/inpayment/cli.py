"""
Inpayment CLI

Command-line interface for the Inpayment presale SDK.

Commands:
  project      - Show project configuration
  progress     - Show presale progress
  price        - Show token price for a buyer
  usd-value    - Show price feed USD value of a token
  buy          - Buy tokens (native currency or ERC20)
  vesting      - Show a beneficiary's vesting schedule
  releasable   - Show releasable amount
  release      - Release vested tokens
  unlock-time  - Show the unlock schedule
  periods      - List checkpoints between two instants
  whoami       - Show signer address
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from .config import DEFAULT_RPC_URL
from .wallet import get_address, load_private_key


# ============ Constants ============

VERSION = "0.3.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="inpayment")
@click.option("--project-id", envvar="INPAYMENT_PROJECT_ID", default=None, help="Project ID")
@click.option(
    "--rpc-url",
    envvar="INPAYMENT_RPC_URL",
    default=DEFAULT_RPC_URL,
    show_default=True,
    help="JSON-RPC endpoint",
)
@click.option("--registry", envvar="PROJECT_REGISTRY_ADDRESS", default=None,
              help="ProjectRegistry contract address")
@click.option("--price-feed", envvar="PRICE_FEED_MANAGER_ADDRESS", default=None,
              help="PriceFeedManager contract address")
@click.option("--chain-id", envvar="CHAIN_ID", default=None, type=int, help="Chain ID")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    project_id: Optional[str],
    rpc_url: str,
    registry: Optional[str],
    price_feed: Optional[str],
    chain_id: Optional[int],
    verbose: bool,
) -> None:
    """Inpayment: presale purchases and token vesting."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {
        "project_id": project_id,
        "provider_url": rpc_url,
        "project_registry_address": registry,
        "price_feed_manager_address": price_feed,
        "chain_id": chain_id,
    }


# ============ Commands ============

from .commands.project import price, progress, project, usd_value
from .commands.purchase import buy
from .commands.vesting import periods, releasable, release, unlock_time, vesting

cli.add_command(project)
cli.add_command(progress)
cli.add_command(price)
cli.add_command(usd_value)
cli.add_command(buy)
cli.add_command(vesting)
cli.add_command(releasable)
cli.add_command(release)
cli.add_command(unlock_time)
cli.add_command(periods)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show the signer address."""
    try:
        pk = load_private_key()
        click.echo(f"Address: {get_address(pk)}")
    except ValueError:
        click.echo("No signer key found.")
        click.echo("Set PRIVATE_KEY in the environment or ~/.inpayment/.env.")
        sys.exit(1)


# ============ Entry Points ============


def main() -> None:
    """Inpayment CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
