"""
Project commands - Read project configuration and sale state.
"""

from __future__ import annotations

import json
from typing import Optional

import click

from ..errors import InpaymentError
from . import fail, format_timestamp, get_sdk


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def project(ctx: click.Context, as_json: bool) -> None:
    """Show project configuration from the registry."""
    sdk = get_sdk(ctx)
    try:
        info = sdk.init()
    except InpaymentError as exc:
        fail(exc)

    if as_json:
        click.echo(json.dumps(info.to_dict(), indent=2, default=str))
        return

    vesting = info.vesting_config
    referral = info.referral_config

    click.echo(f"=== Project {sdk.project_id} ===")
    click.echo("")
    click.echo(f"  Owner:             {info.project_owner}")
    click.echo(f"  Token:             {info.token_address}")
    click.echo(f"  Payment processor: {info.payment_processor}")
    click.echo(f"  Vesting manager:   {info.vesting_manager}")
    click.echo(f"  Active:            {'yes' if info.is_active else 'no'}")
    click.echo(f"  Created:           {format_timestamp(info.created_at)}")
    click.echo(f"  Max per buyer:     {info.max_tokens_to_buy}")

    for i, rnd in enumerate(info.rounds):
        click.echo("")
        click.echo(f"  Round #{i}")
        click.echo(f"    Tokens:  {rnd.token_amount}")
        click.echo(f"    Price:   {rnd.price} USD")
        click.echo(f"    Start:   {format_timestamp(rnd.start_time)}")
        click.echo(f"    End:     {format_timestamp(rnd.end_time)}")
        if rnd.dynamic_price_enabled:
            click.echo(
                f"    Dynamic: +{rnd.price_increase_rate}% after "
                f"{rnd.price_increase_threshold}% sold"
            )

    click.echo("")
    if vesting.enabled:
        click.echo(f"  Vesting:  {getattr(vesting.vesting_type, 'name', vesting.vesting_type)}")
        click.echo(f"    Cliff:    {vesting.cliff}s")
        click.echo(f"    Duration: {vesting.duration}s")
        click.echo(f"    Period:   {vesting.period}s")
        click.echo(f"    Per step: {vesting.period_release_percentage}%")
    else:
        click.echo("  Vesting:  disabled")

    if referral.enabled:
        click.echo(
            f"  Referral: {referral.referrer_reward_rate}% reward, "
            f"{referral.referee_discount_rate}% discount"
        )
    else:
        click.echo("  Referral: disabled")


@click.command()
@click.pass_context
def progress(ctx: click.Context) -> None:
    """Show the share of the presale allocation already sold."""
    try:
        value = get_sdk(ctx).get_project_progress()
    except InpaymentError as exc:
        fail(exc)
    click.echo(f"Sold: {value}%")


@click.command()
@click.option("--buyer", required=True, help="Buyer address (0x...)")
@click.option("--referrer", default=None, help="Referrer address (0x...)")
@click.pass_context
def price(ctx: click.Context, buyer: str, referrer: Optional[str]) -> None:
    """Show the token price for a buyer."""
    try:
        quote = get_sdk(ctx).get_token_price(buyer, referrer)
    except InpaymentError as exc:
        fail(exc)
    click.echo(f"  Price:            {quote['price']}")
    click.echo(f"  Discounted price: {quote['discounted_price']}")


@click.command("usd-value")
@click.option("--token", "token_address", required=True, help="Token contract address")
@click.pass_context
def usd_value(ctx: click.Context, token_address: str) -> None:
    """Show the price feed USD value of a token."""
    try:
        value = get_sdk(ctx).get_token_usd_value(token_address)
    except InpaymentError as exc:
        fail(exc)
    click.echo(str(value))
