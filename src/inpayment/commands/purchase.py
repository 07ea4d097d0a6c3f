"""
Purchase command - Buy project tokens.

Pays in the native currency by default, or in an ERC20 token with --token
(approving the payment processor first when needed).  The signer pays gas.
"""

from __future__ import annotations

from typing import Optional

import click

from ..models import BuyTokensOptions
from ..wallet import get_address, load_private_key
from . import fail, get_sdk, report_transaction


@click.command()
@click.option("--amount", required=True, help="Amount to pay, in whole units (e.g. 0.1)")
@click.option("--token", "token_address", default=None,
              help="ERC20 payment token address (default: native currency)")
@click.option("--referrer", default=None, help="Referrer address (0x...)")
@click.pass_context
def buy(
    ctx: click.Context,
    amount: str,
    token_address: Optional[str],
    referrer: Optional[str],
) -> None:
    """Buy project tokens."""
    sdk = get_sdk(ctx)

    try:
        private_key = load_private_key()
        buyer = get_address(private_key)
    except ValueError as exc:
        fail(exc)

    click.echo("=== Inpayment Buy ===")
    click.echo("")
    click.echo(f"  Buyer:   {buyer}")
    click.echo(f"  Project: {sdk.project_id}")
    click.echo(f"  Amount:  {amount} {'(token ' + token_address + ')' if token_address else '(native)'}")
    if referrer:
        click.echo(f"  Referrer: {referrer}")
    click.echo("")

    options = BuyTokensOptions(amount=amount, referrer=referrer)
    if token_address:
        result = sdk.buy_tokens_with_token(token_address, options, private_key=private_key)
    else:
        result = sdk.buy_tokens_with_eth(options, private_key=private_key)

    report_transaction(result, "Purchase")
