"""
Commands - CLI command implementations for the Inpayment SDK.

- project:  project configuration, sale progress and pricing
- purchase: buy tokens with the native currency or an ERC20 token
- vesting:  vesting schedules, unlock times and releases
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from typing import NoReturn

import click

from ..config import SDKOptions
from ..errors import InpaymentError
from ..models import TransactionResult
from ..sdk import InpaymentSDK


def get_sdk(ctx: click.Context) -> InpaymentSDK:
    """Build (once per invocation) the SDK from the root group's options."""
    obj = ctx.ensure_object(dict)
    if "sdk" not in obj:
        try:
            options = SDKOptions.from_env(**obj.get("overrides", {}))
        except ValueError as exc:
            raise click.ClickException(str(exc))
        obj["sdk"] = InpaymentSDK(options)
    return obj["sdk"]


def fail(exc: Exception) -> NoReturn:
    click.secho(f"ERROR: {exc}", fg="red")
    sys.exit(exc.exit_code if isinstance(exc, InpaymentError) else 1)


def format_timestamp(ts: int) -> str:
    if ts <= 0:
        return "-"
    dt = datetime.fromtimestamp(ts, tz=timezone.utc)
    return f"{ts} ({dt.isoformat().replace('+00:00', 'Z')})"


def report_transaction(result: TransactionResult, action: str) -> None:
    if result.success:
        click.secho(f"SUCCESS: {action} confirmed!", fg="green")
        click.echo(f"  TX: {result.transaction_hash}")
    else:
        click.secho(f"FAILED: {action}: {result.error}", fg="red")
        sys.exit(1)
