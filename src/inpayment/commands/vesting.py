"""
Vesting commands - Schedules, unlock times and releases.

- vesting:     a beneficiary's vesting record
- releasable:  amount currently releasable
- release:     release vested tokens (own, or batched with --all)
- unlock-time: project unlock checkpoints and the next one
- periods:     fixed-interval checkpoints between two instants (offline)
"""

from __future__ import annotations

import json
import time
from typing import Optional

import click

from ..errors import InpaymentError
from ..vesting.schedule import DEFAULT_PERIOD_LENGTH, build_period_list
from ..wallet import load_private_key
from . import fail, format_timestamp, get_sdk, report_transaction


@click.command()
@click.option("--address", required=True, help="Beneficiary address (0x...)")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def vesting(ctx: click.Context, address: str, as_json: bool) -> None:
    """Show a beneficiary's vesting schedule."""
    try:
        info = get_sdk(ctx).get_vesting_schedule_info(address)
    except InpaymentError as exc:
        fail(exc)

    if as_json:
        click.echo(json.dumps(info.to_dict(), indent=2, default=str))
        return

    click.echo(f"  Beneficiary: {info.beneficiary}")
    click.echo(f"  Amount:      {info.amount}")
    click.echo(f"  Released:    {info.released}")
    if info.start_time is not None:
        click.echo(f"  Start:       {format_timestamp(info.start_time)}")
        click.echo(f"  End:         {format_timestamp(info.end_time or 0)}")
        click.echo(f"  Revoked:     {'yes' if info.revoked else 'no'}")
        click.echo(f"  Checkpoints: {len(info.period_list)}")


@click.command()
@click.option("--address", default=None, help="Beneficiary address (default: signer)")
@click.pass_context
def releasable(ctx: click.Context, address: Optional[str]) -> None:
    """Show the amount currently releasable."""
    sdk = get_sdk(ctx)
    try:
        private_key = None if address else load_private_key()
        amount = sdk.get_releasable_amount(address=address, private_key=private_key)
    except (ValueError, InpaymentError) as exc:
        fail(exc)
    click.echo(f"Releasable: {amount}")


@click.command()
@click.option("--all", "release_all", is_flag=True, help="Batch release for all beneficiaries")
@click.option("--start-idx", default=0, type=int, help="First schedule index (with --all)")
@click.option("--batch-size", default=100, type=int, help="Schedules per batch (with --all)")
@click.pass_context
def release(ctx: click.Context, release_all: bool, start_idx: int, batch_size: int) -> None:
    """Release vested tokens."""
    sdk = get_sdk(ctx)
    try:
        private_key = load_private_key()
    except ValueError as exc:
        fail(exc)

    if release_all:
        click.echo(f"Releasing schedules {start_idx}..{start_idx + batch_size - 1}...")
        result = sdk.release_all_tokens(start_idx, batch_size, private_key=private_key)
    else:
        click.echo("Releasing vested tokens...")
        result = sdk.release_tokens(private_key=private_key)

    report_transaction(result, "Release")


@click.command("unlock-time")
@click.option("--now", "now", default=None, type=int, help="Reference time (Unix seconds)")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def unlock_time(ctx: click.Context, now: Optional[int], as_json: bool) -> None:
    """Show the project's unlock schedule."""
    if now is None:
        now = int(time.time())
    try:
        info = get_sdk(ctx).get_unlock_time(now=now)
    except InpaymentError as exc:
        fail(exc)

    if as_json:
        click.echo(json.dumps(info.to_dict(), indent=2))
        return

    if not info.is_available:
        click.secho("Unlock schedule unavailable (check the vesting configuration).", fg="yellow")
        return

    click.echo(f"  Next unlock: {format_timestamp(info.current_unlock_time)}")
    click.echo("  Schedule:")
    for ts in info.unlock_time_list:
        marker = "*" if ts == info.current_unlock_time else " "
        state = "unlocked" if ts <= now else "locked"
        click.echo(f"   {marker} {format_timestamp(ts)}  {state}")


@click.command()
@click.option("--start", "start_time", required=True, type=int, help="Start (Unix seconds)")
@click.option("--end", "end_time", required=True, type=int, help="End (Unix seconds)")
@click.option("--period-length", default=DEFAULT_PERIOD_LENGTH, type=int,
              help="Seconds between checkpoints (default: 2 days)")
def periods(start_time: int, end_time: int, period_length: int) -> None:
    """List display checkpoints between two instants."""
    for ts in build_period_list(start_time, end_time, period_length):
        click.echo(format_timestamp(ts))
