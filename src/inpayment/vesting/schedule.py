"""
Vesting unlock schedule computation.

Pure functions over ``VestingConfig`` and integer Unix timestamps.  Nothing
here reads the clock or the chain; callers pass ``now`` explicitly.

Anchor convention: ``compute_unlock_schedule`` takes the *resolved* release
start time.  The cliff is already folded into it (sale end + cliff when
vesting is enabled, the vesting manager's ``releaseStartTime`` otherwise),
and the first release happens one ``period`` later.  Use
``resolve_release_start_time`` to build the anchor.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Sequence

from ..errors import InvalidConfigurationError
from ..models import UnlockTimeInfo, VestingConfig, VestingType

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86_400
DEFAULT_PERIOD_LENGTH = 2 * SECONDS_PER_DAY
# Used when vesting is disabled and the project owner never set a release start.
DEFAULT_RELEASE_DELAY = 30 * SECONDS_PER_DAY


def resolve_release_start_time(
    config: VestingConfig,
    sale_end_time: int,
    on_chain_release_start: int = 0,
) -> int:
    """
    Resolve the anchor passed to ``compute_unlock_schedule``.

    Args:
        config: Project vesting configuration
        sale_end_time: End of the presale (Unix seconds)
        on_chain_release_start: ``VestingManager.releaseStartTime``; 0 if unset

    Returns:
        ``sale_end_time + cliff`` when vesting is enabled, otherwise the
        on-chain release start, or ``sale_end_time + DEFAULT_RELEASE_DELAY``
        when that was never set.
    """
    if config.enabled:
        return sale_end_time + config.cliff
    if on_chain_release_start > 0:
        return on_chain_release_start
    logger.debug(
        "releaseStartTime unset, defaulting to sale end + %ss", DEFAULT_RELEASE_DELAY
    )
    return sale_end_time + DEFAULT_RELEASE_DELAY


def step_unlock_times(first_release: int, config: VestingConfig) -> list[int]:
    """
    Checkpoints of a STEP schedule.

    ``ceil(100 / period_release_percentage)`` releases spaced ``period``
    apart, starting at ``first_release``.  A release past
    ``first_release + duration`` is replaced by that cap and ends the list.

    Raises:
        InvalidConfigurationError: If period or percentage is not positive.
    """
    percentage = Decimal(config.period_release_percentage)
    if config.period <= 0 or percentage <= 0:
        raise InvalidConfigurationError(
            f"STEP vesting needs a positive period and release percentage "
            f"(period={config.period}, percentage={percentage})"
        )

    total_periods = math.ceil(Decimal(100) / percentage)
    if total_periods <= 0:
        return []

    cap = first_release + config.duration
    unlock_times = [first_release]
    for i in range(1, total_periods):
        period_time = first_release + config.period * i
        if period_time > cap:
            if cap not in unlock_times:
                unlock_times.append(cap)
            break
        unlock_times.append(period_time)
    return unlock_times


def _next_unlock(unlock_times: Sequence[int], now: int) -> int:
    for unlock_time in unlock_times:
        if unlock_time > now:
            return unlock_time
    return unlock_times[-1]


def compute_unlock_schedule(
    config: VestingConfig,
    anchor: int,
    now: int,
    *,
    strict: bool = False,
) -> UnlockTimeInfo:
    """
    Compute the unlock checkpoints and the next one after ``now``.

    - Vesting disabled or ``NONE``: a single unlock at ``anchor``.
    - ``LINEAR``: the release start and end, ``duration`` apart.
    - ``STEP``: see ``step_unlock_times``.

    ``current_unlock_time`` is the first checkpoint strictly after ``now``,
    or the last one once all have passed.

    A STEP config with a non-positive period or percentage, or an unknown
    vesting type, yields the empty ``UnlockTimeInfo()``.  With
    ``strict=True`` the STEP misconfiguration raises
    ``InvalidConfigurationError`` instead.
    """
    if not config.enabled or config.vesting_type == VestingType.NONE:
        return UnlockTimeInfo(current_unlock_time=anchor, unlock_time_list=(anchor,))

    first_release = anchor + config.period

    if config.vesting_type == VestingType.LINEAR:
        unlock_times = [first_release, first_release + config.duration]
    elif config.vesting_type == VestingType.STEP:
        try:
            unlock_times = step_unlock_times(first_release, config)
        except InvalidConfigurationError as exc:
            if strict:
                raise
            logger.debug("No step schedule: %s", exc)
            return UnlockTimeInfo()
    else:
        logger.debug("Unknown vesting type %r, no schedule", config.vesting_type)
        return UnlockTimeInfo()

    if not unlock_times:
        return UnlockTimeInfo()

    return UnlockTimeInfo(
        current_unlock_time=_next_unlock(unlock_times, now),
        unlock_time_list=tuple(unlock_times),
    )


def build_period_list(
    start_time: int,
    end_time: int,
    period_length: int = DEFAULT_PERIOD_LENGTH,
) -> list[int]:
    """
    Fixed-interval display checkpoints between two instants.

    Yields ``start_time + k * period_length`` for every ``k >= 1`` that does
    not pass ``end_time``, then ``end_time`` itself unless it is already the
    last checkpoint.  Returns ``[]`` when ``end_time < start_time``.
    """
    if end_time < start_time:
        return []

    periods: list[int] = []
    if period_length > 0:
        checkpoint = start_time + period_length
        while checkpoint <= end_time:
            periods.append(checkpoint)
            checkpoint += period_length

    if not periods or periods[-1] < end_time:
        periods.append(end_time)
    return periods
