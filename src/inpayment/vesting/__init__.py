"""
Vesting - Unlock schedule computation for Inpayment projects.

- schedule: unlock checkpoints per vesting type, display period lists
"""

from .schedule import (
    DEFAULT_PERIOD_LENGTH,
    DEFAULT_RELEASE_DELAY,
    build_period_list,
    compute_unlock_schedule,
    resolve_release_start_time,
)

__all__ = [
    "DEFAULT_PERIOD_LENGTH",
    "DEFAULT_RELEASE_DELAY",
    "build_period_list",
    "compute_unlock_schedule",
    "resolve_release_start_time",
]
