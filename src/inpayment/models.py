"""
Typed models for Inpayment contract state.

Contract reads come back either as positional tuples (what eth-abi decodes)
or as mappings keyed by Solidity field names (hand-built fixtures, other
ABI revisions).  The ``from_chain`` constructors accept both shapes and are
the only place raw responses are interpreted.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass
from decimal import Decimal
from enum import IntEnum
from typing import Any, Optional, Union

from .utils import bps_to_percent, from_wei


class VestingType(IntEnum):
    NONE = 0
    LINEAR = 1  # continuous release between two instants
    STEP = 2  # fixed percentage per period


def parse_vesting_type(raw: Any) -> Union[VestingType, int]:
    """Map a raw on-chain value to ``VestingType``; unknown values pass through as int."""
    value = int(raw)
    try:
        return VestingType(value)
    except ValueError:
        return value


def _field(raw: Any, index: int, *names: str) -> Any:
    if isinstance(raw, Mapping):
        for name in names:
            if name in raw:
                return raw[name]
        raise KeyError(names[0])
    return raw[index]


def _has_field(raw: Any, index: int, name: str) -> bool:
    if isinstance(raw, Mapping):
        return name in raw
    return len(raw) > index


def _is_struct(raw: Any) -> bool:
    return isinstance(raw, Mapping) or (
        isinstance(raw, Sequence) and not isinstance(raw, (str, bytes))
    )


@dataclass(frozen=True)
class VestingConfig:
    """
    Vesting configuration of a project.

    Attributes:
        enabled: Whether vesting is active; if not, everything unlocks at once
        vesting_type: Release shape (``VestingType`` or an unknown raw int)
        cliff: Delay in seconds before any release
        duration: Seconds over which release completes, from the first release
        period: Seconds between step releases
        period_release_percentage: Percent released per step, e.g. ``Decimal("25.00")``
    """
    enabled: bool
    vesting_type: Union[VestingType, int]
    cliff: int = 0
    duration: int = 0
    period: int = 0
    period_release_percentage: Decimal = Decimal("0")

    @classmethod
    def from_chain(cls, raw: Any) -> "VestingConfig":
        return cls(
            enabled=bool(_field(raw, 0, "isAuto", "enabled")),
            vesting_type=parse_vesting_type(_field(raw, 1, "vestingType")),
            cliff=int(_field(raw, 2, "cliff")),
            duration=int(_field(raw, 3, "duration")),
            period=int(_field(raw, 4, "period")),
            period_release_percentage=bps_to_percent(
                _field(raw, 5, "periodReleasePercentage")
            ),
        )


@dataclass(frozen=True)
class UnlockTimeInfo:
    """Computed unlock schedule.

    An empty ``unlock_time_list`` with ``current_unlock_time == 0`` means the
    schedule is unavailable, not that everything is unlocked.
    """
    current_unlock_time: int = 0
    unlock_time_list: tuple[int, ...] = ()

    @property
    def is_available(self) -> bool:
        return bool(self.unlock_time_list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_unlock_time": self.current_unlock_time,
            "unlock_time_list": list(self.unlock_time_list),
        }


@dataclass(frozen=True)
class Round:
    """A presale round. Amounts are ether-formatted strings, rates are percentages."""
    token_amount: str
    price: str
    start_time: int
    end_time: int
    dynamic_price_enabled: bool
    price_increase_threshold: Decimal
    price_increase_rate: Decimal

    @classmethod
    def from_chain(cls, raw: Any) -> "Round":
        return cls(
            token_amount=from_wei(_field(raw, 0, "tokenAmount")),
            price=from_wei(_field(raw, 1, "price")),
            start_time=int(_field(raw, 2, "startTime")),
            end_time=int(_field(raw, 3, "endTime")),
            dynamic_price_enabled=bool(_field(raw, 4, "dynamicPriceEnabled")),
            price_increase_threshold=bps_to_percent(_field(raw, 5, "priceIncreaseThreshold")),
            price_increase_rate=bps_to_percent(_field(raw, 6, "priceIncreaseRate")),
        )


def parse_rounds(raw: Any) -> tuple[Round, ...]:
    """Parse either a single round struct or a list of them."""
    if isinstance(raw, Mapping):
        return (Round.from_chain(raw),)
    if len(raw) == 0:
        return ()
    if _is_struct(raw[0]):
        return tuple(Round.from_chain(item) for item in raw)
    return (Round.from_chain(raw),)


@dataclass(frozen=True)
class ReferralConfig:
    enabled: bool
    referrer_reward_rate: Decimal
    referee_discount_rate: Decimal

    @classmethod
    def from_chain(cls, raw: Any) -> "ReferralConfig":
        return cls(
            enabled=bool(_field(raw, 0, "enabled")),
            referrer_reward_rate=bps_to_percent(_field(raw, 1, "referrerRewardRate")),
            referee_discount_rate=bps_to_percent(_field(raw, 2, "refereeDiscountRate")),
        )


@dataclass(frozen=True)
class ProjectInfo:
    project_owner: str
    token_address: str
    payment_processor: str
    vesting_manager: str
    rounds: tuple[Round, ...]
    max_tokens_to_buy: str
    is_active: bool
    created_at: int
    vesting_config: VestingConfig
    referral_config: ReferralConfig

    @classmethod
    def from_chain(cls, raw: Any) -> "ProjectInfo":
        """Build from a ``ProjectRegistry.getProject`` response."""
        return cls(
            project_owner=str(_field(raw, 0, "projectOwner")),
            token_address=str(_field(raw, 1, "tokenAddress")),
            payment_processor=str(_field(raw, 2, "paymentProcessor")),
            vesting_manager=str(_field(raw, 3, "vestingManager")),
            rounds=parse_rounds(_field(raw, 4, "rounds", "round")),
            max_tokens_to_buy=from_wei(_field(raw, 5, "maxTokensToBuy")),
            is_active=bool(_field(raw, 6, "isActive")),
            created_at=int(_field(raw, 7, "createdAt")),
            vesting_config=VestingConfig.from_chain(_field(raw, 8, "vestingConfig")),
            referral_config=ReferralConfig.from_chain(_field(raw, 9, "referralConfig")),
        )

    @property
    def sale_end_time(self) -> int:
        """End of the last presale round (0 when no rounds are configured)."""
        return max((r.end_time for r in self.rounds), default=0)

    @property
    def total_token_amount(self) -> Decimal:
        return sum((Decimal(r.token_amount) for r in self.rounds), Decimal("0"))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class VestingScheduleInfo:
    """
    A beneficiary's vesting record.

    The short record carries only beneficiary, amount and released; the
    extended record adds the schedule parameters, from which ``end_time``
    and ``period_list`` are derived.
    """
    beneficiary: str
    amount: str
    released: str
    start_time: Optional[int] = None
    cliff: Optional[int] = None
    duration: Optional[int] = None
    vesting_type: Optional[Union[VestingType, int]] = None
    period: Optional[int] = None
    period_release_percentage: Optional[Decimal] = None
    revoked: Optional[bool] = None
    end_time: Optional[int] = None
    period_list: tuple[int, ...] = ()

    @classmethod
    def from_chain(cls, raw: Any) -> "VestingScheduleInfo":
        """Build from a ``VestingManager.getVestingSchedule`` response."""
        beneficiary = str(_field(raw, 0, "beneficiary"))
        amount = from_wei(_field(raw, 1, "amount"))
        released = from_wei(_field(raw, 2, "released"))

        if not _has_field(raw, 3, "startTime"):
            return cls(beneficiary=beneficiary, amount=amount, released=released)

        from .vesting.schedule import build_period_list

        start_time = int(_field(raw, 3, "startTime"))
        cliff = int(_field(raw, 4, "cliff"))
        duration = int(_field(raw, 5, "duration"))
        end_time = start_time + cliff + duration
        return cls(
            beneficiary=beneficiary,
            amount=amount,
            released=released,
            start_time=start_time,
            cliff=cliff,
            duration=duration,
            vesting_type=parse_vesting_type(_field(raw, 6, "vestingType")),
            period=int(_field(raw, 7, "period")),
            period_release_percentage=bps_to_percent(_field(raw, 8, "periodReleasePercentage")),
            revoked=bool(_field(raw, 9, "revoked")),
            end_time=end_time,
            period_list=tuple(build_period_list(start_time, end_time)),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BuyTokensOptions:
    amount: Union[str, int, float, Decimal]  # ether units
    referrer: Optional[str] = None


@dataclass(frozen=True)
class TransactionResult:
    success: bool
    transaction_hash: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success}
        if self.transaction_hash is not None:
            result["transaction_hash"] = self.transaction_hash
        if self.error is not None:
            result["error"] = self.error
        return result
