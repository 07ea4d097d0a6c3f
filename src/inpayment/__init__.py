__all__ = [
    # SDK
    "InpaymentSDK",
    "SDKOptions",
    # Models
    "BuyTokensOptions",
    "ProjectInfo",
    "ReferralConfig",
    "Round",
    "TransactionResult",
    "UnlockTimeInfo",
    "VestingConfig",
    "VestingScheduleInfo",
    "VestingType",
    # Vesting schedule
    "DEFAULT_PERIOD_LENGTH",
    "DEFAULT_RELEASE_DELAY",
    "build_period_list",
    "compute_unlock_schedule",
    "resolve_release_start_time",
    # Errors
    "ContractReadError",
    "InitializationError",
    "InpaymentError",
    "InsufficientBalanceError",
    "InvalidAddressError",
    "InvalidConfigurationError",
    "NotInitializedError",
    "RpcError",
    "TransactionRevertedError",
    # Utils
    "format_error",
    "from_wei",
    "is_valid_address",
    "to_wei",
]

from .config import SDKOptions
from .errors import (
    ContractReadError,
    InitializationError,
    InpaymentError,
    InsufficientBalanceError,
    InvalidAddressError,
    InvalidConfigurationError,
    NotInitializedError,
    RpcError,
    TransactionRevertedError,
)
from .models import (
    BuyTokensOptions,
    ProjectInfo,
    ReferralConfig,
    Round,
    TransactionResult,
    UnlockTimeInfo,
    VestingConfig,
    VestingScheduleInfo,
    VestingType,
)
from .sdk import InpaymentSDK
from .utils import format_error, from_wei, is_valid_address, to_wei
from .vesting.schedule import (
    DEFAULT_PERIOD_LENGTH,
    DEFAULT_RELEASE_DELAY,
    build_period_list,
    compute_unlock_schedule,
    resolve_release_start_time,
)
