"""
InpaymentSDK - Client facade over the Inpayment presale contracts.

Reads project configuration from the ProjectRegistry, submits purchases to
the PaymentProcessor, and queries/triggers releases on the VestingManager.
Contract state is authoritative; this class only mirrors and formats it.

Read operations raise ``InpaymentError`` subclasses.  Transaction
operations never raise: they return a ``TransactionResult`` whose
``error`` carries the failure message.
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Optional, Union

from .chain.abi import (
    ERC20,
    PAYMENT_PROCESSOR,
    PRICE_FEED_MANAGER,
    PROJECT_REGISTRY,
    VESTING_MANAGER,
)
from .chain.rpc import read_contract
from .chain.tx import send_contract_tx
from .config import SDKOptions
from .errors import (
    ContractReadError,
    InitializationError,
    InpaymentError,
    InsufficientBalanceError,
    InvalidAddressError,
    NotInitializedError,
    TransactionRevertedError,
)
from .models import (
    BuyTokensOptions,
    ProjectInfo,
    TransactionResult,
    UnlockTimeInfo,
    VestingScheduleInfo,
    VestingType,
)
from .utils import (
    MAX_UINT256,
    ZERO_ADDRESS,
    format_error,
    from_wei,
    is_valid_address,
    to_wei,
)
from .vesting.schedule import (
    DEFAULT_PERIOD_LENGTH,
    build_period_list,
    compute_unlock_schedule,
    resolve_release_start_time,
)
from .wallet import get_address

logger = logging.getLogger(__name__)


def _require_address(address: str, label: str) -> str:
    if not is_valid_address(address):
        raise InvalidAddressError(f"Invalid {label} address: {address!r}")
    return address


class InpaymentSDK:
    """
    Client for one Inpayment project.

    Args:
        options: Project ID, RPC endpoint and contract addresses

    Usage:
        sdk = InpaymentSDK(SDKOptions.from_env())
        sdk.init()
        schedule = sdk.get_unlock_time()
    """

    def __init__(self, options: SDKOptions) -> None:
        self.options = options
        self.project_id = options.project_id
        self.rpc_url = options.provider_url
        self._project_info: Optional[ProjectInfo] = None

    # ============ Chain access ============

    def _read(self, address: str, function_name: str, args: list, contract_name: str):
        return read_contract(
            address,
            function_name,
            args,
            contract_name=contract_name,
            rpc_url=self.rpc_url,
        )

    def _send(
        self,
        address: str,
        function_name: str,
        args: list,
        contract_name: str,
        private_key: Optional[str],
        value: int = 0,
    ) -> str:
        result = send_contract_tx(
            contract_address=address,
            function_name=function_name,
            args=args,
            contract_name=contract_name,
            value=value,
            private_key=private_key,
            rpc_url=self.rpc_url,
            chain_id=self.options.chain_id,
        )
        if result.get("status") != 1:
            raise TransactionRevertedError(
                f"{function_name} reverted: {result.get('tx_hash', 'unknown')}"
            )
        return result["tx_hash"]

    def _ensure_project(self) -> ProjectInfo:
        if self._project_info is None:
            self.init()
        if self._project_info is None:
            raise InitializationError("Failed to initialize project info")
        return self._project_info

    # ============ Project ============

    def init(self) -> ProjectInfo:
        """
        Fetch and cache the project configuration from the registry.

        Raises:
            InitializationError: If the read fails or the project's payment
                or vesting contract address is invalid
        """
        try:
            registry = _require_address(self.options.project_registry_address, "project registry")
            raw = self._read(registry, "getProject", [self.project_id], PROJECT_REGISTRY)
            if raw is None:
                raise ContractReadError(f"Project {self.project_id!r} not found")

            info = ProjectInfo.from_chain(raw)
            for address in (info.payment_processor, info.vesting_manager):
                if not is_valid_address(address) or address == ZERO_ADDRESS:
                    raise InvalidAddressError("Invalid contract address")
        except Exception as exc:
            raise InitializationError(f"Initialization failed: {format_error(exc)}") from exc

        self._project_info = info
        logger.info(
            "Initialized project %s (payment %s, vesting %s)",
            self.project_id,
            info.payment_processor,
            info.vesting_manager,
        )
        return info

    def get_project_info(self) -> ProjectInfo:
        if self._project_info is None:
            raise NotInitializedError("SDK is not initialized, please call init() first")
        return self._project_info

    def get_project_progress(self) -> str:
        """Percentage of the presale allocation sold, two decimals (e.g. "42.50")."""
        info = self._ensure_project()
        try:
            sold = self._read(info.payment_processor, "projectSales", [self.project_id], PAYMENT_PROCESSOR)
        except Exception as exc:
            raise ContractReadError(f"Failed to get project progress: {format_error(exc)}") from exc

        total = info.total_token_amount
        if total == 0:
            return "0.00"
        progress = Decimal(from_wei(sold or 0)) / total * 100
        return f"{progress:.2f}"

    # ============ Pricing ============

    def get_token_price(self, buyer: str, referrer: Optional[str] = None) -> dict[str, str]:
        """
        Current token price for a buyer, with any referral discount applied.

        Returns:
            ``{"price": ..., "discounted_price": ...}`` in ether units
        """
        info = self._ensure_project()
        try:
            price, discounted_price = self._read(
                info.payment_processor,
                "getTokenPrice",
                [self.project_id, buyer, self._referrer(referrer)],
                PAYMENT_PROCESSOR,
            )
        except Exception as exc:
            raise ContractReadError(f"Failed to get token price: {format_error(exc)}") from exc

        return {"price": from_wei(price), "discounted_price": from_wei(discounted_price)}

    def get_token_usd_value(self, token_address: str) -> int:
        """Raw USD value of one unit of ``token_address`` from the price feed."""
        feed = _require_address(self.options.price_feed_manager_address, "price feed manager")
        _require_address(token_address, "token")
        try:
            value = self._read(feed, "getTokenUsdValue", [token_address, 1], PRICE_FEED_MANAGER)
        except Exception as exc:
            raise ContractReadError(f"Failed to get token USD value: {format_error(exc)}") from exc
        return int(value or 0)

    # ============ Purchases ============

    def buy_tokens_with_eth(
        self, options: BuyTokensOptions, private_key: Optional[str] = None
    ) -> TransactionResult:
        """Buy project tokens paying ``options.amount`` in the native currency."""
        try:
            info = self._ensure_project()
            referrer = self._referrer(options.referrer)
            tx_hash = self._send(
                info.payment_processor,
                "buyTokensWithETH",
                [self.project_id, referrer],
                PAYMENT_PROCESSOR,
                private_key,
                value=to_wei(options.amount),
            )
            return TransactionResult(success=True, transaction_hash=tx_hash)
        except Exception as exc:
            logger.warning("buyTokensWithETH failed: %s", exc)
            return TransactionResult(success=False, error=format_error(exc))

    def buy_tokens_with_token(
        self,
        token_address: str,
        options: BuyTokensOptions,
        private_key: Optional[str] = None,
    ) -> TransactionResult:
        """
        Buy project tokens paying ``options.amount`` of an ERC20 token.

        Checks the signer's balance, approves the payment processor for the
        maximum amount when the current allowance is short, then buys.
        """
        try:
            _require_address(token_address, "token")
            info = self._ensure_project()
            referrer = self._referrer(options.referrer)
            amount_wei = to_wei(options.amount)
            buyer = get_address(private_key)

            balance = self._read(token_address, "balanceOf", [buyer], ERC20) or 0
            if balance < amount_wei:
                raise InsufficientBalanceError("Insufficient token balance")

            allowance = self._read(
                token_address, "allowance", [buyer, info.payment_processor], ERC20
            ) or 0
            if allowance < amount_wei:
                logger.info("Approving %s to spend %s", info.payment_processor, token_address)
                self._send(
                    token_address,
                    "approve",
                    [info.payment_processor, MAX_UINT256],
                    ERC20,
                    private_key,
                )

            tx_hash = self._send(
                info.payment_processor,
                "buyTokensWithToken",
                [self.project_id, token_address, amount_wei, referrer],
                PAYMENT_PROCESSOR,
                private_key,
            )
            return TransactionResult(success=True, transaction_hash=tx_hash)
        except Exception as exc:
            logger.warning("buyTokensWithToken failed: %s", exc)
            return TransactionResult(success=False, error=format_error(exc))

    @staticmethod
    def _referrer(referrer: Optional[str]) -> str:
        if not referrer:
            return ZERO_ADDRESS
        return _require_address(referrer, "referrer")

    # ============ Vesting ============

    def get_vesting_schedule_info(self, address: str) -> VestingScheduleInfo:
        try:
            _require_address(address, "beneficiary")
            info = self._ensure_project()
            raw = self._read(
                info.vesting_manager, "getVestingSchedule", [self.project_id, address], VESTING_MANAGER
            )
            if raw is None:
                raise ContractReadError("empty response")
            return VestingScheduleInfo.from_chain(raw)
        except Exception as exc:
            raise ContractReadError(f"Failed to get vesting schedule: {format_error(exc)}") from exc

    def get_schedule_count(self) -> int:
        info = self._ensure_project()
        try:
            count = self._read(info.vesting_manager, "getScheduleCount", [self.project_id], VESTING_MANAGER)
        except Exception as exc:
            raise ContractReadError(f"Failed to get schedule count: {format_error(exc)}") from exc
        return int(count or 0)

    def get_releasable_amount(
        self, address: Optional[str] = None, private_key: Optional[str] = None
    ) -> str:
        """Releasable amount (ether units) for ``address``, or for the signer."""
        try:
            info = self._ensure_project()
            beneficiary = _require_address(address, "beneficiary") if address else get_address(private_key)
            amount = self._read(
                info.vesting_manager,
                "getReleasableAmount",
                [self.project_id, beneficiary],
                VESTING_MANAGER,
            )
        except Exception as exc:
            raise ContractReadError(f"Failed to get releasable amount: {format_error(exc)}") from exc
        return from_wei(amount or 0)

    def get_release_start_time(self) -> int:
        """``VestingManager.releaseStartTime``; 0 when the owner has not set it."""
        info = self._ensure_project()
        value = self._read(info.vesting_manager, "releaseStartTime", [self.project_id], VESTING_MANAGER)
        return int(value or 0)

    def release_tokens(self, private_key: Optional[str] = None) -> TransactionResult:
        """Release the signer's currently vested tokens."""
        try:
            info = self._ensure_project()
            tx_hash = self._send(
                info.vesting_manager, "releaseTokens", [self.project_id], VESTING_MANAGER, private_key
            )
            return TransactionResult(success=True, transaction_hash=tx_hash)
        except Exception as exc:
            logger.warning("releaseTokens failed: %s", exc)
            return TransactionResult(success=False, error=format_error(exc))

    def release_all_tokens(
        self,
        start_idx: int,
        batch_size: int,
        private_key: Optional[str] = None,
    ) -> TransactionResult:
        """Release vested tokens for ``batch_size`` schedules starting at ``start_idx``."""
        try:
            info = self._ensure_project()
            tx_hash = self._send(
                info.vesting_manager,
                "batchReleaseTokens",
                [self.project_id, start_idx, batch_size],
                VESTING_MANAGER,
                private_key,
            )
            return TransactionResult(success=True, transaction_hash=tx_hash)
        except Exception as exc:
            logger.warning("batchReleaseTokens failed: %s", exc)
            return TransactionResult(success=False, error=format_error(exc))

    def get_unlock_time(self, now: Optional[int] = None) -> UnlockTimeInfo:
        """
        Unlock schedule of the project.

        - No vesting: everything unlocks once, at the vesting manager's
          release start (or sale end + 30 days if never set).
        - Linear: release runs continuously between the two checkpoints.
        - Step: a fixed percentage unlocks at every checkpoint.

        Args:
            now: Reference time (Unix seconds); defaults to the wall clock
        """
        try:
            info = self._ensure_project()
            config = info.vesting_config
            on_chain_start = 0 if config.enabled else self.get_release_start_time()
            anchor = resolve_release_start_time(config, info.sale_end_time, on_chain_start)
        except InpaymentError:
            raise
        except Exception as exc:
            raise ContractReadError(f"Failed to get unlock time: {format_error(exc)}") from exc

        if now is None:
            now = int(time.time())
        return compute_unlock_schedule(config, anchor, now)

    def get_period_list(
        self, start_time: int, end_time: int, period_length: int = DEFAULT_PERIOD_LENGTH
    ) -> list[int]:
        return build_period_list(start_time, end_time, period_length)

    def get_vesting_type(self) -> Union[VestingType, int]:
        return self._ensure_project().vesting_config.vesting_type
