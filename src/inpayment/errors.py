"""
Exception hierarchy for the Inpayment SDK.

Every error carries an ``exit_code`` so the CLI can map failures to
distinct process exit statuses.
"""

from __future__ import annotations


class InpaymentError(RuntimeError):
    exit_code: int = 1


class InvalidConfigurationError(InpaymentError, ValueError):
    """Vesting configuration cannot produce a step schedule."""

    exit_code = 2


class NotInitializedError(InpaymentError):
    exit_code = 3


class InitializationError(InpaymentError):
    exit_code = 3


class InvalidAddressError(InpaymentError, ValueError):
    exit_code = 4


class InsufficientBalanceError(InpaymentError):
    exit_code = 5


class ContractReadError(InpaymentError):
    exit_code = 6


class RpcError(InpaymentError):
    exit_code = 6


class TransactionRevertedError(InpaymentError):
    exit_code = 7


__all__ = [
    "InpaymentError",
    "InvalidConfigurationError",
    "NotInitializedError",
    "InitializationError",
    "InvalidAddressError",
    "InsufficientBalanceError",
    "ContractReadError",
    "RpcError",
    "TransactionRevertedError",
]
