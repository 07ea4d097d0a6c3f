"""
Transaction Builder - Build, sign, and send contract transactions.

Uses eth-account for signing and httpx-based JSON-RPC for sending.
All gas is paid by the signer's EOA.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..utils import to_checksum_address
from ..wallet import get_account
from .abi import load_abi
from .rpc import (
    encode_function_call,
    estimate_gas,
    get_chain_id,
    get_gas_price,
    get_nonce,
    send_raw_transaction,
    wait_for_receipt,
)

logger = logging.getLogger(__name__)

# Headroom over eth_estimateGas
GAS_ESTIMATE_MULTIPLIER = 1.2


def build_contract_tx(
    contract_address: str,
    function_name: str,
    args: list,
    contract_name: Optional[str] = None,
    abi: Optional[list] = None,
    value: int = 0,
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
    rpc_url: Optional[str] = None,
    chain_id: Optional[int] = None,
) -> dict:
    """
    Build a contract call transaction (unsigned).

    Args:
        contract_address: 0x-prefixed contract address
        function_name: Function to call
        args: Function arguments
        contract_name: For ABI loading
        abi: Pre-loaded ABI
        value: Native currency value in wei (default: 0)
        gas_limit: Gas limit (default: estimate + 20%)
        private_key: Signer key, for nonce lookup
        rpc_url: RPC endpoint URL
        chain_id: Chain ID (default: CHAIN_ID env or eth_chainId)

    Returns:
        Unsigned transaction dict
    """
    if abi is None:
        if contract_name is None:
            raise ValueError("Either abi or contract_name must be provided")
        abi = load_abi(contract_name)

    calldata = encode_function_call(abi, function_name, args)

    account = get_account(private_key)
    nonce = get_nonce(account.address, rpc_url=rpc_url)
    gas_price = get_gas_price(rpc_url=rpc_url)

    tx: dict[str, Any] = {
        "to": to_checksum_address(contract_address),
        "data": calldata,
        "value": value,
        "nonce": nonce,
        "gasPrice": gas_price,
        "chainId": chain_id if chain_id is not None else get_chain_id(rpc_url=rpc_url),
    }

    if gas_limit is None:
        estimated = estimate_gas({**tx, "from": account.address}, rpc_url=rpc_url)
        gas_limit = int(estimated * GAS_ESTIMATE_MULTIPLIER)
        logger.debug("Estimated gas for %s: %d (limit %d)", function_name, estimated, gas_limit)
    tx["gas"] = gas_limit

    return tx


def sign_and_send(
    tx: dict,
    private_key: Optional[str] = None,
    wait: bool = True,
    timeout: int = 120,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Sign a transaction and send it.

    Args:
        tx: Unsigned transaction dict
        private_key: 0x-prefixed hex private key
        wait: Whether to wait for receipt
        timeout: Receipt wait timeout
        rpc_url: RPC endpoint URL

    Returns:
        Dict with tx_hash and, when waiting, receipt and status
    """
    account = get_account(private_key)
    signed = account.sign_transaction(tx)
    raw_tx = "0x" + signed.raw_transaction.hex()

    tx_hash = send_raw_transaction(raw_tx, rpc_url=rpc_url)
    logger.info("Sent transaction %s from %s", tx_hash, account.address)
    result: dict[str, Any] = {"tx_hash": tx_hash}

    if wait:
        receipt = wait_for_receipt(tx_hash, timeout=timeout, rpc_url=rpc_url)
        result["receipt"] = receipt
        result["status"] = int(receipt.get("status", "0x0"), 16)

    return result


def send_contract_tx(
    contract_address: str,
    function_name: str,
    args: list,
    contract_name: Optional[str] = None,
    abi: Optional[list] = None,
    value: int = 0,
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
    wait: bool = True,
    rpc_url: Optional[str] = None,
    chain_id: Optional[int] = None,
) -> dict:
    """
    Build, sign, and send a contract call transaction.

    Convenience function combining build + sign + send.

    Returns:
        Dict with tx_hash, receipt, status
    """
    tx = build_contract_tx(
        contract_address=contract_address,
        function_name=function_name,
        args=args,
        contract_name=contract_name,
        abi=abi,
        value=value,
        gas_limit=gas_limit,
        private_key=private_key,
        rpc_url=rpc_url,
        chain_id=chain_id,
    )
    return sign_and_send(tx, private_key=private_key, wait=wait, rpc_url=rpc_url)
