"""
JSON-RPC Client for EVM chains.

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for encoding.
Supports read-only contract calls, chain/nonce/gas queries, and transaction
receipt polling.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx
from eth_abi import decode, encode

from ..config import get_configured_chain_id, get_rpc_url
from ..errors import RpcError
from .abi import canonical_type, find_function, load_abi

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Keccak-256 helper (NOT the same as hashlib.sha3_256 / NIST SHA-3)
# ---------------------------------------------------------------------------

def _keccak256(data: bytes) -> bytes:
    """Compute Keccak-256 hash. Tries eth_hash first, then pycryptodome."""
    try:
        from eth_hash.auto import keccak
        return keccak(data)
    except ImportError:
        pass
    try:
        from Crypto.Hash import keccak as _ck
        h = _ck.new(digest_bits=256)
        h.update(data)
        return h.digest()
    except ImportError:
        raise ImportError(
            "No Keccak-256 backend found. "
            "Install eth-hash (pip install eth-hash[pycryptodome]) "
            "or pycryptodome (pip install pycryptodome)."
        )


RPC_TIMEOUT = 30


def _rpc_call(method: str, params: list, rpc_url: Optional[str] = None) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "eth_call")
        params: RPC parameters
        rpc_url: RPC endpoint URL

    Returns:
        Result field from the RPC response

    Raises:
        RpcError: If the node answers with a JSON-RPC error
        httpx.HTTPError: On transport or HTTP status failures
    """
    url = rpc_url or get_rpc_url()
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }

    logger.debug("RPC %s -> %s", method, url)
    with httpx.Client(timeout=RPC_TIMEOUT) as client:
        response = client.post(url, json=payload)
        response.raise_for_status()
        data = response.json()

    if "error" in data:
        raise RpcError(f"RPC error: {data['error']}")

    return data.get("result")


def encode_function_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        function_name: Function name to call
        args: Function arguments

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = find_function(abi, function_name)

    input_types = [canonical_type(inp) for inp in func.get("inputs", [])]
    sig = f"{function_name}({','.join(input_types)})"

    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    selector = _keccak256(sig.encode("utf-8"))[:4]

    if args:
        encoded_args = encode(input_types, args)
    else:
        encoded_args = b""

    return "0x" + selector.hex() + encoded_args.hex()


def decode_function_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Args:
        abi: Contract ABI
        function_name: Function name
        data: 0x-prefixed hex encoded return data

    Returns:
        Decoded result (single value or tuple)
    """
    func = find_function(abi, function_name)

    output_types = [canonical_type(out) for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:]) if data.startswith("0x") else bytes.fromhex(data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded


def read_contract(
    contract_address: str,
    function_name: str,
    args: Optional[list] = None,
    contract_name: Optional[str] = None,
    abi: Optional[list] = None,
    rpc_url: Optional[str] = None,
) -> Any:
    """
    Read from a smart contract (eth_call).

    Args:
        contract_address: 0x-prefixed contract address
        function_name: Function to call
        args: Function arguments (default: [])
        contract_name: Name of contract for ABI loading (e.g., "VestingManager")
        abi: Pre-loaded ABI (if not using contract_name)
        rpc_url: RPC endpoint URL

    Returns:
        Decoded return value(s)
    """
    if abi is None:
        if contract_name is None:
            raise ValueError("Either abi or contract_name must be provided")
        abi = load_abi(contract_name)

    calldata = encode_function_call(abi, function_name, args or [])

    result = _rpc_call(
        "eth_call",
        [{"to": contract_address, "data": calldata}, "latest"],
        rpc_url=rpc_url,
    )

    if result is None or result == "0x":
        return None

    return decode_function_result(abi, function_name, result)


def get_chain_id(rpc_url: Optional[str] = None) -> int:
    """Chain ID from CHAIN_ID, or from the node (eth_chainId) when unset."""
    configured = get_configured_chain_id()
    if configured is not None:
        return configured
    result = _rpc_call("eth_chainId", [], rpc_url=rpc_url)
    return int(result, 16)


def get_nonce(address: str, rpc_url: Optional[str] = None) -> int:
    """
    Get transaction nonce for an address.

    Args:
        address: 0x-prefixed address
        rpc_url: RPC endpoint URL

    Returns:
        Current nonce (including pending transactions)
    """
    result = _rpc_call("eth_getTransactionCount", [address, "pending"], rpc_url=rpc_url)
    return int(result, 16)


def get_gas_price(rpc_url: Optional[str] = None) -> int:
    """
    Get current gas price.

    Returns:
        Gas price in wei
    """
    result = _rpc_call("eth_gasPrice", [], rpc_url=rpc_url)
    return int(result, 16)


def estimate_gas(tx: dict, rpc_url: Optional[str] = None) -> int:
    """Estimate gas for a call; reverts surface here as RpcError."""
    call = {
        "from": tx.get("from"),
        "to": tx.get("to"),
        "data": tx.get("data"),
        "value": hex(tx.get("value", 0)),
    }
    result = _rpc_call(
        "eth_estimateGas",
        [{k: v for k, v in call.items() if v is not None}],
        rpc_url=rpc_url,
    )
    return int(result, 16)


def send_raw_transaction(raw_tx: str, rpc_url: Optional[str] = None) -> str:
    """
    Send a signed raw transaction.

    Args:
        raw_tx: 0x-prefixed hex encoded signed transaction

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    return _rpc_call("eth_sendRawTransaction", [raw_tx], rpc_url=rpc_url)


def wait_for_receipt(
    tx_hash: str,
    timeout: int = 120,
    poll_interval: float = 2.0,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Wait for a transaction receipt.

    Args:
        tx_hash: Transaction hash
        timeout: Maximum wait time in seconds
        poll_interval: Polling interval in seconds
        rpc_url: RPC endpoint URL

    Returns:
        Transaction receipt dict

    Raises:
        TimeoutError: If receipt not found within timeout
    """
    start = time.time()
    while time.time() - start < timeout:
        receipt = _rpc_call(
            "eth_getTransactionReceipt", [tx_hash], rpc_url=rpc_url
        )
        if receipt is not None:
            return receipt
        time.sleep(poll_interval)

    raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")
