"""
ABI Loader - Loads contract ABIs bundled with the package.

Bundled artifacts live in ``chain/abis/<Contract>.json``.  Setting
INPAYMENT_ABI_DIR points the loader at another directory first (e.g. a
fresh Foundry/Hardhat export), with the same file naming.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

PROJECT_REGISTRY = "ProjectRegistry"
PAYMENT_PROCESSOR = "PaymentProcessor"
VESTING_MANAGER = "VestingManager"
ERC20 = "ERC20"
PRICE_FEED_MANAGER = "PriceFeedManager"

BUNDLED_ABI_DIR = Path(__file__).resolve().parent / "abis"


def _abi_search_path() -> list[Path]:
    dirs = []
    override = os.environ.get("INPAYMENT_ABI_DIR")
    if override:
        dirs.append(Path(override).expanduser())
    dirs.append(BUNDLED_ABI_DIR)
    return dirs


@lru_cache(maxsize=16)
def load_abi(contract_name: str) -> list[dict[str, Any]]:
    """
    Load the ABI for a contract.

    Args:
        contract_name: Contract name (e.g., "ProjectRegistry", "ERC20")

    Returns:
        ABI as a list of dicts

    Raises:
        FileNotFoundError: If no ABI file exists for the contract
    """
    for directory in _abi_search_path():
        abi_path = directory / f"{contract_name}.json"
        if abi_path.exists():
            break
    else:
        raise FileNotFoundError(f"ABI not found for contract: {contract_name}")

    with abi_path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    # Foundry/Hardhat artifacts wrap the ABI; plain exports are a bare list
    if isinstance(artifact, dict):
        return artifact["abi"]
    return artifact


def find_function(abi: list, function_name: str) -> dict[str, Any]:
    """Return the ABI entry of a function, raising ValueError if absent."""
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def canonical_type(param: dict[str, Any]) -> str:
    """
    Canonical ABI type of a parameter.

    Structs are declared as ``tuple`` / ``tuple[]`` with ``components`` and
    expand to ``(t1,t2,...)`` / ``(t1,t2,...)[]``.
    """
    abi_type = param["type"]
    if abi_type.startswith("tuple"):
        inner = ",".join(canonical_type(c) for c in param.get("components", []))
        return f"({inner}){abi_type[len('tuple'):]}"
    return abi_type
