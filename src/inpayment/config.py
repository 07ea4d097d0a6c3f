"""
SDK configuration.

Settings come from explicit arguments first, then environment variables,
optionally loaded from ~/.inpayment/.env:

- INPAYMENT_PROJECT_ID
- INPAYMENT_RPC_URL
- PROJECT_REGISTRY_ADDRESS
- PRICE_FEED_MANAGER_ADDRESS
- CHAIN_ID (queried from the node when unset)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

INPAYMENT_DIR = Path.home() / ".inpayment"
INPAYMENT_ENV = INPAYMENT_DIR / ".env"

DEFAULT_RPC_URL = "https://ethereum.publicnode.com"


def load_env(env_path: Optional[Path] = None) -> None:
    """Load ~/.inpayment/.env (or ``env_path``) without overriding the process env."""
    env_path = env_path or INPAYMENT_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("INPAYMENT_RPC_URL", DEFAULT_RPC_URL)


def get_configured_chain_id() -> Optional[int]:
    value = os.environ.get("CHAIN_ID")
    return int(value) if value else None


@dataclass(frozen=True)
class SDKOptions:
    """
    Options for ``InpaymentSDK``.

    Attributes:
        project_id: Project identifier in the registry
        provider_url: JSON-RPC endpoint
        project_registry_address: ProjectRegistry contract address
        price_feed_manager_address: PriceFeedManager contract address
        chain_id: Chain ID for signing; looked up from the node when None
    """
    project_id: str
    provider_url: str = DEFAULT_RPC_URL
    project_registry_address: str = ""
    price_feed_manager_address: str = ""
    chain_id: Optional[int] = None

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None, **overrides: Any) -> "SDKOptions":
        """
        Build options from the environment; non-None ``overrides`` win.

        Raises:
            ValueError: If no project ID is configured
        """
        load_env(env_path)
        values: dict[str, Any] = {
            "project_id": os.environ.get("INPAYMENT_PROJECT_ID", ""),
            "provider_url": get_rpc_url(),
            "project_registry_address": os.environ.get("PROJECT_REGISTRY_ADDRESS", ""),
            "price_feed_manager_address": os.environ.get("PRICE_FEED_MANAGER_ADDRESS", ""),
            "chain_id": get_configured_chain_id(),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        if not values["project_id"]:
            raise ValueError(
                f"Project ID not set. Pass --project-id or set INPAYMENT_PROJECT_ID "
                f"in {env_path or INPAYMENT_ENV}."
            )
        return cls(**values)
