"""Shared fixtures: a fake project as the registry would return it."""

from __future__ import annotations

from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from inpayment.config import SDKOptions

DAY = 86_400
ETHER = 10**18

PROJECT_ID = "test-project-id"
REGISTRY = "0x8d86318f0aa10a3c6cd5975aa27201555d94d645"
PRICE_FEED = "0x1111111111111111111111111111111111111111"
OWNER = "0x2222222222222222222222222222222222222222"
TOKEN = "0x3333333333333333333333333333333333333333"
PAYMENT = "0x4444444444444444444444444444444444444444"
VESTING = "0x5555555555555555555555555555555555555555"
BUYER = "0x6666666666666666666666666666666666666666"
PAY_TOKEN = "0x2345678901234567890123456789012345678901"

SALE_START = 1712880000
SALE_END = 1715500800


def make_project_response(
    vesting_config: tuple = (True, 2, 30 * DAY, 90 * DAY, 2 * DAY, 2500),
    payment: str = PAYMENT,
    vesting: str = VESTING,
) -> tuple:
    """Positional ``getProject`` result, shaped like eth-abi decodes it."""
    return (
        OWNER,
        TOKEN,
        payment,
        vesting,
        ((1000 * ETHER, ETHER // 10, SALE_START, SALE_END, False, 0, 0),),
        100 * ETHER,
        True,
        SALE_START,
        vesting_config,
        (True, 1000, 500),
    )


def make_reader(responses: Optional[dict[str, Any]] = None) -> MagicMock:
    """A ``read_contract`` stand-in answering by function name."""
    table: dict[str, Any] = {
        "getProject": make_project_response(),
        "projectSales": 250 * ETHER,
        "getTokenPrice": (ETHER // 10, ETHER // 20),
        "getVestingSchedule": (
            BUYER, ETHER, ETHER // 2, 1712880000, 30, 90, 1, 2, 2500, False,
        ),
        "getReleasableAmount": 3 * ETHER // 2,
        "getScheduleCount": 7,
        "releaseStartTime": 0,
        "getTokenUsdValue": 123_456,
        "balanceOf": 10 * ETHER,
        "allowance": 10 * ETHER,
    }
    table.update(responses or {})

    def fake_read(
        address: str,
        function_name: str,
        args: Optional[list] = None,
        contract_name: Optional[str] = None,
        abi: Optional[list] = None,
        rpc_url: Optional[str] = None,
    ) -> Any:
        value = table[function_name]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(args)
        return value

    return MagicMock(side_effect=fake_read)


@pytest.fixture()
def sdk_options() -> SDKOptions:
    return SDKOptions(
        project_id=PROJECT_ID,
        provider_url="http://localhost:8545",
        project_registry_address=REGISTRY,
        price_feed_manager_address=PRICE_FEED,
        chain_id=31337,
    )
