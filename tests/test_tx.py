"""Tests for transaction building and signing with the node mocked out."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from eth_account import Account

from conftest import PAYMENT, PROJECT_ID
from inpayment.chain.abi import PAYMENT_PROCESSOR
from inpayment.chain.tx import build_contract_tx, send_contract_tx, sign_and_send

PRIVATE_KEY = "0x" + "11" * 32


@pytest.fixture()
def node():
    """Patch every RPC helper used by the transaction builder."""
    with patch("inpayment.chain.tx.get_nonce", return_value=7) as nonce, \
            patch("inpayment.chain.tx.get_gas_price", return_value=10**9), \
            patch("inpayment.chain.tx.get_chain_id", return_value=1) as chain_id, \
            patch("inpayment.chain.tx.estimate_gas", return_value=100_000) as estimate, \
            patch("inpayment.chain.tx.send_raw_transaction", return_value="0xhash") as send, \
            patch("inpayment.chain.tx.wait_for_receipt", return_value={"status": "0x1"}) as receipt:
        yield {
            "nonce": nonce,
            "chain_id": chain_id,
            "estimate": estimate,
            "send": send,
            "receipt": receipt,
        }


class TestBuildContractTx:
    def test_estimates_gas_with_headroom(self, node) -> None:
        tx = build_contract_tx(
            PAYMENT,
            "buyTokensWithETH",
            [PROJECT_ID, "0x" + "00" * 20],
            contract_name=PAYMENT_PROCESSOR,
            value=10**17,
            private_key=PRIVATE_KEY,
        )
        assert tx["gas"] == 120_000
        assert tx["nonce"] == 7
        assert tx["value"] == 10**17
        assert tx["chainId"] == 1
        assert tx["data"].startswith("0x")

        sender = Account.from_key(PRIVATE_KEY).address
        node["nonce"].assert_called_once_with(sender, rpc_url=None)
        assert node["estimate"].call_args.args[0]["from"] == sender

    def test_explicit_gas_and_chain_id(self, node) -> None:
        tx = build_contract_tx(
            PAYMENT,
            "releaseTokens",
            [PROJECT_ID],
            contract_name="VestingManager",
            gas_limit=50_000,
            private_key=PRIVATE_KEY,
            chain_id=31337,
        )
        assert tx["gas"] == 50_000
        assert tx["chainId"] == 31337
        node["estimate"].assert_not_called()
        node["chain_id"].assert_not_called()

    def test_requires_abi_source(self, node) -> None:
        with pytest.raises(ValueError, match="abi or contract_name"):
            build_contract_tx(PAYMENT, "releaseTokens", [PROJECT_ID], private_key=PRIVATE_KEY)


class TestSignAndSend:
    def test_waits_for_receipt(self, node) -> None:
        tx = {
            "to": PAYMENT,
            "data": "0x",
            "value": 0,
            "nonce": 0,
            "gasPrice": 10**9,
            "chainId": 1,
            "gas": 21_000,
        }
        result = sign_and_send(tx, private_key=PRIVATE_KEY)
        assert result["tx_hash"] == "0xhash"
        assert result["status"] == 1
        raw_tx = node["send"].call_args.args[0]
        assert raw_tx.startswith("0x")

    def test_no_wait(self, node) -> None:
        tx = {"to": PAYMENT, "data": "0x", "value": 0, "nonce": 0, "gasPrice": 1, "chainId": 1, "gas": 21_000}
        result = sign_and_send(tx, private_key=PRIVATE_KEY, wait=False)
        assert result == {"tx_hash": "0xhash"}
        node["receipt"].assert_not_called()

    def test_send_contract_tx_reports_revert(self, node) -> None:
        node["receipt"].return_value = {"status": "0x0"}
        result = send_contract_tx(
            PAYMENT,
            "releaseTokens",
            [PROJECT_ID],
            contract_name="VestingManager",
            private_key=PRIVATE_KEY,
        )
        assert result["status"] == 0
