"""Unit tests for utils.py functions."""

from __future__ import annotations

from decimal import Decimal

import pytest

from inpayment.utils import (
    bps_to_percent,
    format_error,
    from_wei,
    is_valid_address,
    to_checksum_address,
    to_wei,
)

# EIP-55 reference vector
CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class TestFormatError:
    """Tests for format_error function."""

    def test_string(self) -> None:
        assert format_error("boom") == "boom"

    def test_exception(self) -> None:
        assert format_error(ValueError("bad value")) == "bad value"

    def test_exception_without_message(self) -> None:
        assert format_error(TimeoutError()) == "TimeoutError"

    def test_other(self) -> None:
        assert format_error(42) == "Unknown error"


class TestAddresses:
    """Tests for address validation and EIP-55 checksums."""

    def test_checksum_vector(self) -> None:
        assert to_checksum_address(CHECKSUMMED.lower()) == CHECKSUMMED

    def test_valid_checksummed(self) -> None:
        assert is_valid_address(CHECKSUMMED)

    def test_valid_lowercase(self) -> None:
        assert is_valid_address(CHECKSUMMED.lower())

    def test_invalid_checksum(self) -> None:
        broken = CHECKSUMMED.replace("5aAeb", "5AAeb", 1)
        assert not is_valid_address(broken)

    @pytest.mark.parametrize(
        "value",
        ["", "0x123", "5aaeb6053f3e94c9b9a09f33669435e7ef1beaed", "0xZZaeb6053f3e94c9b9a09f33669435e7ef1beaed", None],
    )
    def test_malformed(self, value: object) -> None:
        assert not is_valid_address(value)


class TestToWei:
    """Tests for to_wei function."""

    def test_whole(self) -> None:
        assert to_wei("1") == 10**18

    def test_fraction(self) -> None:
        assert to_wei("0.1") == 10**17

    def test_numeric_inputs(self) -> None:
        assert to_wei(2) == 2 * 10**18
        assert to_wei(Decimal("1.5")) == 15 * 10**17

    def test_smallest_unit(self) -> None:
        assert to_wei("0.000000000000000001") == 1

    def test_large_amount_keeps_precision(self) -> None:
        assert to_wei("123456789012.123456789012345678") == 123456789012123456789012345678

    def test_too_many_decimals(self) -> None:
        with pytest.raises(ValueError, match="too many decimals"):
            to_wei("0.0000000000000000001")

    @pytest.mark.parametrize("value", ["abc", "", "nan", "inf"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValueError, match="Failed to convert to wei"):
            to_wei(value)


class TestFromWei:
    """Tests for from_wei function."""

    def test_one_ether(self) -> None:
        assert from_wei(10**18) == "1.0"

    def test_string_input(self) -> None:
        assert from_wei("500000000000000000") == "0.5"

    def test_zero(self) -> None:
        assert from_wei(0) == "0.0"

    def test_one_wei(self) -> None:
        assert from_wei(1) == "0.000000000000000001"

    def test_negative(self) -> None:
        assert from_wei(-15 * 10**17) == "-1.5"

    def test_invalid(self) -> None:
        with pytest.raises(ValueError, match="Failed to convert from wei"):
            from_wei("not-a-number")


class TestBpsToPercent:
    def test_two_decimals(self) -> None:
        assert bps_to_percent(2500) == Decimal("25.00")
        assert bps_to_percent("1") == Decimal("0.01")
        assert str(bps_to_percent(0)) == "0.00"
