"""Tests for display formatting helpers."""

from decimal import Decimal

from perpcore.formatting import (
    format_address,
    format_number,
    format_percent,
    format_price,
    format_signed_usd,
    format_usd,
)


def test_format_number_thousands() -> None:
    assert format_number(Decimal("1234.5")) == "1,234.50"


def test_format_number_invalid_input() -> None:
    assert format_number("not-a-number", prefix="$") == "$0.00"


def test_format_usd() -> None:
    assert format_usd("3000") == "$3,000.00"


def test_format_percent_signed() -> None:
    assert format_percent(Decimal("1.234")) == "+1.23%"
    assert format_percent(Decimal("-0.4")) == "-0.40%"
    assert format_percent(0) == "+0.00%"


def test_format_signed_usd() -> None:
    assert format_signed_usd(Decimal("12.3")) == "+12.30"
    assert format_signed_usd(Decimal("-4")) == "-4.00"


def test_format_price_uses_market_precision() -> None:
    assert format_price("ARB-USD", Decimal("0.81234")) == "0.8123"
    assert format_price("BTC-USD", Decimal("60123.456")) == "60,123.46"


def test_format_address() -> None:
    assert (
        format_address("0x1234567890abcdef1234567890abcdef12345678")
        == "0x1234...5678"
    )
