"""Tests for the static market registry."""

import pytest

from perpcore.exceptions import UnknownMarketError
from perpcore.markets import MARKETS, Tokens, get_market, market_by_address, token_decimals


def test_exactly_four_markets() -> None:
    assert set(MARKETS) == {"ETH-USD", "BTC-USD", "ARB-USD", "LINK-USD"}


def test_btc_index_uses_eight_decimals() -> None:
    assert get_market("BTC-USD").index_decimals == 8
    assert get_market("ETH-USD").index_decimals == 18


def test_max_leverage() -> None:
    assert get_market("ETH-USD").max_leverage == 100
    assert get_market("ARB-USD").max_leverage == 50


def test_unknown_market_key() -> None:
    with pytest.raises(UnknownMarketError):
        get_market("DOGE-USD")


def test_lookup_by_address_is_case_insensitive() -> None:
    address = MARKETS["LINK-USD"].market_token
    assert market_by_address(address.lower()) is MARKETS["LINK-USD"]
    assert market_by_address(address.upper().replace("0X", "0x")) is MARKETS["LINK-USD"]


def test_untracked_address() -> None:
    assert market_by_address("0x2222222222222222222222222222222222222222") is None


def test_token_decimals() -> None:
    assert token_decimals(Tokens.USDC) == 6
    assert token_decimals(Tokens.WBTC.lower()) == 8
    assert token_decimals("0x3333333333333333333333333333333333333333") == 18
