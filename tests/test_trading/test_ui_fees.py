"""Tests for UI fee receiver payloads and the DataStore fee cap read."""

from decimal import Decimal

import pytest
from eth_abi import decode
from eth_utils import function_signature_to_4byte_selector, keccak

from factories import ACCOUNT
from perpcore.config import ContractSettings
from perpcore.markets import MARKETS, Tokens
from perpcore.trading.ui_fees import (
    CLAIM_UI_FEES_SIGNATURE,
    MAX_UI_FEE_FACTOR_KEY,
    SET_UI_FEE_FACTOR_SIGNATURE,
    build_claim_ui_fees,
    build_set_ui_fee_factor,
    query_max_ui_fee_factor,
    ui_fee_factor_to_percent,
)


def test_max_ui_fee_factor_key_is_abi_encoded_string_hash() -> None:
    assert len(MAX_UI_FEE_FACTOR_KEY) == 32
    # abi.encode pads the string; hashing the bare bytes gives a different key
    assert MAX_UI_FEE_FACTOR_KEY != keccak(text="MAX_UI_FEE_FACTOR")


@pytest.mark.parametrize(
    "raw, expected",
    [
        (0, "0"),
        (5 * 10**26, "0.05"),
        (10**27, "0.1"),
        (10**28, "1"),
    ],
)
def test_ui_fee_factor_to_percent(raw: int, expected: str) -> None:
    assert ui_fee_factor_to_percent(raw) == Decimal(expected)


@pytest.mark.asyncio
async def test_query_max_ui_fee_factor(chain) -> None:
    chain.get_uint.return_value = 5 * 10**26

    factor = await query_max_ui_fee_factor(chain)

    assert factor.raw == 5 * 10**26
    assert factor.percentage == Decimal("0.05")
    chain.get_uint.assert_awaited_once_with(
        ContractSettings().data_store, MAX_UI_FEE_FACTOR_KEY
    )


def test_set_ui_fee_factor_payload() -> None:
    contracts = ContractSettings()
    payload = build_set_ui_fee_factor(5 * 10**26, contracts)

    assert payload.to.lower() == contracts.exchange_router.lower()
    assert payload.value == 0
    assert payload.data[:4] == function_signature_to_4byte_selector(
        SET_UI_FEE_FACTOR_SIGNATURE
    )
    assert decode(["uint256"], payload.data[4:]) == (5 * 10**26,)


def test_set_ui_fee_factor_rejects_negative() -> None:
    with pytest.raises(ValueError):
        build_set_ui_fee_factor(-1)


def test_claim_ui_fees_defaults() -> None:
    contracts = ContractSettings()
    payload = build_claim_ui_fees(contracts)

    assert payload.data[:4] == function_signature_to_4byte_selector(CLAIM_UI_FEES_SIGNATURE)
    markets, tokens, receiver = decode(
        ["address[]", "address[]", "address"], payload.data[4:]
    )
    assert [m.lower() for m in markets] == [
        m.market_token.lower() for m in MARKETS.values()
    ]
    assert [t.lower() for t in tokens] == [
        Tokens.USDC.lower(),
        Tokens.WETH.lower(),
        Tokens.WBTC.lower(),
    ]
    assert receiver.lower() == contracts.ui_fee_receiver.lower()


def test_claim_ui_fees_custom_receiver_and_market() -> None:
    payload = build_claim_ui_fees(
        markets=[MARKETS["ARB-USD"].market_token],
        tokens=[Tokens.ARB],
        receiver=ACCOUNT,
    )
    markets, tokens, receiver = decode(
        ["address[]", "address[]", "address"], payload.data[4:]
    )
    assert len(markets) == 1
    assert tokens[0].lower() == Tokens.ARB.lower()
    assert receiver.lower() == ACCOUNT.lower()
