from decimal import Decimal

import pytest

from factories import ACCOUNT
from perpcore.markets import Tokens
from perpcore.trading.balances import get_native_balance, get_token_balance


@pytest.mark.asyncio
async def test_native_balance(chain) -> None:
    chain.native_balance.return_value = 25 * 10**16

    balance = await get_native_balance(chain, ACCOUNT)

    assert balance.raw == 25 * 10**16
    assert balance.formatted == Decimal("0.25")
    assert balance.decimals == 18


@pytest.mark.asyncio
async def test_usdc_balance_uses_six_decimals(chain) -> None:
    chain.token_balance.return_value = 1_234_560_000

    balance = await get_token_balance(chain, Tokens.USDC, ACCOUNT)

    assert balance.formatted == Decimal("1234.56")
    assert balance.decimals == 6
    chain.token_balance.assert_awaited_once_with(Tokens.USDC, ACCOUNT)


@pytest.mark.asyncio
async def test_wbtc_balance_uses_eight_decimals(chain) -> None:
    chain.token_balance.return_value = 5 * 10**7

    balance = await get_token_balance(chain, Tokens.WBTC.lower(), ACCOUNT)

    assert balance.formatted == Decimal("0.5")
    assert balance.decimals == 8


@pytest.mark.asyncio
async def test_unknown_token_defaults_to_eighteen(chain) -> None:
    chain.token_balance.return_value = 10**18

    balance = await get_token_balance(
        chain, "0x3333333333333333333333333333333333333333", ACCOUNT
    )

    assert balance.formatted == Decimal("1")
    assert balance.decimals == 18
