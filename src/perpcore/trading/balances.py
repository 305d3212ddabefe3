"""Native and ERC-20 balance reads with decimal formatting."""

from dataclasses import dataclass
from decimal import Decimal

from perpcore.chain.client import ChainReader
from perpcore.markets import token_decimals
from perpcore.units import NATIVE_DECIMALS, from_fixed_point


@dataclass(frozen=True)
class TokenBalance:
    raw: int
    formatted: Decimal
    decimals: int


async def get_native_balance(chain: ChainReader, address: str) -> TokenBalance:
    raw = await chain.native_balance(address)
    return TokenBalance(
        raw=raw,
        formatted=from_fixed_point(raw, NATIVE_DECIMALS),
        decimals=NATIVE_DECIMALS,
    )


async def get_token_balance(chain: ChainReader, token: str, wallet: str) -> TokenBalance:
    """ERC-20 balance; decimals come from the known-token table (default 18)."""
    decimals = token_decimals(token)
    raw = await chain.token_balance(token, wallet)
    return TokenBalance(raw=raw, formatted=from_fixed_point(raw, decimals), decimals=decimals)
