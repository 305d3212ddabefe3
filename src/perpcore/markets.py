"""Static registry of the four tracked GMX V2 markets on Arbitrum One.

Addresses are checksummed; lookups by address are case-insensitive.
"""

from dataclasses import dataclass

from perpcore.exceptions import UnknownMarketError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class Tokens:
    """Arbitrum One token addresses."""

    WETH = "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1"
    USDC = "0xaf88d065e77c8cC2239327C5EDb3A432268e5831"  # native USDC
    USDC_BRIDGED = "0xFF970A61A04b1cA14834A43f5dE4533eBDDB5CC8"  # USDC.e
    ARB = "0x912CE59144191C1204E64559FE8253a0e49E6548"
    WBTC = "0x2f2a2543B76A4166549F7aaB2e75Bef0aefC5B0f"
    LINK = "0xf97f4df75117a78c1A5a0DBb814Af92458539FB4"
    UNI = "0xFa7F8980b0f1E64A2062791cc3b0871572f1F7f0"


TOKEN_DECIMALS: dict[str, int] = {
    Tokens.WETH.lower(): 18,
    Tokens.USDC.lower(): 6,
    Tokens.USDC_BRIDGED.lower(): 6,
    Tokens.ARB.lower(): 18,
    Tokens.WBTC.lower(): 8,
    Tokens.LINK.lower(): 18,
    Tokens.UNI.lower(): 18,
}

DEFAULT_TOKEN_DECIMALS = 18

# Collateral valued 1:1 in USD
STABLE_TOKENS = frozenset({Tokens.USDC.lower(), Tokens.USDC_BRIDGED.lower()})


def token_decimals(address: str) -> int:
    """Return the known decimals for a token, defaulting to 18."""
    return TOKEN_DECIMALS.get(address.lower(), DEFAULT_TOKEN_DECIMALS)


@dataclass(frozen=True)
class Market:
    """A tradable GMX V2 perpetual market."""

    key: str
    market_token: str
    index_token: str
    long_token: str
    short_token: str
    name: str
    symbol: str
    price_feed: str  # Chainlink aggregator
    coingecko_id: str
    index_decimals: int
    max_leverage: int
    price_precision: int = 2


MARKETS: dict[str, Market] = {
    "ETH-USD": Market(
        key="ETH-USD",
        market_token="0x70d95587d40A2caf56bd97485aB3Eec10Bee6336",
        index_token=Tokens.WETH,
        long_token=Tokens.WETH,
        short_token=Tokens.USDC,
        name="ETH/USD",
        symbol="ETH",
        price_feed="0x639Fe6ab55C921f74e7fac1ee960C0B6293ba612",
        coingecko_id="ethereum",
        index_decimals=18,
        max_leverage=100,
    ),
    "BTC-USD": Market(
        key="BTC-USD",
        market_token="0x47c031236e19d024b42f8AE6780E44A573170703",
        index_token=Tokens.WBTC,
        long_token=Tokens.WBTC,
        short_token=Tokens.USDC,
        name="BTC/USD",
        symbol="BTC",
        price_feed="0x6ce185860a4963106506C203335A2910C7e99934",
        coingecko_id="bitcoin",
        index_decimals=8,
        max_leverage=100,
    ),
    "ARB-USD": Market(
        key="ARB-USD",
        market_token="0xC25cEf6061Cf5dE5eb761b50E4743c1F5D7E5407",
        index_token=Tokens.ARB,
        long_token=Tokens.ARB,
        short_token=Tokens.USDC,
        name="ARB/USD",
        symbol="ARB",
        price_feed="0xb2A824043730FE05F3DA2efaFa1CBbe83fa548D6",
        coingecko_id="arbitrum",
        index_decimals=18,
        max_leverage=50,
        price_precision=4,
    ),
    "LINK-USD": Market(
        key="LINK-USD",
        market_token="0x7f1fa204bb700853D36994DA19F830b6Ad18455C",
        index_token=Tokens.LINK,
        long_token=Tokens.LINK,
        short_token=Tokens.USDC,
        name="LINK/USD",
        symbol="LINK",
        price_feed="0x86E53CF1B870786351Da77A57575e79CB55812CB",
        coingecko_id="chainlink",
        index_decimals=18,
        max_leverage=50,
    ),
}

_MARKETS_BY_ADDRESS: dict[str, Market] = {
    market.market_token.lower(): market for market in MARKETS.values()
}


def get_market(key: str) -> Market:
    """Return the market for a key such as "ETH-USD".

    Raises:
        UnknownMarketError: If the key is not tracked.
    """
    try:
        return MARKETS[key]
    except KeyError:
        raise UnknownMarketError(f"Unknown market {key!r}") from None


def market_by_address(address: str) -> Market | None:
    """Return the tracked market for a GMX market token address, or None."""
    return _MARKETS_BY_ADDRESS.get(address.lower())
