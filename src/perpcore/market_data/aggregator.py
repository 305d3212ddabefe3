"""Price aggregation across the Chainlink oracle and CoinGecko 24h statistics.

Per market the oracle gives the price and CoinGecko gives everything else
(24h change, high/low, volume). Fallback order for the price:

1. Chainlink ``latestRoundData`` for the market's feed
2. CoinGecko last price (from the cache, fresh or stale)
3. Zero, with high/low degraded to +/-2% of the price

Read path: nothing here raises to the caller except ``get_price``, which
exists for order construction and refuses to return zero.
"""

import asyncio
from decimal import Decimal

from perpcore.chain.client import ChainReader
from perpcore.exceptions import PriceUnavailableError, StatsUnavailableError
from perpcore.logging import get_logger
from perpcore.market_data.price_cache import PriceCache
from perpcore.market_data.stats_client import CoinGeckoClient
from perpcore.markets import MARKETS, Market, get_market
from perpcore.models import AssetStats, MarketSnapshot, PriceSource
from perpcore.units import from_fixed_point

logger = get_logger(__name__)

DEGRADED_HIGH_FACTOR = Decimal("1.02")
DEGRADED_LOW_FACTOR = Decimal("0.98")


class PriceAggregator:
    """Builds MarketSnapshots from the oracle and a cached statistics source.

    Args:
        chain: Reader used for Chainlink oracle calls.
        stats_client: Batched 24h statistics source.
        cache: Shared statistics cache, constructed once per process.
        markets: Markets to track (defaults to the four registered markets).
    """

    def __init__(
        self,
        chain: ChainReader,
        stats_client: CoinGeckoClient,
        cache: PriceCache,
        markets: dict[str, Market] | None = None,
    ) -> None:
        self._chain = chain
        self._stats_client = stats_client
        self._cache = cache
        self._markets = markets if markets is not None else MARKETS

    @property
    def cache(self) -> PriceCache:
        return self._cache

    async def get_oracle_price(self, market: Market) -> Decimal:
        """Read the market's Chainlink price.

        Raises:
            PriceUnavailableError: If the call fails or the answer is not positive.
        """
        try:
            round_data, decimals = await asyncio.gather(
                self._chain.latest_round_data(market.price_feed),
                self._chain.feed_decimals(market.price_feed),
            )
        except Exception as exc:
            raise PriceUnavailableError(
                f"Oracle read failed for {market.key}: {exc}"
            ) from exc

        if round_data.answer <= 0:
            raise PriceUnavailableError(
                f"Oracle returned non-positive answer {round_data.answer} for {market.key}"
            )
        return from_fixed_point(round_data.answer, decimals)

    async def fetch_24h_stats(self) -> dict[str, AssetStats]:
        """Return 24h statistics for every tracked market, refreshing the cache if stale.

        On fetch failure the previous (stale) data is returned, or an empty
        dict if nothing was ever fetched.
        """
        if self._cache.is_fresh():
            return self._cache.data

        coin_ids = [m.coingecko_id for m in self._markets.values()]
        try:
            stats = await asyncio.to_thread(self._stats_client.fetch_markets, coin_ids)
        except StatsUnavailableError as exc:
            logger.warning(
                "stats_fetch_failed",
                error=str(exc),
                cache_age=self._cache.age(),
                serving_stale=bool(self._cache.data),
            )
            return self._cache.data

        self._cache.update(stats)
        return stats

    async def _oracle_price_or_none(self, market: Market) -> Decimal | None:
        try:
            return await self.get_oracle_price(market)
        except PriceUnavailableError as exc:
            logger.warning("oracle_price_unavailable", market=market.key, error=str(exc))
            return None

    async def get_market_snapshot(self, market_key: str) -> MarketSnapshot:
        """Build a snapshot for one market. Never raises for data unavailability."""
        market = get_market(market_key)
        oracle_price, stats = await asyncio.gather(
            self._oracle_price_or_none(market),
            self.fetch_24h_stats(),
        )
        return self._build_snapshot(market, oracle_price, stats.get(market.coingecko_id))

    def _build_snapshot(
        self,
        market: Market,
        oracle_price: Decimal | None,
        coin: AssetStats | None,
    ) -> MarketSnapshot:
        if oracle_price is not None:
            price, source = oracle_price, PriceSource.ORACLE
        elif coin is not None:
            price, source = coin.price, PriceSource.STATS
            logger.info("using_stats_price", market=market.key, price=str(price))
        else:
            price, source = Decimal("0"), PriceSource.NONE
            logger.warning("no_price_available", market=market.key)

        high = coin.high_24h if coin is not None else None
        low = coin.low_24h if coin is not None else None

        return MarketSnapshot(
            market=market.key,
            price=price,
            change_24h=coin.change_24h if coin is not None else Decimal("0"),
            high_24h=high if high is not None else price * DEGRADED_HIGH_FACTOR,
            low_24h=low if low is not None else price * DEGRADED_LOW_FACTOR,
            volume_24h=coin.volume_24h if coin is not None else Decimal("0"),
            # Open interest and funding need the GMX subgraph; not read here
            open_interest_long=Decimal("0"),
            open_interest_short=Decimal("0"),
            funding_rate=Decimal("0"),
            max_leverage=market.max_leverage,
            price_source=source,
        )

    async def get_all_markets(self) -> list[MarketSnapshot]:
        """Snapshot every tracked market concurrently.

        The statistics batch is fetched once for all markets. Oracle reads
        run side by side; a failing oracle only degrades its own market's
        snapshot.
        """
        markets = list(self._markets.values())
        oracle_prices, stats = await asyncio.gather(
            asyncio.gather(*(self._oracle_price_or_none(m) for m in markets)),
            self.fetch_24h_stats(),
        )
        return [
            self._build_snapshot(market, price, stats.get(market.coingecko_id))
            for market, price in zip(markets, oracle_prices)
        ]

    async def get_price(self, market_key: str) -> Decimal:
        """Best available price for order construction.

        Raises:
            PriceUnavailableError: If every source is unavailable (price 0).
        """
        snapshot = await self.get_market_snapshot(market_key)
        if snapshot.price <= 0:
            raise PriceUnavailableError(f"No price available for {market_key}")
        return snapshot.price
