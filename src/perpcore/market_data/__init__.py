"""Market data layer -- oracle prices, 24h statistics and their cache."""

from perpcore.market_data.aggregator import PriceAggregator
from perpcore.market_data.price_cache import PriceCache
from perpcore.market_data.stats_client import CoinGeckoClient

__all__ = ["CoinGeckoClient", "PriceAggregator", "PriceCache"]
