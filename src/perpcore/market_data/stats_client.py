"""CoinGecko 24h market statistics client.

Fetches price, 24h change, high/low and volume for a batch of CoinGecko
ids in one request. Uses urllib.request (stdlib); the aggregator runs the
blocking call in a worker thread.
"""

import http.client
import json
import urllib.error
import urllib.parse
import urllib.request
from decimal import Decimal, InvalidOperation

from perpcore.config import MarketDataSettings
from perpcore.exceptions import StatsUnavailableError
from perpcore.logging import get_logger
from perpcore.models import AssetStats

logger = get_logger(__name__)


def _decimal_or_none(value) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def parse_coin_markets(payload: list[dict]) -> dict[str, AssetStats]:
    """Convert a ``/coins/markets`` response body into AssetStats keyed by coin id.

    Entries that are not objects, or lack an id or a current price, are dropped.
    """
    result: dict[str, AssetStats] = {}
    for coin in payload:
        if not isinstance(coin, dict):
            logger.warning("coingecko_entry_skipped", entry=repr(coin)[:100])
            continue
        coin_id = coin.get("id")
        price = _decimal_or_none(coin.get("current_price"))
        if not isinstance(coin_id, str) or not coin_id or price is None:
            continue
        result[coin_id] = AssetStats(
            asset_id=coin_id,
            price=price,
            change_24h=_decimal_or_none(coin.get("price_change_percentage_24h")) or Decimal("0"),
            high_24h=_decimal_or_none(coin.get("high_24h")),
            low_24h=_decimal_or_none(coin.get("low_24h")),
            volume_24h=_decimal_or_none(coin.get("total_volume")) or Decimal("0"),
        )
    return result


class CoinGeckoClient:
    """Batched reader for the CoinGecko ``/coins/markets`` endpoint.

    Args:
        settings: Base URL, optional demo API key and request timeout.
    """

    def __init__(self, settings: MarketDataSettings | None = None) -> None:
        self._settings = settings or MarketDataSettings()

    def build_url(self, coin_ids: list[str]) -> str:
        params = {
            "vs_currency": "usd",
            "ids": ",".join(coin_ids),
            "order": "market_cap_desc",
            "sparkline": "false",
            "price_change_percentage": "24h",
        }
        api_key = self._settings.coingecko_api_key.get_secret_value()
        if api_key:
            params["x_cg_demo_api_key"] = api_key
        base = self._settings.coingecko_url.rstrip("/")
        return f"{base}/coins/markets?{urllib.parse.urlencode(params, safe=',')}"

    def fetch_markets(self, coin_ids: list[str]) -> dict[str, AssetStats]:
        """Fetch 24h statistics for all ``coin_ids`` in one request.

        Raises:
            StatsUnavailableError: On HTTP errors (including 429 rate limits),
                network failures, or an unparseable body.
        """
        if not coin_ids:
            return {}

        headers = {"Accept": "application/json", "User-Agent": "perpcore/0.1"}
        req = urllib.request.Request(self.build_url(coin_ids), headers=headers)

        try:
            with urllib.request.urlopen(
                req, timeout=self._settings.request_timeout_seconds
            ) as resp:
                payload = json.loads(resp.read())
        except urllib.error.HTTPError as exc:
            raise StatsUnavailableError(f"CoinGecko API error: {exc.code}") from exc
        except (OSError, http.client.HTTPException, ValueError) as exc:
            raise StatsUnavailableError(f"CoinGecko request failed: {exc}") from exc

        if not isinstance(payload, list):
            raise StatsUnavailableError(f"Unexpected CoinGecko response: {payload!r:.200}")

        stats = parse_coin_markets(payload)
        logger.debug("coingecko_markets_fetched", requested=len(coin_ids), received=len(stats))
        return stats
