"""Process-wide cache for the batched 24h statistics fetch.

One PriceCache is built at startup and passed to the PriceAggregator by
reference. Entries older than the TTL are stale: the aggregator tries to
refresh them but keeps serving them if the refresh fails. Writes happen
only after a successful fetch, so a failed refresh never clears data.
"""

import time
from typing import Callable

from perpcore.logging import get_logger
from perpcore.models import AssetStats

logger = get_logger(__name__)


class PriceCache:
    """Last successful statistics fetch keyed by asset id, with a fetch timestamp.

    No locking: a single event loop is the only writer, and across
    processes the cache is best-effort local state.

    Args:
        ttl_seconds: Age after which cached data is considered stale.
        clock: Time source returning seconds; injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._data: dict[str, AssetStats] = {}
        self._timestamp: float | None = None

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def data(self) -> dict[str, AssetStats]:
        """Cached statistics (possibly stale, possibly empty)."""
        return self._data

    def age(self) -> float | None:
        """Seconds since the last successful update, or None if never updated."""
        if self._timestamp is None:
            return None
        return self._clock() - self._timestamp

    def is_fresh(self) -> bool:
        age = self.age()
        return age is not None and age < self._ttl

    def update(self, data: dict[str, AssetStats]) -> None:
        """Replace the cached statistics after a successful fetch."""
        self._data = dict(data)
        self._timestamp = self._clock()
        logger.debug("price_cache_updated", assets=len(self._data))

    def get(self, asset_id: str) -> AssetStats | None:
        return self._data.get(asset_id)
