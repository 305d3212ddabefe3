"""Shared test fixtures for perpcore."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from factories import STATS, make_chain
from perpcore.config import AppSettings, ContractSettings, MarketDataSettings, TradingSettings


@pytest.fixture
def chain() -> AsyncMock:
    """Chain reader with all four oracles healthy."""
    return make_chain()


@pytest.fixture
def stats_client() -> MagicMock:
    """Statistics client returning STATS for every request."""
    client = MagicMock()
    client.fetch_markets = MagicMock(return_value=dict(STATS))
    return client


@pytest.fixture
def contract_settings() -> ContractSettings:
    return ContractSettings()


@pytest.fixture
def trading_settings() -> TradingSettings:
    return TradingSettings()


@pytest.fixture
def app_settings() -> AppSettings:
    """AppSettings with defaults (Arbitrum One addresses, 1% slippage)."""
    return AppSettings(
        log_level="DEBUG",
        market_data=MarketDataSettings(stats_cache_ttl_seconds=60.0),
        trading=TradingSettings(),
    )
