"""Facade wiring chain access, price aggregation, positions and order encoding.

An application shell builds one TradingService per process and calls it
from its request handlers. Component wiring order (in ``from_settings``):

1. AppSettings (configuration)
2. ChainReader (Web3ChainReader over the configured RPC)
3. PriceCache (shared 24h statistics cache)
4. CoinGeckoClient (24h statistics source)
5. PriceAggregator (oracle + statistics with fallback)
6. PositionReader (on-chain positions with live PnL)
7. OrderPayloadBuilder (ExchangeRouter multicall payloads)

Submitting the returned payloads (signing, sending) is the caller's job.
"""

from decimal import Decimal

from perpcore.chain.client import ChainReader
from perpcore.chain.web3_reader import Web3ChainReader
from perpcore.config import AppSettings
from perpcore.logging import account_context, get_logger, setup_logging
from perpcore.market_data.aggregator import PriceAggregator
from perpcore.market_data.price_cache import PriceCache
from perpcore.market_data.stats_client import CoinGeckoClient
from perpcore.models import MarketSnapshot, OrderPayload, Position, TradePreview
from perpcore.trading.calculator import trade_preview
from perpcore.trading.orders import OrderPayloadBuilder, create_close_intent, create_open_intent
from perpcore.trading.positions import PositionReader

logger = get_logger(__name__)


class TradingService:
    """Entry point for market data, previews, positions and order payloads."""

    def __init__(
        self,
        settings: AppSettings,
        chain: ChainReader,
        aggregator: PriceAggregator,
        position_reader: PositionReader,
        order_builder: OrderPayloadBuilder,
    ) -> None:
        self._settings = settings
        self._chain = chain
        self._aggregator = aggregator
        self._position_reader = position_reader
        self._order_builder = order_builder

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        chain: ChainReader | None = None,
        cache: PriceCache | None = None,
        configure_logging: bool = True,
    ) -> "TradingService":
        """Build the full component graph. ``chain`` and ``cache`` are injectable."""
        settings = settings or AppSettings()
        if configure_logging:
            setup_logging(settings.log_level)
        chain = chain or Web3ChainReader(settings.chain, settings.contracts)
        cache = cache or PriceCache(settings.market_data.stats_cache_ttl_seconds)
        aggregator = PriceAggregator(chain, CoinGeckoClient(settings.market_data), cache)
        logger.info(
            "trading_service_initialized",
            rpc_url=settings.chain.rpc_url,
            chain_id=settings.chain.chain_id,
            exchange_router=settings.contracts.exchange_router,
        )
        return cls(
            settings=settings,
            chain=chain,
            aggregator=aggregator,
            position_reader=PositionReader(
                chain, aggregator, settings.contracts, settings.trading
            ),
            order_builder=OrderPayloadBuilder(settings.contracts, settings.trading),
        )

    @property
    def aggregator(self) -> PriceAggregator:
        return self._aggregator

    async def close(self) -> None:
        await self._chain.close()
        logger.info("trading_service_closed")

    async def get_markets(self) -> list[MarketSnapshot]:
        return await self._aggregator.get_all_markets()

    async def get_positions(self, account: str) -> list[Position]:
        return await self._position_reader.get_positions(account)

    def preview(
        self,
        collateral: Decimal,
        leverage: Decimal,
        current_price: Decimal,
        is_long: bool,
    ) -> TradePreview:
        trading = self._settings.trading
        return trade_preview(
            collateral,
            leverage,
            current_price,
            is_long,
            position_fee_rate=trading.position_fee_rate,
            execution_fee_price_factor=trading.execution_fee_price_factor,
            maintenance_margin=trading.maintenance_margin,
        )

    async def build_open_order(
        self,
        market_key: str,
        is_long: bool,
        collateral: Decimal,
        leverage: Decimal,
        account: str,
        slippage_percent: Decimal | None = None,
    ) -> OrderPayload:
        """Fetch a fresh price and encode an open order.

        Raises:
            PriceUnavailableError: If no source has a price for the market.
            InvalidOrderError: If the inputs cannot produce a safe order.
        """
        with account_context(account, market=market_key):
            price = await self._aggregator.get_price(market_key)
            intent = create_open_intent(
                market_key,
                is_long,
                collateral,
                leverage,
                price,
                account,
                self._slippage(slippage_percent),
            )
            return self._order_builder.build_open(intent)

    async def build_close_order(
        self,
        market_key: str,
        is_long: bool,
        size_delta: Decimal,
        collateral_to_withdraw: Decimal,
        account: str,
        slippage_percent: Decimal | None = None,
    ) -> OrderPayload:
        """Fetch a fresh price and encode a close order.

        Raises:
            PriceUnavailableError: If no source has a price for the market.
            InvalidOrderError: If the inputs cannot produce a safe order.
        """
        with account_context(account, market=market_key):
            price = await self._aggregator.get_price(market_key)
            intent = create_close_intent(
                market_key,
                is_long,
                size_delta,
                collateral_to_withdraw,
                price,
                account,
                self._slippage(slippage_percent),
            )
            return self._order_builder.build_close(intent)

    def _slippage(self, slippage_percent: Decimal | None) -> Decimal:
        if slippage_percent is None:
            return self._settings.trading.default_slippage_percent
        return slippage_percent
