"""Reconstruct open positions from GMX Reader output.

Flow for one account:
1. Read up to ``positions_page_size`` raw records from the Reader contract
2. Drop records in untracked markets and records with zero size
3. Fetch one oracle price per remaining market, concurrently
4. Convert each record's fixed-point fields and derive entry price,
   leverage, PnL and liquidation price

Nothing is cached between calls. A failed Reader call, or an account
without positions, yields an empty list. A market whose price cannot be
read loses only its own positions.
"""

import asyncio
from decimal import Decimal

from perpcore.chain.client import ChainReader
from perpcore.chain.types import RawPosition
from perpcore.config import ContractSettings, TradingSettings
from perpcore.exceptions import PriceUnavailableError
from perpcore.logging import account_context, get_logger
from perpcore.market_data.aggregator import PriceAggregator
from perpcore.markets import STABLE_TOKENS, Market, market_by_address, token_decimals
from perpcore.models import Position, PositionSide
from perpcore.trading.calculator import calculate_pnl, liquidation_price
from perpcore.units import from_fixed_point, protocol_to_usd

logger = get_logger(__name__)


class PositionReader:
    """Turns an account's on-chain positions into typed Position records.

    Args:
        chain: Reader used for ``getAccountPositions``.
        aggregator: Source of live oracle prices.
        contracts: GMX contract addresses (DataStore).
        trading: Page size and maintenance margin.
    """

    def __init__(
        self,
        chain: ChainReader,
        aggregator: PriceAggregator,
        contracts: ContractSettings | None = None,
        trading: TradingSettings | None = None,
    ) -> None:
        self._chain = chain
        self._aggregator = aggregator
        self._contracts = contracts or ContractSettings()
        self._trading = trading or TradingSettings()

    async def get_positions(self, account: str) -> list[Position]:
        """Return the account's open positions in tracked markets."""
        with account_context(account):
            return await self._read_positions(account)

    async def _read_positions(self, account: str) -> list[Position]:
        try:
            raw_positions = await self._chain.account_positions(
                self._contracts.data_store,
                account,
                0,
                self._trading.positions_page_size,
            )
        except Exception:
            logger.warning("position_read_failed", exc_info=True)
            return []

        candidates: list[tuple[Market, RawPosition]] = []
        for raw in raw_positions:
            market = market_by_address(raw.addresses.market)
            if market is None:
                continue
            if raw.numbers.size_in_usd == 0:
                continue
            candidates.append((market, raw))

        if not candidates:
            return []

        prices = await self._fetch_prices({m.key: m for m, _ in candidates})

        positions: list[Position] = []
        for market, raw in candidates:
            mark_price = prices.get(market.key)
            if mark_price is None:
                continue
            position = self.reconstruct(market, raw, mark_price)
            if position is not None:
                positions.append(position)

        logger.debug(
            "positions_reconstructed",
            raw=len(raw_positions),
            open=len(positions),
        )
        return positions

    async def _fetch_prices(self, markets: dict[str, Market]) -> dict[str, Decimal]:
        """One oracle read per market for this pass; failed markets are omitted."""
        keys = list(markets)
        results = await asyncio.gather(
            *(self._aggregator.get_oracle_price(markets[key]) for key in keys),
            return_exceptions=True,
        )

        prices: dict[str, Decimal] = {}
        for key, result in zip(keys, results):
            if isinstance(result, PriceUnavailableError):
                logger.warning("position_price_unavailable", market=key, error=str(result))
                continue
            if isinstance(result, BaseException):
                raise result
            prices[key] = result
        return prices

    def reconstruct(
        self, market: Market, raw: RawPosition, mark_price: Decimal
    ) -> Position | None:
        """Derive a Position from one raw record, or None if it cannot be valued."""
        size_usd = protocol_to_usd(raw.numbers.size_in_usd)
        size_in_tokens = from_fixed_point(raw.numbers.size_in_tokens, market.index_decimals)
        if size_usd <= 0 or size_in_tokens <= 0:
            logger.warning(
                "position_without_size",
                market=market.key,
                size_in_usd=raw.numbers.size_in_usd,
                size_in_tokens=raw.numbers.size_in_tokens,
            )
            return None

        collateral_token = raw.addresses.collateral_token
        collateral_amount = from_fixed_point(
            raw.numbers.collateral_amount, token_decimals(collateral_token)
        )
        if collateral_token.lower() in STABLE_TOKENS:
            collateral_usd = collateral_amount
        else:
            # Non-stable collateral in these markets is the index token itself
            collateral_usd = collateral_amount * mark_price
        if collateral_usd <= 0:
            logger.warning("position_without_collateral", market=market.key)
            return None

        is_long = raw.flags.is_long
        entry_price = size_usd / size_in_tokens
        leverage = size_usd / collateral_usd
        pnl = calculate_pnl(is_long, entry_price, mark_price, size_usd, collateral_usd)

        return Position(
            market=market.key,
            side=PositionSide.from_is_long(is_long),
            size=size_usd,
            collateral=collateral_usd,
            entry_price=entry_price,
            mark_price=mark_price,
            leverage=leverage,
            pnl=pnl.pnl,
            pnl_percent=pnl.pnl_percent,
            liquidation_price=liquidation_price(
                is_long, entry_price, leverage, self._trading.maintenance_margin
            ),
        )
