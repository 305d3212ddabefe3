"""Shared data models for perpcore.

CRITICAL: All monetary values use Decimal. Never use float for prices, sizes, or fees.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class PositionSide(str, Enum):
    """Position direction."""

    LONG = "long"
    SHORT = "short"

    @classmethod
    def from_is_long(cls, is_long: bool) -> "PositionSide":
        return cls.LONG if is_long else cls.SHORT

    @property
    def is_long(self) -> bool:
        return self is PositionSide.LONG


class OrderKind(str, Enum):
    """Order intent kind: open (increase) or close (decrease)."""

    INCREASE = "increase"
    DECREASE = "decrease"


class PriceSource(str, Enum):
    """Where a snapshot's price came from."""

    ORACLE = "oracle"
    STATS = "stats"
    NONE = "none"


@dataclass(frozen=True)
class AssetStats:
    """24h statistics for one asset from the external statistics endpoint."""

    asset_id: str
    price: Decimal
    change_24h: Decimal = Decimal("0")
    high_24h: Decimal | None = None
    low_24h: Decimal | None = None
    volume_24h: Decimal = Decimal("0")


@dataclass(frozen=True)
class MarketSnapshot:
    """Point-in-time market data for one market. Superseded by the next poll."""

    market: str
    price: Decimal
    change_24h: Decimal
    high_24h: Decimal
    low_24h: Decimal
    volume_24h: Decimal
    open_interest_long: Decimal
    open_interest_short: Decimal
    funding_rate: Decimal
    max_leverage: int
    price_source: PriceSource = PriceSource.ORACLE


@dataclass(frozen=True)
class PnL:
    """Unrealized profit and loss for a position."""

    pnl: Decimal
    pnl_percent: Decimal


@dataclass(frozen=True)
class TradePreview:
    """Pre-submission estimate for opening a position."""

    size: Decimal
    entry_price: Decimal
    liquidation_price: Decimal
    position_fee: Decimal
    execution_fee: Decimal  # display estimate, not the fee attached on submit
    fees: Decimal
    margin: Decimal
    leverage: Decimal


@dataclass(frozen=True)
class Position:
    """An open position reconstructed from on-chain state and a live mark price."""

    market: str
    side: PositionSide
    size: Decimal
    collateral: Decimal
    entry_price: Decimal
    mark_price: Decimal
    leverage: Decimal
    pnl: Decimal
    pnl_percent: Decimal
    liquidation_price: Decimal

    @property
    def is_long(self) -> bool:
        return self.side.is_long


@dataclass(frozen=True)
class OrderIntent:
    """A single-use request to open or close a position.

    ``collateral`` is the USDC deposited for INCREASE and the USDC withdrawn
    for DECREASE. Build a new intent for every submission attempt.
    """

    kind: OrderKind
    side: PositionSide
    market: str
    collateral: Decimal
    size_delta: Decimal
    acceptable_price: Decimal
    account: str

    @property
    def is_long(self) -> bool:
        return self.side.is_long


@dataclass(frozen=True)
class CallPayload:
    """Calldata for one contract call, ready for an external signer."""

    to: str
    data: bytes
    value: int = 0

    @property
    def hex_data(self) -> str:
        return "0x" + self.data.hex()


@dataclass(frozen=True)
class OrderPayload(CallPayload):
    """Multicall calldata for an order plus the individual encoded sub-calls."""

    calls: tuple[bytes, ...] = field(default_factory=tuple)
