"""Trading layer -- trade math, position reconstruction and order encoding."""

from perpcore.trading.calculator import (
    acceptable_price,
    calculate_pnl,
    liquidation_price,
    trade_preview,
)
from perpcore.trading.orders import (
    OrderPayloadBuilder,
    OrderType,
    create_close_intent,
    create_open_intent,
)
from perpcore.trading.positions import PositionReader

__all__ = [
    "OrderPayloadBuilder",
    "OrderType",
    "PositionReader",
    "acceptable_price",
    "calculate_pnl",
    "create_close_intent",
    "create_open_intent",
    "liquidation_price",
    "trade_preview",
]
