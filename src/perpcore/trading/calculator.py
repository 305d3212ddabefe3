"""Leverage, liquidation, fee and PnL math for trade previews and positions.

All calculations use Decimal arithmetic exclusively and are pure: no I/O,
no state, no rounding beyond the Decimal context.

Direction conventions:
  - Long profits when mark > entry; short profits when mark < entry
  - Liquidation sits below entry for longs and above entry for shorts
  - Acceptable price: opening a long or closing a short tolerates a HIGHER
    price; opening a short or closing a long tolerates a LOWER one
"""

from decimal import Decimal

from perpcore.models import PnL, TradePreview

DEFAULT_MAINTENANCE_MARGIN = Decimal("0.01")
DEFAULT_POSITION_FEE_RATE = Decimal("0.0005")  # 5 bps
DEFAULT_EXECUTION_FEE_PRICE_FACTOR = Decimal("0.0001")

_ONE = Decimal("1")
_HUNDRED = Decimal("100")


def liquidation_price(
    is_long: bool,
    entry_price: Decimal,
    leverage: Decimal,
    maintenance_margin: Decimal = DEFAULT_MAINTENANCE_MARGIN,
) -> Decimal:
    """Price at which the position's losses exhaust collateral down to maintenance margin.

    Formula: entry * (1 -/+ (1/leverage - maintenance_margin)), minus for longs.

    The result is not clamped. At leverage <= 1/(1 - maintenance_margin) the
    long liquidation price is zero or negative; callers decide how to show it.

    Raises:
        ValueError: If leverage is not positive.
    """
    if leverage <= 0:
        raise ValueError(f"leverage must be positive, got {leverage}")
    threshold = _ONE / leverage - maintenance_margin
    if is_long:
        return entry_price * (_ONE - threshold)
    return entry_price * (_ONE + threshold)


def calculate_pnl(
    is_long: bool,
    entry_price: Decimal,
    mark_price: Decimal,
    size: Decimal,
    collateral: Decimal,
) -> PnL:
    """Unrealized PnL in USD and as a percent of collateral.

    pnl = (mark - entry) / entry * size for longs, sign inverted for shorts.
    pnl_percent = pnl / collateral * 100, or 0 when collateral is 0.

    Raises:
        ValueError: If entry_price is not positive.
    """
    if entry_price <= 0:
        raise ValueError(f"entry_price must be positive, got {entry_price}")
    price_diff = mark_price - entry_price if is_long else entry_price - mark_price
    pnl = price_diff / entry_price * size
    pnl_percent = pnl / collateral * _HUNDRED if collateral else Decimal("0")
    return PnL(pnl=pnl, pnl_percent=pnl_percent)


def trade_preview(
    collateral: Decimal,
    leverage: Decimal,
    current_price: Decimal,
    is_long: bool,
    position_fee_rate: Decimal = DEFAULT_POSITION_FEE_RATE,
    execution_fee_price_factor: Decimal = DEFAULT_EXECUTION_FEE_PRICE_FACTOR,
    maintenance_margin: Decimal = DEFAULT_MAINTENANCE_MARGIN,
) -> TradePreview:
    """Estimate size, liquidation price and fees for opening a position.

    The execution fee here is a display estimate (about 0.0001 ETH priced at
    ``current_price``). The fee actually attached on submission is the fixed
    native amount in TradingSettings.execution_fee_native.

    Example: 300 collateral at 10x, price 3000, long ->
    size 3000, position fee 1.5, execution fee 0.3, liquidation 2730.
    """
    size = collateral * leverage
    position_fee = size * position_fee_rate
    execution_fee = execution_fee_price_factor * current_price

    return TradePreview(
        size=size,
        entry_price=current_price,
        liquidation_price=liquidation_price(
            is_long, current_price, leverage, maintenance_margin
        ),
        position_fee=position_fee,
        execution_fee=execution_fee,
        fees=position_fee + execution_fee,
        margin=collateral,
        leverage=leverage,
    )


def acceptable_price(
    price: Decimal,
    is_long: bool,
    slippage_percent: Decimal,
    for_close: bool = False,
) -> Decimal:
    """Worst execution price an order tolerates after slippage.

    Closing reverses the market action of the position, so the bias flips:

        open long  / close short -> price * (1 + slippage)
        open short / close long  -> price * (1 - slippage)
    """
    slippage = slippage_percent / _HUNDRED
    bias_up = is_long != for_close
    if bias_up:
        return price * (_ONE + slippage)
    return price * (_ONE - slippage)
