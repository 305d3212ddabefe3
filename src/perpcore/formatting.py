"""Display formatting for prices, USD amounts, percentages and addresses."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from perpcore.markets import get_market


def _as_decimal(value: Decimal | int | float | str) -> Decimal | None:
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        return None
    return result if result.is_finite() else None


def format_number(value: Decimal | int | float | str, decimals: int = 2, prefix: str = "") -> str:
    """Thousands-separated number with a fixed number of decimals, e.g. ``1,234.50``."""
    number = _as_decimal(value)
    if number is None:
        return f"{prefix}{0:.{decimals}f}"
    quantum = Decimal(1).scaleb(-decimals)
    return f"{prefix}{number.quantize(quantum, rounding=ROUND_HALF_UP):,.{decimals}f}"


def format_usd(value: Decimal | int | float | str) -> str:
    return format_number(value, 2, "$")


def format_percent(value: Decimal | int | float | str, decimals: int = 2) -> str:
    """Signed percentage, e.g. ``+1.25%`` or ``-0.40%``."""
    number = _as_decimal(value) or Decimal("0")
    sign = "+" if number >= 0 else ""
    return f"{sign}{number:.{decimals}f}%"


def format_signed_usd(value: Decimal | int | float | str) -> str:
    """PnL style: ``+12.30`` / ``-4.00``."""
    number = _as_decimal(value) or Decimal("0")
    sign = "+" if number >= 0 else ""
    return f"{sign}{format_number(number)}"


def format_price(market_key: str, price: Decimal | int | float | str) -> str:
    """Price at the market's display precision (4 decimals for ARB, 2 otherwise)."""
    return format_number(price, get_market(market_key).price_precision)


def format_address(address: str, chars: int = 4) -> str:
    """Shorten ``0x1234...abcd``."""
    return f"{address[:chars + 2]}...{address[-chars:]}"
