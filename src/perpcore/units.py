"""Fixed-point conversions between USD decimals and GMX integer units.

GMX V2 works in several incompatible integer domains:
  - USD values (sizes, PnL): 30 decimals
  - USDC amounts: 6 decimals
  - Native asset (ETH) amounts: 18 decimals
  - Prices: 30 - index token decimals, so that price * token amount lands in
    the 30-decimal USD domain

Every change of domain in this package goes through one of these functions.
Parsing always goes through Decimal(str(value)); a float is never multiplied
by a power of ten directly.
"""

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation

USD_DECIMALS = 30
USDC_DECIMALS = 6
NATIVE_DECIMALS = 18
PRICE_DISPLAY_DECIMALS = 2

# 30-decimal values with 12+ integer digits exceed the default 28-digit precision
_CONTEXT = Context(prec=100, rounding=ROUND_HALF_UP)

_ONE = Decimal("1")
_CENT = Decimal("0.01")


def _to_decimal(value: str | int | float | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a decimal amount: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return result


def to_fixed_point(value: str | int | float | Decimal, decimals: int) -> int:
    """Convert a decimal amount into an integer with ``decimals`` implied places.

    Digits beyond ``decimals`` are rounded half-up.

    Raises:
        ValueError: If the value is not a finite decimal or decimals < 0.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    scaled = _CONTEXT.scaleb(_to_decimal(value), decimals)
    return int(scaled.quantize(_ONE, rounding=ROUND_HALF_UP, context=_CONTEXT))


def from_fixed_point(amount: int, decimals: int) -> Decimal:
    """Convert an integer with ``decimals`` implied places back to a Decimal (exact)."""
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    return _CONTEXT.scaleb(Decimal(int(amount)), -decimals)


def usd_to_protocol(value: str | int | float | Decimal) -> int:
    """USD amount -> GMX 30-decimal USD units."""
    return to_fixed_point(value, USD_DECIMALS)


def protocol_to_usd(amount: int) -> Decimal:
    """GMX 30-decimal USD units -> USD amount."""
    return from_fixed_point(amount, USD_DECIMALS)


def usdc_to_units(value: str | int | float | Decimal) -> int:
    return to_fixed_point(value, USDC_DECIMALS)


def units_to_usdc(amount: int) -> Decimal:
    return from_fixed_point(amount, USDC_DECIMALS)


def native_to_wei(value: str | int | float | Decimal) -> int:
    return to_fixed_point(value, NATIVE_DECIMALS)


def wei_to_native(amount: int) -> Decimal:
    return from_fixed_point(amount, NATIVE_DECIMALS)


def round_price(price: str | int | float | Decimal) -> Decimal:
    """Round a USD price to cents, dropping float noise before it reaches the chain."""
    return _to_decimal(price).quantize(_CENT, rounding=ROUND_HALF_UP, context=_CONTEXT)


def price_to_protocol(price: str | int | float | Decimal, index_decimals: int) -> int:
    """USD price -> GMX price units for a market whose index token has ``index_decimals``.

    GMX stores prices as ``price * 10^(30 - index_decimals)`` so that
    ``price * size_in_tokens`` yields a 30-decimal USD value.

    The price is rounded to cents first. For low-priced index tokens this
    moves the acceptable price by more than the requested slippage: an ARB
    open-long at 0.304 with 1% slippage (0.30704) is encoded as 0.31, about
    2% above the quote.
    """
    return to_fixed_point(round_price(price), USD_DECIMALS - index_decimals)


def protocol_to_price(amount: int, index_decimals: int) -> Decimal:
    """GMX price units -> USD price."""
    return from_fixed_point(amount, USD_DECIMALS - index_decimals)
