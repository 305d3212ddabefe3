"""GMX V2 order intents and ExchangeRouter multicall payloads.

Open (MarketIncrease), one multicall with three sub-calls:
1. sendWnt(orderVault, executionFee)
2. sendTokens(USDC, orderVault, collateral)
3. createOrder(params) with initialCollateralDeltaAmount = 0

Close (MarketDecrease), one multicall with two sub-calls:
1. sendWnt(orderVault, executionFee)
2. createOrder(params) with initialCollateralDeltaAmount = USDC to withdraw

The sub-calls are never split across transactions. Nothing here signs or
sends; the caller hands ``(to, data, value)`` to a wallet.

Write path: every invalid input raises before any byte is encoded.
"""

from decimal import Decimal
from enum import IntEnum

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, is_address, to_checksum_address

from perpcore.config import ContractSettings, TradingSettings
from perpcore.exceptions import InvalidOrderError, PriceUnavailableError
from perpcore.logging import get_logger
from perpcore.markets import ZERO_ADDRESS, Market, Tokens, get_market
from perpcore.models import CallPayload, OrderIntent, OrderKind, OrderPayload, PositionSide
from perpcore.trading.calculator import acceptable_price
from perpcore.units import native_to_wei, price_to_protocol, usd_to_protocol, usdc_to_units

logger = get_logger(__name__)


class OrderType(IntEnum):
    """GMX V2 Order.OrderType."""

    MARKET_SWAP = 0
    LIMIT_SWAP = 1
    MARKET_INCREASE = 2
    LIMIT_INCREASE = 3
    MARKET_DECREASE = 4
    LIMIT_DECREASE = 5
    STOP_LOSS_DECREASE = 6
    LIQUIDATION = 7


class DecreasePositionSwapType(IntEnum):
    """GMX V2 Order.DecreasePositionSwapType."""

    NO_SWAP = 0
    SWAP_PNL_TOKEN_TO_COLLATERAL_TOKEN = 1
    SWAP_COLLATERAL_TOKEN_TO_PNL_TOKEN = 2


# IBaseOrderUtils.CreateOrderParams (GMX V2.1):
#   addresses: receiver, cancellationReceiver, callbackContract, uiFeeReceiver,
#              market, initialCollateralToken, swapPath
#   numbers:   sizeDeltaUsd, initialCollateralDeltaAmount, triggerPrice,
#              acceptablePrice, executionFee, callbackGasLimit, minOutputAmount,
#              validFromTime
#   orderType, decreasePositionSwapType, isLong, shouldUnwrapNativeToken,
#   autoCancel, referralCode
CREATE_ORDER_PARAMS_TYPE = (
    "((address,address,address,address,address,address,address[]),"
    "(uint256,uint256,uint256,uint256,uint256,uint256,uint256,uint256),"
    "uint8,uint8,bool,bool,bool,bytes32)"
)

MULTICALL_SIGNATURE = "multicall(bytes[])"
SEND_WNT_SIGNATURE = "sendWnt(address,uint256)"
SEND_TOKENS_SIGNATURE = "sendTokens(address,address,uint256)"
CREATE_ORDER_SIGNATURE = f"createOrder({CREATE_ORDER_PARAMS_TYPE})"
APPROVE_SIGNATURE = "approve(address,uint256)"

ZERO_REFERRAL_CODE = bytes(32)


def encode_call(signature: str, arg_types: list[str], args: list) -> bytes:
    """ABI-encode a function call: 4-byte selector followed by the encoded arguments."""
    return function_signature_to_4byte_selector(signature) + encode(arg_types, args)


def _require_account(account: str) -> str:
    if not isinstance(account, str) or not is_address(account):
        raise InvalidOrderError(f"Invalid account address: {account!r}")
    return to_checksum_address(account)


def create_open_intent(
    market_key: str,
    is_long: bool,
    collateral: Decimal,
    leverage: Decimal,
    price: Decimal,
    account: str,
    slippage_percent: Decimal = Decimal("1"),
) -> OrderIntent:
    """Build an intent to open (increase) a position at ``leverage`` x ``collateral``.

    Raises:
        UnknownMarketError: If the market is not tracked.
        PriceUnavailableError: If price is zero or negative.
        InvalidOrderError: On non-positive collateral/leverage, leverage above
            the market maximum, or an invalid account.
    """
    market = get_market(market_key)
    if price <= 0:
        raise PriceUnavailableError(f"Refusing to open {market_key} at price {price}")
    if collateral <= 0:
        raise InvalidOrderError(f"Collateral must be positive, got {collateral}")
    if leverage <= 0:
        raise InvalidOrderError(f"Leverage must be positive, got {leverage}")
    if leverage > market.max_leverage:
        raise InvalidOrderError(
            f"Leverage {leverage}x exceeds {market.max_leverage}x maximum for {market_key}"
        )

    return OrderIntent(
        kind=OrderKind.INCREASE,
        side=PositionSide.from_is_long(is_long),
        market=market.key,
        collateral=collateral,
        size_delta=collateral * leverage,
        acceptable_price=acceptable_price(price, is_long, slippage_percent, for_close=False),
        account=_require_account(account),
    )


def create_close_intent(
    market_key: str,
    is_long: bool,
    size_delta: Decimal,
    collateral_to_withdraw: Decimal,
    price: Decimal,
    account: str,
    slippage_percent: Decimal = Decimal("1"),
) -> OrderIntent:
    """Build an intent to close (decrease) ``size_delta`` USD of a position.

    ``collateral_to_withdraw`` is the USDC released back to the account; it
    may be zero for a pure size reduction.

    Raises:
        UnknownMarketError: If the market is not tracked.
        PriceUnavailableError: If price is zero or negative.
        InvalidOrderError: On non-positive size, negative withdrawal, or an
            invalid account.
    """
    market = get_market(market_key)
    if price <= 0:
        raise PriceUnavailableError(f"Refusing to close {market_key} at price {price}")
    if size_delta <= 0:
        raise InvalidOrderError(f"Size delta must be positive, got {size_delta}")
    if collateral_to_withdraw < 0:
        raise InvalidOrderError(
            f"Collateral withdrawal cannot be negative, got {collateral_to_withdraw}"
        )

    return OrderIntent(
        kind=OrderKind.DECREASE,
        side=PositionSide.from_is_long(is_long),
        market=market.key,
        collateral=collateral_to_withdraw,
        size_delta=size_delta,
        acceptable_price=acceptable_price(price, is_long, slippage_percent, for_close=True),
        account=_require_account(account),
    )


class OrderPayloadBuilder:
    """Encodes order intents into ExchangeRouter multicall payloads.

    Args:
        contracts: GMX contract addresses (router, order vault, UI fee receiver).
        trading: Trading settings; ``execution_fee_native`` is attached to every order.
    """

    def __init__(
        self,
        contracts: ContractSettings | None = None,
        trading: TradingSettings | None = None,
    ) -> None:
        self._contracts = contracts or ContractSettings()
        self._trading = trading or TradingSettings()
        self._execution_fee_wei = native_to_wei(self._trading.execution_fee_native)

    @property
    def execution_fee_wei(self) -> int:
        """Native fee (wei) sent to the order vault with every order."""
        return self._execution_fee_wei

    def build(self, intent: OrderIntent) -> OrderPayload:
        """Dispatch on the intent kind."""
        if intent.kind is OrderKind.INCREASE:
            return self.build_open(intent)
        return self.build_close(intent)

    def build_open(self, intent: OrderIntent) -> OrderPayload:
        """Encode sendWnt + sendTokens + createOrder(MarketIncrease)."""
        if intent.kind is not OrderKind.INCREASE:
            raise InvalidOrderError(f"build_open needs an increase intent, got {intent.kind.value}")
        market = self._validate(intent)
        if intent.collateral <= 0:
            raise InvalidOrderError(f"Collateral must be positive, got {intent.collateral}")

        order_vault = to_checksum_address(self._contracts.order_vault)
        collateral_units = usdc_to_units(intent.collateral)

        calls = (
            self._send_wnt(order_vault),
            encode_call(
                SEND_TOKENS_SIGNATURE,
                ["address", "address", "uint256"],
                [to_checksum_address(Tokens.USDC), order_vault, collateral_units],
            ),
            self._create_order(
                intent,
                market,
                OrderType.MARKET_INCREASE,
                # Collateral arrives through sendTokens, never through this field
                initial_collateral_delta=0,
            ),
        )
        payload = self._multicall(calls)
        logger.info(
            "open_order_encoded",
            market=market.key,
            side=intent.side.value,
            size_usd=str(intent.size_delta),
            collateral_usd=str(intent.collateral),
            acceptable_price=str(intent.acceptable_price),
            execution_fee_wei=self._execution_fee_wei,
        )
        return payload

    def build_close(self, intent: OrderIntent) -> OrderPayload:
        """Encode sendWnt + createOrder(MarketDecrease)."""
        if intent.kind is not OrderKind.DECREASE:
            raise InvalidOrderError(f"build_close needs a decrease intent, got {intent.kind.value}")
        market = self._validate(intent)
        if intent.collateral < 0:
            raise InvalidOrderError(
                f"Collateral withdrawal cannot be negative, got {intent.collateral}"
            )

        calls = (
            self._send_wnt(to_checksum_address(self._contracts.order_vault)),
            self._create_order(
                intent,
                market,
                OrderType.MARKET_DECREASE,
                initial_collateral_delta=usdc_to_units(intent.collateral),
            ),
        )
        payload = self._multicall(calls)
        logger.info(
            "close_order_encoded",
            market=market.key,
            side=intent.side.value,
            size_usd=str(intent.size_delta),
            withdraw_usd=str(intent.collateral),
            acceptable_price=str(intent.acceptable_price),
        )
        return payload

    def build_collateral_approval(self, amount: Decimal | None = None) -> CallPayload:
        """ERC-20 approve of USDC to the GMX Router, which pulls tokens for sendTokens.

        ``amount`` of None approves the maximum uint256.
        """
        units = 2**256 - 1 if amount is None else usdc_to_units(amount)
        data = encode_call(
            APPROVE_SIGNATURE,
            ["address", "uint256"],
            [to_checksum_address(self._contracts.router), units],
        )
        return CallPayload(to=to_checksum_address(Tokens.USDC), data=data, value=0)

    def _validate(self, intent: OrderIntent) -> Market:
        market = get_market(intent.market)
        if intent.acceptable_price <= 0:
            raise PriceUnavailableError(
                f"Refusing to encode {intent.market} order with acceptable price {intent.acceptable_price}"
            )
        if intent.size_delta <= 0:
            raise InvalidOrderError(f"Size delta must be positive, got {intent.size_delta}")
        _require_account(intent.account)
        return market

    def _send_wnt(self, order_vault: str) -> bytes:
        return encode_call(
            SEND_WNT_SIGNATURE,
            ["address", "uint256"],
            [order_vault, self._execution_fee_wei],
        )

    def _create_order(
        self,
        intent: OrderIntent,
        market: Market,
        order_type: OrderType,
        initial_collateral_delta: int,
    ) -> bytes:
        addresses = (
            to_checksum_address(intent.account),  # receiver
            ZERO_ADDRESS,  # cancellationReceiver
            ZERO_ADDRESS,  # callbackContract
            to_checksum_address(self._contracts.ui_fee_receiver),
            to_checksum_address(market.market_token),
            to_checksum_address(Tokens.USDC),  # initialCollateralToken
            [],  # swapPath
        )
        numbers = (
            usd_to_protocol(intent.size_delta),
            initial_collateral_delta,
            0,  # triggerPrice
            price_to_protocol(intent.acceptable_price, market.index_decimals),
            self._execution_fee_wei,
            0,  # callbackGasLimit
            0,  # minOutputAmount
            0,  # validFromTime
        )
        params = (
            addresses,
            numbers,
            int(order_type),
            int(DecreasePositionSwapType.NO_SWAP),
            intent.is_long,
            False,  # shouldUnwrapNativeToken
            False,  # autoCancel
            ZERO_REFERRAL_CODE,
        )
        return encode_call(CREATE_ORDER_SIGNATURE, [CREATE_ORDER_PARAMS_TYPE], [params])

    def _multicall(self, calls: tuple[bytes, ...]) -> OrderPayload:
        data = encode_call(MULTICALL_SIGNATURE, ["bytes[]"], [list(calls)])
        return OrderPayload(
            to=to_checksum_address(self._contracts.exchange_router),
            data=data,
            value=self._execution_fee_wei,
            calls=calls,
        )
