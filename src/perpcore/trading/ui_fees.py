"""GMX UI fee receiver management.

GMX shares part of the position fee with the interface that submitted the
order, identified by ``uiFeeReceiver`` in CreateOrderParams. The receiver
registers a fee factor once (``setUiFeeFactor``) and claims accrued fees
per market and token (``claimUiFees``). The factor is a 30-decimal
fraction capped by the DataStore value under MAX_UI_FEE_FACTOR.
"""

from dataclasses import dataclass
from decimal import Decimal

from eth_abi import encode
from eth_utils import keccak, to_checksum_address

from perpcore.chain.client import ChainReader
from perpcore.config import ContractSettings
from perpcore.logging import get_logger
from perpcore.markets import MARKETS, Tokens
from perpcore.models import CallPayload
from perpcore.trading.orders import encode_call
from perpcore.units import USD_DECIMALS, from_fixed_point

logger = get_logger(__name__)

# Keys.MAX_UI_FEE_FACTOR = keccak256(abi.encode("MAX_UI_FEE_FACTOR"))
MAX_UI_FEE_FACTOR_KEY: bytes = keccak(encode(["string"], ["MAX_UI_FEE_FACTOR"]))

SET_UI_FEE_FACTOR_SIGNATURE = "setUiFeeFactor(uint256)"
CLAIM_UI_FEES_SIGNATURE = "claimUiFees(address[],address[],address)"

DEFAULT_CLAIM_TOKENS = (Tokens.USDC, Tokens.WETH, Tokens.WBTC)


@dataclass(frozen=True)
class UiFeeFactor:
    """A UI fee factor in raw 30-decimal form and as a percentage."""

    raw: int
    percentage: Decimal


def ui_fee_factor_to_percent(raw: int) -> Decimal:
    return from_fixed_point(raw, USD_DECIMALS) * Decimal("100")


async def query_max_ui_fee_factor(
    chain: ChainReader, contracts: ContractSettings | None = None
) -> UiFeeFactor:
    """Read the protocol's maximum UI fee factor from the DataStore."""
    contracts = contracts or ContractSettings()
    raw = await chain.get_uint(contracts.data_store, MAX_UI_FEE_FACTOR_KEY)
    factor = UiFeeFactor(raw=raw, percentage=ui_fee_factor_to_percent(raw))
    logger.info("max_ui_fee_factor", raw=raw, percentage=str(factor.percentage))
    return factor


def build_set_ui_fee_factor(
    ui_fee_factor: int, contracts: ContractSettings | None = None
) -> CallPayload:
    """Payload registering the sender as UI fee receiver with ``ui_fee_factor``.

    Must be sent from the receiver address itself.
    """
    if ui_fee_factor < 0:
        raise ValueError(f"ui_fee_factor must be >= 0, got {ui_fee_factor}")
    contracts = contracts or ContractSettings()
    data = encode_call(SET_UI_FEE_FACTOR_SIGNATURE, ["uint256"], [ui_fee_factor])
    return CallPayload(to=to_checksum_address(contracts.exchange_router), data=data)


def build_claim_ui_fees(
    contracts: ContractSettings | None = None,
    markets: list[str] | None = None,
    tokens: list[str] | None = None,
    receiver: str | None = None,
) -> CallPayload:
    """Payload claiming accrued UI fees; anyone may send it, fees go to ``receiver``.

    Defaults: every tracked market, USDC/WETH/WBTC, the configured receiver.
    """
    contracts = contracts or ContractSettings()
    market_addresses = markets if markets is not None else [
        m.market_token for m in MARKETS.values()
    ]
    token_addresses = tokens if tokens is not None else list(DEFAULT_CLAIM_TOKENS)
    data = encode_call(
        CLAIM_UI_FEES_SIGNATURE,
        ["address[]", "address[]", "address"],
        [
            [to_checksum_address(a) for a in market_addresses],
            [to_checksum_address(a) for a in token_addresses],
            to_checksum_address(receiver or contracts.ui_fee_receiver),
        ],
    )
    return CallPayload(to=to_checksum_address(contracts.exchange_router), data=data)
