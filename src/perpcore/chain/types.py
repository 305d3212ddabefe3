"""Decoded on-chain records.

web3 returns contract outputs as nested positional tuples. Each record here
has exactly one ``from_abi`` constructor so the positional layout is known in
one place only; everything downstream uses field names.
"""

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class RoundData:
    """Chainlink ``latestRoundData`` answer. ``answer`` is a signed mantissa."""

    round_id: int
    answer: int
    started_at: int
    updated_at: int
    answered_in_round: int

    @classmethod
    def from_abi(cls, raw: Sequence[int]) -> "RoundData":
        round_id, answer, started_at, updated_at, answered_in_round = raw
        return cls(
            round_id=int(round_id),
            answer=int(answer),
            started_at=int(started_at),
            updated_at=int(updated_at),
            answered_in_round=int(answered_in_round),
        )


@dataclass(frozen=True)
class PositionAddresses:
    account: str
    market: str
    collateral_token: str


@dataclass(frozen=True)
class PositionNumbers:
    """Raw integer fields of a GMX position, each in its own fixed-point domain.

    size_in_usd is 30 decimals, size_in_tokens uses the index token's
    decimals and collateral_amount uses the collateral token's decimals.
    """

    size_in_usd: int
    size_in_tokens: int
    collateral_amount: int
    borrowing_factor: int = 0
    funding_fee_amount_per_size: int = 0
    long_token_claimable_funding_amount_per_size: int = 0
    short_token_claimable_funding_amount_per_size: int = 0
    increased_at_block: int = 0
    decreased_at_block: int = 0


@dataclass(frozen=True)
class PositionFlags:
    is_long: bool


@dataclass(frozen=True)
class RawPosition:
    """A GMX ``Position.Props`` record as returned by the Reader contract."""

    addresses: PositionAddresses
    numbers: PositionNumbers
    flags: PositionFlags

    @classmethod
    def from_abi(cls, raw: Sequence[Sequence]) -> "RawPosition":
        addresses, numbers, flags = raw
        account, market, collateral_token = addresses
        return cls(
            addresses=PositionAddresses(
                account=str(account),
                market=str(market),
                collateral_token=str(collateral_token),
            ),
            numbers=PositionNumbers(*(int(n) for n in numbers)),
            flags=PositionFlags(is_long=bool(flags[0])),
        )
