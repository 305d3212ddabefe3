"""Chain access layer -- Arbitrum contract reads via web3.py."""

from perpcore.chain.client import ChainReader
from perpcore.chain.types import (
    PositionAddresses,
    PositionFlags,
    PositionNumbers,
    RawPosition,
    RoundData,
)
from perpcore.chain.web3_reader import Web3ChainReader

__all__ = [
    "ChainReader",
    "PositionAddresses",
    "PositionFlags",
    "PositionNumbers",
    "RawPosition",
    "RoundData",
    "Web3ChainReader",
]
