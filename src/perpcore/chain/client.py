"""Abstract chain reader interface.

Price aggregation and position reconstruction depend only on this
interface, keeping web3-specific details in the concrete implementation
and letting tests substitute an AsyncMock.
"""

from abc import ABC, abstractmethod

from perpcore.chain.types import RawPosition, RoundData


class ChainReader(ABC):
    """Read-only access to the Arbitrum contracts perpcore needs."""

    @abstractmethod
    async def close(self) -> None:
        """Release HTTP sessions held by the provider."""
        ...

    @abstractmethod
    async def latest_round_data(self, feed: str) -> RoundData:
        """Return the latest round of a Chainlink aggregator."""
        ...

    @abstractmethod
    async def feed_decimals(self, feed: str) -> int:
        """Return the number of decimals of a Chainlink aggregator's answer."""
        ...

    @abstractmethod
    async def account_positions(
        self, data_store: str, account: str, start: int, end: int
    ) -> list[RawPosition]:
        """Return the account's positions in index range [start, end) from the GMX Reader."""
        ...

    @abstractmethod
    async def get_uint(self, data_store: str, key: bytes) -> int:
        """Read a uint256 value from the GMX DataStore."""
        ...

    @abstractmethod
    async def native_balance(self, address: str) -> int:
        """Return the native (ETH) balance in wei."""
        ...

    @abstractmethod
    async def token_balance(self, token: str, owner: str) -> int:
        """Return an ERC-20 balance in the token's smallest unit."""
        ...
