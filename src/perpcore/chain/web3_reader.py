"""ChainReader implementation over web3.py's AsyncWeb3.

Wraps AsyncHTTPProvider with contract construction and decoding of the raw
tuples into perpcore.chain.types records.
"""

from web3 import AsyncHTTPProvider, AsyncWeb3

from perpcore.chain.abi import (
    CHAINLINK_AGGREGATOR_ABI,
    DATA_STORE_ABI,
    ERC20_ABI,
    GMX_READER_ABI,
)
from perpcore.chain.client import ChainReader
from perpcore.chain.types import RawPosition, RoundData
from perpcore.config import ChainSettings, ContractSettings
from perpcore.logging import get_logger

logger = get_logger(__name__)


class Web3ChainReader(ChainReader):
    """Concrete chain reader using web3.py async contracts."""

    def __init__(
        self,
        settings: ChainSettings,
        contracts: ContractSettings | None = None,
    ) -> None:
        self._settings = settings
        self._contracts = contracts or ContractSettings()
        self._w3 = AsyncWeb3(AsyncHTTPProvider(settings.rpc_url))

    @property
    def w3(self) -> AsyncWeb3:
        """Access the underlying AsyncWeb3 instance."""
        return self._w3

    def _contract(self, address: str, abi: list[dict]):
        return self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(address), abi=abi
        )

    async def close(self) -> None:
        logger.debug("closing_rpc_provider", rpc_url=self._settings.rpc_url)
        await self._w3.provider.disconnect()

    async def latest_round_data(self, feed: str) -> RoundData:
        raw = await self._contract(feed, CHAINLINK_AGGREGATOR_ABI).functions.latestRoundData().call()
        return RoundData.from_abi(raw)

    async def feed_decimals(self, feed: str) -> int:
        return int(await self._contract(feed, CHAINLINK_AGGREGATOR_ABI).functions.decimals().call())

    async def account_positions(
        self, data_store: str, account: str, start: int, end: int
    ) -> list[RawPosition]:
        reader = self._contract(self._contracts.reader, GMX_READER_ABI)
        raw = await reader.functions.getAccountPositions(
            AsyncWeb3.to_checksum_address(data_store),
            AsyncWeb3.to_checksum_address(account),
            start,
            end,
        ).call()
        positions = [RawPosition.from_abi(item) for item in raw]
        logger.debug("account_positions_read", account=account, count=len(positions))
        return positions

    async def get_uint(self, data_store: str, key: bytes) -> int:
        store = self._contract(data_store, DATA_STORE_ABI)
        return int(await store.functions.getUint(key).call())

    async def native_balance(self, address: str) -> int:
        return int(await self._w3.eth.get_balance(AsyncWeb3.to_checksum_address(address)))

    async def token_balance(self, token: str, owner: str) -> int:
        erc20 = self._contract(token, ERC20_ABI)
        return int(
            await erc20.functions.balanceOf(AsyncWeb3.to_checksum_address(owner)).call()
        )
