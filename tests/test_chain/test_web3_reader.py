"""Tests for Web3ChainReader with contract calls patched out."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from perpcore.chain.abi import CHAINLINK_AGGREGATOR_ABI, ERC20_ABI, GMX_READER_ABI
from perpcore.chain.web3_reader import Web3ChainReader
from perpcore.config import ChainSettings, ContractSettings

ACCOUNT = "0x1111111111111111111111111111111111111111"
FEED = "0x639Fe6ab55C921f74e7fac1ee960C0B6293ba612"


def _contract_returning(method: str, value) -> MagicMock:
    contract = MagicMock()
    call = getattr(contract.functions, method).return_value
    call.call = AsyncMock(return_value=value)
    return contract


@pytest.fixture
def reader() -> Web3ChainReader:
    return Web3ChainReader(ChainSettings(rpc_url="http://localhost:8545"), ContractSettings())


@pytest.mark.asyncio
async def test_latest_round_data(reader: Web3ChainReader) -> None:
    contract = _contract_returning("latestRoundData", (5, 300000000000, 1, 2, 5))
    with patch.object(reader, "_contract", return_value=contract) as make_contract:
        data = await reader.latest_round_data(FEED)

    assert data.answer == 300000000000
    make_contract.assert_called_once_with(FEED, CHAINLINK_AGGREGATOR_ABI)


@pytest.mark.asyncio
async def test_feed_decimals(reader: Web3ChainReader) -> None:
    contract = _contract_returning("decimals", 8)
    with patch.object(reader, "_contract", return_value=contract):
        assert await reader.feed_decimals(FEED) == 8


@pytest.mark.asyncio
async def test_account_positions_decodes_records(reader: Web3ChainReader) -> None:
    market = "0x70d95587d40A2caf56bd97485aB3Eec10Bee6336"
    usdc = "0xaf88d065e77c8cC2239327C5EDb3A432268e5831"
    raw = [
        ((ACCOUNT, market, usdc), (10**30, 10**15, 10**6, 0, 0, 0, 0, 0, 0), (False,)),
    ]
    contract = _contract_returning("getAccountPositions", raw)
    contracts = ContractSettings()

    with patch.object(reader, "_contract", return_value=contract) as make_contract:
        positions = await reader.account_positions(contracts.data_store, ACCOUNT, 0, 100)

    assert len(positions) == 1
    assert positions[0].flags.is_long is False
    assert positions[0].numbers.size_in_usd == 10**30
    make_contract.assert_called_once_with(contracts.reader, GMX_READER_ABI)
    args = contract.functions.getAccountPositions.call_args.args
    assert args[2:] == (0, 100)


@pytest.mark.asyncio
async def test_get_uint(reader: Web3ChainReader) -> None:
    contract = _contract_returning("getUint", 5 * 10**26)
    with patch.object(reader, "_contract", return_value=contract):
        value = await reader.get_uint(ContractSettings().data_store, bytes(32))

    assert value == 5 * 10**26
    contract.functions.getUint.assert_called_once_with(bytes(32))


@pytest.mark.asyncio
async def test_token_balance(reader: Web3ChainReader) -> None:
    usdc = "0xaf88d065e77c8cC2239327C5EDb3A432268e5831"
    contract = _contract_returning("balanceOf", 42 * 10**6)
    with patch.object(reader, "_contract", return_value=contract) as make_contract:
        assert await reader.token_balance(usdc, ACCOUNT) == 42 * 10**6

    make_contract.assert_called_once_with(usdc, ERC20_ABI)


@pytest.mark.asyncio
async def test_native_balance(reader: Web3ChainReader) -> None:
    with patch.object(
        reader.w3.eth, "get_balance", AsyncMock(return_value=10**18)
    ) as get_balance:
        assert await reader.native_balance(ACCOUNT) == 10**18

    get_balance.assert_awaited_once_with(ACCOUNT)
