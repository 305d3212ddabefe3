from perpcore.chain.types import RawPosition, RoundData

ACCOUNT = "0x1111111111111111111111111111111111111111"
MARKET = "0x70d95587d40A2caf56bd97485aB3Eec10Bee6336"
USDC = "0xaf88d065e77c8cC2239327C5EDb3A432268e5831"


def test_round_data_from_abi() -> None:
    round_id = 18446744073709562000
    data = RoundData.from_abi((round_id, 300012345678, 1700000000, 1700000005, round_id))

    assert data.answer == 300012345678
    assert data.updated_at == 1700000005


def test_negative_answer_is_kept() -> None:
    assert RoundData.from_abi((1, -5, 0, 0, 1)).answer == -5


def test_raw_position_from_nested_tuples() -> None:
    raw = (
        (ACCOUNT, MARKET, USDC),
        (3000 * 10**30, 10**18, 300 * 10**6, 7, 8, 9, 10, 123456, 0),
        (True,),
    )

    position = RawPosition.from_abi(raw)

    assert position.addresses.market == MARKET
    assert position.addresses.collateral_token == USDC
    assert position.numbers.size_in_usd == 3000 * 10**30
    assert position.numbers.size_in_tokens == 10**18
    assert position.numbers.collateral_amount == 300 * 10**6
    assert position.numbers.borrowing_factor == 7
    assert position.numbers.increased_at_block == 123456
    assert position.flags.is_long is True
