"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChainSettings(BaseSettings):
    """Arbitrum RPC connection settings."""

    model_config = SettingsConfigDict(env_prefix="CHAIN_")

    rpc_url: str = "https://arb1.arbitrum.io/rpc"
    chain_id: int = 42161


class ContractSettings(BaseSettings):
    """GMX V2 contract addresses on Arbitrum One."""

    model_config = SettingsConfigDict(env_prefix="GMX_")

    data_store: str = "0xFD70de6b91282D8017aA4E741e9Ae325CAb992d8"
    reader: str = "0x38d91ED96283d62182Fc6d990C24097A918a4d9b"
    exchange_router: str = "0x7C68C7866A64FA2160F78EEaE12217FFbf871fa8"
    router: str = "0x7452c558d45f8afC8c83dAe62C3f8A5BE19c71f6"
    order_vault: str = "0x31eF83a530Fde1B38EE9A18093A333D8Bbbc40D5"
    ui_fee_receiver: str = "0xBe2Cc1861341F3b058A3307385BEBa84167b3fa4"


class MarketDataSettings(BaseSettings):
    """24h statistics source (CoinGecko) and cache behaviour."""

    model_config = SettingsConfigDict(env_prefix="MARKET_DATA_")

    coingecko_url: str = "https://api.coingecko.com/api/v3"
    coingecko_api_key: SecretStr = SecretStr("")
    stats_cache_ttl_seconds: float = 60.0
    request_timeout_seconds: float = 10.0


class TradingSettings(BaseSettings):
    """Trade preview and order construction parameters."""

    model_config = SettingsConfigDict(env_prefix="TRADING_")

    default_slippage_percent: Decimal = Decimal("1")  # 1% acceptable price band
    maintenance_margin: Decimal = Decimal("0.01")
    position_fee_rate: Decimal = Decimal("0.0005")  # 5 bps
    execution_fee_price_factor: Decimal = Decimal("0.0001")  # display estimate only
    execution_fee_native: Decimal = Decimal("0.001")  # ETH attached to every order
    positions_page_size: int = 100


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    chain: ChainSettings = ChainSettings()
    contracts: ContractSettings = ContractSettings()
    market_data: MarketDataSettings = MarketDataSettings()
    trading: TradingSettings = TradingSettings()
