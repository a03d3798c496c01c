"""
Configuration for cashmint builds.

MintConfig is what the builder consumes. MintSettings loads the same values
from the environment (CASHMINT_*) or a .env file for the CLI.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cashmint.constants import DEFAULT_FEE_RATE
from cashmint.models import NetworkType
from cashmint.wallet import WalletProvider


class MintConfig(BaseModel):
    """Configuration for a mint transaction builder."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    network: NetworkType = NetworkType.MAINNET

    # Signing credentials - a private key takes precedence over a wallet
    private_key: str | None = None
    wallet_provider: WalletProvider | None = None

    # Coin data endpoints. Chronik wins if both are set; with neither the
    # builder produces an offline (unfunded) genesis template.
    utxo_provider_url: str | None = None
    electrumx_provider_url: str | None = None

    fee_rate: float = Field(default=DEFAULT_FEE_RATE, gt=0, description="Fee rate in sat/byte")
    request_timeout: float = Field(default=30.0, gt=0, description="Provider timeout in seconds")

    def has_provider(self) -> bool:
        return bool(self.utxo_provider_url or self.electrumx_provider_url)


class MintSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CASHMINT_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    network: NetworkType = NetworkType.MAINNET
    private_key: str | None = None
    utxo_provider_url: str | None = None
    electrumx_provider_url: str | None = None
    fee_rate: float = Field(default=DEFAULT_FEE_RATE, gt=0)
    request_timeout: float = Field(default=30.0, gt=0)

    log_level: str = "INFO"

    def to_mint_config(self, wallet_provider: WalletProvider | None = None) -> MintConfig:
        return MintConfig(
            network=self.network,
            private_key=self.private_key,
            wallet_provider=wallet_provider,
            utxo_provider_url=self.utxo_provider_url,
            electrumx_provider_url=self.electrumx_provider_url,
            fee_rate=self.fee_rate,
            request_timeout=self.request_timeout,
        )


def get_settings() -> MintSettings:
    return MintSettings()
