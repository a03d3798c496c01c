"""
Tests for configuration loading.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cashmint.config import MintConfig, MintSettings
from cashmint.constants import DEFAULT_FEE_RATE
from cashmint.models import NetworkType
from tests.conftest import StubWallet


class TestMintConfig:
    def test_defaults(self) -> None:
        config = MintConfig()
        assert config.network == NetworkType.MAINNET
        assert config.fee_rate == DEFAULT_FEE_RATE
        assert not config.has_provider()

    def test_has_provider(self) -> None:
        assert MintConfig(utxo_provider_url="https://chronik.example.com").has_provider()
        assert MintConfig(electrumx_provider_url="https://fulcrum.example.com").has_provider()

    @pytest.mark.parametrize("fee_rate", [0, -1.0])
    def test_fee_rate_must_be_positive(self, fee_rate: float) -> None:
        with pytest.raises(ValidationError):
            MintConfig(fee_rate=fee_rate)

    def test_network_from_string(self) -> None:
        assert MintConfig(network="testnet").network == NetworkType.TESTNET

    def test_wallet_provider(self) -> None:
        wallet = StubWallet()
        assert MintConfig(wallet_provider=wallet).wallet_provider is wallet

    def test_frozen(self) -> None:
        config = MintConfig()
        with pytest.raises(ValidationError):
            config.fee_rate = 2.0


class TestMintSettings:
    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CASHMINT_NETWORK", "regtest")
        monkeypatch.setenv("CASHMINT_PRIVATE_KEY", "11" * 32)
        monkeypatch.setenv("CASHMINT_UTXO_PROVIDER_URL", "https://chronik.example.com")
        monkeypatch.setenv("CASHMINT_FEE_RATE", "2.5")

        settings = MintSettings(_env_file=None)

        assert settings.network == NetworkType.REGTEST
        assert settings.fee_rate == 2.5

        config = settings.to_mint_config()
        assert config.private_key == "11" * 32
        assert config.utxo_provider_url == "https://chronik.example.com"
        assert config.electrumx_provider_url is None
        assert config.has_provider()

    def test_wallet_passed_to_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CASHMINT_PRIVATE_KEY", raising=False)
        wallet = StubWallet()

        config = MintSettings(_env_file=None).to_mint_config(wallet_provider=wallet)

        assert config.wallet_provider is wallet

    @pytest.mark.parametrize("var", ["CASHMINT_FEE_RATE", "CASHMINT_REQUEST_TIMEOUT"])
    def test_non_positive_values_rejected(
        self, monkeypatch: pytest.MonkeyPatch, var: str
    ) -> None:
        monkeypatch.setenv(var, "0")
        with pytest.raises(ValidationError):
            MintSettings(_env_file=None)
