"""
Pytest configuration and fixtures for cashmint tests.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from cashmint.config import MintConfig
from cashmint.models import UTXO, NetworkType, SourceOutput, TokenSchema
from cashmint.wallet import WalletProvider

# Well-known private key 0x01 (never use for real funds)
TEST_PRIVATE_KEY = "0000000000000000000000000000000000000000000000000000000000000001"
TEST_PUBKEY_HEX = "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
TEST_PUBKEY_HASH_HEX = "751e76e8199196d454941c45d1b3a323f1433bd6"

# Regtest CashAddr of TEST_PRIVATE_KEY
WALLET_ADDRESS = "bchreg:qp63uahgrxged4z5jswyt5dn5v3lzsem6c6mz8vuwd"


class StubWallet(WalletProvider):
    """Wallet that reports a fixed address and echoes the unsigned hex as "signed"."""

    def __init__(self, address: str = WALLET_ADDRESS, signed_hex: str | None = None):
        self.address = address
        self.signed_hex = signed_hex
        self.address_calls = 0
        self.sign_calls: list[tuple[str, list[SourceOutput]]] = []

    async def get_address(self) -> str:
        self.address_calls += 1
        return self.address

    async def sign_transaction(self, tx_hex: str, source_outputs: list[SourceOutput]) -> str:
        self.sign_calls.append((tx_hex, source_outputs))
        return self.signed_hex if self.signed_hex is not None else tx_hex


def make_utxo(satoshis: int, vout: int = 0, txid: str = "aa" * 32) -> UTXO:
    return UTXO(txid=txid, vout=vout, satoshis=satoshis)


def make_provider(utxos: list[UTXO] | None = None) -> MagicMock:
    provider = MagicMock()
    provider.fetch_utxos = AsyncMock(return_value=utxos if utxos is not None else [])
    provider.broadcast_transaction = AsyncMock(return_value="ff" * 32)
    provider.close = AsyncMock()
    return provider


@pytest.fixture
def offline_config() -> MintConfig:
    return MintConfig(network=NetworkType.REGTEST, private_key=TEST_PRIVATE_KEY)


@pytest.fixture
def funded_config() -> MintConfig:
    return MintConfig(
        network=NetworkType.REGTEST,
        private_key=TEST_PRIVATE_KEY,
        electrumx_provider_url="https://fulcrum.example.com",
    )


@pytest.fixture
def stub_wallet() -> StubWallet:
    return StubWallet()


@pytest.fixture
def fungible_schema() -> TokenSchema:
    return TokenSchema(name="My Token", symbol="MTK", decimals=2, initial_supply=1_000_000)
