"""
Tests for CashAddr encoding.
"""

from __future__ import annotations

import pytest

from cashmint.cashaddr import (
    TYPE_P2PKH,
    TYPE_P2PKH_TOKENS,
    address_to_pubkey_hash,
    decode_cashaddr,
    pubkey_hash_to_address,
)
from cashmint.errors import EncodingFailedError
from cashmint.models import NetworkType
from tests.conftest import TEST_PUBKEY_HASH_HEX, WALLET_ADDRESS

PUBKEY_HASH = bytes.fromhex(TEST_PUBKEY_HASH_HEX)
MAINNET_ADDRESS = "bitcoincash:qp63uahgrxged4z5jswyt5dn5v3lzsem6cy4spdc2h"


class TestEncode:
    def test_mainnet(self) -> None:
        assert pubkey_hash_to_address(PUBKEY_HASH, NetworkType.MAINNET) == MAINNET_ADDRESS

    def test_testnet(self) -> None:
        assert (
            pubkey_hash_to_address(PUBKEY_HASH, NetworkType.TESTNET)
            == "bchtest:qp63uahgrxged4z5jswyt5dn5v3lzsem6cq85x00dt"
        )

    def test_regtest(self) -> None:
        assert pubkey_hash_to_address(PUBKEY_HASH, "regtest") == WALLET_ADDRESS


class TestDecode:
    def test_roundtrip(self) -> None:
        prefix, addr_type, payload = decode_cashaddr(MAINNET_ADDRESS)
        assert prefix == "bitcoincash"
        assert addr_type == TYPE_P2PKH
        assert payload == PUBKEY_HASH

    def test_uppercase(self) -> None:
        assert address_to_pubkey_hash(MAINNET_ADDRESS.upper()) == PUBKEY_HASH

    def test_default_prefix(self) -> None:
        body = MAINNET_ADDRESS.split(":")[1]
        prefix, _, payload = decode_cashaddr(body, default_prefix="bitcoincash")
        assert prefix == "bitcoincash"
        assert payload == PUBKEY_HASH

    def test_missing_prefix(self) -> None:
        with pytest.raises(EncodingFailedError):
            decode_cashaddr(MAINNET_ADDRESS.split(":")[1])

    def test_token_aware_address(self) -> None:
        address = "bitcoincash:zp63uahgrxged4z5jswyt5dn5v3lzsem6crlrlr74y"
        _, addr_type, _ = decode_cashaddr(address)
        assert addr_type == TYPE_P2PKH_TOKENS
        assert address_to_pubkey_hash(address) == PUBKEY_HASH

    def test_p2sh_rejected(self) -> None:
        with pytest.raises(EncodingFailedError, match="P2PKH"):
            address_to_pubkey_hash("bitcoincash:pp63uahgrxged4z5jswyt5dn5v3lzsem6cnsdw2m32")

    def test_bad_checksum(self) -> None:
        with pytest.raises(EncodingFailedError, match="checksum"):
            decode_cashaddr(MAINNET_ADDRESS[:-1] + "q")

    def test_wrong_network_prefix(self) -> None:
        body = MAINNET_ADDRESS.split(":")[1]
        with pytest.raises(EncodingFailedError):
            decode_cashaddr(f"bchtest:{body}")

    def test_mixed_case(self) -> None:
        with pytest.raises(EncodingFailedError, match="Mixed-case"):
            decode_cashaddr("bitcoincash:Qp63uahgrxged4z5jswyt5dn5v3lzsem6cy4spdc2h")

    def test_invalid_character(self) -> None:
        with pytest.raises(EncodingFailedError):
            decode_cashaddr("bitcoincash:qp63uahgrxged4z5jswyt5dn5v3lzsem6cy4spdc2b")

    def test_network_checked(self) -> None:
        assert address_to_pubkey_hash(MAINNET_ADDRESS, NetworkType.MAINNET) == PUBKEY_HASH
        assert address_to_pubkey_hash(WALLET_ADDRESS, "regtest") == PUBKEY_HASH
        with pytest.raises(EncodingFailedError, match="regtest"):
            address_to_pubkey_hash(MAINNET_ADDRESS, NetworkType.REGTEST)
