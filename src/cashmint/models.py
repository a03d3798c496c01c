"""
Data models for token schemas, coins and build results.

Schemas are pydantic models for parsing and serialization. Field bounds are
checked by cashmint.validation, which reports them as InvalidSchemaError.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"
    REGTEST = "regtest"


class NftCapability(str, Enum):
    NONE = "none"
    MUTABLE = "mutable"
    MINTING = "minting"


class NftOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    capability: str = NftCapability.NONE.value
    # Hex with 0x prefix, bare even-length hex, or plain text
    commitment: str = ""


class TokenSchema(BaseModel):
    """Description of the token created by a genesis transaction."""

    model_config = ConfigDict(frozen=True)

    name: str
    symbol: str
    decimals: int = 0
    initial_supply: int = 0
    nft: NftOptions | None = None
    bcmr_uri: str | None = None
    metadata: dict[str, Any] | None = Field(default=None)


@dataclass(frozen=True)
class UTXO:
    txid: str
    vout: int
    satoshis: int
    height: int | None = None


@dataclass
class CoinSelection:
    """Result of coin selection"""

    utxos: list[UTXO]
    total_input: int
    fee: int
    change: int


@dataclass(frozen=True)
class SourceOutput:
    """A coin being spent, as wallet signers need it for the sighash pre-image."""

    satoshis: int
    locking_bytecode: bytes


@dataclass
class BuiltTransaction:
    hex: str
    txid: str
    fee: int | None = None


@dataclass
class MintResult:
    hex: str
    txid: str
    category: str
    fee: int | None = None
    metadata: dict[str, Any] | None = None
