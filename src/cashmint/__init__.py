"""
cashmint - CashTokens genesis transaction builder for Bitcoin Cash

Builds, signs and broadcasts transactions that create fungible and
non-fungible tokens, funded by a private key, an external wallet, or
offline as an unsigned template.
"""

__version__ = "0.3.0"

from cashmint.builder import BuildMode, MintTransactionBuilder
from cashmint.coin_selection import select_coins
from cashmint.config import MintConfig, MintSettings
from cashmint.constants import DEFAULT_FEE_RATE, DUST_THRESHOLD, TOKEN_OUTPUT_DUST
from cashmint.engine import MintEngine, broadcast, build
from cashmint.errors import (
    EncodingFailedError,
    InsufficientFundsError,
    InvalidPrivateKeyError,
    InvalidSchemaError,
    MintError,
    NoCoinDataProviderError,
    NoCoinsAvailableError,
    NoSigningCredentialsError,
    NoUtxosAvailableError,
    ProviderRequestFailedError,
    SigningFailedError,
)
from cashmint.fees import estimate_fee
from cashmint.models import (
    UTXO,
    BuiltTransaction,
    CoinSelection,
    MintResult,
    NetworkType,
    NftCapability,
    NftOptions,
    SourceOutput,
    TokenSchema,
)
from cashmint.providers import ChronikProvider, CoinDataProvider, ElectrumXProvider
from cashmint.validation import validate_schema
from cashmint.verification import get_token_category, inspect_mint, verify_mint
from cashmint.wallet import WalletProvider

__all__ = [
    "BuildMode",
    "BuiltTransaction",
    "ChronikProvider",
    "CoinDataProvider",
    "CoinSelection",
    "DEFAULT_FEE_RATE",
    "DUST_THRESHOLD",
    "ElectrumXProvider",
    "EncodingFailedError",
    "InsufficientFundsError",
    "InvalidPrivateKeyError",
    "InvalidSchemaError",
    "MintConfig",
    "MintEngine",
    "MintError",
    "MintResult",
    "MintSettings",
    "MintTransactionBuilder",
    "NetworkType",
    "NftCapability",
    "NftOptions",
    "NoCoinDataProviderError",
    "NoCoinsAvailableError",
    "NoSigningCredentialsError",
    "NoUtxosAvailableError",
    "ProviderRequestFailedError",
    "SigningFailedError",
    "SourceOutput",
    "TOKEN_OUTPUT_DUST",
    "TokenSchema",
    "UTXO",
    "WalletProvider",
    "broadcast",
    "build",
    "estimate_fee",
    "get_token_category",
    "inspect_mint",
    "select_coins",
    "validate_schema",
    "verify_mint",
]
