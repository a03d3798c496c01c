"""
Mint transaction builder for CashTokens genesis transactions.

Builds one of three transaction shapes, chosen once per build from the
configuration:

- OFFLINE: no coin data provider. A single input spends the all-zero
  outpoint, so the category id is all zeros too. Nothing is signed and no fee
  is computed; the result is a template, not a broadcastable transaction.
- KEY_FUNDED: coins are fetched for the private key's address and every
  input is signed locally.
- WALLET_FUNDED: coins are fetched for the wallet's address and the unsigned
  transaction is handed to the wallet for signing.

Output order is fixed: token output, optional BCMR OP_RETURN, optional change.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from coincurve import PrivateKey
from loguru import logger

from cashmint.cashaddr import address_to_pubkey_hash, pubkey_hash_to_address
from cashmint.coin_selection import select_coins
from cashmint.config import MintConfig
from cashmint.constants import (
    DUST_THRESHOLD,
    SIGHASH_ALL_FORKID,
    TOKEN_OUTPUT_DUST,
    ZERO_TXID,
)
from cashmint.crypto import (
    compressed_public_key,
    hash160,
    hash256,
    load_private_key,
    sign_hash_der,
)
from cashmint.errors import (
    EncodingFailedError,
    MintError,
    NoCoinDataProviderError,
    NoSigningCredentialsError,
    NoUtxosAvailableError,
    ProviderRequestFailedError,
    SigningFailedError,
)
from cashmint.models import (
    BuiltTransaction,
    CoinSelection,
    NftCapability,
    SourceOutput,
    TokenSchema,
)
from cashmint.providers import CoinDataProvider, create_provider
from cashmint.script import bcmr_locking_bytecode, encode_data_push, p2pkh_locking_bytecode
from cashmint.transaction import (
    NftData,
    TokenData,
    Transaction,
    TxInput,
    TxOutput,
    encode_transaction,
    get_txid,
    signing_serialization,
)
from cashmint.validation import decode_commitment, validate_schema
from cashmint.wallet import WalletProvider


class BuildMode(str, Enum):
    OFFLINE = "offline"
    KEY_FUNDED = "key_funded"
    WALLET_FUNDED = "wallet_funded"


@dataclass(frozen=True)
class PrivateKeyCredential:
    private_key: PrivateKey
    public_key: bytes


@dataclass(frozen=True)
class WalletCredential:
    wallet: WalletProvider


SigningCredential = PrivateKeyCredential | WalletCredential


@dataclass
class PreparedTransaction:
    """Unsigned funded transaction plus what the signers need."""

    tx: Transaction
    selection: CoinSelection
    source_outputs: list[SourceOutput]


def resolve_credential(config: MintConfig) -> SigningCredential:
    """
    Pick the signing credential; a private key wins over a wallet provider.

    Raises:
        NoSigningCredentialsError: If neither is configured
        InvalidPrivateKeyError: If the private key cannot be loaded
    """
    if config.private_key:
        private_key = load_private_key(config.private_key)
        return PrivateKeyCredential(private_key, compressed_public_key(private_key))
    if config.wallet_provider is not None:
        return WalletCredential(config.wallet_provider)
    raise NoSigningCredentialsError(
        "No signing credentials configured. Provide private_key or wallet_provider in MintConfig."
    )


def select_build_mode(has_provider: bool, credential: SigningCredential) -> BuildMode:
    if not has_provider:
        return BuildMode.OFFLINE
    if isinstance(credential, PrivateKeyCredential):
        return BuildMode.KEY_FUNDED
    return BuildMode.WALLET_FUNDED


def build_token_output(schema: TokenSchema, locking_bytecode: bytes, category: str) -> TxOutput:
    nft = None
    if schema.nft is not None:
        nft = NftData(
            capability=NftCapability(schema.nft.capability),
            commitment=decode_commitment(schema.nft.commitment),
        )
    token = TokenData(category=category, amount=schema.initial_supply, nft=nft)
    return TxOutput(locking_bytecode=locking_bytecode, value=TOKEN_OUTPUT_DUST, token=token)


def build_bcmr_output(uri: str) -> TxOutput:
    return TxOutput(locking_bytecode=bcmr_locking_bytecode(uri), value=0)


class MintTransactionBuilder:
    """
    Builds and signs genesis transactions for one MintConfig.

    Every build owns its own Transaction; a builder can serve concurrent builds.
    """

    def __init__(self, config: MintConfig, provider: CoinDataProvider | None = None):
        """
        Args:
            config: Mint configuration
            provider: Coin data provider; created from config when omitted
        """
        self.config = config
        self._owns_provider = provider is None
        self.provider = provider if provider is not None else create_provider(config)

    async def build(self, schema: TokenSchema) -> BuiltTransaction:
        """
        Validate the schema and build the genesis transaction.

        Raises:
            MintError: Any failure, as one of the cashmint error kinds
        """
        validate_schema(schema)
        credential = resolve_credential(self.config)
        mode = select_build_mode(self.provider is not None, credential)
        logger.info(f"Building {mode.value} genesis transaction for {schema.symbol}")

        address, locking_bytecode = await self._resolve_spending_address(credential)

        if mode == BuildMode.OFFLINE:
            return self._build_offline(schema, locking_bytecode)

        prepared = await self._prepare_funded(schema, address, locking_bytecode)
        if mode == BuildMode.KEY_FUNDED:
            return self._sign_with_key(prepared, credential, locking_bytecode)
        return await self._sign_with_wallet(prepared, credential)

    async def broadcast(self, tx_hex: str) -> str:
        """
        Broadcast a signed transaction via the configured provider.

        Raises:
            NoCoinDataProviderError: If no provider is configured
            ProviderRequestFailedError: If the provider rejects the request
        """
        if self.provider is None:
            raise NoCoinDataProviderError(
                "No UTXO provider configured. "
                "Set utxo_provider_url or electrumx_provider_url in MintConfig."
            )
        return await self.provider.broadcast_transaction(tx_hex)

    async def _resolve_spending_address(self, credential: SigningCredential) -> tuple[str, bytes]:
        """Return (CashAddr, P2PKH locking bytecode) for the funding key or wallet."""
        if isinstance(credential, PrivateKeyCredential):
            pubkey_hash = hash160(credential.public_key)
            address = pubkey_hash_to_address(pubkey_hash, self.config.network)
        else:
            try:
                address = await credential.wallet.get_address()
            except MintError:
                raise
            except Exception as e:
                raise SigningFailedError(f"Wallet provider failed to report an address: {e}") from e
            pubkey_hash = address_to_pubkey_hash(address, self.config.network)
        return address, p2pkh_locking_bytecode(pubkey_hash)

    def _build_offline(self, schema: TokenSchema, locking_bytecode: bytes) -> BuiltTransaction:
        outputs = [build_token_output(schema, locking_bytecode, ZERO_TXID)]
        if schema.bcmr_uri:
            outputs.append(build_bcmr_output(schema.bcmr_uri))

        tx = Transaction(inputs=[TxInput(txid=ZERO_TXID, vout=0)], outputs=outputs)
        return self._finalize(tx, fee=None)

    async def _prepare_funded(
        self, schema: TokenSchema, address: str, locking_bytecode: bytes
    ) -> PreparedTransaction:
        """Fetch coins, select inputs and assemble the unsigned transaction."""
        if self.provider is None:
            raise NoCoinDataProviderError("No UTXO provider configured")

        try:
            utxos = await self.provider.fetch_utxos(address)
        except MintError:
            raise
        except Exception as e:
            raise ProviderRequestFailedError(f"UTXO fetch failed: {e}") from e
        if not utxos:
            raise NoUtxosAvailableError(f"No UTXOs available for minting at {address}")

        non_change_outputs = 1 + (1 if schema.bcmr_uri else 0)
        selection = select_coins(
            utxos,
            TOKEN_OUTPUT_DUST,
            non_change_outputs,
            self.config.fee_rate,
            has_token=True,
        )

        # The genesis category is the txid of the first outpoint spent
        category = selection.utxos[0].txid

        outputs = [build_token_output(schema, locking_bytecode, category)]
        if schema.bcmr_uri:
            outputs.append(build_bcmr_output(schema.bcmr_uri))
        if selection.change > DUST_THRESHOLD:
            outputs.append(TxOutput(locking_bytecode=locking_bytecode, value=selection.change))

        inputs = [TxInput(txid=u.txid, vout=u.vout) for u in selection.utxos]
        source_outputs = [
            SourceOutput(satoshis=u.satoshis, locking_bytecode=locking_bytecode)
            for u in selection.utxos
        ]

        logger.debug(
            f"Funded genesis: category={category}, inputs={len(inputs)}, "
            f"outputs={len(outputs)}, fee={selection.fee}"
        )
        return PreparedTransaction(
            tx=Transaction(inputs=inputs, outputs=outputs),
            selection=selection,
            source_outputs=source_outputs,
        )

    def _sign_with_key(
        self,
        prepared: PreparedTransaction,
        credential: PrivateKeyCredential,
        locking_bytecode: bytes,
    ) -> BuiltTransaction:
        tx = prepared.tx
        for i, inp in enumerate(tx.inputs):
            preimage = signing_serialization(tx, i, prepared.source_outputs, locking_bytecode)
            signature = sign_hash_der(credential.private_key, hash256(preimage))
            inp.unlocking_bytecode = encode_data_push(
                signature + bytes([SIGHASH_ALL_FORKID])
            ) + encode_data_push(credential.public_key)

        return self._finalize(tx, fee=prepared.selection.fee)

    async def _sign_with_wallet(
        self, prepared: PreparedTransaction, credential: WalletCredential
    ) -> BuiltTransaction:
        unsigned_hex = encode_transaction(prepared.tx).hex()

        try:
            signed_hex = await credential.wallet.sign_transaction(
                unsigned_hex, prepared.source_outputs
            )
        except MintError:
            raise
        except Exception as e:
            raise SigningFailedError(f"Wallet provider failed to sign: {e}") from e

        try:
            signed_bytes = bytes.fromhex(signed_hex)
        except (TypeError, ValueError) as e:
            raise EncodingFailedError("Wallet provider returned a non-hex transaction") from e
        if not signed_bytes:
            raise EncodingFailedError("Wallet provider returned an empty transaction")

        txid = get_txid(signed_bytes)
        logger.info(f"Wallet-signed genesis transaction {txid}")
        return BuiltTransaction(hex=signed_hex, txid=txid, fee=prepared.selection.fee)

    def _finalize(self, tx: Transaction, fee: int | None) -> BuiltTransaction:
        tx_bytes = encode_transaction(tx)
        txid = get_txid(tx_bytes)
        logger.info(f"Built genesis transaction {txid} ({len(tx_bytes)} bytes)")
        return BuiltTransaction(hex=tx_bytes.hex(), txid=txid, fee=fee)

    async def close(self) -> None:
        if self._owns_provider and self.provider is not None:
            await self.provider.close()

    async def __aenter__(self) -> MintTransactionBuilder:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
