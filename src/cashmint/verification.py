"""
Inspection of genesis transactions: recover the token category, supply,
NFT data and BCMR pointer from raw hex, and check them against a schema.
"""

from __future__ import annotations

from dataclasses import dataclass

from cashmint.errors import EncodingFailedError
from cashmint.models import TokenSchema
from cashmint.script import parse_bcmr_locking_bytecode
from cashmint.transaction import Transaction, TxOutput, decode_transaction, get_txid
from cashmint.validation import decode_commitment


@dataclass
class MintSummary:
    txid: str
    category: str
    amount: int
    nft_capability: str | None
    nft_commitment: str | None
    bcmr_uri: str | None
    input_count: int
    output_count: int


def parse_transaction_hex(tx_hex: str) -> Transaction:
    try:
        tx_bytes = bytes.fromhex(tx_hex)
    except ValueError as e:
        raise EncodingFailedError("Transaction is not valid hex") from e
    return decode_transaction(tx_bytes)


def find_token_output(tx: Transaction) -> TxOutput | None:
    for out in tx.outputs:
        if out.token is not None:
            return out
    return None


def extract_bcmr_uri(tx: Transaction) -> str | None:
    for out in tx.outputs:
        uri = parse_bcmr_locking_bytecode(out.locking_bytecode)
        if uri is not None:
            return uri
    return None


def get_token_category(tx_hex: str) -> str | None:
    """Return the category of the first token output, or None."""
    token_output = find_token_output(parse_transaction_hex(tx_hex))
    return token_output.token.category if token_output and token_output.token else None


def inspect_mint(tx_hex: str) -> MintSummary:
    """
    Summarize a genesis transaction.

    Raises:
        EncodingFailedError: If the hex does not decode or has no token output
    """
    tx = parse_transaction_hex(tx_hex)
    token_output = find_token_output(tx)
    if token_output is None or token_output.token is None:
        raise EncodingFailedError("Transaction has no token output")

    token = token_output.token
    return MintSummary(
        txid=get_txid(bytes.fromhex(tx_hex)),
        category=token.category,
        amount=token.amount,
        nft_capability=token.nft.capability.value if token.nft else None,
        nft_commitment=token.nft.commitment.hex() if token.nft else None,
        bcmr_uri=extract_bcmr_uri(tx),
        input_count=len(tx.inputs),
        output_count=len(tx.outputs),
    )


def verify_mint(tx_hex: str, schema: TokenSchema) -> bool:
    """Check that a genesis transaction mints what the schema describes."""
    try:
        summary = inspect_mint(tx_hex)
    except EncodingFailedError:
        return False

    if summary.amount != schema.initial_supply:
        return False

    if schema.nft is None:
        if summary.nft_capability is not None:
            return False
    elif (
        summary.nft_capability != schema.nft.capability
        or summary.nft_commitment != decode_commitment(schema.nft.commitment).hex()
    ):
        return False

    if schema.bcmr_uri and summary.bcmr_uri != schema.bcmr_uri:
        return False
    return True
