"""
Bitcoin Cash transaction codec with CashTokens support.

Covers serialization and parsing of version-2 transactions whose outputs may
carry a CashTokens token prefix, txid computation, and the BCH signing
serialization (BIP143 layout with SIGHASH_FORKID) for P2PKH inputs.
Reference: https://github.com/cashtokens/cashtokens
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from cashmint.constants import (
    DEFAULT_SEQUENCE,
    MAX_COMMITMENT_LENGTH,
    MAX_TOKEN_AMOUNT,
    SIGHASH_ALL_FORKID,
    TX_LOCKTIME,
    TX_VERSION,
)
from cashmint.crypto import hash256
from cashmint.errors import EncodingFailedError
from cashmint.models import NftCapability, SourceOutput

PREFIX_TOKEN = 0xEF

# Token bitfield flags (high nibble); the low nibble holds the capability
RESERVED_BIT = 0x80
HAS_COMMITMENT_LENGTH = 0x40
HAS_NFT = 0x20
HAS_AMOUNT = 0x10

CAPABILITY_CODES = {
    NftCapability.NONE: 0x00,
    NftCapability.MUTABLE: 0x01,
    NftCapability.MINTING: 0x02,
}
CAPABILITY_BY_CODE = {code: cap for cap, code in CAPABILITY_CODES.items()}


@dataclass
class NftData:
    capability: NftCapability
    commitment: bytes = b""


@dataclass
class TokenData:
    """Token payload of an output. category is in display (txid) byte order."""

    category: str
    amount: int = 0
    nft: NftData | None = None


@dataclass
class TxInput:
    txid: str
    vout: int
    unlocking_bytecode: bytes = b""
    sequence: int = DEFAULT_SEQUENCE


@dataclass
class TxOutput:
    locking_bytecode: bytes
    value: int
    token: TokenData | None = None


@dataclass
class Transaction:
    inputs: list[TxInput] = field(default_factory=list)
    outputs: list[TxOutput] = field(default_factory=list)
    version: int = TX_VERSION
    locktime: int = TX_LOCKTIME


def encode_varint(value: int) -> bytes:
    if value < 0xFD:
        return bytes([value])
    if value <= 0xFFFF:
        return b"\xfd" + value.to_bytes(2, "little")
    if value <= 0xFFFFFFFF:
        return b"\xfe" + value.to_bytes(4, "little")
    return b"\xff" + value.to_bytes(8, "little")


def read_varint(data: bytes, offset: int) -> tuple[int, int]:
    first = data[offset]
    offset += 1

    if first < 0xFD:
        return first, offset
    if first == 0xFD:
        value = int.from_bytes(data[offset : offset + 2], "little")
        return value, offset + 2
    if first == 0xFE:
        value = int.from_bytes(data[offset : offset + 4], "little")
        return value, offset + 4
    value = int.from_bytes(data[offset : offset + 8], "little")
    return value, offset + 8


def serialize_outpoint(txid: str, vout: int) -> bytes:
    """
    Serialize outpoint (txid:vout).

    Raises:
        EncodingFailedError: If txid is not 32 bytes of hex or vout is out of range
    """
    try:
        txid_bytes = bytes.fromhex(txid)
    except (TypeError, ValueError) as e:
        raise EncodingFailedError(f"Outpoint txid is not hex: {txid!r}") from e
    if len(txid_bytes) != 32:
        raise EncodingFailedError(f"Outpoint txid must be 32 bytes, got {len(txid_bytes)}")
    if not 0 <= vout <= 0xFFFFFFFF:
        raise EncodingFailedError(f"Outpoint index {vout} out of range")
    # txid is in display order (big-endian), raw transactions use the reverse
    return txid_bytes[::-1] + struct.pack("<I", vout)


def encode_token_prefix(token: TokenData) -> bytes:
    """
    Encode a CashTokens token prefix.

    Layout: PREFIX_TOKEN, category (32 bytes, internal order), bitfield,
    [commitment length + commitment], [amount as CompactSize].

    Raises:
        EncodingFailedError: If the token would be invalid on-chain
    """
    try:
        category = bytes.fromhex(token.category)[::-1]
    except ValueError as e:
        raise EncodingFailedError(f"Token category is not hex: {token.category!r}") from e
    if len(category) != 32:
        raise EncodingFailedError(f"Token category must be 32 bytes, got {len(category)}")

    if token.amount < 0 or token.amount > MAX_TOKEN_AMOUNT:
        raise EncodingFailedError(
            f"Token amount {token.amount} outside the range 0..{MAX_TOKEN_AMOUNT}"
        )
    if token.amount == 0 and token.nft is None:
        raise EncodingFailedError("A token output must carry a fungible amount or an NFT")

    bitfield = 0
    body = b""
    if token.nft is not None:
        commitment = token.nft.commitment
        if len(commitment) > MAX_COMMITMENT_LENGTH:
            raise EncodingFailedError(
                f"NFT commitment is {len(commitment)} bytes; maximum is {MAX_COMMITMENT_LENGTH}"
            )
        bitfield |= HAS_NFT | CAPABILITY_CODES[NftCapability(token.nft.capability)]
        if commitment:
            bitfield |= HAS_COMMITMENT_LENGTH
            body += encode_varint(len(commitment)) + commitment
    if token.amount > 0:
        bitfield |= HAS_AMOUNT
        body += encode_varint(token.amount)

    return bytes([PREFIX_TOKEN]) + category + bytes([bitfield]) + body


def decode_token_prefix(data: bytes) -> tuple[TokenData, int]:
    """
    Parse a token prefix at the start of data.

    Returns:
        (token, bytes consumed)

    Raises:
        EncodingFailedError: On a malformed prefix
    """
    try:
        if data[0] != PREFIX_TOKEN:
            raise EncodingFailedError("Missing token prefix byte")
        offset = 1
        category = data[offset : offset + 32]
        if len(category) != 32:
            raise EncodingFailedError("Truncated token category")
        offset += 32
        bitfield = data[offset]
        offset += 1

        if bitfield & RESERVED_BIT:
            raise EncodingFailedError("Reserved token bitfield bit is set")

        nft = None
        if bitfield & HAS_NFT:
            capability_code = bitfield & 0x0F
            if capability_code not in CAPABILITY_BY_CODE:
                raise EncodingFailedError(f"Unknown NFT capability {capability_code}")
            commitment = b""
            if bitfield & HAS_COMMITMENT_LENGTH:
                length, offset = read_varint(data, offset)
                commitment = data[offset : offset + length]
                if len(commitment) != length:
                    raise EncodingFailedError("Truncated NFT commitment")
                offset += length
            nft = NftData(capability=CAPABILITY_BY_CODE[capability_code], commitment=commitment)
        elif bitfield & (HAS_COMMITMENT_LENGTH | 0x0F):
            raise EncodingFailedError("Commitment or capability set without an NFT")

        amount = 0
        if bitfield & HAS_AMOUNT:
            amount, offset = read_varint(data, offset)

        token = TokenData(category=category[::-1].hex(), amount=amount, nft=nft)
        return token, offset
    except IndexError as e:
        raise EncodingFailedError("Truncated token prefix") from e


def serialize_output(out: TxOutput) -> bytes:
    """Serialize an output; the token prefix lives inside the script length."""
    script = out.locking_bytecode
    if out.token is not None:
        script = encode_token_prefix(out.token) + script
    return struct.pack("<Q", out.value) + encode_varint(len(script)) + script


def serialize_input(inp: TxInput) -> bytes:
    return (
        serialize_outpoint(inp.txid, inp.vout)
        + encode_varint(len(inp.unlocking_bytecode))
        + inp.unlocking_bytecode
        + struct.pack("<I", inp.sequence)
    )


def encode_transaction(tx: Transaction) -> bytes:
    """
    Serialize a transaction to bytes.

    Raises:
        EncodingFailedError: If any field cannot be encoded
    """
    try:
        result = struct.pack("<I", tx.version)
        result += encode_varint(len(tx.inputs))
        for inp in tx.inputs:
            result += serialize_input(inp)
        result += encode_varint(len(tx.outputs))
        for out in tx.outputs:
            result += serialize_output(out)
        result += struct.pack("<I", tx.locktime)
        return result
    except (ValueError, struct.error) as e:
        raise EncodingFailedError(f"Failed to encode transaction: {e}") from e


def decode_transaction(tx_bytes: bytes) -> Transaction:
    """
    Parse a serialized transaction, including token prefixes.

    Raises:
        EncodingFailedError: On truncated or malformed input
    """
    try:
        offset = 0
        version = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
        offset += 4

        input_count, offset = read_varint(tx_bytes, offset)
        inputs: list[TxInput] = []
        for _ in range(input_count):
            txid = tx_bytes[offset : offset + 32][::-1].hex()
            offset += 32
            vout = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
            offset += 4
            script_len, offset = read_varint(tx_bytes, offset)
            script = tx_bytes[offset : offset + script_len]
            offset += script_len
            sequence = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
            offset += 4
            inputs.append(TxInput(txid, vout, script, sequence))

        output_count, offset = read_varint(tx_bytes, offset)
        outputs: list[TxOutput] = []
        for _ in range(output_count):
            value = struct.unpack("<Q", tx_bytes[offset : offset + 8])[0]
            offset += 8
            script_len, offset = read_varint(tx_bytes, offset)
            script = tx_bytes[offset : offset + script_len]
            if len(script) != script_len:
                raise EncodingFailedError("Truncated output script")
            offset += script_len

            token = None
            if script and script[0] == PREFIX_TOKEN:
                token, consumed = decode_token_prefix(script)
                script = script[consumed:]
            outputs.append(TxOutput(script, value, token))

        locktime = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
        offset += 4
        if offset != len(tx_bytes):
            raise EncodingFailedError(f"{len(tx_bytes) - offset} trailing bytes after locktime")

        return Transaction(inputs=inputs, outputs=outputs, version=version, locktime=locktime)

    except (IndexError, struct.error) as e:
        raise EncodingFailedError(f"Failed to parse transaction: {e}") from e


def get_txid(tx_bytes: bytes) -> str:
    """Double SHA256 of the serialized transaction, in display order."""
    return hash256(tx_bytes)[::-1].hex()


def signing_serialization(
    tx: Transaction,
    input_index: int,
    source_outputs: list[SourceOutput],
    covered_bytecode: bytes,
    sighash_type: int = SIGHASH_ALL_FORKID,
) -> bytes:
    """
    Build the BCH signing serialization (pre-image) for one input.

    Only SIGHASH_ALL | SIGHASH_FORKID is supported, which commits to every
    input outpoint and sequence and to all outputs including token prefixes.
    Spent coins are plain P2PKH, so no UTXO token prefix is inserted.

    Raises:
        EncodingFailedError: On an out-of-range index or unsupported sighash type
    """
    if sighash_type != SIGHASH_ALL_FORKID:
        raise EncodingFailedError(f"Unsupported sighash type: {sighash_type:#04x}")
    if not 0 <= input_index < len(tx.inputs):
        raise EncodingFailedError(f"Input index {input_index} out of range")
    if len(source_outputs) != len(tx.inputs):
        raise EncodingFailedError("source_outputs must have one entry per input")

    hash_prevouts = hash256(
        b"".join(serialize_outpoint(inp.txid, inp.vout) for inp in tx.inputs)
    )
    hash_sequence = hash256(b"".join(struct.pack("<I", inp.sequence) for inp in tx.inputs))
    hash_outputs = hash256(b"".join(serialize_output(out) for out in tx.outputs))

    target = tx.inputs[input_index]
    satoshis = source_outputs[input_index].satoshis
    if not 0 <= satoshis <= 0xFFFFFFFFFFFFFFFF:
        raise EncodingFailedError(f"Spent output value {satoshis} out of range")
    return (
        struct.pack("<I", tx.version)
        + hash_prevouts
        + hash_sequence
        + serialize_outpoint(target.txid, target.vout)
        + encode_varint(len(covered_bytecode))
        + covered_bytecode
        + struct.pack("<Q", satoshis)
        + struct.pack("<I", target.sequence)
        + hash_outputs
        + struct.pack("<I", tx.locktime)
        + struct.pack("<I", sighash_type)
    )
