"""
Cryptographic primitives: hashing, key parsing and ECDSA signing.
"""

from __future__ import annotations

import hashlib

import base58
from coincurve import PrivateKey

from cashmint.errors import InvalidPrivateKeyError, SigningFailedError

# WIF version bytes (mainnet, testnet/regtest)
WIF_VERSIONS = (0x80, 0xEF)


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def hash256(data: bytes) -> bytes:
    """SHA256(SHA256(data)), used for txids and sighashes."""
    return sha256(sha256(data))


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))"""
    h = hashlib.new("ripemd160")
    h.update(sha256(data))
    return h.digest()


def private_key_to_bytes(key: str) -> bytes:
    """
    Parse a private key given as 64 hex characters or as WIF.

    Raises:
        InvalidPrivateKeyError: If the key is in neither format
    """
    key = key.strip()
    if len(key) == 64:
        try:
            return bytes.fromhex(key)
        except ValueError:
            pass

    try:
        decoded = base58.b58decode_check(key)
    except ValueError as e:
        raise InvalidPrivateKeyError("Private key is neither 32-byte hex nor WIF") from e

    if not decoded or decoded[0] not in WIF_VERSIONS:
        raise InvalidPrivateKeyError("Unknown WIF version byte")
    payload = decoded[1:]
    # Compressed-key WIF carries a trailing 0x01 flag
    if len(payload) == 33 and payload[-1] == 0x01:
        payload = payload[:-1]
    if len(payload) != 32:
        raise InvalidPrivateKeyError(f"Invalid WIF payload length: {len(payload)}")
    return payload


def load_private_key(key: str) -> PrivateKey:
    """
    Load a coincurve PrivateKey, rejecting keys outside the curve order.

    Raises:
        InvalidPrivateKeyError: On malformed or out-of-range keys
    """
    key_bytes = private_key_to_bytes(key)
    try:
        return PrivateKey(key_bytes)
    except ValueError as e:
        raise InvalidPrivateKeyError(f"Invalid private key: {e}") from e


def compressed_public_key(private_key: PrivateKey) -> bytes:
    return private_key.public_key.format(compressed=True)


def sign_hash_der(private_key: PrivateKey, msg_hash: bytes) -> bytes:
    """
    Produce a DER-encoded (low-S, RFC6979) ECDSA signature over a 32-byte hash.

    Raises:
        SigningFailedError: If libsecp256k1 rejects the input
    """
    if len(msg_hash) != 32:
        raise SigningFailedError(f"Message hash must be 32 bytes, got {len(msg_hash)}")
    try:
        # The hash is already SHA256d, so skip coincurve's own hashing
        return private_key.sign(msg_hash, hasher=None)
    except Exception as e:
        raise SigningFailedError(f"ECDSA signing failed: {e}") from e
