"""
CashAddr encoding and decoding for Bitcoin Cash P2PKH addresses.

Same construction as bech32 (base32 payload plus BCH-code checksum) but with
a 40-bit checksum over the full network prefix.
Reference: https://github.com/bitcoincashorg/bitcoincash.org/blob/master/spec/cashaddr.md
"""

from __future__ import annotations

from cashmint.errors import EncodingFailedError
from cashmint.models import NetworkType

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"

NETWORK_PREFIXES = {
    NetworkType.MAINNET: "bitcoincash",
    NetworkType.TESTNET: "bchtest",
    NetworkType.REGTEST: "bchreg",
}

# Address type nibble in the version byte
TYPE_P2PKH = 0
TYPE_P2SH = 1
TYPE_P2PKH_TOKENS = 2
TYPE_P2SH_TOKENS = 3


def cashaddr_polymod(values: list[int]) -> int:
    """CashAddr checksum polymod"""
    gen = [0x98F2BC8E61, 0x79B76D99E2, 0xF33E5FB3C4, 0xAE2EABE2A8, 0x1E4F43E470]
    chk = 1
    for v in values:
        b = chk >> 35
        chk = ((chk & 0x07FFFFFFFF) << 5) ^ v
        for i in range(5):
            chk ^= gen[i] if ((b >> i) & 1) else 0
    return chk ^ 1


def prefix_expand(prefix: str) -> list[int]:
    """Lower 5 bits of each prefix character, then a zero separator"""
    return [ord(x) & 0x1F for x in prefix] + [0]


def create_checksum(prefix: str, data: list[int]) -> list[int]:
    polymod = cashaddr_polymod(prefix_expand(prefix) + data + [0] * 8)
    return [(polymod >> 5 * (7 - i)) & 0x1F for i in range(8)]


def verify_checksum(prefix: str, data: list[int]) -> bool:
    return cashaddr_polymod(prefix_expand(prefix) + data) == 0


def convertbits(data: bytes | list[int], frombits: int, tobits: int, pad: bool = True) -> list[int]:
    """Convert between bit groups"""
    acc = 0
    bits = 0
    ret = []
    maxv = (1 << tobits) - 1
    max_acc = (1 << (frombits + tobits - 1)) - 1

    for value in data:
        acc = ((acc << frombits) | value) & max_acc
        bits += frombits
        while bits >= tobits:
            bits -= tobits
            ret.append((acc >> bits) & maxv)

    if pad:
        if bits:
            ret.append((acc << (tobits - bits)) & maxv)
    elif bits >= frombits or ((acc << (tobits - bits)) & maxv):
        raise ValueError("Invalid bits")

    return ret


def encode_cashaddr(prefix: str, addr_type: int, payload: bytes) -> str:
    """Encode a hash payload; only 160-bit hashes (size code 0) are supported."""
    if len(payload) != 20:
        raise EncodingFailedError(f"Unsupported CashAddr payload length: {len(payload)}")
    version_byte = addr_type << 3
    data = convertbits(bytes([version_byte]) + payload, 8, 5)
    combined = data + create_checksum(prefix, data)
    return prefix + ":" + "".join(CHARSET[d] for d in combined)


def decode_cashaddr(address: str, default_prefix: str | None = None) -> tuple[str, int, bytes]:
    """
    Decode a CashAddr string.

    Args:
        address: Address with or without its prefix
        default_prefix: Prefix to assume when the address carries none

    Returns:
        (prefix, address type, 20-byte hash)

    Raises:
        EncodingFailedError: On malformed addresses or bad checksums
    """
    if address.lower() != address and address.upper() != address:
        raise EncodingFailedError(f"Mixed-case CashAddr: {address}")
    address = address.lower()

    if ":" in address:
        prefix, body = address.split(":", 1)
    elif default_prefix:
        prefix, body = default_prefix, address
    else:
        raise EncodingFailedError(f"CashAddr has no network prefix: {address}")

    try:
        data = [CHARSET.index(c) for c in body]
    except ValueError as e:
        raise EncodingFailedError(f"Invalid character in CashAddr: {address}") from e

    if len(data) < 9 or not verify_checksum(prefix, data):
        raise EncodingFailedError(f"Invalid CashAddr checksum: {address}")

    try:
        decoded = bytes(convertbits(data[:-8], 5, 8, pad=False))
    except ValueError as e:
        raise EncodingFailedError(f"Invalid CashAddr padding: {address}") from e

    version_byte, payload = decoded[0], decoded[1:]
    addr_type = (version_byte >> 3) & 0x0F
    if version_byte & 0x07 != 0 or len(payload) != 20:
        raise EncodingFailedError(f"Unsupported CashAddr hash size: {address}")
    return prefix, addr_type, payload


def pubkey_hash_to_address(pubkey_hash: bytes, network: NetworkType | str) -> str:
    return encode_cashaddr(NETWORK_PREFIXES[NetworkType(network)], TYPE_P2PKH, pubkey_hash)


def address_to_pubkey_hash(address: str, network: NetworkType | str | None = None) -> bytes:
    """
    Extract the public key hash from a P2PKH CashAddr (plain or token-aware).

    Args:
        address: CashAddr with its network prefix
        network: When given, the address prefix must belong to this network

    Raises:
        EncodingFailedError: If the address is malformed, not P2PKH or on another network
    """
    prefix, addr_type, payload = decode_cashaddr(address)
    if network is not None and prefix != NETWORK_PREFIXES[NetworkType(network)]:
        raise EncodingFailedError(
            f"Address {address} is not a {NetworkType(network).value} address"
        )
    if addr_type not in (TYPE_P2PKH, TYPE_P2PKH_TOKENS):
        raise EncodingFailedError(f"Address is not P2PKH: {address}")
    return payload
