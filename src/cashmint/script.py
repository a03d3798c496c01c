"""
Script construction helpers: P2PKH locking bytecode, data pushes and the
BCMR OP_RETURN output.
"""

from __future__ import annotations

from cashmint.constants import BCMR_MARKER, OP_RETURN

OP_0 = 0x00
OP_PUSHDATA1 = 0x4C
OP_PUSHDATA2 = 0x4D
OP_PUSHDATA4 = 0x4E
OP_1NEGATE = 0x4F
OP_1 = 0x51
OP_DUP = 0x76
OP_EQUALVERIFY = 0x88
OP_HASH160 = 0xA9
OP_CHECKSIG = 0xAC


def p2pkh_locking_bytecode(pubkey_hash: bytes) -> bytes:
    """OP_DUP OP_HASH160 <20-byte-pubkeyhash> OP_EQUALVERIFY OP_CHECKSIG"""
    if len(pubkey_hash) != 20:
        raise ValueError(f"Invalid pubkey hash length: {len(pubkey_hash)}")
    return bytes([OP_DUP, OP_HASH160, 0x14]) + pubkey_hash + bytes([OP_EQUALVERIFY, OP_CHECKSIG])


def p2pkh_pubkey_hash(locking_bytecode: bytes) -> bytes | None:
    """Return the pubkey hash of a P2PKH script, or None for other scripts."""
    if (
        len(locking_bytecode) == 25
        and locking_bytecode[:3] == bytes([OP_DUP, OP_HASH160, 0x14])
        and locking_bytecode[23:] == bytes([OP_EQUALVERIFY, OP_CHECKSIG])
    ):
        return locking_bytecode[3:23]
    return None


def encode_data_push(data: bytes) -> bytes:
    """Encode data with the minimal push opcode."""
    length = len(data)
    if length == 0:
        return bytes([OP_0])
    if length == 1:
        if 1 <= data[0] <= 16:
            return bytes([OP_1 + data[0] - 1])
        if data[0] == 0x81:
            return bytes([OP_1NEGATE])
    if length <= 75:
        return bytes([length]) + data
    if length <= 0xFF:
        return bytes([OP_PUSHDATA1, length]) + data
    if length <= 0xFFFF:
        return bytes([OP_PUSHDATA2]) + length.to_bytes(2, "little") + data
    return bytes([OP_PUSHDATA4]) + length.to_bytes(4, "little") + data


def parse_pushes(script: bytes) -> list[bytes]:
    """
    Split a push-only script into its pushed items.

    Raises:
        ValueError: On a non-push opcode or truncated push
    """
    items: list[bytes] = []
    offset = 0
    while offset < len(script):
        opcode = script[offset]
        offset += 1
        if opcode == OP_0:
            items.append(b"")
            continue
        if OP_1 <= opcode <= OP_1 + 15:
            items.append(bytes([opcode - OP_1 + 1]))
            continue
        if opcode == OP_1NEGATE:
            items.append(bytes([0x81]))
            continue
        if opcode <= 75:
            length = opcode
        elif opcode == OP_PUSHDATA1:
            length = script[offset]
            offset += 1
        elif opcode == OP_PUSHDATA2:
            length = int.from_bytes(script[offset : offset + 2], "little")
            offset += 2
        elif opcode == OP_PUSHDATA4:
            length = int.from_bytes(script[offset : offset + 4], "little")
            offset += 4
        else:
            raise ValueError(f"Non-push opcode {opcode:#04x}")
        if offset + length > len(script):
            raise ValueError("Truncated push")
        items.append(script[offset : offset + length])
        offset += length
    return items


def bcmr_locking_bytecode(uri: str) -> bytes:
    """OP_RETURN <push "BCMR"> <push uri>"""
    return (
        bytes([OP_RETURN])
        + encode_data_push(BCMR_MARKER)
        + encode_data_push(uri.encode("utf-8"))
    )


def parse_bcmr_locking_bytecode(locking_bytecode: bytes) -> str | None:
    """Return the URI of a BCMR OP_RETURN output, or None if it is not one."""
    if not locking_bytecode or locking_bytecode[0] != OP_RETURN:
        return None
    try:
        items = parse_pushes(locking_bytecode[1:])
    except (ValueError, IndexError):
        return None
    if len(items) < 2 or items[0] != BCMR_MARKER:
        return None
    return items[1].decode("utf-8", errors="replace")
