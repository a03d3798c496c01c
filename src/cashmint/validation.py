"""
Token schema validation.

Runs before any network or signing work. Checks fail fast and raise
InvalidSchemaError naming the offending field.
"""

from __future__ import annotations

import json
import re

from cashmint.constants import (
    MAX_BCMR_URI_BYTES,
    MAX_COMMITMENT_LENGTH,
    MAX_DECIMALS,
    MAX_METADATA_LENGTH,
)
from cashmint.errors import InvalidSchemaError
from cashmint.models import NftCapability, TokenSchema

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")
_CAPABILITIES = {c.value for c in NftCapability}


def decode_commitment(raw: str) -> bytes:
    """
    Decode an NFT commitment string to bytes.

    Rules, in order:
    1. "0x"-prefixed: the rest must be even-length hex
    2. valid even-length hex: decoded as hex
    3. anything else: UTF-8 text

    Raises:
        InvalidSchemaError: If a 0x-prefixed value is not valid hex
    """
    if raw.startswith("0x"):
        body = raw[2:]
        if len(body) % 2 != 0 or (body and not _HEX_RE.match(body)):
            raise InvalidSchemaError(f"NFT commitment is not valid hex: {raw!r}")
        return bytes.fromhex(body)
    if _HEX_RE.match(raw) and len(raw) % 2 == 0:
        return bytes.fromhex(raw)
    return raw.encode("utf-8")


def serialize_metadata(metadata: dict) -> str:
    # Compact form, matching what is stored off-chain
    return json.dumps(metadata, separators=(",", ":"), ensure_ascii=False)


def validate_schema(schema: TokenSchema) -> None:
    if not schema.name:
        raise InvalidSchemaError("Token name is required")
    if not schema.symbol:
        raise InvalidSchemaError("Token symbol is required")

    if isinstance(schema.decimals, bool) or not 0 <= schema.decimals <= MAX_DECIMALS:
        raise InvalidSchemaError(f"Decimals must be between 0 and {MAX_DECIMALS}")

    if schema.initial_supply < 0:
        raise InvalidSchemaError("Initial supply must be non-negative")

    if schema.nft is not None:
        if schema.nft.capability not in _CAPABILITIES:
            raise InvalidSchemaError(
                f"Invalid NFT capability {schema.nft.capability!r}; "
                f"expected one of {sorted(_CAPABILITIES)}"
            )
        commitment = decode_commitment(schema.nft.commitment)
        if len(commitment) > MAX_COMMITMENT_LENGTH:
            raise InvalidSchemaError(
                f"NFT commitment is {len(commitment)} bytes; "
                f"maximum is {MAX_COMMITMENT_LENGTH}"
            )

    if schema.bcmr_uri is not None:
        if not schema.bcmr_uri.strip():
            raise InvalidSchemaError("bcmr_uri must not be empty")
        uri_length = len(schema.bcmr_uri.encode("utf-8"))
        if uri_length > MAX_BCMR_URI_BYTES:
            raise InvalidSchemaError(
                f"bcmr_uri is {uri_length} bytes; maximum is {MAX_BCMR_URI_BYTES}"
            )

    if schema.metadata is not None:
        try:
            serialized = serialize_metadata(schema.metadata)
        except (TypeError, ValueError) as e:
            raise InvalidSchemaError(f"Metadata is not JSON serializable: {e}") from e
        if len(serialized) > MAX_METADATA_LENGTH:
            raise InvalidSchemaError(
                f"Metadata serializes to {len(serialized)} characters; "
                f"maximum is {MAX_METADATA_LENGTH}"
            )
