"""
High-level minting API.

build() and broadcast() are one-shot helpers that open and close their own
provider. MintEngine keeps a builder around for several calls.
"""

from __future__ import annotations

from cashmint.builder import MintTransactionBuilder
from cashmint.config import MintConfig
from cashmint.errors import EncodingFailedError
from cashmint.models import BuiltTransaction, MintResult, TokenSchema
from cashmint.verification import get_token_category


async def build(config: MintConfig, schema: TokenSchema) -> BuiltTransaction:
    """Build (and, in funded modes, sign) a genesis transaction."""
    async with MintTransactionBuilder(config) as builder:
        return await builder.build(schema)


async def broadcast(config: MintConfig, tx_hex: str) -> str:
    """Broadcast a signed transaction through the configured provider."""
    async with MintTransactionBuilder(config) as builder:
        return await builder.broadcast(tx_hex)


class MintEngine:
    """
    Mint tokens with a fixed configuration.

    Example:
        async with MintEngine(config) as engine:
            result = await engine.mint(schema)
            await engine.broadcast(result.hex)
    """

    def __init__(self, config: MintConfig, builder: MintTransactionBuilder | None = None):
        self.config = config
        self.builder = builder or MintTransactionBuilder(config)

    async def mint(self, schema: TokenSchema) -> MintResult:
        built = await self.builder.build(schema)
        category = get_token_category(built.hex)
        if category is None:
            raise EncodingFailedError(f"Built transaction {built.txid} carries no token output")
        return MintResult(
            hex=built.hex,
            txid=built.txid,
            category=category,
            fee=built.fee,
            metadata=schema.metadata,
        )

    async def broadcast(self, tx_hex: str) -> str:
        return await self.builder.broadcast(tx_hex)

    async def close(self) -> None:
        await self.builder.close()

    async def __aenter__(self) -> MintEngine:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
