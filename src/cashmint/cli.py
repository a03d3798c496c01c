"""
Command-line interface for cashmint.
"""

from __future__ import annotations

import asyncio
import json
import sys
from dataclasses import asdict
from typing import Annotated, Any

import typer
from loguru import logger
from pydantic import ValidationError

from cashmint.builder import MintTransactionBuilder
from cashmint.cashaddr import pubkey_hash_to_address
from cashmint.config import MintConfig, get_settings
from cashmint.crypto import compressed_public_key, hash160, load_private_key
from cashmint.engine import MintEngine
from cashmint.errors import MintError
from cashmint.models import NetworkType, NftOptions, TokenSchema
from cashmint.verification import inspect_mint

app = typer.Typer(
    name="cashmint",
    help="cashmint - Build and broadcast CashTokens genesis transactions",
    add_completion=False,
)


def setup_logging(level: str) -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def load_config(
    network: str | None,
    private_key: str | None,
    chronik_url: str | None,
    electrumx_url: str | None,
    fee_rate: float | None,
) -> MintConfig:
    """
    Merge CLI options over CASHMINT_* environment settings.

    Raises:
        typer.BadParameter: If an option or environment value is invalid
    """
    try:
        resolved_network = NetworkType(network) if network else None
    except ValueError as e:
        raise typer.BadParameter(f"Unknown network: {network}") from e

    try:
        settings = get_settings()
        return MintConfig(
            network=resolved_network or settings.network,
            private_key=private_key or settings.private_key,
            utxo_provider_url=chronik_url or settings.utxo_provider_url,
            electrumx_provider_url=electrumx_url or settings.electrumx_provider_url,
            fee_rate=fee_rate if fee_rate is not None else settings.fee_rate,
            request_timeout=settings.request_timeout,
        )
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise typer.BadParameter(f"Invalid configuration: {errors}") from e


def parse_metadata(raw: str | None) -> dict[str, Any] | None:
    if raw is None:
        return None
    try:
        metadata = json.loads(raw)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"--metadata is not valid JSON: {e}") from e
    if not isinstance(metadata, dict):
        raise typer.BadParameter("--metadata must be a JSON object")
    return metadata


NetworkOption = Annotated[
    str | None,
    typer.Option("--network", "-n", help="mainnet | testnet | regtest (default: CASHMINT_NETWORK)"),
]
PrivateKeyOption = Annotated[
    str | None,
    typer.Option(
        "--private-key", envvar="CASHMINT_PRIVATE_KEY", help="Private key (hex or WIF)"
    ),
]
ChronikOption = Annotated[
    str | None, typer.Option("--chronik-url", help="Chronik base URL (takes precedence)")
]
ElectrumXOption = Annotated[
    str | None, typer.Option("--electrumx-url", help="ElectrumX/Fulcrum REST base URL")
]
LogLevelOption = Annotated[
    str, typer.Option("--log-level", "-l", envvar="CASHMINT_LOG_LEVEL", help="Log level")
]


@app.command()
def build(
    name: Annotated[str, typer.Option("--name", help="Token name")],
    symbol: Annotated[str, typer.Option("--symbol", help="Token symbol")],
    decimals: Annotated[int, typer.Option("--decimals", help="Decimal places (0-18)")] = 0,
    supply: Annotated[int, typer.Option("--supply", help="Initial fungible supply")] = 0,
    nft_capability: Annotated[
        str | None,
        typer.Option("--nft-capability", help="Mint an NFT: none | mutable | minting"),
    ] = None,
    nft_commitment: Annotated[
        str, typer.Option("--nft-commitment", help="NFT commitment (0x-hex, hex or text)")
    ] = "",
    bcmr_uri: Annotated[
        str | None, typer.Option("--bcmr-uri", help="BCMR metadata URI for an OP_RETURN output")
    ] = None,
    metadata: Annotated[
        str | None, typer.Option("--metadata", help="Free-form metadata as a JSON object")
    ] = None,
    network: NetworkOption = None,
    private_key: PrivateKeyOption = None,
    chronik_url: ChronikOption = None,
    electrumx_url: ElectrumXOption = None,
    fee_rate: Annotated[
        float | None, typer.Option("--fee-rate", help="Fee rate in sat/byte")
    ] = None,
    do_broadcast: Annotated[
        bool, typer.Option("--broadcast", help="Broadcast after building")
    ] = False,
    log_level: LogLevelOption = "INFO",
) -> None:
    """Build a genesis transaction and print it as JSON."""
    setup_logging(log_level)

    schema = TokenSchema(
        name=name,
        symbol=symbol,
        decimals=decimals,
        initial_supply=supply,
        nft=(
            NftOptions(capability=nft_capability, commitment=nft_commitment)
            if nft_capability is not None
            else None
        ),
        bcmr_uri=bcmr_uri,
        metadata=parse_metadata(metadata),
    )
    config = load_config(network, private_key, chronik_url, electrumx_url, fee_rate)

    async def _run() -> dict[str, Any]:
        async with MintEngine(config) as engine:
            result = await engine.mint(schema)
            output = {
                "hex": result.hex,
                "txid": result.txid,
                "fee": result.fee,
                "category": result.category,
            }
            if do_broadcast:
                output["broadcast_txid"] = await engine.broadcast(result.hex)
            return output

    try:
        output = asyncio.run(_run())
    except MintError as e:
        logger.error(f"Build failed: {e}")
        raise typer.Exit(1) from e

    typer.echo(json.dumps(output, indent=2))


@app.command()
def broadcast(
    tx_hex: Annotated[str, typer.Argument(help="Signed transaction hex")],
    network: NetworkOption = None,
    chronik_url: ChronikOption = None,
    electrumx_url: ElectrumXOption = None,
    log_level: LogLevelOption = "INFO",
) -> None:
    """Broadcast a signed transaction."""
    setup_logging(log_level)
    config = load_config(network, None, chronik_url, electrumx_url, None)

    async def _run() -> str:
        async with MintTransactionBuilder(config) as builder:
            return await builder.broadcast(tx_hex)

    try:
        txid = asyncio.run(_run())
    except MintError as e:
        logger.error(f"Broadcast failed: {e}")
        raise typer.Exit(1) from e

    typer.echo(txid)


@app.command()
def address(
    network: NetworkOption = None,
    private_key: PrivateKeyOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Print the P2PKH CashAddr that funds builds for a private key."""
    setup_logging(log_level)
    config = load_config(network, private_key, None, None, None)
    if not config.private_key:
        logger.error("A private key is required (--private-key or CASHMINT_PRIVATE_KEY)")
        raise typer.Exit(1)

    try:
        key = load_private_key(config.private_key)
    except MintError as e:
        logger.error(str(e))
        raise typer.Exit(1) from e

    typer.echo(pubkey_hash_to_address(hash160(compressed_public_key(key)), config.network))


@app.command()
def inspect(
    tx_hex: Annotated[str, typer.Argument(help="Genesis transaction hex")],
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Decode a genesis transaction and print its token data."""
    setup_logging(log_level)
    try:
        summary = inspect_mint(tx_hex)
    except MintError as e:
        logger.error(f"Cannot inspect transaction: {e}")
        raise typer.Exit(1) from e

    typer.echo(json.dumps(asdict(summary), indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
