"""
Coin data providers.

Available providers:
- ChronikProvider: Chronik indexer REST API
- ElectrumXProvider: ElectrumX / Fulcrum HTTP REST bridge

create_provider() picks one from a MintConfig; Chronik wins when both URLs
are configured.
"""

from __future__ import annotations

import httpx

from cashmint.config import MintConfig
from cashmint.providers.base import CoinDataProvider
from cashmint.providers.chronik import ChronikProvider
from cashmint.providers.electrumx import ElectrumXProvider


def create_provider(
    config: MintConfig, client: httpx.AsyncClient | None = None
) -> CoinDataProvider | None:
    if config.utxo_provider_url:
        return ChronikProvider(
            config.utxo_provider_url, config.network, config.request_timeout, client
        )
    if config.electrumx_provider_url:
        return ElectrumXProvider(
            config.electrumx_provider_url, config.network, config.request_timeout, client
        )
    return None


__all__ = [
    "ChronikProvider",
    "CoinDataProvider",
    "ElectrumXProvider",
    "create_provider",
]
