"""
Base coin data provider interface.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any

import httpx
from loguru import logger

from cashmint.crypto import hash256
from cashmint.errors import ProviderRequestFailedError
from cashmint.models import UTXO, NetworkType

DEFAULT_TIMEOUT = 30.0

_TXID_RE = re.compile(r"^[0-9a-fA-F]{64}$")


class CoinDataProvider(ABC):
    """
    Abstract coin data provider.

    Implementations fetch spendable coins for an address and relay signed
    transactions. Every HTTP failure is reported as ProviderRequestFailedError.
    """

    name = "provider"

    def __init__(
        self,
        base_url: str,
        network: NetworkType | str = NetworkType.MAINNET,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            base_url: Provider REST root; trailing slashes are ignored
            network: Network the provider serves
            timeout: Request timeout in seconds
            client: Optional httpx client (a private one is created otherwise)
        """
        self.base_url = base_url.rstrip("/")
        self.network = NetworkType(network)
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    @abstractmethod
    async def fetch_utxos(self, address: str) -> list[UTXO]:
        """Get spendable coins for an address"""

    @abstractmethod
    async def broadcast_transaction(self, tx_hex: str) -> str:
        """Broadcast a signed transaction, returns txid"""

    async def _api_call(
        self,
        method: str,
        endpoint: str,
        data: dict[str, Any] | None = None,
    ) -> Any:
        """Make an API call and return the decoded JSON body."""
        url = f"{self.base_url}/{endpoint}"

        try:
            if method == "GET":
                response = await self.client.get(url)
            elif method == "POST":
                response = await self.client.post(url, json=data)
            else:
                raise ValueError(f"Unsupported HTTP method: {method}")

            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"{self.name} request failed: {endpoint} - HTTP {status}")
            raise ProviderRequestFailedError(
                f"{self.name} request to {endpoint} failed with status {status}",
                status_code=status,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{self.name} request failed: {endpoint} - {e}")
            raise ProviderRequestFailedError(f"{self.name} request to {endpoint} failed: {e}") from e
        except ValueError as e:
            raise ProviderRequestFailedError(
                f"{self.name} returned an invalid response for {endpoint}: {e}"
            ) from e

    @staticmethod
    def _make_utxo(txid: Any, vout: Any, satoshis: Any, height: Any = None) -> UTXO:
        """
        Build a UTXO from provider fields.

        Raises:
            ValueError: If the txid is not 64 hex characters or vout/value is out of range
        """
        if not isinstance(txid, str) or not _TXID_RE.match(txid):
            raise ValueError(f"invalid txid {txid!r}")
        vout = int(vout)
        satoshis = int(satoshis)
        if not 0 <= vout <= 0xFFFFFFFF:
            raise ValueError(f"invalid vout {vout}")
        if satoshis < 0:
            raise ValueError(f"negative value {satoshis}")
        return UTXO(txid=txid.lower(), vout=vout, satoshis=satoshis, height=height)

    def _txid_or_local(self, txid: Any, tx_hex: str) -> str:
        if isinstance(txid, str) and txid:
            return txid
        try:
            tx_bytes = bytes.fromhex(tx_hex)
        except ValueError as e:
            raise ProviderRequestFailedError(
                f"{self.name} broadcast response had no txid and the transaction is not hex"
            ) from e
        local = hash256(tx_bytes)[::-1].hex()
        logger.warning(f"{self.name} broadcast response had no txid, using local txid {local}")
        return local

    async def close(self) -> None:
        """Close the HTTP client if this provider created it"""
        if self._owns_client:
            await self.client.aclose()
