"""
Chronik indexer provider.

Expected endpoints:
    GET  {base}/address/{address}/utxos  -> {"utxos": [...]} or [...]
    POST {base}/broadcast-txs            <- {"rawTxs": [hex]} -> {"txids": [txid]}

Each coin is {"txid": str, "vout": int, "satoshis": int}.
"""

from __future__ import annotations

from loguru import logger

from cashmint.errors import ProviderRequestFailedError
from cashmint.models import UTXO
from cashmint.providers.base import CoinDataProvider


class ChronikProvider(CoinDataProvider):
    name = "Chronik"

    async def fetch_utxos(self, address: str) -> list[UTXO]:
        data = await self._api_call("GET", f"address/{address}/utxos")
        items = data.get("utxos", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise ProviderRequestFailedError("Chronik returned an unexpected UTXO payload")

        try:
            utxos = [
                self._make_utxo(
                    item["txid"], item["vout"], item["satoshis"], item.get("height")
                )
                for item in items
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderRequestFailedError(f"Chronik returned a malformed UTXO: {e}") from e

        logger.debug(f"Chronik: {len(utxos)} UTXOs for {address}")
        return utxos

    async def broadcast_transaction(self, tx_hex: str) -> str:
        data = await self._api_call("POST", "broadcast-txs", data={"rawTxs": [tx_hex]})
        txid = None
        if isinstance(data, dict):
            txids = data.get("txids") or []
            txid = txids[0] if txids else data.get("txid")
        txid = self._txid_or_local(txid, tx_hex)
        logger.info(f"Broadcast via Chronik: {txid}")
        return txid
