"""
ElectrumX / Fulcrum HTTP REST provider.

Expected endpoints:
    GET  {base}/address/{address}/unspent -> [...] or {"result": [...]}
    POST {base}/tx/broadcast              <- {"rawTx": hex} -> txid, {"txid"} or {"result"}

Each coin is {"tx_hash": str, "tx_pos": int, "value": int, "height": int?}.
"""

from __future__ import annotations

from loguru import logger

from cashmint.errors import ProviderRequestFailedError
from cashmint.models import UTXO
from cashmint.providers.base import CoinDataProvider


class ElectrumXProvider(CoinDataProvider):
    name = "ElectrumX"

    async def fetch_utxos(self, address: str) -> list[UTXO]:
        data = await self._api_call("GET", f"address/{address}/unspent")
        items = data.get("result", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise ProviderRequestFailedError("ElectrumX returned an unexpected UTXO payload")

        try:
            utxos = [
                self._make_utxo(
                    item["tx_hash"], item["tx_pos"], item["value"], item.get("height")
                )
                for item in items
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderRequestFailedError(f"ElectrumX returned a malformed UTXO: {e}") from e

        logger.debug(f"ElectrumX: {len(utxos)} UTXOs for {address}")
        return utxos

    async def broadcast_transaction(self, tx_hex: str) -> str:
        data = await self._api_call("POST", "tx/broadcast", data={"rawTx": tx_hex})
        if isinstance(data, dict):
            txid = data.get("txid") or data.get("result")
        else:
            txid = data
        txid = self._txid_or_local(txid, tx_hex)
        logger.info(f"Broadcast via ElectrumX: {txid}")
        return txid
