"""
External wallet signing interface.

Implement WalletProvider to mint from a hardware wallet, browser extension or
any other signer without handing a raw private key to MintConfig.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from cashmint.models import SourceOutput


class WalletProvider(ABC):
    @abstractmethod
    async def get_address(self) -> str:
        """Return the wallet's P2PKH CashAddr, including the network prefix."""

    @abstractmethod
    async def sign_transaction(self, tx_hex: str, source_outputs: list[SourceOutput]) -> str:
        """
        Sign a fully-constructed unsigned transaction.

        Args:
            tx_hex: Unsigned transaction as lowercase hex
            source_outputs: Coins being spent, in input order (value and
                locking bytecode are needed for the BCH sighash pre-image)

        Returns:
            The signed transaction as hex
        """
