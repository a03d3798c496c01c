"""
Error kinds raised by cashmint.

Every failure inside a build or broadcast surfaces as one of these; callers
can catch MintError to handle all of them.
"""

from __future__ import annotations


class MintError(Exception):
    pass


class InvalidSchemaError(MintError):
    """Token schema failed validation."""


class NoSigningCredentialsError(MintError):
    pass


class InvalidPrivateKeyError(MintError):
    pass


class NoCoinDataProviderError(MintError):
    """Raised when an operation needs a UTXO provider and none is configured."""


class NoUtxosAvailableError(MintError):
    """The provider returned no spendable coins for the funding address."""


class NoCoinsAvailableError(MintError):
    """Coin selection was given an empty coin list."""


class InsufficientFundsError(MintError):
    def __init__(self, available: int, required: int, fee: int):
        self.available = available
        self.required = required
        self.fee = fee
        super().__init__(
            f"Insufficient funds: have {available} satoshis, "
            f"need {required} + {fee} fee"
        )


class SigningFailedError(MintError):
    pass


class ProviderRequestFailedError(MintError):
    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class EncodingFailedError(MintError):
    pass
