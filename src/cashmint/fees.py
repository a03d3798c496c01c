"""
Transaction fee estimation for P2PKH genesis transactions.

The size model is an upper bound (see cashmint.constants), so estimates
slightly overpay rather than underpay.
"""

from __future__ import annotations

import math

from cashmint.constants import (
    DEFAULT_FEE_RATE,
    P2PKH_INPUT_SIZE,
    P2PKH_OUTPUT_SIZE,
    TOKEN_PREFIX_OVERHEAD,
    TX_OVERHEAD,
)


def estimate_tx_size(num_inputs: int, num_outputs: int, has_token: bool = True) -> int:
    return (
        TX_OVERHEAD
        + num_inputs * P2PKH_INPUT_SIZE
        + num_outputs * P2PKH_OUTPUT_SIZE
        + (TOKEN_PREFIX_OVERHEAD if has_token else 0)
    )


def estimate_fee(
    num_inputs: int,
    num_outputs: int,
    fee_rate: float = DEFAULT_FEE_RATE,
    has_token: bool = True,
) -> int:
    """
    Estimate the fee in satoshis, rounded up.

    Args:
        num_inputs: Number of P2PKH inputs
        num_outputs: Total outputs (token, OP_RETURN, change)
        fee_rate: sat/byte
        has_token: Whether an output carries a CashToken prefix
    """
    return math.ceil(estimate_tx_size(num_inputs, num_outputs, has_token) * fee_rate)
