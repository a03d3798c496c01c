"""
Greedy largest-first coin selection.
"""

from __future__ import annotations

from loguru import logger

from cashmint.constants import DUST_THRESHOLD
from cashmint.errors import InsufficientFundsError, NoCoinsAvailableError
from cashmint.fees import estimate_fee
from cashmint.models import UTXO, CoinSelection


def select_coins(
    utxos: list[UTXO],
    required_output: int,
    num_non_change_outputs: int,
    fee_rate: float,
    has_token: bool = True,
) -> CoinSelection:
    """
    Pick coins largest-first until they cover required_output plus fee.

    The fee is recomputed for every prefix. A change output is only counted
    in the fee when the surplus would exceed the dust threshold; a sub-dust
    surplus is left to the miner.

    Args:
        utxos: Available coins
        required_output: Satoshis needed by the non-change outputs
        num_non_change_outputs: Outputs excluding change
        fee_rate: sat/byte
        has_token: Whether one output carries a CashToken

    Raises:
        NoCoinsAvailableError: If utxos is empty
        InsufficientFundsError: If all coins together cannot pay
    """
    if not utxos:
        raise NoCoinsAvailableError("No UTXOs available for coin selection")

    ordered = sorted(utxos, key=lambda u: u.satoshis, reverse=True)

    selected: list[UTXO] = []
    total_input = 0
    fee = 0

    for utxo in ordered:
        selected.append(utxo)
        total_input += utxo.satoshis

        fee = estimate_fee(len(selected), num_non_change_outputs, fee_rate, has_token)
        if total_input - required_output - fee > DUST_THRESHOLD:
            fee = estimate_fee(len(selected), num_non_change_outputs + 1, fee_rate, has_token)

        if total_input >= required_output + fee:
            change = total_input - required_output - fee
            if change <= DUST_THRESHOLD:
                change = 0
            logger.debug(
                f"Selected {len(selected)}/{len(utxos)} UTXOs: "
                f"total={total_input}, fee={fee}, change={change}"
            )
            return CoinSelection(
                utxos=selected, total_input=total_input, fee=fee, change=change
            )

    raise InsufficientFundsError(total_input, required_output, fee)
