"""
Tests for largest-first coin selection.
"""

from __future__ import annotations

import pytest

from cashmint.coin_selection import select_coins
from cashmint.constants import DEFAULT_FEE_RATE, DUST_THRESHOLD, TOKEN_OUTPUT_DUST
from cashmint.errors import InsufficientFundsError, NoCoinsAvailableError
from cashmint.fees import estimate_fee
from tests.conftest import make_utxo


class TestSelectCoins:
    def test_single_sufficient_utxo(self) -> None:
        result = select_coins([make_utxo(100_000)], TOKEN_OUTPUT_DUST, 1, DEFAULT_FEE_RATE)

        assert len(result.utxos) == 1
        assert result.total_input == 100_000
        # Change output is priced in
        assert result.fee == estimate_fee(1, 2)
        assert result.change == 100_000 - TOKEN_OUTPUT_DUST - result.fee

    def test_multiple_small_utxos(self) -> None:
        utxos = [make_utxo(700, vout=i) for i in range(5)]

        result = select_coins(utxos, TOKEN_OUTPUT_DUST, 1, DEFAULT_FEE_RATE)

        assert len(result.utxos) > 1
        assert result.total_input == sum(u.satoshis for u in result.utxos)
        assert result.total_input >= TOKEN_OUTPUT_DUST + result.fee

    def test_largest_first(self) -> None:
        utxos = [make_utxo(500, 0), make_utxo(100_000, 1), make_utxo(200, 2)]

        result = select_coins(utxos, TOKEN_OUTPUT_DUST, 1, DEFAULT_FEE_RATE)

        assert result.utxos[0].satoshis == 100_000
        assert len(result.utxos) == 1

    def test_change_above_dust(self) -> None:
        result = select_coins([make_utxo(500_000)], TOKEN_OUTPUT_DUST, 1, DEFAULT_FEE_RATE)

        assert result.change > DUST_THRESHOLD
        assert result.total_input - result.fee - TOKEN_OUTPUT_DUST == result.change

    def test_sub_dust_surplus_dropped(self) -> None:
        fee = estimate_fee(1, 1)
        amount = TOKEN_OUTPUT_DUST + fee + DUST_THRESHOLD - 1

        result = select_coins([make_utxo(amount)], TOKEN_OUTPUT_DUST, 1, DEFAULT_FEE_RATE)

        assert result.change == 0
        assert result.fee == fee

    def test_surplus_that_cannot_pay_for_change_output(self) -> None:
        """Surplus just above dust becomes sub-dust once the change output is priced."""
        amount = TOKEN_OUTPUT_DUST + estimate_fee(1, 1) + DUST_THRESHOLD + 1

        result = select_coins([make_utxo(amount)], TOKEN_OUTPUT_DUST, 1, DEFAULT_FEE_RATE)

        assert result.change == 0
        assert result.fee == estimate_fee(1, 2)
        assert result.total_input >= TOKEN_OUTPUT_DUST + result.fee

    def test_counts_non_change_outputs(self) -> None:
        one = select_coins([make_utxo(100_000)], TOKEN_OUTPUT_DUST, 1, DEFAULT_FEE_RATE)
        two = select_coins([make_utxo(100_000)], TOKEN_OUTPUT_DUST, 2, DEFAULT_FEE_RATE)

        assert two.fee - one.fee == 34

    def test_no_utxos(self) -> None:
        with pytest.raises(NoCoinsAvailableError):
            select_coins([], TOKEN_OUTPUT_DUST, 1, DEFAULT_FEE_RATE)

    def test_insufficient_funds(self) -> None:
        with pytest.raises(InsufficientFundsError, match="[Ii]nsufficient") as exc_info:
            select_coins([make_utxo(1, 0), make_utxo(1, 1)], TOKEN_OUTPUT_DUST, 1, DEFAULT_FEE_RATE)

        assert exc_info.value.available == 2
        assert exc_info.value.required == TOKEN_OUTPUT_DUST

    def test_input_list_not_mutated(self) -> None:
        utxos = [make_utxo(500, 0), make_utxo(100_000, 1)]

        select_coins(utxos, TOKEN_OUTPUT_DUST, 1, DEFAULT_FEE_RATE)

        assert [u.satoshis for u in utxos] == [500, 100_000]
