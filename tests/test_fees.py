"""
Tests for fee estimation.
"""

from __future__ import annotations

from cashmint.constants import DEFAULT_FEE_RATE
from cashmint.fees import estimate_fee, estimate_tx_size


class TestEstimateFee:
    def test_single_input_output(self) -> None:
        """10 overhead + 148 input + 34 output + 50 token prefix."""
        assert estimate_fee(1, 1) == 242

    def test_increases_with_inputs(self) -> None:
        assert estimate_fee(3, 1) > estimate_fee(2, 1) > estimate_fee(1, 1)

    def test_increases_with_outputs(self) -> None:
        assert estimate_fee(1, 3) > estimate_fee(1, 2) > estimate_fee(1, 1)

    def test_token_overhead(self) -> None:
        assert estimate_fee(1, 1, DEFAULT_FEE_RATE, True) > estimate_fee(
            1, 1, DEFAULT_FEE_RATE, False
        )
        assert estimate_fee(1, 1, 1.0, True) - estimate_fee(1, 1, 1.0, False) == 50

    def test_scales_with_fee_rate(self) -> None:
        assert estimate_fee(1, 1, 2.0) == 2 * estimate_fee(1, 1, 1.0)

    def test_rounds_up(self) -> None:
        # 242 * 1.01 = 244.42
        assert estimate_fee(1, 1, 1.01) == 245

    def test_default_rate(self) -> None:
        assert estimate_fee(1, 1) == estimate_fee(1, 1, DEFAULT_FEE_RATE)

    def test_tx_size(self) -> None:
        assert estimate_tx_size(2, 3, has_token=False) == 10 + 2 * 148 + 3 * 34
