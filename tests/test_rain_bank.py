"""Tests for the per-column rain bank."""

import pytest

from src.rainflow.rain_bank import RainBank


class TestRainBank:
    """Test suite for RainBank."""

    def test_initialized_with_amount(self):
        bank = RainBank(4, 2.5)
        assert len(bank) == 4
        assert bank.remaining == pytest.approx(10.0)
        assert not bank.drained

    def test_claim_returns_then_zeroes(self):
        bank = RainBank(3, 1.5)
        assert bank.claim(1) == 1.5
        assert bank.claim(1) == 0.0
        assert bank.remaining == pytest.approx(3.0)

    def test_drained_after_all_claims(self):
        bank = RainBank(3, 1.0)
        for i in range(3):
            bank.claim(i)
        assert bank.drained
        assert bank.remaining == 0.0

    def test_zero_rain_bank_is_drained(self):
        assert RainBank(5, 0.0).drained

    def test_claim_out_of_range(self):
        bank = RainBank(2, 1.0)
        with pytest.raises(IndexError):
            bank.claim(2)
        with pytest.raises(IndexError):
            bank.claim(-1)

    @pytest.mark.parametrize("amount", [-1.0, float("inf"), float("nan")])
    def test_invalid_amount(self, amount):
        with pytest.raises(ValueError, match="finite and non-negative"):
            RainBank(3, amount)

    def test_negative_size(self):
        with pytest.raises(ValueError):
            RainBank(-1, 1.0)
