"""Per-column reservoir of rain that has not yet been released onto the relief."""

import math

import numpy as np


class RainBank:
    """
    Pending rainfall for each interior column.

    Every entry starts at the same amount and is drained to zero the first
    time the flow engine visits its column, so a column contributes fresh
    rain exactly once per simulation.

    Args:
        size: Number of interior columns (walls excluded)
        amount: Rain waiting above each column
    """

    def __init__(self, size: int, amount: float):
        if size < 0:
            raise ValueError(f"Rain bank size must be non-negative, got {size}")
        if not math.isfinite(amount) or amount < 0:
            raise ValueError(f"Rain amount must be finite and non-negative, got {amount}")
        self._pending = np.full(size, float(amount), dtype=np.float64)

    def __len__(self):
        return len(self._pending)

    def claim(self, index: int) -> float:
        """Release the rain pending at interior ``index`` (0 on later calls)."""
        if not 0 <= index < len(self._pending):
            raise IndexError(f"Rain bank index {index} out of range [0, {len(self._pending)})")
        amount = float(self._pending[index])
        self._pending[index] = 0.0
        return amount

    @property
    def remaining(self) -> float:
        return float(self._pending.sum())

    @property
    def drained(self) -> bool:
        return not self._pending.any()
