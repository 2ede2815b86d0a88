"""
Terrain: a relief of columns enclosed by two sentinel walls.

Index 0 and index N-1 are walls of infinite height; indices 1..N-2 hold the
input relief, left to right. The sequence never changes length or order.
"""

import math
from typing import Iterable, List

import numpy as np

from src.rainflow.column import Column


class Terrain:
    """
    Ordered columns of a one-dimensional relief with walls at both ends.

    Args:
        relief: Interior column heights, left to right (non-negative, finite)

    Raises:
        ValueError: If the relief is empty or holds a negative or non-finite height
    """

    def __init__(self, relief: Iterable[float]):
        heights = [float(h) for h in relief]
        if not heights:
            raise ValueError("Relief must contain at least one column")
        for i, height in enumerate(heights):
            if not math.isfinite(height) or height < 0:
                raise ValueError(
                    f"Relief height at column {i + 1} must be finite and non-negative, got {height}"
                )

        self.columns: List[Column] = [Column.wall()]
        self.columns.extend(Column(h) for h in heights)
        self.columns.append(Column.wall())

    def __len__(self):
        return len(self.columns)

    def __getitem__(self, pos: int) -> Column:
        return self.columns[pos]

    @property
    def right_wall(self) -> int:
        """Index of the right wall (N-1)."""
        return len(self.columns) - 1

    @property
    def interior(self) -> List[Column]:
        return self.columns[1:-1]

    @property
    def n_interior(self) -> int:
        return len(self.columns) - 2

    def water_level(self, pos: int) -> float:
        """Water level of the column at terrain index ``pos``."""
        return self.columns[pos].water_level

    def heights(self) -> np.ndarray:
        return np.array([c.height for c in self.interior], dtype=np.float64)

    def water(self) -> np.ndarray:
        return np.array([c.water for c in self.interior], dtype=np.float64)

    def water_levels(self) -> np.ndarray:
        return np.array([c.water_level for c in self.interior], dtype=np.float64)

    def max_height(self) -> float:
        return max(c.height for c in self.interior)
