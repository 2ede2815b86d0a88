"""
Column: the atomic cell of a one-dimensional relief.

A column has a fixed terrain height and a mutable water depth. Columns are
ordered and compared exclusively by their water level (height + water).
Walls are columns of infinite height; they never hold water.
"""

import math
from functools import total_ordering


@total_ordering
class Column:
    """
    A single terrain column holding pooled water.

    Attributes:
        height: Terrain height, fixed at construction (``inf`` for walls)
        water: Accumulated water depth, never negative
    """

    __slots__ = ("height", "water")

    def __init__(self, height: float):
        if math.isnan(height) or height < 0:
            raise ValueError(f"Column height must be non-negative, got {height}")
        self.height = float(height)
        self.water = 0.0

    @classmethod
    def wall(cls) -> "Column":
        """Create an infinitely tall sentinel column."""
        return cls(math.inf)

    @property
    def is_wall(self) -> bool:
        return math.isinf(self.height)

    @property
    def water_level(self) -> float:
        """Height of the water surface (terrain height when dry)."""
        return self.height + self.water

    def add_water(self, amount: float) -> None:
        """Pour ``amount`` units of water onto this column."""
        if amount < 0:
            raise ValueError(f"Cannot add negative water ({amount})")
        self.water += amount

    def __eq__(self, other):
        if not isinstance(other, Column):
            return NotImplemented
        return self.water_level == other.water_level

    def __lt__(self, other):
        if not isinstance(other, Column):
            return NotImplemented
        return self.water_level < other.water_level

    def __sub__(self, other):
        if not isinstance(other, Column):
            return NotImplemented
        return self.water_level - other.water_level

    def __repr__(self):
        if self.is_wall:
            return "Column(wall)"
        return f"Column(height={self.height:g}, water={self.water:g})"


def compare_levels(a: Column, b: Column, tolerance: float = 0.0) -> int:
    """
    Three-way comparison of two columns by water level.

    Levels within ``tolerance`` of each other compare equal, so floating-point
    residue left by repeated filling never breaks a flat water surface apart.
    Two walls compare equal.

    Returns:
        1 if ``a`` is higher, -1 if ``a`` is lower, 0 if they are level.
    """
    level_a = a.water_level
    level_b = b.water_level
    if level_a > level_b + tolerance:
        return 1
    if level_b > level_a + tolerance:
        return -1
    return 0
