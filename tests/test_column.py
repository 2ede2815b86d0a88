"""Tests for the Column cell and water-level comparisons."""

import math

import pytest

from src.rainflow.column import Column, compare_levels


class TestColumn:
    """Test suite for Column construction and water bookkeeping."""

    def test_new_column_is_dry(self):
        column = Column(4)
        assert column.height == 4.0
        assert column.water == 0.0
        assert column.water_level == 4.0

    def test_add_water_raises_level(self):
        column = Column(4.0)
        column.add_water(2.5)
        assert column.water_level == 6.5
        assert column.water == 2.5

    def test_add_water_rejects_negative(self):
        column = Column(1.0)
        with pytest.raises(ValueError, match="negative water"):
            column.add_water(-0.1)

    def test_negative_height_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            Column(-1)

    def test_wall_is_infinitely_tall(self):
        wall = Column.wall()
        assert wall.is_wall
        assert math.isinf(wall.water_level)
        assert not Column(10**9).is_wall

    def test_repr(self):
        assert repr(Column.wall()) == "Column(wall)"
        assert repr(Column(3)) == "Column(height=3, water=0)"


class TestColumnOrdering:
    """Columns are ordered by water level, not by terrain height."""

    def test_comparisons_use_water_level(self):
        low_wet = Column(1.0)
        low_wet.add_water(3.0)
        high_dry = Column(3.0)

        assert low_wet > high_dry
        assert high_dry < low_wet
        assert high_dry <= low_wet
        assert low_wet >= high_dry
        assert low_wet != high_dry

    def test_equal_levels_compare_equal(self):
        a = Column(2.0)
        a.add_water(1.0)
        b = Column(3.0)
        assert a == b
        assert not a < b
        assert not a > b

    def test_subtraction_is_level_difference(self):
        a = Column(5.0)
        b = Column(2.0)
        b.add_water(0.5)
        assert a - b == pytest.approx(2.5)
        assert b - a == pytest.approx(-2.5)

    def test_wall_minus_column_is_infinite(self):
        assert math.isinf(Column.wall() - Column(7.0))

    def test_not_comparable_with_numbers(self):
        with pytest.raises(TypeError):
            Column(1.0) < 2.0


class TestCompareLevels:
    """Test suite for the tolerant three-way comparison."""

    def test_three_way_result(self):
        assert compare_levels(Column(3), Column(1)) == 1
        assert compare_levels(Column(1), Column(3)) == -1
        assert compare_levels(Column(2), Column(2)) == 0

    def test_tolerance_absorbs_rounding(self):
        a = Column(0.1)
        a.add_water(0.2)
        b = Column(0.3)
        # 0.1 + 0.2 != 0.3 in binary floating point
        assert a != b
        assert compare_levels(a, b, tolerance=1e-9) == 0

    def test_walls(self):
        assert compare_levels(Column.wall(), Column(1e12), tolerance=1e-9) == 1
        assert compare_levels(Column(0), Column.wall(), tolerance=1e-9) == -1
        assert compare_levels(Column.wall(), Column.wall()) == 0
