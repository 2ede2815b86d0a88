"""
Text rendering of a settled relief.

The grid shows one character per interior column and one row per unit of
height, highest row first:

    O  terrain
    x  water
       air
"""

import math

import numpy as np

from src.config import AIR_CHAR, TERRAIN_CHAR, WATER_CHAR
from src.rainflow.flow import RainfallResult


def grid_rows(result: RainfallResult) -> int:
    """Number of rows needed to draw the highest water level."""
    levels = result.water_levels
    if levels.size == 0:
        return 0
    return max(0, math.ceil(float(levels.max()) - 1e-9))


def render_grid(result: RainfallResult) -> str:
    """
    Draw terrain and water as an ASCII grid.

    A cell of row ``r`` is terrain when ``r < height``, water when
    ``height <= r < water_level`` and air otherwise.

    Example:
        >>> from src.rainflow.flow import simulate
        >>> print(render_grid(simulate([2, 0], 1.0)))
        Ox
        Ox
    """
    rows = np.arange(grid_rows(result), dtype=np.float64)[::-1, np.newaxis]
    heights = result.heights[np.newaxis, :]
    levels = result.water_levels[np.newaxis, :]

    cells = np.full((rows.shape[0], heights.shape[1]), AIR_CHAR, dtype="<U1")
    cells[rows < levels] = WATER_CHAR
    cells[rows < heights] = TERRAIN_CHAR
    return "\n".join("".join(row) for row in cells)


def format_report(result: RainfallResult) -> str:
    """One line per interior column with its height and final water level."""
    lines = [
        f"Columns {i} has height of {height:g} and water_level at {level:g}"
        for i, (height, level) in enumerate(zip(result.heights, result.water_levels), start=1)
    ]
    return "\n".join(lines)


def format_state(result: RainfallResult, grid: bool = True) -> str:
    """Grid (optional) followed by the per-column report."""
    parts = []
    if grid:
        drawing = render_grid(result)
        if drawing:
            parts.append(drawing)
    parts.append(format_report(result))
    return "\n".join(parts)
