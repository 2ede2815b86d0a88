"""
Profile plot of a settled relief.

Example:
    from src.rainflow.flow import simulate
    from src.rainflow.visualization import save_water_profile_plot

    result = simulate([3, 7, 4, 5, 3], hours=2.0)
    save_water_profile_plot(result, Path("output/profile.png"))
"""

import logging
from pathlib import Path
from typing import Optional

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np

from src.config import DEFAULT_PLOT_DPI
from src.rainflow.flow import RainfallResult

logger = logging.getLogger(__name__)

# Colors for the two stacked layers
PROFILE_COLORS = {
    "terrain": "#8c6d46",
    "water": "#3a7dc9",
}


def save_water_profile_plot(
    result: RainfallResult,
    output_path: Path,
    title: Optional[str] = None,
    figsize: tuple = (10, 5),
    dpi: int = DEFAULT_PLOT_DPI,
) -> Path:
    """
    Save a bar chart of terrain with the pooled water stacked on top.

    Parameters
    ----------
    result : RainfallResult
        Settled state returned by ``simulate``
    output_path : Path
        Destination image; parent directories are created
    title : str, optional
        Figure title (defaults to the rain duration and total water)
    figsize : tuple
        Figure size in inches
    dpi : int
        Output resolution

    Returns
    -------
    Path
        The path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    positions = np.arange(1, len(result) + 1)

    fig, ax = plt.subplots(figsize=figsize)
    try:
        ax.bar(positions, result.heights, width=1.0, color=PROFILE_COLORS["terrain"],
               edgecolor="black", linewidth=0.5, label="terrain")
        ax.bar(positions, result.water, width=1.0, bottom=result.heights,
               color=PROFILE_COLORS["water"], alpha=0.8, label="water")

        if title is None:
            title = f"{result.hours:g} h of rain, {result.total_water:g} units pooled"
        ax.set_title(title)
        ax.set_xlabel("Column")
        ax.set_ylabel("Level")
        ax.set_xlim(0.5, len(result) + 0.5)
        ax.set_ylim(0, max(1.0, float(result.water_levels.max()) * 1.05))
        ax.legend(loc="upper right")

        fig.tight_layout()
        fig.savefig(output_path, dpi=dpi)
    finally:
        plt.close(fig)

    logger.info(f"Saved water profile plot to {output_path}")
    return output_path
