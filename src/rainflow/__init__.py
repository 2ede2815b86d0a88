"""
Rainfall pooling over a one-dimensional relief.

Core functionality:
- Column and Terrain: walled relief of columns compared by water level
- RainBank: rain pending above each column
- FlowEngine: topology-driven redistribution of rain into equilibrium
- rain / simulate: one-call API from relief and hours to settled water
- Text and matplotlib rendering of the settled state
"""

from .column import Column, compare_levels
from .rain_bank import RainBank
from .terrain import Terrain
from .flow import (
    ConvergenceError,
    FlowClassificationError,
    FlowEngine,
    RainfallResult,
    Topology,
    rain,
    simulate,
)
from .display import format_report, format_state, render_grid
from .cli import InputError

__all__ = [
    "Column",
    "compare_levels",
    "RainBank",
    "Terrain",
    "ConvergenceError",
    "FlowClassificationError",
    "FlowEngine",
    "RainfallResult",
    "Topology",
    "rain",
    "simulate",
    "format_report",
    "format_state",
    "render_grid",
    "InputError",
]
