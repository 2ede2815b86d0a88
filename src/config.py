"""Configuration module for the rainflow project.

Centralizes paths, physical constants and numerical tolerances.
"""
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# Output directory for plots (created on demand, never at import time)
OUTPUT_DIR = PROJECT_ROOT / "output"

# Rain falls uniformly: one unit of water per column per hour
RAIN_PER_HOUR = 1.0

# Packets smaller than this fraction of the total rain are treated as empty
PACKET_EPSILON_SCALE = 1e-9

# Two water levels closer than this fraction of the terrain scale are equal
LEVEL_TOLERANCE_SCALE = 1e-9

# Drive loop gives up after MAX_PASS_FACTOR * N + 1 passes
MAX_PASS_FACTOR = 4

# Interpreter frames reserved per terrain column while the engine recurses
RECURSION_FRAMES_PER_COLUMN = 4

# ASCII grid glyphs
TERRAIN_CHAR = "O"
WATER_CHAR = "x"
AIR_CHAR = " "

# Default settings
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_PLOT_DPI = 150
