"""Pytest configuration and fixtures for rainflow tests."""
import sys
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest
import numpy as np


@pytest.fixture
def staircase_relief():
    """Monotonic rise from 1 to 9: all rain drains to the left wall."""
    return list(range(1, 10))


@pytest.fixture
def twin_basin_relief():
    """Two basins separated by a single peak."""
    return [3, 7, 4, 5, 3]


@pytest.fixture
def random_reliefs():
    """Seeded random reliefs of varying width and roughness."""
    rng = np.random.default_rng(20240611)
    reliefs = []
    for width in (1, 2, 3, 5, 8, 13, 21):
        for max_height in (3, 10):
            for _ in range(3):
                reliefs.append(rng.integers(0, max_height, size=width).tolist())
    return reliefs


@pytest.fixture
def project_root():
    """Get the project root directory."""
    return Path(__file__).parent.parent
