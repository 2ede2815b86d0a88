"""Basic tests to verify project setup."""
import sys
from pathlib import Path
import pytest


def test_python_version():
    """Test that Python version is 3.9 or higher."""
    assert sys.version_info >= (3, 9), f"Python 3.9+ required, got {sys.version}"


def test_src_modules_importable():
    """Test that src modules can be imported."""
    try:
        from src import config
        from src.rainflow import FlowEngine, rain, simulate
        assert config.PROJECT_ROOT is not None
        assert callable(rain) and callable(simulate)
        assert FlowEngine is not None
    except ImportError as e:
        pytest.fail(f"Failed to import src modules: {e}")


def test_project_structure():
    """Test that expected project directories exist."""
    project_root = Path(__file__).parent.parent

    expected_dirs = [
        "src",
        "src/rainflow",
        "src/utils",
        "tests",
    ]

    for dir_path in expected_dirs:
        full_path = project_root / dir_path
        assert full_path.exists(), f"Expected directory {dir_path} not found"
