"""
Pytest configuration and shared fixtures.
"""

import matplotlib
matplotlib.use("Agg")

import pytest
import numpy as np


@pytest.fixture
def small_config():
    """Configuration for a small closed 16x16 box rendered in 4x4 blocks."""
    from hppsim.core import SimulationConfig
    return SimulationConfig(
        width=16,
        height=16,
        downscale=4,
        iterations=10,
        frame_interval=5,
        colouring="density",
        seed=42,
    )


@pytest.fixture
def open_config():
    """Configuration for a 32x32 grid without edge walls."""
    from hppsim.core import SimulationConfig
    return SimulationConfig(
        width=32,
        height=32,
        downscale=4,
        edge_boundary=False,
        seed=7,
    )


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)
