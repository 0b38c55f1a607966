"""Shared fixtures: small grids and seeded random generators."""

import numpy as np
import pytest

from nav_world import Environment, Point


@pytest.fixture
def env10():
    """Empty 10x10 grid, start (0, 0), goal (9, 9)."""
    return Environment(10, 10, start=Point(0, 0), goal=Point(9, 9))


@pytest.fixture
def rng():
    return np.random.default_rng(42)
