"""Shared fixtures for the maze test suite."""

import pytest

from qmaze.domain.learner import QLearner
from qmaze.domain.types import MazeConfig
from qmaze.utils.grid_factory import create_open_grid, grid_from_layout
from qmaze.utils.rng import SeededRNG

# Agent at (1, 1) is walled in on all four sides
ENCLOSED_LAYOUT = [
    ".#.",
    "#S#",
    ".#G",
]


@pytest.fixture
def open_grid():
    """3x3 grid without walls, goal at (2, 2)."""
    return create_open_grid(3)


@pytest.fixture
def make_learner():
    """Build a learner on a fresh open 3x3 grid (or a given grid)."""
    def _make(grid=None, start=(0, 0), seed=0, **config_kwargs):
        config = MazeConfig(grid_size=3, seed=seed, **config_kwargs)
        if grid is None:
            grid = create_open_grid(3)
        return QLearner(grid, config, start, rng=SeededRNG(seed))
    return _make


@pytest.fixture
def enclosed_grid():
    return grid_from_layout(ENCLOSED_LAYOUT)


@pytest.fixture(scope="session")
def qapp():
    """A QCoreApplication so QTimer can be armed."""
    from PySide6.QtCore import QCoreApplication
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
