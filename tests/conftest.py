import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from game_2048 import create_tile, init_grid


@pytest.fixture
def make_board():
    """Build (grid, tiles) from a 4x4 array of values, None for empty cells."""
    def _make(values):
        grid, tiles = init_grid(), {}
        for y, row in enumerate(values):
            for x, value in enumerate(row):
                if value is not None:
                    grid, tiles = create_tile(grid, tiles, (x, y), value)
        return grid, tiles
    return _make


@pytest.fixture
def dead_board():
    return [
        [2, 4, 2, 4],
        [4, 2, 4, 2],
        [2, 4, 2, 4],
        [4, 2, 4, 2],
    ]
