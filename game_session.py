"""
2048 Game Session
Owns the canonical board and drives it through new -> playing -> won / lost.
"""

import random
from typing import List, Optional

from game_2048 import (
    DIRECTIONS,
    Coordinate,
    Tile,
    Tiles,
    apply_direction,
    boards_equal,
    empty_cells,
    get_board_values,
    get_score,
    has_any_legal_move,
    has_winning_tile,
    init_grid,
    is_full,
    seed_initial_tiles,
    spawn_random_tile,
)

NEW = 'new'
PLAYING = 'playing'
WON = 'won'
LOST = 'lost'
TERMINAL_STATUSES = (WON, LOST)


class Game:
    """2048 game state"""

    def __init__(self, rng=None):
        self.rng = rng if rng is not None else random.Random()
        self.grid = init_grid()
        self.tiles: Tiles = {}
        self.status = NEW
        self.previous_grid = None
        self.has_moved = False
        self.is_locked = False
        self.moves = 0

    def start_game(self, count: Optional[int] = None):
        """Clear the board and seed the opening tiles (all of value 2)."""
        self.status = NEW
        self.previous_grid = None
        self.has_moved = False
        self.moves = 0
        self.grid, self.tiles = seed_initial_tiles(count, rng=self.rng)

    def reset_game(self):
        self.start_game()

    def set_lock(self, locked: bool):
        self.is_locked = locked

    def move(self, direction: str) -> bool:
        """
        Play a move. Return whether the grid changed.

        Moves are ignored while the game is won or lost, or while a suggestion
        request holds the input lock. A move that changes nothing still puts the
        game in the playing state.
        """
        if direction not in DIRECTIONS:
            raise ValueError(f"Invalid direction: {direction}. Must be one of {', '.join(DIRECTIONS)}")
        if self.status in TERMINAL_STATUSES or self.is_locked:
            return False

        self.previous_grid = self.grid
        result = apply_direction(self.grid, self.tiles, direction)
        self.grid, self.tiles = result.grid, result.tiles
        self.status = PLAYING
        self.moves += 1
        self.has_moved = True

        changed = not boards_equal(self.grid, self.previous_grid)
        self.reconcile()
        return changed

    def reconcile(self):
        """Spawn a tile after a real move, then look for a win or a loss."""
        if not self.has_moved:
            return

        if self.previous_grid is not None and not boards_equal(self.grid, self.previous_grid):
            self.grid, self.tiles = spawn_random_tile(self.grid, self.tiles, rng=self.rng)

        if has_winning_tile(self.tiles):
            self.status = WON
        elif is_full(self.grid) and not has_any_legal_move(self.grid, self.tiles):
            self.status = LOST

        self.has_moved = False

    def get_tiles(self) -> List[Tile]:
        return list(self.tiles.values())

    def get_tile_at_position(self, position: Coordinate) -> Optional[Tile]:
        x, y = position
        for tile in self.tiles.values():
            if tile.position == (x, y):
                return tile
        return None

    def get_current_board_values(self) -> List[List[Optional[int]]]:
        return get_board_values(self.grid, self.tiles)

    def get_empty_cells(self) -> List[Coordinate]:
        return empty_cells(self.grid)

    @property
    def score(self) -> int:
        return get_score(self.tiles)

    @property
    def is_over(self) -> bool:
        return self.status in TERMINAL_STATUSES
