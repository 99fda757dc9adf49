"""
Stateless 2048 Board Engine
Pure functions over a grid of tile ids and a map of tile records.
Nothing here mutates its inputs.
"""

import itertools
import random
from dataclasses import dataclass, replace
from typing import Dict, List, NamedTuple, Optional, Tuple

SIZE = 4
WINNING_VALUE = 2048
MIN_INITIAL_TILES = 2
MAX_INITIAL_TILES = 16
DIRECTIONS = ('up', 'down', 'left', 'right')

Coordinate = Tuple[int, int]
Grid = List[List[Optional[str]]]


@dataclass(frozen=True)
class Tile:
    id: str
    position: Coordinate  # (column, row)
    value: int


Tiles = Dict[str, Tile]


class MoveResult(NamedTuple):
    grid: Grid
    tiles: Tiles
    tile_ids: List[str]


_tile_ids = itertools.count(1)


def _next_tile_id() -> str:
    return f"t{next(_tile_ids)}"


def init_grid() -> Grid:
    """
    Create an empty 4x4 grid.

    Returns:
        4x4 grid (list of lists) with every cell set to None
    """
    return [[None] * SIZE for _ in range(SIZE)]


def copy_grid(grid: Grid) -> Grid:
    return [row[:] for row in grid]


def boards_equal(a: Grid, b: Grid) -> bool:
    """Compare two grids cell by cell on tile ids."""
    return all(a[y][x] == b[y][x] for y in range(SIZE) for x in range(SIZE))


def sanitize_tiles(grid: Grid, tiles: Tiles) -> Tiles:
    """
    Drop every tile record whose id is no longer on the grid.

    Args:
        grid: Grid after a move
        tiles: Tile records, possibly holding absorbed tiles

    Returns:
        New mapping with only live tiles, in the input order
    """
    live = {tile_id for row in grid for tile_id in row if tile_id is not None}
    return {tile_id: tile for tile_id, tile in tiles.items() if tile_id in live}


def _lines(direction: str) -> List[List[Coordinate]]:
    # Each line lists its cells starting from the edge tiles slide towards.
    forward = list(range(SIZE))
    backward = forward[::-1]

    if direction == 'left':
        return [[(x, y) for x in forward] for y in forward]
    if direction == 'right':
        return [[(x, y) for x in backward] for y in forward]
    if direction == 'up':
        return [[(x, y) for y in forward] for x in forward]
    if direction == 'down':
        return [[(x, y) for y in backward] for x in forward]

    raise ValueError(f"Invalid direction: {direction}. Must be 'left', 'right', 'up', or 'down'")


def _compact_line(line: List[Coordinate], grid: Grid, tiles: Tiles,
                  new_grid: Grid, new_tiles: Tiles) -> None:
    """
    Slide and merge the tiles of one line into new_grid / new_tiles.

    A tile that has just merged is no longer a merge candidate, so a line of
    [2, 2, 2, 2] becomes [4, 4] and [2, 2, 2] becomes [4, 2].
    """
    last_id = None
    slot = 0

    for x, y in line:
        tile_id = grid[y][x]
        if tile_id is None:
            continue

        tile = tiles[tile_id]

        if last_id is not None and new_tiles[last_id].value == tile.value:
            survivor = new_tiles[last_id]
            new_tiles[last_id] = replace(survivor, value=survivor.value * 2)
            # The absorbed tile shares the survivor's cell until it is sanitized away.
            new_tiles[tile_id] = replace(tile, position=survivor.position)
            last_id = None
            continue

        new_x, new_y = line[slot]
        new_grid[new_y][new_x] = tile_id
        new_tiles[tile_id] = replace(tile, position=(new_x, new_y))
        last_id = tile_id
        slot += 1


def apply_direction(grid: Grid, tiles: Tiles, direction: str) -> MoveResult:
    """
    Slide and merge every line of the grid in the given direction.

    Args:
        grid: Current 4x4 grid of tile ids
        tiles: Tile records for every id on the grid
        direction: One of 'left', 'right', 'up', 'down'

    Returns:
        MoveResult with the new grid, the surviving tile records and their ids
    """
    new_grid = init_grid()
    new_tiles: Tiles = {}

    for line in _lines(direction):
        _compact_line(line, grid, tiles, new_grid, new_tiles)

    # Keep the caller's order so tiles stay listed in creation order.
    ordered = {tile_id: new_tiles[tile_id] for tile_id in tiles if tile_id in new_tiles}
    survivors = sanitize_tiles(new_grid, ordered)

    return MoveResult(new_grid, survivors, list(survivors))


def has_any_legal_move(grid: Grid, tiles: Tiles) -> bool:
    """
    Check if any move is possible from the current state.

    Args:
        grid: Current 4x4 grid
        tiles: Tile records for the grid

    Returns:
        True if at least one direction changes the grid, False otherwise
    """
    for direction in DIRECTIONS:
        if not boards_equal(apply_direction(grid, tiles, direction).grid, grid):
            return True
    return False


def has_winning_tile(tiles: Tiles) -> bool:
    return any(tile.value >= WINNING_VALUE for tile in tiles.values())


def empty_cells(grid: Grid) -> List[Coordinate]:
    return [(x, y) for y in range(SIZE) for x in range(SIZE) if grid[y][x] is None]


def is_full(grid: Grid) -> bool:
    return not empty_cells(grid)


def create_tile(grid: Grid, tiles: Tiles, position: Coordinate, value: int) -> Tuple[Grid, Tiles]:
    """
    Place a new tile with a fresh id on an empty cell.

    Args:
        grid: Current grid
        tiles: Current tile records
        position: (column, row) of an empty cell
        value: Tile value

    Returns:
        Tuple of (new grid, new tile records)
    """
    x, y = position
    if not (0 <= x < SIZE and 0 <= y < SIZE):
        raise ValueError(f"Position {position} is outside the board")
    if grid[y][x] is not None:
        raise ValueError(f"Position {position} is already occupied by {grid[y][x]}")

    tile_id = _next_tile_id()
    new_grid = copy_grid(grid)
    new_grid[y][x] = tile_id

    new_tiles = dict(tiles)
    new_tiles[tile_id] = Tile(id=tile_id, position=(x, y), value=value)

    return new_grid, new_tiles


def spawn_random_tile(grid: Grid, tiles: Tiles, rng=random) -> Tuple[Grid, Tiles]:
    """
    Add a random tile (2 or 4, equally likely) to a random empty cell.
    Returns the inputs unchanged if the board is full.

    Args:
        grid: Current grid
        tiles: Current tile records
        rng: Source of randomness (the random module or a random.Random)
    """
    candidates = empty_cells(grid)
    if not candidates:
        return grid, tiles

    position = rng.choice(candidates)
    value = 2 if rng.random() < 0.5 else 4
    return create_tile(grid, tiles, position, value)


def seed_initial_tiles(count: Optional[int] = None, rng=random) -> Tuple[Grid, Tiles]:
    """
    Build a fresh board with `count` tiles of value 2 on distinct cells.

    Args:
        count: Number of tiles; drawn uniformly from [2, 16] when omitted
        rng: Source of randomness

    Returns:
        Tuple of (grid, tile records)
    """
    if count is None:
        count = rng.randint(MIN_INITIAL_TILES, MAX_INITIAL_TILES)
    if not 0 <= count <= SIZE * SIZE:
        raise ValueError(f"Cannot seed {count} tiles on a {SIZE}x{SIZE} board")

    grid = init_grid()
    tiles: Tiles = {}
    cells = [(x, y) for y in range(SIZE) for x in range(SIZE)]
    for position in rng.sample(cells, count):
        grid, tiles = create_tile(grid, tiles, position, 2)

    return grid, tiles


def get_board_values(grid: Grid, tiles: Tiles) -> List[List[Optional[int]]]:
    """Resolve each cell to its tile value, or None when empty."""
    return [
        [tiles[tile_id].value if tile_id is not None else None for tile_id in row]
        for row in grid
    ]


def get_score(tiles: Tiles) -> int:
    """
    Calculate the score (sum of all tiles).

    Args:
        tiles: Tile records on the board

    Returns:
        Total score
    """
    return sum(tile.value for tile in tiles.values())


def display(board_values: List[List[Optional[int]]]) -> str:
    """
    Display the board values as a markdown table.

    Args:
        board_values: 4x4 values with None for empty cells
    """
    res = ''
    for row in board_values:
        res += "| " + " | ".join(f"{val if val else '':^4}" for val in row) + " |\n"

    score = sum(val for row in board_values for val in row if val)
    res += f"\nScore: {score}"

    return res
