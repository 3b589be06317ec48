"""
Geometric queries over a TileGrid: distance, line tracing and line of sight.

All functions are pure reads of the grid. Positions that fall off the map or
on empty cells are treated as "no tile", never as errors.
"""

import logging
from typing import Generic, List, Optional

from .grid import HexTile, T, TileGrid, tile_cube
from .hex_math import CubeCoordinate, Triple, cube_distance, cube_lerp, cube_round, cube_spiral

logger = logging.getLogger(__name__)

# Symmetric nudges for the two sight rays. Each sums to zero so the nudged
# endpoints stay on the x + y + z = 0 plane.
EPSILON_A: Triple = (1e-6, 1e-6, -2e-6)
EPSILON_B: Triple = (-1e-6, -1e-6, 2e-6)

def _nudged(tile: HexTile, eps: Triple) -> Triple:
    return (tile.cube_x + eps[0], tile.cube_y + eps[1], tile.cube_z + eps[2])

def distance(a: HexTile, b: HexTile) -> int:
    """Hex distance between two tiles, 0 when they share a cell."""
    return cube_distance(tile_cube(a), tile_cube(b))

def trace_line(grid: TileGrid[T], a: T, b: T) -> List[T]:
    """
    Returns the tiles on the straight line from a to b, both included.
    Cells along the line without a tile are skipped, so the result has at
    most distance(a, b) + 1 entries.
    """
    n = distance(a, b)
    step = 1.0 / max(n, 1)
    start, end = tile_cube(a), tile_cube(b)

    results = []
    for i in range(n + 1):
        cube = cube_round(*cube_lerp(start, end, step * i))
        tile = grid.get_cube(cube)
        if tile is not None:
            results.append(tile)
    return results

def _blocks(tile: Optional[HexTile], a: HexTile, b: HexTile) -> bool:
    return tile is not None and tile is not a and tile is not b and tile.is_opaque()

def is_line_of_sight(grid: TileGrid[T], a: T, b: T) -> bool:
    """
    True if nothing opaque stands between a and b.

    A single ray sampled exactly on a hex edge could round into either of
    the two cells sharing that edge. Two rays are cast instead, one nudged
    to each side of the edge, and a step only blocks when both rays land on
    an opaque tile. The endpoints themselves never block.
    """
    n = distance(a, b)
    step = 1.0 / max(n, 1)
    a1, b1 = _nudged(a, EPSILON_A), _nudged(b, EPSILON_A)
    a2, b2 = _nudged(a, EPSILON_B), _nudged(b, EPSILON_B)

    for i in range(1, n):
        t = step * i
        tile1 = grid.get_cube(cube_round(*cube_lerp(a1, b1, t)))
        tile2 = grid.get_cube(cube_round(*cube_lerp(a2, b2, t)))
        if _blocks(tile1, a, b) and _blocks(tile2, a, b):
            logger.debug(f"Sight from {tile_cube(a)} to {tile_cube(b)} blocked at step {i}")
            return False
    return True

class HexGeometry(Generic[T]):
    """Binds the geometric queries to one grid."""

    def __init__(self, grid: TileGrid[T]):
        self.grid = grid

    def get(self, cube: CubeCoordinate) -> Optional[T]:
        return self.grid.get_cube(cube)

    def distance(self, a: T, b: T) -> int:
        return distance(a, b)

    def trace_line(self, a: T, b: T) -> List[T]:
        return trace_line(self.grid, a, b)

    def is_line_of_sight(self, a: T, b: T) -> bool:
        return is_line_of_sight(self.grid, a, b)

    def visible_from(self, origin: T, radius: int) -> List[T]:
        """
        Tiles within radius of origin that origin can see, origin included.
        Order follows cube_spiral.
        """
        visible = []
        for cube in cube_spiral(tile_cube(origin), radius):
            tile = self.grid.get_cube(cube)
            if tile is not None and is_line_of_sight(self.grid, origin, tile):
                visible.append(tile)
        return visible
