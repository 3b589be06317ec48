"""
Odd-row offset addressing for the rectangular tile store.

row = x
col = z + (x - (x & 1)) / 2

Every odd row is shifted half a tile. The mapping is a bijection between the
cube lattice and integer (col, row) pairs, so it round-trips for any position;
bounds only matter when a grid is indexed.
"""

from dataclasses import dataclass

from .hex_math import CubeCoordinate

@dataclass(frozen=True, eq=True)
class OffsetPosition:
    """Storage address (column, row) into a TileGrid."""
    col: int
    row: int

    def __repr__(self):
        return f"Offset({self.col}, {self.row})"

def cube_to_offset(cube: CubeCoordinate) -> OffsetPosition:
    # x - (x & 1) is always even, so the floor division is exact
    col = cube.z + (cube.x - (cube.x & 1)) // 2
    row = cube.x
    return OffsetPosition(col, row)

def offset_to_cube(position: OffsetPosition) -> CubeCoordinate:
    x = position.row
    z = position.col - (position.row - (position.row & 1)) // 2
    return CubeCoordinate(x, -x - z, z)

def in_bounds(position: OffsetPosition, width: int, height: int) -> bool:
    """Return True if the position lies inside a width x height store."""
    return 0 <= position.col < width and 0 <= position.row < height
