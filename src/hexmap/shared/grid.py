import logging
from typing import Generic, Iterable, Iterator, List, Optional, Protocol, TypeVar

from .hex_math import CubeCoordinate, cube_neighbors
from .offset import OffsetPosition, cube_to_offset, in_bounds
from .schemas import GridConfig

logger = logging.getLogger(__name__)

class HexTile(Protocol):
    """What the geometry needs from a tile owned by the caller."""
    cube_x: int
    cube_y: int
    cube_z: int

    def is_opaque(self) -> bool: ...

T = TypeVar("T", bound=HexTile)

def tile_cube(tile: HexTile) -> CubeCoordinate:
    return CubeCoordinate(tile.cube_x, tile.cube_y, tile.cube_z)

class TileGrid(Generic[T]):
    """
    Fixed-size rectangular store of optional tiles, addressed by odd-row
    offset positions.

    Tiles live in an arena list; each cell holds the arena handle of its tile
    or None. The grid never creates or copies tiles, it hands back the exact
    instances it was given.

    Populate once with set() (or build with from_tiles) before querying.
    Concurrent reads are fine afterwards; writes during reads are not.
    """

    def __init__(self, config: GridConfig):
        self.config = config
        self._tiles: List[T] = []
        self._cells: List[Optional[int]] = [None] * (config.width * config.height)
        logger.debug(f"Created {config.width}x{config.height} tile grid")

    @classmethod
    def empty(cls, width: int, height: int) -> 'TileGrid[T]':
        return cls(GridConfig(width=width, height=height))

    @classmethod
    def from_tiles(cls, config: GridConfig, tiles: Iterable[T]) -> 'TileGrid[T]':
        """Build a grid placing every tile at the cell its own cube coordinate maps to."""
        grid = cls(config)
        for tile in tiles:
            grid.set(cube_to_offset(tile_cube(tile)), tile)
        logger.debug(f"Populated {len(grid)} of {config.width * config.height} cells")
        return grid

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def _index(self, position: OffsetPosition) -> int:
        return position.row * self.config.width + position.col

    def set(self, position: OffsetPosition, tile: T) -> int:
        """Place a tile and return its arena handle. Replacing a tile reuses the cell's handle."""
        if not in_bounds(position, self.width, self.height):
            raise ValueError(f"{position} is outside the {self.width}x{self.height} grid")
        idx = self._index(position)
        handle = self._cells[idx]
        if handle is not None:
            self._tiles[handle] = tile
            return handle
        handle = len(self._tiles)
        self._tiles.append(tile)
        self._cells[idx] = handle
        return handle

    def get(self, position: OffsetPosition) -> Optional[T]:
        """Tile at the position, or None for empty and out-of-bounds cells."""
        if not in_bounds(position, self.width, self.height):
            return None
        handle = self._cells[self._index(position)]
        if handle is None:
            return None
        return self._tiles[handle]

    def get_cube(self, cube: CubeCoordinate) -> Optional[T]:
        return self.get(cube_to_offset(cube))

    def neighbors(self, tile: T) -> List[T]:
        """Tiles present in the six cells around the given tile."""
        found = []
        for cube in cube_neighbors(tile_cube(tile)):
            other = self.get_cube(cube)
            if other is not None:
                found.append(other)
        return found

    def __contains__(self, position: OffsetPosition) -> bool:
        return self.get(position) is not None

    def __iter__(self) -> Iterator[T]:
        for handle in self._cells:
            if handle is not None:
                yield self._tiles[handle]

    def __len__(self) -> int:
        return sum(1 for handle in self._cells if handle is not None)
