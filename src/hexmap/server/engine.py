import logging
from typing import List

from hexmap.shared.geometry import HexGeometry
from hexmap.shared.grid import TileGrid
from hexmap.shared.hex_math import CubeCoordinate
from hexmap.shared.schemas import MapDefinition, MapSummary, TileState

logger = logging.getLogger(__name__)

class TileNotFound(LookupError):
    """No tile at the requested coordinate (empty cell or off the map)."""

class MapSession:
    """
    One populated map. The grid is filled once from the definition and only
    read afterwards, so a session can serve any number of queries.
    """

    def __init__(self, map_id: str, definition: MapDefinition):
        self.map_id = map_id
        self.config = definition.config
        self.grid: TileGrid[TileState] = TileGrid.from_tiles(definition.config, definition.tiles)
        self.geometry = HexGeometry(self.grid)
        logger.debug(f"Session {map_id} ready with {len(self.grid)} tiles")

    def summary(self) -> MapSummary:
        return MapSummary(
            map_id=self.map_id,
            width=self.config.width,
            height=self.config.height,
            tiles=len(self.grid)
        )

    def tile_at(self, cube: CubeCoordinate) -> TileState:
        """Tile at the coordinate. Raises TileNotFound when the cell is empty or off the map."""
        tile = self.geometry.get(cube)
        if tile is None:
            raise TileNotFound(f"No tile at {cube}")
        return tile

    def distance(self, a: CubeCoordinate, b: CubeCoordinate) -> int:
        return self.geometry.distance(self.tile_at(a), self.tile_at(b))

    def line(self, a: CubeCoordinate, b: CubeCoordinate) -> List[TileState]:
        return self.geometry.trace_line(self.tile_at(a), self.tile_at(b))

    def line_of_sight(self, a: CubeCoordinate, b: CubeCoordinate) -> bool:
        return self.geometry.is_line_of_sight(self.tile_at(a), self.tile_at(b))

    def neighbors(self, cube: CubeCoordinate) -> List[TileState]:
        return self.grid.neighbors(self.tile_at(cube))

    def visible(self, cube: CubeCoordinate, radius: int) -> List[TileState]:
        return self.geometry.visible_from(self.tile_at(cube), radius)
