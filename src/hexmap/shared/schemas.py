from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .hex_math import CubeCoordinate
from .offset import cube_to_offset, in_bounds

# --- Configuration ---

class GridConfig(BaseModel):
    """
    Fixed dimensions of one map plus the pixel geometry of a single tile.
    Set once when the grid is built and read-only afterwards.
    """
    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    tile_width: int = Field(default=64, gt=0)
    tile_height: int = Field(default=64, gt=0)
    tile_slope: int = Field(default=16, ge=0) # Vertical overlap between rows

    @model_validator(mode='after')
    def check_slope(self):
        # Runs after defaults are filled in, so a default slope is checked too
        if self.tile_slope >= self.tile_height:
            raise ValueError('tile_slope must be smaller than tile_height')
        return self

    @property
    def render_width(self) -> int:
        return self.width * self.tile_width

    @property
    def render_height(self) -> int:
        return self.height * self.tile_height

    @property
    def row_pitch(self) -> int:
        """Vertical distance between the tops of two consecutive rows."""
        return self.tile_height - self.tile_slope

# --- Basic Primitives ---

class HexCoord(BaseModel):
    """
    Data Transfer Object for Cube coordinates.
    Maps to {"x": int, "y": int, "z": int} JSON.
    """
    x: int
    y: int
    z: int

    @model_validator(mode='after')
    def check_zero_sum(self):
        if self.x + self.y + self.z != 0:
            raise ValueError('cube coordinate must satisfy x + y + z == 0')
        return self

    def __hash__(self):
        return hash((self.x, self.y, self.z))

    def to_cube(self) -> CubeCoordinate:
        return CubeCoordinate(self.x, self.y, self.z)

    @classmethod
    def from_cube(cls, cube: CubeCoordinate) -> 'HexCoord':
        return cls(x=cube.x, y=cube.y, z=cube.z)

class TileState(HexCoord):
    """
    A concrete map tile. Grids keep the instance itself, so two TileStates
    with equal fields are still different tiles for line-of-sight purposes.
    """
    opaque: bool = False
    terrain: Optional[str] = None

    @property
    def cube_x(self) -> int:
        return self.x

    @property
    def cube_y(self) -> int:
        return self.y

    @property
    def cube_z(self) -> int:
        return self.z

    def is_opaque(self) -> bool:
        return self.opaque

# --- Map Definition ---

class MapDefinition(BaseModel):
    """
    Everything needed to populate a grid once: its configuration and the
    tiles, each placed at the cell its own cube coordinate maps to.
    """
    config: GridConfig
    tiles: List[TileState] = []

    @model_validator(mode='after')
    def check_tiles(self):
        seen = set()
        for tile in self.tiles:
            pos = cube_to_offset(tile.to_cube())
            if not in_bounds(pos, self.config.width, self.config.height):
                raise ValueError(f'tile ({tile.x}, {tile.y}, {tile.z}) lies outside the {self.config.width}x{self.config.height} grid')
            if pos in seen:
                raise ValueError(f'more than one tile at ({tile.x}, {tile.y}, {tile.z})')
            seen.add(pos)
        return self

# --- Query Results ---

class MapSummary(BaseModel):
    map_id: str
    width: int
    height: int
    tiles: int # Populated cells

class DistanceResult(BaseModel):
    a: HexCoord
    b: HexCoord
    distance: int

class SightResult(BaseModel):
    a: HexCoord
    b: HexCoord
    clear: bool

class TileList(BaseModel):
    tiles: List[TileState]
