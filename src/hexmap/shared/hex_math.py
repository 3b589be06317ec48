"""
Hexagonal Grid Math Library
System: Cube (x, y, z) with the constraint x + y + z = 0
Storage addressing lives in hexmap.shared.offset; this module never touches a grid.
"""

import math
from dataclasses import dataclass
from typing import Iterator, List, Tuple, Union

Triple = Tuple[float, float, float]

@dataclass(frozen=True, eq=True)
class CubeCoordinate:
    """
    Immutable Hexagon coordinate in Cube format.
    Frozen allows this to be used as dictionary keys (critical for map storage).
    """
    x: int
    y: int
    z: int

    def __post_init__(self):
        if self.x + self.y + self.z != 0:
            raise ValueError(f"Cube coordinate must sum to zero, got ({self.x}, {self.y}, {self.z})")

    def __add__(self, other: 'CubeCoordinate') -> 'CubeCoordinate':
        return CubeCoordinate(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: 'CubeCoordinate') -> 'CubeCoordinate':
        return CubeCoordinate(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, k: int) -> 'CubeCoordinate':
        return CubeCoordinate(self.x * k, self.y * k, self.z * k)

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def lerp(self, other: 'CubeCoordinate', t: float) -> Triple:
        return cube_lerp(self, other, t)

    def __repr__(self):
        return f"Cube({self.x}, {self.y}, {self.z})"

# --- Constants ---

# The 6 neighbors of a cube coordinate, walking counter-clockwise
CUBE_DIRECTIONS = [
    CubeCoordinate(1, -1, 0), CubeCoordinate(1, 0, -1), CubeCoordinate(0, 1, -1),
    CubeCoordinate(-1, 1, 0), CubeCoordinate(-1, 0, 1), CubeCoordinate(0, -1, 1)
]

# --- Core Math Functions ---

def cube_length(cube: CubeCoordinate) -> int:
    """Calculates the distance from (0,0,0) to the cube."""
    return (abs(cube.x) + abs(cube.y) + abs(cube.z)) // 2

def cube_distance(a: CubeCoordinate, b: CubeCoordinate) -> int:
    """
    Calculates the hex distance between two cube coordinates.
    Formula: (|dx| + |dy| + |dz|) / 2, exact because the sum is always even.
    """
    return cube_length(a - b)

def cube_neighbors(cube: CubeCoordinate) -> List[CubeCoordinate]:
    """Returns the 6 adjacent cubes."""
    return [cube + d for d in CUBE_DIRECTIONS]

# --- Interpolation & Rounding (Line drawing) ---

def _lerp(a: float, b: float, t: float) -> float:
    """Linear Interpolation between a and b."""
    return a + (b - a) * t

def _as_triple(value: Union[CubeCoordinate, Triple]) -> Triple:
    if isinstance(value, CubeCoordinate):
        return (float(value.x), float(value.y), float(value.z))
    return value

def cube_lerp(a: Union[CubeCoordinate, Triple], b: Union[CubeCoordinate, Triple], t: float) -> Triple:
    """
    Interpolates between two points in Cube space.
    The result is real valued and generally off the x + y + z = 0 plane's
    integer lattice; pass it through cube_round before any lookup.
    """
    ax, ay, az = _as_triple(a)
    bx, by, bz = _as_triple(b)
    return (
        _lerp(ax, bx, t),
        _lerp(ay, by, t),
        _lerp(az, bz, t)
    )

def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))

def cube_round(frac_x: float, frac_y: float, frac_z: float) -> CubeCoordinate:
    """
    Rounds floating point cube coordinates to the nearest valid integer cube.
    Maintains the constraint x + y + z = 0.
    """
    x = _round_half_up(frac_x)
    y = _round_half_up(frac_y)
    z = _round_half_up(frac_z)

    x_diff = abs(x - frac_x)
    y_diff = abs(y - frac_y)
    z_diff = abs(z - frac_z)

    # Reset the component with the largest change to satisfy constraint
    if x_diff > y_diff and x_diff > z_diff:
        x = -y - z
    elif y_diff > z_diff:
        y = -x - z
    else:
        z = -x - y

    return CubeCoordinate(x, y, z)

# --- Range & Area ---

def cube_spiral(center: CubeCoordinate, radius: int) -> Iterator[CubeCoordinate]:
    """
    Yields all cubes within a certain radius of the center (filled circle).
    Useful for 'Area of Effect' or visibility sweeps.
    """
    for dx in range(-radius, radius + 1):
        # dy loop bounds depend on dx to maintain hex shape
        y1 = max(-radius, -dx - radius)
        y2 = min(radius, -dx + radius)
        for dy in range(y1, y2 + 1):
            yield center + CubeCoordinate(dx, dy, -dx - dy)

def cube_ring(center: CubeCoordinate, radius: int) -> Iterator[CubeCoordinate]:
    """Yields only the cubes at exactly distance == radius."""
    if radius == 0:
        yield center
        return

    # Start at one corner and walk around
    current = center + (CUBE_DIRECTIONS[4] * radius)
    for i in range(6):
        for _ in range(radius):
            yield current
            current = current + CUBE_DIRECTIONS[i]
