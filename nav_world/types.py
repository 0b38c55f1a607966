# =============================================================================
# World Model - Types and Data Structures
# =============================================================================
# Planar coordinates, velocity vectors and the grid extent shared by every
# layer (world, planning, simulation).
# =============================================================================

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .config import INVALID_COORD, POINT_EPSILON, VECTOR_EPSILON


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


# =============================================================================
# Point
# =============================================================================

@dataclass(frozen=True, eq=False)
class Point:
    """
    Real-valued 2D coordinate.

    Used both for continuous agent / obstacle positions and for grid cells
    (a cell is the lattice point its coordinates round to). Equality is
    distance based so near-duplicate float coordinates compare equal.
    """
    x: float
    y: float

    def __eq__(self, other) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.distance_to(other) < POINT_EPSILON

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def distance_to(self, other: "Point") -> float:
        return float(np.hypot(self.x - other.x, self.y - other.y))

    def grid_cell(self) -> Tuple[int, int]:
        """Integer cell this point rounds to."""
        return round_half_away(self.x), round_half_away(self.y)

    def to_grid_cell(self) -> "Point":
        cx, cy = self.grid_cell()
        return Point(float(cx), float(cy))

    def offset(self, vel: "Vector2D", dt: float) -> "Point":
        """Position after moving with `vel` for `dt` seconds."""
        return Point(self.x + vel.x * dt, self.y + vel.y * dt)

    def is_valid(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    @classmethod
    def from_cell(cls, cell: Tuple[int, int]) -> "Point":
        return cls(float(cell[0]), float(cell[1]))


# Unset start / goal marker
INVALID_POINT = Point(INVALID_COORD, INVALID_COORD)


# =============================================================================
# Vector2D
# =============================================================================

@dataclass(frozen=True)
class Vector2D:
    """Direction or velocity in the plane."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2D":
        return Vector2D(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector2D":
        return Vector2D(-self.x, -self.y)

    @property
    def length(self) -> float:
        return float(np.hypot(self.x, self.y))

    @property
    def heading(self) -> float:
        """Direction angle in radians (0 for the zero vector)."""
        return float(np.arctan2(self.y, self.x))

    def normalized(self) -> "Vector2D":
        norm = self.length
        if norm < VECTOR_EPSILON:
            return Vector2D(0.0, 0.0)
        return Vector2D(self.x / norm, self.y / norm)

    def dot(self, other: "Vector2D") -> float:
        return self.x * other.x + self.y * other.y

    def clamped(self, max_length: float) -> "Vector2D":
        """Same direction, length limited to `max_length`."""
        norm = self.length
        if norm <= max_length or norm < VECTOR_EPSILON:
            return self
        return self * (max_length / norm)

    @classmethod
    def from_polar(cls, magnitude: float, angle: float) -> "Vector2D":
        return cls(magnitude * float(np.cos(angle)), magnitude * float(np.sin(angle)))

    @classmethod
    def between(cls, origin: Point, target: Point) -> "Vector2D":
        return cls(target.x - origin.x, target.y - origin.y)


# =============================================================================
# Grid
# =============================================================================

@dataclass(frozen=True)
class Grid:
    """
    Rectangular lattice of `width x height` cells.

    A continuous point is in bounds when its rounded cell is.
    """
    width: int
    height: int

    def contains_cell(self, cx: int, cy: int) -> bool:
        return 0 <= cx < self.width and 0 <= cy < self.height

    def contains(self, p: Point) -> bool:
        if not p.is_valid():
            return False
        return self.contains_cell(*p.grid_cell())

    def x_in_bounds(self, x: float) -> bool:
        return 0 <= round_half_away(x) < self.width

    def y_in_bounds(self, y: float) -> bool:
        return 0 <= round_half_away(y) < self.height

    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, cols) shape for occupancy arrays."""
        return self.height, self.width
