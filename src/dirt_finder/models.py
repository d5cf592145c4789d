from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Facing(str, Enum):
    """Direction the player faces when reading rotations off the blocks."""

    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def offset(self) -> int:
        return _FACING_OFFSETS[self]


_FACING_OFFSETS = {Facing.NORTH: 0, Facing.EAST: 1, Facing.SOUTH: 2, Facing.WEST: 3}


class Direction(str, Enum):
    """Axis a simplified rotation list steps along."""

    X = "x"
    Y = "y"
    Z = "z"

    @property
    def stride(self) -> tuple[int, int, int]:
        return _DIRECTION_STRIDES[self]


_DIRECTION_STRIDES = {Direction.X: (1, 0, 0), Direction.Y: (0, 1, 0), Direction.Z: (0, 0, 1)}


@dataclass(frozen=True, slots=True)
class Coordinate:
    x: int
    y: int
    z: int


@dataclass(frozen=True, slots=True)
class Constraint:
    """Expected orientation at an offset from the candidate block."""

    dx: int
    dy: int
    dz: int
    rotation: int


@dataclass(frozen=True, slots=True)
class SearchVolume:
    """Inclusive axis-aligned box of block coordinates."""

    min_x: int
    max_x: int
    min_y: int
    max_y: int
    min_z: int
    max_z: int

    def __post_init__(self) -> None:
        if self.min_x > self.max_x or self.min_y > self.max_y or self.min_z > self.max_z:
            raise ValueError(f"Invalid block range: {self}")

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    @property
    def depth(self) -> int:
        return self.max_z - self.min_z + 1

    @property
    def volume(self) -> int:
        return self.width * self.height * self.depth

    def contains(self, coordinate: Coordinate) -> bool:
        return (
            self.min_x <= coordinate.x <= self.max_x
            and self.min_y <= coordinate.y <= self.max_y
            and self.min_z <= coordinate.z <= self.max_z
        )


@dataclass(frozen=True, slots=True)
class Partition:
    """Half-open linear index range ``[begin, end)`` scanned by one worker."""

    index: int
    begin: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.begin
