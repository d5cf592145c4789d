"""Orientation patterns a candidate block has to satisfy."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .models import Constraint, Coordinate, Direction, Facing
from .orientation import ORIENTATION_COUNT, orientation


def rotation_constraints(rotations: Iterable[int], direction: Direction) -> list[Constraint]:
    sx, sy, sz = direction.stride
    return [Constraint(dx=i * sx, dy=i * sy, dz=i * sz, rotation=r) for i, r in enumerate(rotations)]


@dataclass(frozen=True, slots=True)
class Predicate:
    """Ordered conjunction of constraints; all must hold for a match.

    Instances are immutable and handed to every worker as-is.
    """

    constraints: tuple[Constraint, ...]

    def __post_init__(self) -> None:
        if not self.constraints:
            raise ValueError("Predicate must contain at least one constraint")

    @classmethod
    def of(cls, constraints: Iterable[Constraint]) -> Predicate:
        return cls(tuple(constraints))

    @classmethod
    def from_rotations(cls, rotations: Iterable[int], direction: Direction = Direction.Y) -> Predicate:
        """Expand a flat rotation list into unit steps along ``direction``.

        Step 0 is the candidate itself.
        """
        return cls(tuple(rotation_constraints(rotations, direction)))

    def normalized(self, facing: Facing) -> Predicate:
        """Rotate every expected orientation into the frame the hash encodes."""
        offset = facing.offset
        return Predicate(
            tuple(
                Constraint(c.dx, c.dy, c.dz, (c.rotation + offset) % ORIENTATION_COUNT)
                for c in self.constraints
            )
        )

    def matches_at(self, x: int, y: int, z: int) -> bool:
        for c in self.constraints:
            if orientation(x + c.dx, y + c.dy, z + c.dz) != c.rotation:
                return False
        return True

    def __len__(self) -> int:
        return len(self.constraints)


def matches(candidate: Coordinate, predicate: Predicate) -> bool:
    """Return ``True`` when every constraint holds around ``candidate``."""
    return predicate.matches_at(candidate.x, candidate.y, candidate.z)
