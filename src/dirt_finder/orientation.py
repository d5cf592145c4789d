"""Per-block orientation lookup (the rotation a textured top face is drawn with)."""

from __future__ import annotations

from .bits import to_int32
from .generator import DeterministicGenerator
from .position import position_hash

ORIENTATION_COUNT = 4
NO_ORIENTATION = -1


def select_weighted_index(total_weight: int, weight: int) -> int:
    """Walk unit-weighted entries until ``weight`` is used up.

    Returns ``NO_ORIENTATION`` when the walk runs past ``total_weight``.
    """
    for index in range(total_weight):
        weight -= 1
        if weight < 0:
            return index
    return NO_ORIENTATION


def _int32_abs(value: int) -> int:
    return to_int32(abs(value))


def _int32_rem(value: int, divisor: int) -> int:
    remainder = abs(value) % divisor
    return remainder if value >= 0 else -remainder


def orientation(x: int, y: int, z: int) -> int:
    """Return the orientation (0..3) of the block at ``(x, y, z)``."""
    generator = DeterministicGenerator(position_hash(x, y, z))
    weight = _int32_rem(_int32_abs(to_int32(generator.next_long())), ORIENTATION_COUNT)
    return select_weighted_index(ORIENTATION_COUNT, weight)
