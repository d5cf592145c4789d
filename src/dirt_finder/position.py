"""Coordinate to seed hash used for per-block visual randomness."""

from __future__ import annotations

from .bits import arithmetic_shift_right, to_int32, to_int64


def position_hash(x: int, y: int, z: int) -> int:
    """Return the signed 64-bit seed for the block at ``(x, y, z)``.

    Coordinates are 32-bit ints in the reference engine, so they are wrapped
    first and ``x * 3129871`` overflows in 32 bits before being widened.
    """
    x, y, z = to_int32(x), to_int32(y), to_int32(z)
    i = to_int64(to_int32(x * 3129871) ^ (z * 116129781) ^ y)
    i = to_int64(i * i * 42317861 + i * 11)
    return arithmetic_shift_right(i, 16)
