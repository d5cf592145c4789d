"""Fixed-width integer helpers for reproducing two's-complement arithmetic."""

from __future__ import annotations

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF
INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1
INT64_MAX = (1 << 63) - 1

_MAGNITUDE_BITS = 0x7FFFFFFFFFFFFFFF


def to_int32(value: int) -> int:
    """Wrap ``value`` into the signed 32-bit range."""
    value &= MASK32
    return value - (1 << 32) if value > INT32_MAX else value


def to_int64(value: int) -> int:
    """Wrap ``value`` into the signed 64-bit range."""
    value &= MASK64
    return value - (1 << 64) if value > INT64_MAX else value


def arithmetic_shift_right(value: int, amount: int) -> int:
    """Sign-extending right shift of a signed 64-bit value.

    Only unsigned mask/shift/or operations are used: the magnitude bits are
    shifted logically and the vacated top ``amount + 1`` bits are refilled with
    ones for negative input.
    """
    if not 0 <= amount <= 63:
        raise ValueError(f"Shift amount must be in 0..63, got {amount}")

    bits = value & MASK64
    if to_int64(value) >= 0:
        return bits >> amount

    bits = (bits & _MAGNITUDE_BITS) >> amount
    fill = ((MASK64 >> (63 - amount)) << (63 - amount)) & MASK64
    return to_int64(bits | fill)
