"""48-bit linear congruential generator matching the game's ``Random``."""

from __future__ import annotations

from .bits import INT32_MAX, arithmetic_shift_right, to_int32, to_int64

MULTIPLIER = 0x5DEECE66D
ADDEND = 0xB
SEED_MASK = (1 << 48) - 1


class DeterministicGenerator:
    """Owns one 48-bit seed and advances it on every draw.

    Instances are cheap and meant to be created per coordinate; nothing is
    shared between them.
    """

    __slots__ = ("_seed",)

    def __init__(self, seed: int) -> None:
        self._seed = (to_int64(seed) ^ MULTIPLIER) & SEED_MASK

    @property
    def seed(self) -> int:
        return self._seed

    def next(self, bits: int) -> int:
        """Advance the state and return its top ``bits`` bits as a signed 32-bit int."""
        if not 1 <= bits <= 32:
            raise ValueError(f"bits must be in 1..32, got {bits}")
        self._seed = (self._seed * MULTIPLIER + ADDEND) & SEED_MASK
        return to_int32(arithmetic_shift_right(self._seed, 48 - bits))

    def next_int(self, bound: int | None = None) -> int:
        """Return a raw 32-bit draw, or a value in ``[0, bound)`` when ``bound`` is given."""
        if bound is None:
            return self.next(32)
        if bound <= 0 or bound > INT32_MAX:
            raise ValueError(f"bound must be a positive 32-bit int, got {bound}")

        if bound & -bound == bound:
            return to_int32((bound * self.next(31)) >> 31)

        while True:
            bits = self.next(31)
            val = bits % bound
            # Redraw exactly when the reference's 32-bit sum would overflow.
            if bits - val + (bound - 1) <= INT32_MAX:
                return val

    def next_long(self) -> int:
        """Return a signed 64-bit value built from two 32-bit draws."""
        high = self.next(32)
        low = self.next(32)
        return to_int64((high << 32) + low)

