"""
Lane Picker - Seeded choice of the next forced-drop lane.

LaneRng is a 32-bit linear congruential generator held as a value:
every draw returns the number and the advanced generator, so the
caller owns the state and replays are exact.
"""

from __future__ import annotations
from dataclasses import dataclass
import time

from .state import LANE_COUNT

_MASK32 = 0xFFFFFFFF
_MULTIPLIER = 0x41C64E6D
_INCREMENT = 0x3039
_DRAW_RANGE = 0x8000


@dataclass(frozen=True)
class LaneRng:
    """Explicit generator state."""
    state: int = 0

    @classmethod
    def seeded(cls, seed: int) -> LaneRng:
        return cls(state=seed & _MASK32)

    @classmethod
    def from_clock(cls) -> LaneRng:
        return cls.seeded(time.time_ns() // 1_000_000)

    def next_state(self) -> LaneRng:
        return LaneRng(state=(self.state * _MULTIPLIER + _INCREMENT) & _MASK32)

    def next_int(self, bound: int) -> tuple[int, LaneRng]:
        """
        Draw an integer in [0, bound) from the high 15 bits.

        Draws from the uneven tail above the last full multiple of
        `bound` are thrown away, so every result is equally likely.
        """
        if not 0 < bound <= _DRAW_RANGE:
            raise ValueError(f"bound must be in 1..{_DRAW_RANGE}, got {bound}")
        limit = _DRAW_RANGE - _DRAW_RANGE % bound
        rng = self
        while True:
            rng = rng.next_state()
            value = (rng.state >> 16) & (_DRAW_RANGE - 1)
            if value < limit:
                return value % bound, rng


def pick_next_lane(
    rng: LaneRng, exclude: int | None = None, lane_count: int = LANE_COUNT
) -> tuple[int, LaneRng]:
    """
    Pick the next drop lane, never `exclude`.

    Returns (lane, advanced generator).
    """
    candidates = [lane for lane in range(lane_count) if lane != exclude]
    choice, rng = rng.next_int(len(candidates))
    return candidates[choice], rng
