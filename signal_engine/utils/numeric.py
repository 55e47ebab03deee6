"""Small numeric helpers shared by the scoring modules."""

from __future__ import annotations

import math


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going towards +infinity.

    Python's ``round()`` uses banker's rounding (``round(4.5) == 4``); the
    dashboard contract expects ``4.5 -> 5``.
    """
    return int(math.floor(value + 0.5))
