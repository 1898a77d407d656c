from __future__ import annotations
import math
import random
from typing import Optional


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Restrict value to [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def random_uniform(a: float, b: float, rng: Optional[random.Random] = None) -> float:
    """Return a random float between a and b, agnostic to order."""
    lo, hi = (a, b) if a <= b else (b, a)
    return (rng or random).uniform(lo, hi)


def distance(ax: float, ay: float, bx: float, by: float) -> float:
    """Euclidean distance between (ax, ay) and (bx, by)."""
    return math.hypot(bx - ax, by - ay)
