"""Spatial helpers: distance, overlap tests, random placement, grid snapping.

Every entity in the simulation exposes ``x``, ``y`` (its centre) and
``size`` (its diameter), so these helpers take any such object.

Nearest-target contract
-----------------------
``nearest()`` is a linear scan that keeps the first candidate on equal
distance.  Creature targeting, helper targeting, tower aiming and spell
aiming all go through it, and tests rely on the first-wins tie-break, so
do not swap it for a sort or a spatial index without keeping that order.
"""

from __future__ import annotations

import math
import random
from typing import Iterable, Protocol, Sequence, TypeVar


class Placed(Protocol):
    x: float
    y: float
    size: float


P = TypeVar("P", bound=Placed)

# Extra clearance between randomly placed objects
PLACEMENT_MARGIN = 20.0

# Rejection-sampling attempts before giving up on a placement
MAX_PLACEMENT_ATTEMPTS = 100


def distance(a: Placed, b: Placed) -> float:
    """Euclidean distance between the centres of two objects."""
    return math.hypot(a.x - b.x, a.y - b.y)


def distance_to(a: Placed, x: float, y: float) -> float:
    return math.hypot(a.x - x, a.y - y)


def touching(a: Placed, b: Placed) -> bool:
    """True when two objects are closer than their combined half-sizes."""
    return distance(a, b) < a.size / 2 + b.size / 2


def overlaps(
    x: float,
    y: float,
    size: float,
    existing: Iterable[Placed],
    margin: float = PLACEMENT_MARGIN,
) -> bool:
    """True if any existing object's centre is too close to (x, y)."""
    return any(
        math.hypot(x - obj.x, y - obj.y) < (size + obj.size) / 2 + margin
        for obj in existing
    )


def place_random(
    size: float,
    existing: Sequence[Placed],
    width: float,
    height: float,
    rng: random.Random | None = None,
    max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
) -> tuple[float, float] | None:
    """Rejection-sample a free position inside the world.

    The sampled centre is inset by ``size / 2`` from every edge.  Returns
    None when ``max_attempts`` samples all overlap something; callers
    treat that as "place fewer", never as an error.
    """
    rng = rng or random
    for _ in range(max_attempts):
        x = rng.random() * (width - size) + size / 2
        y = rng.random() * (height - size) + size / 2
        if not overlaps(x, y, size, existing):
            return (x, y)
    return None


def snap_to_grid(value: float, grid_size: float) -> float:
    """Round a coordinate to the nearest multiple of ``grid_size``.

    Halves round up (25 -> 50 on a 50 grid), not to even.
    """
    return math.floor(value / grid_size + 0.5) * grid_size


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def nearest(origin: Placed, candidates: Iterable[P]) -> P | None:
    """Return the candidate closest to *origin* (first wins ties)."""
    best: P | None = None
    best_dist = float("inf")
    for candidate in candidates:
        d = distance(origin, candidate)
        if d < best_dist:
            best = candidate
            best_dist = d
    return best


def nearest_within(origin: Placed, candidates: Iterable[P], radius: float) -> P | None:
    """Nearest candidate strictly closer than *radius*, or None."""
    return nearest(origin, (c for c in candidates if distance(origin, c) < radius))
