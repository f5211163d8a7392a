"""Input adapters: turn raw keyboard/joystick state into a move intent.

The engine only accepts a direction vector of magnitude <= 1.  These
helpers are what a front end calls before ``set_move_intent()``.
"""

from __future__ import annotations

import math
from typing import Iterable

_UP = {"w", "arrowup"}
_DOWN = {"s", "arrowdown"}
_LEFT = {"a", "arrowleft"}
_RIGHT = {"d", "arrowright"}


def intent_from_keys(pressed: Iterable[str]) -> tuple[float, float]:
    """WASD / arrow keys to a unit (or zero) vector.  Opposite keys cancel."""
    keys = {k.lower() for k in pressed}
    dx = float(bool(keys & _RIGHT)) - float(bool(keys & _LEFT))
    dy = float(bool(keys & _DOWN)) - float(bool(keys & _UP))
    mag = math.hypot(dx, dy)
    if mag == 0:
        return (0.0, 0.0)
    return (dx / mag, dy / mag)


def intent_from_joystick(dx: float, dy: float) -> tuple[float, float]:
    """Virtual joystick drag (pixels from origin) to a unit vector.

    Any displacement moves at full speed in the drag direction.
    """
    distance = math.hypot(dx, dy)
    if distance == 0:
        return (0.0, 0.0)
    return (dx / distance, dy / distance)
