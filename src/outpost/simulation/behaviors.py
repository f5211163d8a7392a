"""UnitBehaviors -- movement and target selection for every mobile entity.

Architecture
------------
There is no per-unit state machine.  Each tick every creature and helper
re-picks a single target from the live collections and takes one step of
``speed`` units straight at it:

  - Creatures: nearest of {player, walls, towers}.  Traps are not targets.
  - Helpers: nearest creature within HELPER_AGGRO_RANGE, otherwise the
    nearest resource node.

Targets are returned as (unit, target) pairs for the combat resolver to
use in the same tick; nothing keeps a reference across ticks, so a target
removed mid-tick can never be dangling on the next one.

Steps are blocked, not clamped: if the destination overlaps any creature
(other than the mover) the unit stays where it is.  The player is exempt
from this check and only clamped to the world rectangle.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable

from .spatial import Placed, clamp, nearest, nearest_within

if TYPE_CHECKING:
    from .entities import Creature, Helper
    from .world import WorldState

# Helpers switch from harvesting to fighting inside this radius
HELPER_AGGRO_RANGE = 100.0

# Structure types creatures will walk toward and attack
CREATURE_TARGET_TYPES = ("wall", "tower")


def is_blocked(
    x: float,
    y: float,
    size: float,
    creatures: Iterable[Creature],
    exclude: object | None = None,
) -> bool:
    """True if a body of *size* at (x, y) would overlap any creature."""
    return any(
        c is not exclude and math.hypot(x - c.x, y - c.y) < (size + c.size) / 2
        for c in creatures
    )


def step_toward(unit: Placed, speed: float, target: Placed) -> tuple[float, float]:
    """Position one step of *speed* from *unit* toward *target*."""
    angle = math.atan2(target.y - unit.y, target.x - unit.x)
    return (unit.x + math.cos(angle) * speed, unit.y + math.sin(angle) * speed)


def normalize_intent(dx: float, dy: float) -> tuple[float, float]:
    """Clamp a move intent to magnitude <= 1, keeping its direction."""
    mag = math.hypot(dx, dy)
    if mag > 1.0:
        return (dx / mag, dy / mag)
    return (dx, dy)


class UnitBehaviors:
    """Moves the player, creatures and helpers for one tick."""

    def move_player(self, world: WorldState, intent: tuple[float, float]) -> None:
        """Apply the move intent, then clamp to the world rectangle.

        Diagonal input is normalized so it is no faster than a single axis.
        """
        player = world.player
        dx, dy = normalize_intent(*intent)
        if dx == 0.0 and dy == 0.0:
            return
        player.x = clamp(player.x + dx * player.speed, 0.0, world.width)
        player.y = clamp(player.y + dy * player.speed, 0.0, world.height)

    def tick_creatures(self, world: WorldState) -> list[tuple[Creature, Placed]]:
        """Step every creature toward its nearest target.

        Returns (creature, target) pairs for contact resolution.
        """
        engaged: list[tuple[Creature, Placed]] = []
        structures = [s for s in world.structures if s.type in CREATURE_TARGET_TYPES]
        candidates: list[Placed] = [world.player, *structures]
        for creature in world.creatures:
            target = nearest(creature, candidates)
            if target is None:
                continue
            nx, ny = step_toward(creature, creature.speed, target)
            if not is_blocked(nx, ny, creature.size, world.creatures, exclude=creature):
                creature.x, creature.y = nx, ny
            engaged.append((creature, target))
        return engaged

    def tick_helpers(self, world: WorldState) -> list[tuple[Helper, Placed]]:
        """Step every helper toward a nearby creature or the nearest node."""
        engaged: list[tuple[Helper, Placed]] = []
        for helper in world.helpers:
            target: Placed | None = nearest_within(helper, world.creatures, HELPER_AGGRO_RANGE)
            if target is None:
                target = nearest(helper, world.resource_nodes)
            if target is None:
                continue
            nx, ny = step_toward(helper, helper.speed, target)
            if not is_blocked(nx, ny, helper.size, world.creatures):
                helper.x, helper.y = nx, ny
            engaged.append((helper, target))
        return engaged
