"""EconomySystem: build costs, hiring, and upgrade levels.

Every command here is cost-gated: the wallet is checked before anything is
debited, so resource counters never go negative.  Rejections (can't
afford, cell occupied, level capped) return False and change nothing.

Upgrading walls or towers is retroactive: every existing structure of that
type gets the new max hp and a fixed heal, capped at the new max.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from loguru import logger

from .entities import STRUCTURE_TYPES, Helper, Structure
from .spatial import snap_to_grid

if TYPE_CHECKING:
    from outpost.comms.event_bus import EventBus
    from .world import WorldState

BUILD_COSTS: dict[str, dict[str, int]] = {
    "wall": {"wood": 10, "stone": 10},
    "tower": {"wood": 20, "stone": 20, "gold": 10},
    "trap": {"wood": 15, "gold": 5},
}

HIRE_COST: dict[str, int] = {"gold": 100}

UPGRADE_COSTS: dict[str, dict[str, int]] = {
    "weapon": {"gold": 50},
    "wall": {"gold": 20},
    "tower": {"gold": 30},
}

MAX_LEVEL = 5
UPGRADE_HEAL = 50.0

WALL_SIZE = 50.0
TOWER_SIZE = 50.0
TRAP_SIZE = 40.0
TRAP_HP = 150.0

# Hired helpers appear within this offset of the player
HELPER_SPAWN_JITTER = 25.0


def wall_max_hp(level: int) -> float:
    return 50.0 + 50.0 * level


def tower_max_hp(level: int) -> float:
    return 75.0 + 50.0 * level


def make_structure(structure_type: str, x: float, y: float,
                   wall_level: int = 1, tower_level: int = 1) -> Structure:
    """Create a structure with stats for the current upgrade levels."""
    if structure_type == "wall":
        hp = wall_max_hp(wall_level)
        return Structure("wall", x, y, size=WALL_SIZE, hp=hp, max_hp=hp)
    if structure_type == "tower":
        hp = tower_max_hp(tower_level)
        return Structure("tower", x, y, size=TOWER_SIZE, hp=hp, max_hp=hp)
    if structure_type == "trap":
        return Structure("trap", x, y, size=TRAP_SIZE, hp=TRAP_HP, max_hp=TRAP_HP)
    raise ValueError(f"unknown structure type: {structure_type!r}")


class EconomySystem:
    """Applies build, hire, and upgrade commands to a WorldState."""

    def __init__(self, event_bus: EventBus, rng: random.Random) -> None:
        self._event_bus = event_bus
        self._rng = rng

    def build(self, world: WorldState, structure_type: str) -> Structure | None:
        """Build at the player's grid-snapped position.

        Returns the new Structure, or None if the cell is taken or the
        player cannot afford it.
        """
        if structure_type not in STRUCTURE_TYPES:
            raise ValueError(f"unknown structure type: {structure_type!r}")
        player = world.player
        gx = snap_to_grid(player.x, world.grid_size)
        gy = snap_to_grid(player.y, world.grid_size)
        if world.structure_at(gx, gy) is not None:
            return None
        if not player.wallet.spend(BUILD_COSTS[structure_type]):
            return None

        structure = make_structure(
            structure_type, gx, gy,
            wall_level=world.wall_level, tower_level=world.tower_level,
        )
        world.structures.append(structure)
        logger.debug(f"Built {structure_type} at ({gx:.0f}, {gy:.0f})")
        self._event_bus.publish("structure_built", {
            "id": structure.id,
            "type": structure_type,
            "position": {"x": gx, "y": gy},
        })
        return structure

    def hire_helper(self, world: WorldState) -> Helper | None:
        player = world.player
        if not player.wallet.spend(HIRE_COST):
            return None
        helper = Helper(
            x=player.x + self._rng.random() * 2 * HELPER_SPAWN_JITTER - HELPER_SPAWN_JITTER,
            y=player.y + self._rng.random() * 2 * HELPER_SPAWN_JITTER - HELPER_SPAWN_JITTER,
        )
        world.helpers.append(helper)
        logger.debug(f"Hired helper #{len(world.helpers)}")
        return helper

    def upgrade_weapon(self, world: WorldState) -> bool:
        player = world.player
        if player.weapon_level >= MAX_LEVEL:
            return False
        if not player.wallet.spend(UPGRADE_COSTS["weapon"]):
            return False
        player.weapon_level += 1
        logger.debug(f"Weapon upgraded to level {player.weapon_level}")
        return True

    def upgrade_wall(self, world: WorldState) -> bool:
        if world.wall_level >= MAX_LEVEL:
            return False
        if not world.player.wallet.spend(UPGRADE_COSTS["wall"]):
            return False
        world.wall_level += 1
        self._refit(world, "wall", wall_max_hp(world.wall_level))
        logger.debug(f"Walls upgraded to level {world.wall_level}")
        return True

    def upgrade_tower(self, world: WorldState) -> bool:
        if world.tower_level >= MAX_LEVEL:
            return False
        if not world.player.wallet.spend(UPGRADE_COSTS["tower"]):
            return False
        world.tower_level += 1
        self._refit(world, "tower", tower_max_hp(world.tower_level))
        logger.debug(f"Towers upgraded to level {world.tower_level}")
        return True

    @staticmethod
    def _refit(world: WorldState, structure_type: str, max_hp: float) -> None:
        for s in world.structures:
            if s.type == structure_type:
                s.max_hp = max_hp
                s.hp = min(s.hp + UPGRADE_HEAL, s.max_hp)
