"""WorldState: the single owner of every entity collection and scalar.

All systems receive the WorldState and mutate it in place; there are no
module-level collections.  The engine is the only writer (see engine.py
for how concurrent callers are serialized).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .entities import (
    Creature,
    Effect,
    Helper,
    Nest,
    Player,
    Projectile,
    ResourceNode,
    Structure,
    Wallet,
)
from .spatial import Placed, clamp

if TYPE_CHECKING:
    from outpost.config import Settings

STARTING_WALLET = {"wood": 150, "stone": 150, "gold": 75}


@dataclass
class Camera:
    """Viewport that follows the player, clamped to the world rectangle."""

    width: float
    height: float
    x: float = 0.0
    y: float = 0.0

    def follow(self, target: Placed, world_width: float, world_height: float) -> None:
        self.x = clamp(target.x - self.width / 2, 0.0, max(0.0, world_width - self.width))
        self.y = clamp(target.y - self.height / 2, 0.0, max(0.0, world_height - self.height))

    def is_visible(self, obj: Placed) -> bool:
        sx = obj.x - self.x
        sy = obj.y - self.y
        return (
            -obj.size < sx < self.width + obj.size
            and -obj.size < sy < self.height + obj.size
        )

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        return (sx + self.x, sy + self.y)


class WorldState:
    """Mutable simulation state for one epoch."""

    def __init__(self, settings: Settings) -> None:
        self.width = settings.world_width
        self.height = settings.world_height
        self.grid_size = settings.grid_size
        self.camera = Camera(settings.viewport_width, settings.viewport_height)

        self.player = self._new_player()
        self.resource_nodes: list[ResourceNode] = []
        self.structures: list[Structure] = []
        self.creatures: list[Creature] = []
        self.helpers: list[Helper] = []
        self.projectiles: list[Projectile] = []
        self.nests: list[Nest] = []
        self.effects: list[Effect] = []

        self.wave: int = 1
        self.is_day: bool = True
        self.cycle_time: int = 0
        self.wall_level: int = 1
        self.tower_level: int = 1
        self.game_over: bool = False
        self.time_ms: float = 0.0

        self.camera.follow(self.player, self.width, self.height)

    def _new_player(self) -> Player:
        return Player(
            x=self.width / 2,
            y=self.height / 2,
            wallet=Wallet(**STARTING_WALLET),
        )

    def clear(self) -> None:
        """Restore every collection and scalar to its initial value."""
        self.player = self._new_player()
        self.resource_nodes.clear()
        self.structures.clear()
        self.creatures.clear()
        self.helpers.clear()
        self.projectiles.clear()
        self.nests.clear()
        self.effects.clear()
        self.wave = 1
        self.is_day = True
        self.cycle_time = 0
        self.wall_level = 1
        self.tower_level = 1
        self.game_over = False
        self.time_ms = 0.0
        self.camera.follow(self.player, self.width, self.height)

    # -- Queries ------------------------------------------------------------

    def occupied(self) -> list[Placed]:
        """Everything that blocks random placement."""
        return [*self.resource_nodes, *self.nests, *self.structures]

    def in_bounds(self, x: float, y: float) -> bool:
        return 0.0 <= x <= self.width and 0.0 <= y <= self.height

    def structure_at(self, x: float, y: float) -> Structure | None:
        for s in self.structures:
            if s.x == x and s.y == y:
                return s
        return None

    def visible_creatures(self) -> list[Creature]:
        return [c for c in self.creatures if self.camera.is_visible(c)]

    # -- Side channels ------------------------------------------------------

    def add_effect(self, effect_type: str, x: float, y: float, duration: float) -> None:
        self.effects.append(Effect(effect_type, x, y, duration, self.time_ms))

    def expire_effects(self) -> None:
        self.effects[:] = [e for e in self.effects if not e.expired(self.time_ms)]

    # -- Snapshot -----------------------------------------------------------

    def to_dict(self, cycle_duration: int) -> dict:
        return {
            "player": self.player.to_dict(),
            "resource_nodes": [n.to_dict() for n in self.resource_nodes],
            "structures": [s.to_dict() for s in self.structures],
            "creatures": [c.to_dict() for c in self.creatures],
            "helpers": [h.to_dict() for h in self.helpers],
            "projectiles": [p.to_dict() for p in self.projectiles],
            "nests": [n.to_dict() for n in self.nests],
            "effects": [e.to_dict() for e in self.effects],
            "wave": self.wave,
            "is_day": self.is_day,
            "cycle_time": self.cycle_time,
            "cycle_remaining": cycle_duration - self.cycle_time,
            "wall_level": self.wall_level,
            "tower_level": self.tower_level,
            "game_over": self.game_over,
            "camera": {"x": self.camera.x, "y": self.camera.y},
        }
