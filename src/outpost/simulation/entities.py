"""Entity model: flat dataclasses for everything on the map.

Every entity carries ``x``/``y`` (centre) and ``size`` (diameter) so the
spatial helpers work on all of them.  Type-specific behaviour lives in the
systems (combat, behaviors, economy), not here.

Entities use identity equality (``eq=False``): two creatures spawned at the
same spot with the same stats are still different creatures, and
``list.remove()`` must drop the one that was actually hit.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

RESOURCE_TYPES = ("wood", "stone", "gold")
STRUCTURE_TYPES = ("wall", "tower", "trap")
PROJECTILE_ORIGINS = ("player", "tower", "spell")
EFFECT_TYPES = ("hit", "explosion", "resource")


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(eq=False)
class Wallet:
    """Resource counters.  Spending is always gated by ``can_afford``."""

    wood: int = 0
    stone: int = 0
    gold: int = 0

    def get(self, kind: str) -> int:
        return getattr(self, kind)

    def add(self, kind: str, amount: int) -> None:
        if kind not in RESOURCE_TYPES:
            raise ValueError(f"unknown resource type: {kind!r}")
        setattr(self, kind, getattr(self, kind) + amount)

    def can_afford(self, cost: dict[str, int]) -> bool:
        return all(self.get(kind) >= amount for kind, amount in cost.items())

    def spend(self, cost: dict[str, int]) -> bool:
        """Debit *cost* if affordable.  Returns False (no change) otherwise."""
        if not self.can_afford(cost):
            return False
        for kind, amount in cost.items():
            setattr(self, kind, self.get(kind) - amount)
        return True

    def to_dict(self) -> dict:
        return {"wood": self.wood, "stone": self.stone, "gold": self.gold}


@dataclass(eq=False)
class Player:
    x: float
    y: float
    size: float = 25.0
    speed: float = 6.0
    weapon_level: int = 1
    weapon_cooldown: float = 0.0  # ms until the next shot is allowed
    wallet: Wallet = field(default_factory=Wallet)
    score: int = 0
    mana: float = 100.0
    max_mana: float = 100.0

    def to_dict(self) -> dict:
        return {
            "position": {"x": self.x, "y": self.y},
            "size": self.size,
            "weapon_level": self.weapon_level,
            "weapon_cooldown": self.weapon_cooldown,
            "resources": self.wallet.to_dict(),
            "score": self.score,
            "mana": self.mana,
            "max_mana": self.max_mana,
        }


@dataclass(eq=False)
class ResourceNode:
    type: str
    x: float
    y: float
    size: float = 80.0
    hp: float = 200.0
    max_hp: float = 200.0
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "position": {"x": self.x, "y": self.y},
            "size": self.size,
            "hp": self.hp,
            "max_hp": self.max_hp,
        }


@dataclass(eq=False)
class Structure:
    type: str  # wall, tower, trap
    x: float
    y: float
    size: float
    hp: float
    max_hp: float
    cooldown_ms: float = 0.0  # towers only: time until the next shot
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "position": {"x": self.x, "y": self.y},
            "size": self.size,
            "hp": self.hp,
            "max_hp": self.max_hp,
        }


@dataclass(eq=False)
class Creature:
    x: float
    y: float
    hp: float
    max_hp: float
    speed: float
    damage: float
    size: float = 25.0
    kind: str = "standard"  # standard, boss
    attack_cooldown_ms: float = 0.0  # per-creature, shared across all targets
    id: str = field(default_factory=_new_id)

    @property
    def is_boss(self) -> bool:
        return self.kind == "boss"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "position": {"x": self.x, "y": self.y},
            "size": self.size,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "speed": self.speed,
            "damage": self.damage,
        }


@dataclass(eq=False)
class Helper:
    x: float
    y: float
    size: float = 20.0
    speed: float = 1.0
    hp: float = 300.0
    max_hp: float = 300.0
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "position": {"x": self.x, "y": self.y},
            "size": self.size,
            "hp": self.hp,
            "max_hp": self.max_hp,
        }


@dataclass(eq=False)
class Projectile:
    """A straight-line shot.  Moves ``speed`` units per frame along ``angle``."""

    x: float
    y: float
    angle: float
    speed: float
    damage: float
    origin: str  # player, tower, spell
    size: float = 5.0
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "origin": self.origin,
            "position": {"x": self.x, "y": self.y},
            "angle": self.angle,
            "speed": self.speed,
            "damage": self.damage,
            "size": self.size,
        }


@dataclass(eq=False)
class Nest:
    x: float
    y: float
    size: float = 100.0
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> dict:
        return {"id": self.id, "position": {"x": self.x, "y": self.y}, "size": self.size}


@dataclass(eq=False)
class Effect:
    """Cosmetic marker for the renderer.  No gameplay effect."""

    type: str  # hit, explosion, resource
    x: float
    y: float
    duration: float  # ms
    start: float  # simulation time in ms

    def expired(self, now_ms: float) -> bool:
        return now_ms - self.start > self.duration

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "position": {"x": self.x, "y": self.y},
            "duration": self.duration,
            "start": self.start,
        }
