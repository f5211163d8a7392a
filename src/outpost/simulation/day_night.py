"""DayNightCycle: clock, wave counter, and creature spawning.

Architecture
------------
The cycle advances once per clock tick (one second of game time):

  day (cycle_duration ticks) -> night (cycle_duration ticks) -> day -> ...

At every clock tick each nest rolls independently to spawn one creature
on its rim (5% by day, 10% by night).

At day -> night the mass spawn fires around the player at
``max(width, height) / 2 + 100`` (beyond the visible world, so the horde
walks in) using the wave number in effect at nightfall, and only then is
the wave counter incremented.  Every 5th wave adds a boss.

Stat scaling (both spawn paths):
    hp = max_hp = 60 + 10 * wave
    speed       = 0.9 + min(0.025 * wave, 0.8)
    damage      = 15 + 2 * wave
Boss:
    size 40, hp = max_hp = 500 + 50 * wave, speed 0.7, damage 20 + 2 * wave

Events published on the EventBus:
  - ``nightfall``: wave used for the spawn, new wave counter, spawn count
  - ``daybreak``: current wave
"""

from __future__ import annotations

import math
import random
from typing import TYPE_CHECKING

from loguru import logger

from .entities import Creature

if TYPE_CHECKING:
    from outpost.comms.event_bus import EventBus
    from .world import WorldState

DAY_SPAWN_CHANCE = 0.05
NIGHT_SPAWN_CHANCE = 0.10

# Nest spawns appear this far inside the nest's rim
NEST_RIM_INSET = 10.0

WAVE_SIZE_PER_WAVE = 2
MAX_WAVE_SIZE = 30
BOSS_EVERY = 5

# Mass spawn ring sits this far past half the world's larger side
SPAWN_RING_PADDING = 100.0

CREATURE_SIZE = 25.0
BOSS_SIZE = 40.0
BOSS_SPEED = 0.7


def make_creature(wave: int, x: float, y: float) -> Creature:
    """A standard creature scaled to *wave*."""
    hp = 60.0 + 10.0 * wave
    return Creature(
        x=x, y=y, hp=hp, max_hp=hp,
        speed=0.9 + min(0.025 * wave, 0.8),
        damage=15.0 + 2.0 * wave,
        size=CREATURE_SIZE,
    )


def make_boss(wave: int, x: float, y: float) -> Creature:
    hp = 500.0 + 50.0 * wave
    return Creature(
        x=x, y=y, hp=hp, max_hp=hp,
        speed=BOSS_SPEED,
        damage=20.0 + 2.0 * wave,
        size=BOSS_SIZE,
        kind="boss",
    )


def wave_size(wave: int) -> int:
    return min(WAVE_SIZE_PER_WAVE * wave, MAX_WAVE_SIZE)


class DayNightCycle:
    """Advances the day/night clock and spawns creatures."""

    def __init__(self, event_bus: EventBus, rng: random.Random, cycle_duration: int = 30) -> None:
        self._event_bus = event_bus
        self._rng = rng
        self.cycle_duration = cycle_duration

    def tick(self, world: WorldState) -> None:
        """One clock tick: advance the cycle, then roll nest spawns."""
        world.cycle_time += 1
        if world.cycle_time >= self.cycle_duration:
            world.is_day = not world.is_day
            world.cycle_time = 0
            if world.is_day:
                self._event_bus.publish("daybreak", {"wave": world.wave})
            else:
                self._nightfall(world)
        self.spawn_from_nests(world)

    def remaining(self, world: WorldState) -> int:
        return self.cycle_duration - world.cycle_time

    def _nightfall(self, world: WorldState) -> None:
        spawn_wave = world.wave
        spawned = self.spawn_night_wave(world)
        world.wave += 1
        logger.info(f"Nightfall: wave {spawn_wave} spawned {len(spawned)} creatures, now wave {world.wave}")
        self._event_bus.publish("nightfall", {
            "spawn_wave": spawn_wave,
            "wave": world.wave,
            "spawned": len(spawned),
            "boss": any(c.is_boss for c in spawned),
        })

    def spawn_from_nests(self, world: WorldState) -> list[Creature]:
        chance = DAY_SPAWN_CHANCE if world.is_day else NIGHT_SPAWN_CHANCE
        spawned: list[Creature] = []
        for nest in world.nests:
            if self._rng.random() < chance:
                angle = self._rng.random() * math.pi * 2
                radius = nest.size / 2 - NEST_RIM_INSET
                creature = make_creature(
                    world.wave,
                    nest.x + math.cos(angle) * radius,
                    nest.y + math.sin(angle) * radius,
                )
                spawned.append(creature)
        world.creatures.extend(spawned)
        return spawned

    def spawn_night_wave(self, world: WorldState) -> list[Creature]:
        """Ring of creatures around the player, plus a boss every 5th wave."""
        player = world.player
        ring = max(world.width, world.height) / 2 + SPAWN_RING_PADDING
        spawned: list[Creature] = []
        for _ in range(wave_size(world.wave)):
            x, y = self._ring_point(player.x, player.y, ring)
            spawned.append(make_creature(world.wave, x, y))
        if world.wave % BOSS_EVERY == 0:
            x, y = self._ring_point(player.x, player.y, ring)
            spawned.append(make_boss(world.wave, x, y))
        world.creatures.extend(spawned)
        return spawned

    def _ring_point(self, cx: float, cy: float, radius: float) -> tuple[float, float]:
        angle = self._rng.random() * math.pi * 2
        return (cx + math.cos(angle) * radius, cy + math.sin(angle) * radius)
