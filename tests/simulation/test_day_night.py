"""Unit tests for DayNightCycle: clock, wave progression, spawn scaling."""

from __future__ import annotations

import math
import queue
import random

import pytest

from outpost.comms.event_bus import EventBus
from outpost.config import Settings
from outpost.simulation.day_night import (
    DayNightCycle,
    make_boss,
    make_creature,
    wave_size,
)
from outpost.simulation.entities import Nest
from outpost.simulation.world import WorldState


pytestmark = pytest.mark.unit


class FixedRandom(random.Random):
    """Random whose ``random()`` always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def _make(rng: random.Random | None = None, cycle_duration: int = 30):
    bus = EventBus(maxsize=1000)
    q = bus.subscribe()
    world = WorldState(Settings())
    cycle = DayNightCycle(bus, rng or random.Random(0), cycle_duration=cycle_duration)
    return world, cycle, q


def _drain(q: queue.Queue) -> list[dict]:
    out = []
    while not q.empty():
        out.append(q.get_nowait())
    return out


# --------------------------------------------------------------------------
# Stat scaling
# --------------------------------------------------------------------------

class TestScaling:
    def test_wave_one_creature(self):
        c = make_creature(1, 0, 0)
        assert c.hp == c.max_hp == 70.0
        assert c.speed == pytest.approx(0.925)
        assert c.damage == 17.0
        assert c.size == 25.0
        assert not c.is_boss

    def test_wave_five_creature(self):
        c = make_creature(5, 0, 0)
        assert c.hp == 110.0
        assert c.speed == pytest.approx(1.025)
        assert c.damage == 25.0

    def test_speed_bonus_capped(self):
        assert make_creature(40, 0, 0).speed == pytest.approx(1.7)
        assert make_creature(100, 0, 0).speed == pytest.approx(1.7)

    def test_boss(self):
        b = make_boss(5, 0, 0)
        assert b.is_boss
        assert b.hp == b.max_hp == 750.0
        assert b.speed == 0.7
        assert b.damage == 30.0
        assert b.size == 40.0

    @pytest.mark.parametrize("wave,expected", [(1, 2), (4, 8), (15, 30), (17, 30)])
    def test_wave_size(self, wave, expected):
        assert wave_size(wave) == expected


# --------------------------------------------------------------------------
# Clock
# --------------------------------------------------------------------------

class TestClock:
    def test_day_night_alternation(self):
        world, cycle, _ = _make()
        for _ in range(29):
            cycle.tick(world)
        assert world.is_day and world.cycle_time == 29
        assert cycle.remaining(world) == 1

        cycle.tick(world)
        assert not world.is_day
        assert world.cycle_time == 0
        assert world.wave == 2

        for _ in range(30):
            cycle.tick(world)
        assert world.is_day
        assert world.wave == 2

    def test_short_cycle_counts_waves(self):
        world, cycle, _ = _make(cycle_duration=3)
        for _ in range(12):
            cycle.tick(world)
        # two nightfalls in 12 ticks
        assert world.wave == 3
        assert world.is_day

    def test_daybreak_event(self):
        world, cycle, q = _make(cycle_duration=1)
        cycle.tick(world)
        cycle.tick(world)
        types = [m["type"] for m in _drain(q)]
        assert types == ["nightfall", "daybreak"]


# --------------------------------------------------------------------------
# Night waves
# --------------------------------------------------------------------------

class TestNightWave:
    def test_wave_five_spawns_boss_then_increments(self):
        world, cycle, q = _make(cycle_duration=1)
        world.wave = 5
        cycle.tick(world)
        assert not world.is_day
        assert world.wave == 6
        assert len(world.creatures) == 11
        bosses = [c for c in world.creatures if c.is_boss]
        assert len(bosses) == 1
        assert bosses[0].hp == 750.0
        # regular creatures use the wave in effect at nightfall
        assert all(c.hp == 110.0 for c in world.creatures if not c.is_boss)

        msg = _drain(q)[0]
        assert msg["type"] == "nightfall"
        assert msg["data"] == {"spawn_wave": 5, "wave": 6, "spawned": 11, "boss": True}

    def test_wave_four_no_boss(self):
        world, cycle, _ = _make(cycle_duration=1)
        world.wave = 4
        cycle.tick(world)
        assert len(world.creatures) == 8
        assert not any(c.is_boss for c in world.creatures)

    def test_wave_size_capped_at_thirty(self):
        world, cycle, _ = _make(cycle_duration=1)
        world.wave = 17
        cycle.tick(world)
        assert len(world.creatures) == 30

    def test_spawn_ring_around_player(self):
        world, cycle, _ = _make()
        world.player.x, world.player.y = 500.0, 700.0
        spawned = cycle.spawn_night_wave(world)
        for c in spawned:
            assert math.hypot(c.x - 500.0, c.y - 700.0) == pytest.approx(2100.0)


# --------------------------------------------------------------------------
# Nest spawns
# --------------------------------------------------------------------------

class TestNestSpawns:
    def test_day_chance_below_threshold_spawns(self):
        world, cycle, _ = _make(rng=FixedRandom(0.04))
        world.nests.extend([Nest(1000.0, 1000.0), Nest(3000.0, 3000.0)])
        assert len(cycle.spawn_from_nests(world)) == 2

    def test_day_chance_above_threshold_does_not_spawn(self):
        world, cycle, _ = _make(rng=FixedRandom(0.07))
        world.nests.append(Nest(1000.0, 1000.0))
        assert cycle.spawn_from_nests(world) == []
        world.is_day = False
        assert len(cycle.spawn_from_nests(world)) == 1

    def test_spawn_on_nest_rim(self):
        world, cycle, _ = _make(rng=FixedRandom(0.01))
        nest = Nest(1000.0, 1000.0)
        world.nests.append(nest)
        world.wave = 3
        (c,) = cycle.spawn_from_nests(world)
        assert math.hypot(c.x - nest.x, c.y - nest.y) == pytest.approx(40.0)
        assert c.hp == 90.0
        assert world.creatures == [c]

    def test_no_nests_no_spawns(self):
        world, cycle, _ = _make(rng=FixedRandom(0.0))
        for _ in range(30):
            cycle.tick(world)
        # only the nightfall horde
        assert len(world.creatures) == 2
