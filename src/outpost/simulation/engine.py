"""SimulationEngine: fixed-timestep tick driver and command surface.

Architecture
------------
The engine owns one WorldState and is its only writer.  All gameplay runs
from a single fixed-timestep ``tick()`` (one frame, ``frame_ms`` of game
time).  Slower cadences are derived from the same clock with accumulators
instead of separate timers:

  every frame             movement, harvest, projectiles, creature contact
  every structure_interval tower fire, trap triggers        (~100 ms)
  every clock_interval    day/night cycle, nest spawns       (~1 s)

Frame order:
  1. movement      player (move intent), helpers, creatures, projectiles
  2. combat        cooldowns, harvest, helper contact, projectile hits,
                   creature contact (may end the game), structure pass
  3. bookkeeping   sweep dead units, expire effects
  4. scheduler     day/night clock and spawns

Concurrency:
  ``tick()`` and every command take ``self._lock``, so ticks from the
  runner thread and commands from input/UI threads never interleave.
  Within a tick nothing blocks or yields.

Game over:
  When a creature touches the player ``world.game_over`` is set and every
  further tick and command (except ``reset_world()``) is a no-op.

Commands return True when applied and False when rejected (can't afford,
cell occupied, level capped, on cooldown, no target).  A rejected command
leaves state unchanged.
"""

from __future__ import annotations

import random
import threading
import time

from loguru import logger

from outpost.comms.event_bus import EventBus
from outpost.config import Settings, settings as default_settings

from .behaviors import UnitBehaviors, normalize_intent
from .combat import CombatSystem
from .day_night import DayNightCycle
from .economy import EconomySystem
from .world import WorldState
from .worldgen import generate_world

MANA_REGEN_PER_FRAME = 0.1


class SimulationEngine:
    """Drives the survival simulation and accepts player commands."""

    def __init__(
        self,
        event_bus: EventBus | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
    ) -> None:
        self._settings = settings if settings is not None else default_settings
        self._event_bus = event_bus if event_bus is not None else EventBus()
        self._rng = rng if rng is not None else random.Random(seed)
        self._lock = threading.RLock()

        self.world = WorldState(self._settings)
        self.behaviors = UnitBehaviors()
        self.combat = CombatSystem(self._event_bus, self._rng)
        self.economy = EconomySystem(self._event_bus, self._rng)
        self.day_night = DayNightCycle(
            self._event_bus, self._rng, cycle_duration=self._settings.cycle_duration,
        )

        self._move_intent: tuple[float, float] = (0.0, 0.0)
        self._frame_accum = 0.0
        self._structure_accum = 0.0
        self._clock_accum = 0.0
        self._frame_count = 0

        self._running = False
        self._thread: threading.Thread | None = None

        self.reset_world()

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def game_over(self) -> bool:
        return self.world.game_over

    @property
    def frame_count(self) -> int:
        return self._frame_count

    # -- Commands -----------------------------------------------------------

    def set_move_intent(self, dx: float, dy: float) -> None:
        """Desired movement direction; magnitude is clamped to 1."""
        with self._lock:
            self._move_intent = normalize_intent(dx, dy)

    def aim_and_fire(self, target_x: float, target_y: float) -> bool:
        """Fire a player shot toward a world point."""
        with self._lock:
            if self.world.game_over:
                return False
            return self.combat.fire_player_shot(self.world, target_x, target_y) is not None

    def fire_at_screen(self, screen_x: float, screen_y: float) -> bool:
        """Fire toward a point given in viewport coordinates."""
        with self._lock:
            x, y = self.world.camera.screen_to_world(screen_x, screen_y)
            return self.aim_and_fire(x, y)

    def cast_spell(self) -> bool:
        with self._lock:
            if self.world.game_over:
                return False
            return self.combat.cast_spell(self.world) is not None

    def build(self, structure_type: str) -> bool:
        """Build a wall, tower or trap on the player's grid cell."""
        with self._lock:
            if self.world.game_over:
                return False
            return self.economy.build(self.world, structure_type) is not None

    def hire_helper(self) -> bool:
        with self._lock:
            if self.world.game_over:
                return False
            return self.economy.hire_helper(self.world) is not None

    def upgrade_weapon(self) -> bool:
        with self._lock:
            return not self.world.game_over and self.economy.upgrade_weapon(self.world)

    def upgrade_wall(self) -> bool:
        with self._lock:
            return not self.world.game_over and self.economy.upgrade_wall(self.world)

    def upgrade_tower(self) -> bool:
        with self._lock:
            return not self.world.game_over and self.economy.upgrade_tower(self.world)

    def reset_world(self) -> None:
        """Reinitialize every mutable value and regenerate the map."""
        with self._lock:
            self.world.clear()
            generate_world(self.world, self._rng)
            self._move_intent = (0.0, 0.0)
            self._frame_accum = 0.0
            self._structure_accum = 0.0
            self._clock_accum = 0.0
            self._frame_count = 0
            logger.info(
                f"World reset: {len(self.world.resource_nodes)} resource nodes, "
                f"{len(self.world.nests)} nests"
            )
            self._event_bus.publish("world_reset", {
                "resource_nodes": len(self.world.resource_nodes),
                "nests": len(self.world.nests),
            })

    # -- Tick ---------------------------------------------------------------

    def tick(self) -> None:
        """Advance the simulation by exactly one frame."""
        with self._lock:
            world = self.world
            if world.game_over:
                return
            cfg = self._settings
            frame_ms = cfg.frame_ms
            world.time_ms += frame_ms
            self._frame_count += 1

            # 1. Movement
            self.behaviors.move_player(world, self._move_intent)
            helpers_engaged = self.behaviors.tick_helpers(world)
            creatures_engaged = self.behaviors.tick_creatures(world)
            self.combat.advance_projectiles(world)
            world.camera.follow(world.player, world.width, world.height)

            # 2. Combat
            self.combat.cool_down(world, frame_ms)
            player = world.player
            player.mana = min(player.max_mana, player.mana + MANA_REGEN_PER_FRAME)
            self.combat.harvest(world)
            self.combat.resolve_helper_contacts(world, helpers_engaged)
            self.combat.resolve_projectiles(world)
            if self.combat.resolve_creature_contacts(world, creatures_engaged):
                return
            self._structure_accum += frame_ms
            while self._structure_accum >= cfg.structure_interval_ms:
                self._structure_accum -= cfg.structure_interval_ms
                self.combat.structure_pass(world, cfg.structure_interval_ms)

            # 3. Bookkeeping
            self.combat.sweep_dead(world)
            world.expire_effects()

            # 4. Scheduler
            self._clock_accum += frame_ms
            while self._clock_accum >= cfg.clock_interval_ms:
                self._clock_accum -= cfg.clock_interval_ms
                self.day_night.tick(world)

    def advance(self, elapsed_ms: float) -> int:
        """Feed wall-clock time into the fixed-timestep accumulator.

        Runs as many whole frames as fit, capped at
        ``max_frames_per_advance``; time beyond the cap is dropped so a
        stalled host cannot spiral.  Returns the number of frames run.
        """
        cfg = self._settings
        with self._lock:
            if self.world.game_over:
                return 0
            self._frame_accum += elapsed_ms
            frames = 0
            while self._frame_accum >= cfg.frame_ms and frames < cfg.max_frames_per_advance:
                self._frame_accum -= cfg.frame_ms
                self.tick()
                frames += 1
                if self.world.game_over:
                    break
            if frames == cfg.max_frames_per_advance:
                self._frame_accum = min(self._frame_accum, cfg.frame_ms)
            return frames

    # -- Snapshot -----------------------------------------------------------

    def get_state(self) -> dict:
        """Serializable snapshot of the whole world for renderers and UIs."""
        with self._lock:
            state = self.world.to_dict(self.day_night.cycle_duration)
            state["helper_count"] = len(self.world.helpers)
            state["frame"] = self._frame_count
            return state

    # -- Lifecycle ----------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(
            target=self._tick_loop, name="sim-tick", daemon=True
        )
        self._thread.start()
        logger.info("Simulation runner started")

    def stop(self) -> None:
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        logger.info("Simulation runner stopped")

    def _tick_loop(self) -> None:
        frame_s = self._settings.frame_ms / 1000.0
        last = time.monotonic()
        while self._running:
            time.sleep(frame_s)
            now = time.monotonic()
            self.advance((now - last) * 1000.0)
            last = now
