"""CombatSystem: projectiles, contact damage, harvesting, structure fire.

Architecture
------------
Every rule here reads two entities and mutates their hp or the player's
wallet.  New persistent state is only created through two side channels:
``WorldState.add_effect()`` (cosmetic) and ``world.projectiles`` (shots).

Per frame (called by the engine in this order):

  1. ``harvest()``                 player melee against resource nodes
  2. ``resolve_helper_contacts()``  helpers hit creatures / harvest nodes
  3. ``resolve_projectiles()``      first creature in reach takes the hit
  4. ``resolve_creature_contacts()`` creatures hit walls/towers or end the game

Every structure interval (independent of the frame rate):

  5. ``structure_pass()``           towers fire, traps spring

Only projectile kills earn score and gold.  Creatures killed by traps or
helpers are simply removed.

Events published on the EventBus:
  - ``creature_killed``: projectile kill, with score awarded
  - ``structure_destroyed``: wall/tower/trap reached 0 hp
  - ``node_depleted``: a resource node was harvested out and relocated
  - ``game_over``: a creature reached the player
"""

from __future__ import annotations

import math
import random
from typing import TYPE_CHECKING

from loguru import logger

from .entities import Creature, Player, Projectile, ResourceNode, Structure
from .spatial import Placed, distance, nearest, touching
from .worldgen import relocate_node

if TYPE_CHECKING:
    from outpost.comms.event_bus import EventBus
    from .entities import Helper
    from .world import WorldState

PLAYER_SHOT_SPEED = 12.0
PLAYER_SHOT_DAMAGE = 15.0  # per weapon level
PLAYER_SHOT_COOLDOWN = 400.0  # ms, divided by weapon level

SPELL_MANA_COST = 20.0
SPELL_SPEED = 12.0
SPELL_DAMAGE = 50.0
SPELL_SIZE = 10.0

TOWER_SHOT_SPEED = 10.0
TOWER_SHOT_DAMAGE = 30.0  # per tower level
TOWER_BASE_RANGE = 200.0
TOWER_RANGE_PER_LEVEL = 30.0
TOWER_BASE_INTERVAL = 800.0  # ms, divided by tower level

TRAP_DAMAGE = 50.0
TRAP_SELF_DAMAGE = 150.0

CREATURE_ATTACK_COOLDOWN = 1000.0  # ms between structure hits, per creature

HELPER_DAMAGE = 10.0
HELPER_HARVEST_DAMAGE = 3.0
HELPER_HARVEST_YIELD = 2

HARVEST_DAMAGE = 3.0  # per weapon level
HARVEST_YIELD = 2  # per weapon level

# Effect durations (ms)
_HIT_EFFECT = 300.0
_STRUCTURE_HIT_EFFECT = 200.0
_DESTROYED_EFFECT = 500.0
_RESOURCE_EFFECT = 500.0


def tower_range(level: int) -> float:
    return TOWER_BASE_RANGE + TOWER_RANGE_PER_LEVEL * level


def tower_interval(level: int) -> float:
    return TOWER_BASE_INTERVAL / level


class CombatSystem:
    """Resolves all pairwise interactions for one tick."""

    def __init__(self, event_bus: EventBus, rng: random.Random) -> None:
        self._event_bus = event_bus
        self._rng = rng

    # -- Shots --------------------------------------------------------------

    def fire_player_shot(self, world: WorldState, target_x: float, target_y: float) -> Projectile | None:
        """Fire toward a world point if the weapon has cooled down."""
        player = world.player
        if player.weapon_cooldown > 0:
            return None
        angle = math.atan2(target_y - player.y, target_x - player.x)
        proj = Projectile(
            x=player.x, y=player.y, angle=angle,
            speed=PLAYER_SHOT_SPEED,
            damage=PLAYER_SHOT_DAMAGE * player.weapon_level,
            origin="player",
        )
        world.projectiles.append(proj)
        player.weapon_cooldown = PLAYER_SHOT_COOLDOWN / player.weapon_level
        return proj

    def cast_spell(self, world: WorldState) -> Projectile | None:
        """Spend mana on a heavy shot at the nearest on-screen creature.

        Mana is only spent when there is something to shoot at.
        """
        player = world.player
        if player.mana < SPELL_MANA_COST:
            return None
        target = nearest(player, world.visible_creatures())
        if target is None:
            return None
        player.mana -= SPELL_MANA_COST
        proj = Projectile(
            x=player.x, y=player.y,
            angle=math.atan2(target.y - player.y, target.x - player.x),
            speed=SPELL_SPEED, damage=SPELL_DAMAGE,
            origin="spell", size=SPELL_SIZE,
        )
        world.projectiles.append(proj)
        return proj

    def advance_projectiles(self, world: WorldState) -> None:
        for proj in world.projectiles:
            proj.x += math.cos(proj.angle) * proj.speed
            proj.y += math.sin(proj.angle) * proj.speed

    def cool_down(self, world: WorldState, frame_ms: float) -> None:
        """Tick down the player's weapon and every creature's attack timer."""
        player = world.player
        if player.weapon_cooldown > 0:
            player.weapon_cooldown = max(0.0, player.weapon_cooldown - frame_ms)
        for creature in world.creatures:
            if creature.attack_cooldown_ms > 0:
                creature.attack_cooldown_ms = max(0.0, creature.attack_cooldown_ms - frame_ms)

    # -- Harvesting ---------------------------------------------------------

    def harvest(self, world: WorldState) -> None:
        """Player contact with resource nodes, scaled by weapon level."""
        player = world.player
        for node in list(world.resource_nodes):
            if touching(player, node):
                self._harvest_node(
                    world, node,
                    HARVEST_DAMAGE * player.weapon_level,
                    HARVEST_YIELD * player.weapon_level,
                )

    def _harvest_node(self, world: WorldState, node: ResourceNode, damage: float, amount: int) -> None:
        node.hp -= damage
        world.player.wallet.add(node.type, amount)
        world.add_effect("resource", node.x, node.y, _RESOURCE_EFFECT)
        if node.hp <= 0:
            relocate_node(world, node, self._rng)
            self._event_bus.publish("node_depleted", {
                "id": node.id,
                "type": node.type,
                "position": {"x": node.x, "y": node.y},
            })

    # -- Helpers ------------------------------------------------------------

    def resolve_helper_contacts(self, world: WorldState, engaged: list[tuple[Helper, Placed]]) -> None:
        for helper, target in engaged:
            if not touching(helper, target):
                continue
            if isinstance(target, Creature):
                if target.hp <= 0:
                    continue
                target.hp -= HELPER_DAMAGE
                if target.hp <= 0:
                    self._remove_creature(world, target)
            elif isinstance(target, ResourceNode):
                self._harvest_node(world, target, HELPER_HARVEST_DAMAGE, HELPER_HARVEST_YIELD)

    # -- Projectiles --------------------------------------------------------

    def resolve_projectiles(self, world: WorldState) -> None:
        """Each projectile damages at most one creature, then is consumed.

        Projectiles that leave the world without hitting are discarded.
        """
        for proj in list(world.projectiles):
            victim = next(
                (c for c in world.creatures
                 if c.hp > 0 and math.hypot(proj.x - c.x, proj.y - c.y) < c.size / 2 + proj.size),
                None,
            )
            if victim is not None:
                victim.hp -= proj.damage
                world.add_effect(
                    "explosion" if proj.origin == "spell" else "hit",
                    proj.x, proj.y, _HIT_EFFECT,
                )
                world.projectiles.remove(proj)
                if victim.hp <= 0:
                    self._credit_kill(world, victim, proj)
                continue
            if not world.in_bounds(proj.x, proj.y):
                world.projectiles.remove(proj)

    def _credit_kill(self, world: WorldState, creature: Creature, proj: Projectile) -> None:
        self._remove_creature(world, creature)
        points = 15 * world.wave
        world.player.score += points
        world.player.wallet.add("gold", math.floor(world.wave))
        self._event_bus.publish("creature_killed", {
            "id": creature.id,
            "kind": creature.kind,
            "method": proj.origin,
            "points": points,
            "position": {"x": creature.x, "y": creature.y},
        })

    # -- Creatures ----------------------------------------------------------

    def resolve_creature_contacts(self, world: WorldState, engaged: list[tuple[Creature, Placed]]) -> bool:
        """Apply creature contact damage.  Returns True if the game ended."""
        for creature, target in engaged:
            if creature.hp <= 0:
                continue
            if not touching(creature, target):
                continue
            if isinstance(target, Player):
                self._end_game(world, creature)
                return True
            if isinstance(target, Structure):
                if target.hp <= 0 or creature.attack_cooldown_ms > 0:
                    continue
                target.hp -= creature.damage
                creature.attack_cooldown_ms = CREATURE_ATTACK_COOLDOWN
                world.add_effect("hit", target.x, target.y, _STRUCTURE_HIT_EFFECT)
                if target.hp <= 0:
                    self._destroy_structure(world, target)
        return False

    def _end_game(self, world: WorldState, creature: Creature) -> None:
        world.game_over = True
        logger.info(f"Game over: creature reached the player (score={world.player.score}, wave={world.wave})")
        self._event_bus.publish("game_over", {
            "final_score": world.player.score,
            "wave": world.wave,
            "killer": creature.kind,
        })

    # -- Structures ---------------------------------------------------------

    def structure_pass(self, world: WorldState, interval_ms: float) -> None:
        """Tower auto-fire and trap triggers, run once per structure interval."""
        for structure in list(world.structures):
            if structure.type == "tower":
                self._tower_fire(world, structure, interval_ms)
            elif structure.type == "trap":
                self._trap_trigger(world, structure)

    def _tower_fire(self, world: WorldState, tower: Structure, interval_ms: float) -> None:
        tower.cooldown_ms = max(0.0, tower.cooldown_ms - interval_ms)
        if tower.cooldown_ms > 0:
            return
        target = nearest(tower, world.creatures)
        if target is None or distance(tower, target) >= tower_range(world.tower_level):
            return
        world.projectiles.append(Projectile(
            x=tower.x, y=tower.y,
            angle=math.atan2(target.y - tower.y, target.x - tower.x),
            speed=TOWER_SHOT_SPEED,
            damage=TOWER_SHOT_DAMAGE * world.tower_level,
            origin="tower",
        ))
        tower.cooldown_ms = tower_interval(world.tower_level)

    def _trap_trigger(self, world: WorldState, trap: Structure) -> None:
        for creature in list(world.creatures):
            if not touching(trap, creature):
                continue
            creature.hp -= TRAP_DAMAGE
            trap.hp -= TRAP_SELF_DAMAGE
            world.add_effect("explosion", creature.x, creature.y, _HIT_EFFECT)
            if creature.hp <= 0:
                self._remove_creature(world, creature)
            if trap.hp <= 0:
                self._destroy_structure(world, trap)
                return

    def _destroy_structure(self, world: WorldState, structure: Structure) -> None:
        if structure not in world.structures:
            return
        world.structures.remove(structure)
        world.add_effect("explosion", structure.x, structure.y, _DESTROYED_EFFECT)
        logger.debug(f"{structure.type} destroyed at ({structure.x:.0f}, {structure.y:.0f})")
        self._event_bus.publish("structure_destroyed", {
            "id": structure.id,
            "type": structure.type,
            "position": {"x": structure.x, "y": structure.y},
        })

    # -- Bookkeeping --------------------------------------------------------

    @staticmethod
    def _remove_creature(world: WorldState, creature: Creature) -> None:
        if creature in world.creatures:
            world.creatures.remove(creature)

    def sweep_dead(self, world: WorldState) -> None:
        """Drop any creature or helper left at 0 hp."""
        world.creatures[:] = [c for c in world.creatures if c.hp > 0]
        world.helpers[:] = [h for h in world.helpers if h.hp > 0]
