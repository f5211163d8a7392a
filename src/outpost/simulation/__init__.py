"""Simulation subsystem: world state, combat, AI, economy, day/night."""
from .behaviors import UnitBehaviors
from .combat import CombatSystem
from .controls import intent_from_joystick, intent_from_keys
from .day_night import DayNightCycle, make_boss, make_creature
from .economy import BUILD_COSTS, EconomySystem, make_structure
from .engine import SimulationEngine
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
from .world import Camera, WorldState
from .worldgen import generate_world, relocate_node

__all__ = [
    "BUILD_COSTS",
    "Camera",
    "CombatSystem",
    "Creature",
    "DayNightCycle",
    "EconomySystem",
    "Effect",
    "Helper",
    "Nest",
    "Player",
    "Projectile",
    "ResourceNode",
    "SimulationEngine",
    "Structure",
    "UnitBehaviors",
    "Wallet",
    "WorldState",
    "generate_world",
    "intent_from_joystick",
    "intent_from_keys",
    "make_boss",
    "make_creature",
    "make_structure",
    "relocate_node",
]
