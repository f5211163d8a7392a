"""World generation: scatter resource nodes and nests, relocate depleted nodes.

Placement is rejection-sampled against everything already on the map
(``WorldState.occupied()``).  A placement that runs out of attempts is
skipped: a crowded world simply gets fewer nodes or nests.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from loguru import logger

from .entities import Nest, ResourceNode
from .spatial import place_random

if TYPE_CHECKING:
    from .world import WorldState

# (resource type, node count), placed in this order
BIOMES: list[tuple[str, int]] = [
    ("wood", 20),
    ("stone", 15),
    ("gold", 10),
]

NODE_SIZE = 80.0
NODE_HP = 200.0

NEST_COUNT = 5
NEST_SIZE = 100.0


def generate_world(world: WorldState, rng: random.Random) -> None:
    """Populate resource nodes and nests on a cleared world."""
    world.resource_nodes.clear()
    world.nests.clear()

    requested = 0
    for resource_type, count in BIOMES:
        for _ in range(count):
            requested += 1
            pos = place_random(NODE_SIZE, world.occupied(), world.width, world.height, rng)
            if pos is None:
                continue
            world.resource_nodes.append(ResourceNode(
                type=resource_type, x=pos[0], y=pos[1],
                size=NODE_SIZE, hp=NODE_HP, max_hp=NODE_HP,
            ))

    for _ in range(NEST_COUNT):
        pos = place_random(NEST_SIZE, world.occupied(), world.width, world.height, rng)
        if pos is not None:
            world.nests.append(Nest(x=pos[0], y=pos[1], size=NEST_SIZE))

    if len(world.resource_nodes) < requested or len(world.nests) < NEST_COUNT:
        logger.warning(
            f"World generation under-populated: {len(world.resource_nodes)}/{requested} "
            f"nodes, {len(world.nests)}/{NEST_COUNT} nests"
        )


def relocate_node(world: WorldState, node: ResourceNode, rng: random.Random) -> None:
    """Heal a depleted node and move it somewhere free.

    The new spot is checked against the same occupancy set as world
    generation (nodes, nests, structures).  If no free spot is found the
    node stays where it is (still healed).
    """
    node.hp = node.max_hp
    others = [o for o in world.occupied() if o is not node]
    pos = place_random(node.size, others, world.width, world.height, rng)
    if pos is not None:
        node.x, node.y = pos
