"""Unit tests for world generation and node relocation."""

from __future__ import annotations

import random
from itertools import combinations

import pytest

from outpost.config import Settings
from outpost.simulation.economy import make_structure
from outpost.simulation.entities import Nest, ResourceNode
from outpost.simulation.spatial import distance
from outpost.simulation.world import WorldState
from outpost.simulation.worldgen import generate_world, relocate_node


pytestmark = pytest.mark.unit


class TestGenerateWorld:
    def test_default_counts(self):
        world = WorldState(Settings())
        generate_world(world, random.Random(11))
        kinds = [n.type for n in world.resource_nodes]
        assert kinds.count("wood") == 20
        assert kinds.count("stone") == 15
        assert kinds.count("gold") == 10
        assert len(world.nests) == 5

    def test_nothing_overlaps(self):
        world = WorldState(Settings())
        generate_world(world, random.Random(12))
        placed = world.occupied()
        for a, b in combinations(placed, 2):
            assert distance(a, b) >= (a.size + b.size) / 2 + 20

    def test_everything_inside_world(self):
        world = WorldState(Settings())
        generate_world(world, random.Random(13))
        for obj in world.occupied():
            assert obj.size / 2 <= obj.x <= world.width - obj.size / 2
            assert obj.size / 2 <= obj.y <= world.height - obj.size / 2

    def test_small_world_underpopulates_without_error(self):
        world = WorldState(Settings(world_width=400.0, world_height=400.0))
        generate_world(world, random.Random(14))
        assert 0 < len(world.resource_nodes) < 45
        assert len(world.nests) < 5

    def test_regenerate_replaces_previous_layout(self):
        world = WorldState(Settings())
        generate_world(world, random.Random(15))
        generate_world(world, random.Random(16))
        assert len(world.resource_nodes) == 45


class TestRelocateNode:
    def test_heals_and_moves(self):
        world = WorldState(Settings())
        node = ResourceNode("gold", 100.0, 100.0, hp=-3.0)
        world.resource_nodes.append(node)
        relocate_node(world, node, random.Random(1))
        assert node.hp == node.max_hp
        assert node.type == "gold"
        assert (node.x, node.y) != (100.0, 100.0)

    def test_stays_put_when_no_room(self):
        world = WorldState(Settings(world_width=100.0, world_height=100.0))
        blocker = ResourceNode("wood", 50.0, 50.0)
        node = ResourceNode("stone", 40.0, 40.0, hp=0.0)
        world.resource_nodes.extend([blocker, node])
        relocate_node(world, node, random.Random(2))
        assert (node.x, node.y) == (40.0, 40.0)
        assert node.hp == 200.0

    def test_nest_blocks_relocation(self):
        # every spot a node can take in a 200x200 world is too close to the nest
        world = WorldState(Settings(world_width=200.0, world_height=200.0))
        world.nests.append(Nest(100.0, 100.0))
        node = ResourceNode("wood", 40.0, 40.0, hp=0.0)
        world.resource_nodes.append(node)
        relocate_node(world, node, random.Random(3))
        assert (node.x, node.y) == (40.0, 40.0)
        assert node.hp == node.max_hp

    def test_relocation_avoids_nests_and_structures(self):
        world = WorldState(Settings())
        rng = random.Random(4)
        generate_world(world, rng)
        for i in range(40):
            world.structures.append(make_structure("tower", 100.0 * i + 50.0, 2000.0))
        node = world.resource_nodes[0]
        for _ in range(50):
            relocate_node(world, node, rng)
            for other in [*world.nests, *world.structures]:
                assert distance(node, other) >= (node.size + other.size) / 2 + 20
