#!/usr/bin/env python3
"""Run the simulation headless and print a summary.

Steps the fixed-timestep engine as fast as possible (no rendering, no
real-time pacing).  With --autopilot the player shoots the nearest
creature whenever the weapon is ready and builds a tower when it can.

Usage:
    python3 scripts/run_headless.py --seconds 120 --seed 7
    python3 scripts/run_headless.py --seconds 600 --autopilot
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

# Add project src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from outpost.simulation.engine import SimulationEngine
from outpost.simulation.spatial import nearest


def autopilot(engine: SimulationEngine) -> None:
    """Shoot the nearest creature; drop a tower when affordable."""
    world = engine.world
    target = nearest(world.player, world.creatures)
    if target is not None:
        engine.aim_and_fire(target.x, target.y)
    engine.build("tower")


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless survival simulation run")
    parser.add_argument("--seconds", type=float, default=120.0, help="Game seconds to simulate")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed")
    parser.add_argument("--autopilot", action="store_true", help="Let a simple bot play")
    parser.add_argument("--log-level", type=str, default="INFO", help="loguru level")
    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    engine = SimulationEngine(seed=args.seed)
    nightfalls = engine.event_bus.subscribe(event_types=["nightfall"])
    frames = int(args.seconds * 1000 / engine.settings.frame_ms)
    for _ in range(frames):
        if engine.game_over:
            break
        if args.autopilot:
            autopilot(engine)
        engine.tick()

    state = engine.get_state()
    player = state["player"]
    res = player["resources"]
    elapsed = engine.frame_count * engine.settings.frame_ms / 1000
    print(f"\n{'='*60}")
    print("  RUN SUMMARY")
    print(f"{'='*60}")
    print(f"  Game time:   {elapsed:.1f}s ({engine.frame_count} frames)")
    print(f"  Outcome:     {'GAME OVER' if state['game_over'] else 'survived'}")
    print(f"  Wave:        {state['wave']} ({'day' if state['is_day'] else 'night'}, "
          f"{state['cycle_remaining']}s left)")
    print(f"  Score:       {player['score']}")
    print(f"  Resources:   wood={res['wood']} stone={res['stone']} gold={res['gold']}")
    print(f"  Creatures:   {len(state['creatures'])}")
    print(f"  Nightfalls:  {nightfalls.qsize()}")
    print(f"  Structures:  {len(state['structures'])}")


if __name__ == "__main__":
    main()
