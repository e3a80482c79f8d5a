"""
Fireflies
=========

A flock of fireflies drifting inside a cylinder. A few leaders wander
freely; everyone else separates, aligns and coheres around neighbours or
the leader they are currently assigned to.

Controls:
    - W/S: Rotate camera up/down
    - A/D: Rotate camera left/right
    - Q/E: Zoom in/out
    - Mouse drag: Rotate camera
    - Mouse wheel: Zoom
    - 1/2/3/4: Leader / random / fixed hue / rainbow colors
    - Enter or /: Open the command console
        color leader | color random | color hue <h> | color rainbow [<speed>]
        speed <value>
    - ESC: Quit

Usage:
    python main.py                         # Interactive window
    python main.py --seed 7                # Reproducible run
    python main.py --headless --ticks 600  # Simulate without a window
"""

import argparse

import numpy as np

from config import fireflies as config


def run_headless(ticks: int, seed: int = None):
    from fireflies import Simulation, Spawner

    simulation = Simulation(rng=np.random.default_rng(seed))
    spawner = Spawner(simulation)
    dt = config.SIMULATION["headless_dt"]

    for _ in range(ticks):
        spawner.update(dt)
        simulation.step(dt)

    flock = simulation.flock
    if not len(flock):
        print(f"[Headless] {ticks} ticks, no fireflies spawned")
        return

    speeds = np.linalg.norm(flock.velocities[:len(flock)], axis=1)
    print(f"[Headless] {ticks} ticks, {simulation.elapsed:.1f}s simulated, "
          f"{len(flock)} fireflies, speed {speeds.min():.2f}-{speeds.max():.2f}")


def main():
    parser = argparse.ArgumentParser(description="Fireflies flocking simulation")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument("--ticks", type=int, default=600, help="Ticks to run in headless mode")
    args = parser.parse_args()

    if args.headless:
        run_headless(args.ticks, args.seed)
        return

    from core import Application

    app = Application(seed=args.seed)
    app.run()


if __name__ == "__main__":
    main()
