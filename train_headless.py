#!/usr/bin/env python3
"""
Headless Q-learning training for the maze.
Trains an agent without the GUI and prints progress and the learned path.
"""

import argparse
import logging
import sys

from qmaze.domain.errors import MazeError
from qmaze.domain.learner import QLearner
from qmaze.domain.types import MazeConfig
from qmaze.utils.grid_factory import default_endpoints, generate_grid_world
from qmaze.utils.rng import SeededRNG


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Train a Q-learning maze agent without the GUI")
    parser.add_argument("--size", type=int, default=10, help="Grid side length")
    parser.add_argument("--walls", type=float, default=0.2, help="Wall probability per cell")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--episodes", type=int, default=500, help="Number of episodes to train")
    parser.add_argument("--max-steps", type=int, default=500, help="Step cap per episode")
    parser.add_argument("--alpha", type=float, default=0.1, help="Learning rate")
    parser.add_argument("--gamma", type=float, default=0.9, help="Discount factor")
    parser.add_argument("--epsilon", type=float, default=0.1, help="Exploration probability")
    parser.add_argument("--epsilon-decay", type=float, default=1.0, help="Epsilon multiplier per episode")
    parser.add_argument("--report-every", type=int, default=50, help="Episodes between progress lines")
    return parser


def render_path(grid, path) -> str:
    """ASCII picture of the maze with the path drawn in."""
    on_path = {tuple(pos) for pos in path}
    lines = []
    for row in grid.rows():
        chars = []
        for cell in row:
            if tuple(cell.coord) == tuple(grid.goal):
                chars.append("G")
            elif path and tuple(cell.coord) == tuple(path[0]):
                chars.append("S")
            elif cell.is_wall:
                chars.append("#")
            elif tuple(cell.coord) in on_path:
                chars.append("*")
            else:
                chars.append(".")
        lines.append(" ".join(chars))
    return "\n".join(lines)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING)

    config = MazeConfig(
        grid_size=args.size,
        wall_probability=args.walls,
        learning_rate=args.alpha,
        discount_factor=args.gamma,
        epsilon=args.epsilon,
        epsilon_decay=args.epsilon_decay,
        seed=args.seed,
    )

    try:
        config.validate()
        rng = SeededRNG(args.seed)
        start, goal = default_endpoints(config.grid_size)
        grid = generate_grid_world(config, start=start, goal=goal, rng=rng)
        learner = QLearner(grid, config, start, rng=rng)
    except MazeError as e:
        print(f"Invalid configuration: {e}")
        return 2

    print("Q-Learning Maze - headless training")
    print("=" * 40)
    print(f"Grid: {grid.size}x{grid.size}, walls: {grid.wall_count()}")
    print(f"Start: {tuple(start)} -> Goal: {tuple(goal)}")
    print(f"alpha={config.learning_rate} gamma={config.discount_factor} epsilon={config.epsilon}")

    results = []
    report_every = max(1, args.report_every)
    try:
        for done in range(0, args.episodes, report_every):
            batch = min(report_every, args.episodes - done)
            results.extend(learner.run_episodes(batch, args.max_steps))
            recent = results[-batch:]
            successes = sum(1 for ep in recent if ep.reached_goal)
            print(f"Episode {len(results)}: success rate {successes / len(recent):.1%}, "
                  f"epsilon {learner.epsilon:.3f}, total reward {learner.stats.total_reward:g}")
    except MazeError as e:
        print(f"\nTraining stopped: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nTraining interrupted by user")
        return 1

    path = learner.greedy_path()
    reached = bool(path) and path[-1] == grid.goal
    print()
    print(render_path(grid, path))
    if reached:
        print(f"\nGreedy path reaches the goal in {len(path) - 1} steps")
    else:
        print("\nGreedy path does not reach the goal yet")
    return 0


if __name__ == "__main__":
    sys.exit(main())
