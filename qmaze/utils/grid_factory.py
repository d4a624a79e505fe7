"""Grid factory for creating random, open and hand-drawn maze grids."""

from typing import Optional, Sequence, Tuple

from ..domain.gridworld import GridWorld
from ..domain.types import Cell, Coord, MazeConfig, Position
from .rng import SeededRNG


def default_endpoints(size: int) -> Tuple[Position, Position]:
    """Top-left start and bottom-right goal."""
    return Position(0, 0), Position(size - 1, size - 1)


def generate_grid_world(config: MazeConfig, start: Optional[Coord] = None,
                        goal: Optional[Coord] = None,
                        rng: Optional[SeededRNG] = None) -> GridWorld:
    """
    Generate a random maze from a configuration.

    Args:
        config: Supplies size, wall probability and rewards
        start: Start coordinate (top-left if None)
        goal: Goal coordinate (bottom-right if None)
        rng: Random number generator (seeded from ``config.seed`` if None)

    Returns:
        New GridWorld with walls drawn independently per cell
    """
    config.validate()
    default_start, default_goal = default_endpoints(config.grid_size)
    if rng is None:
        rng = SeededRNG(config.seed)

    return GridWorld.generate(
        config.grid_size,
        config.wall_probability,
        start if start is not None else default_start,
        goal if goal is not None else default_goal,
        rng,
        reward_goal=config.reward_goal,
        reward_step=config.reward_step,
        relocated_reward_goal=config.relocated_reward_goal,
        relocated_reward_step=config.relocated_reward_step,
    )


def create_open_grid(size: int, goal: Optional[Coord] = None,
                     reward_goal: float = 1000.0, reward_step: float = -1.0,
                     relocated_reward_goal: float = 100.0,
                     relocated_reward_step: float = -10.0) -> GridWorld:
    """Create a wall-free grid (goal bottom-right if None)."""
    if size <= 0:
        raise ValueError(f"Grid size must be positive, got {size}")
    if goal is None:
        goal = default_endpoints(size)[1]
    goal = Position(*goal)

    cells = [
        [Cell(coord=Position(x, y), reward=reward_goal if (x, y) == goal else reward_step)
         for x in range(size)]
        for y in range(size)
    ]
    return GridWorld(cells, goal, relocated_reward_goal, relocated_reward_step)


def grid_from_layout(layout: Sequence[str], reward_goal: float = 1000.0,
                     reward_step: float = -1.0, relocated_reward_goal: float = 100.0,
                     relocated_reward_step: float = -10.0) -> Tuple[GridWorld, Position]:
    """
    Build a grid from rows of characters.

    ``#`` is a wall, ``S`` the start, ``G`` the goal and anything else is open.
    The relocated rewards are written when the goal is later moved.

    Returns:
        Tuple of (grid, start_coord)

    Raises:
        ValueError: If the layout is not square or lacks exactly one S and one G
    """
    rows = [row for row in layout if row.strip()]
    size = len(rows)
    if size == 0 or any(len(row) != size for row in rows):
        raise ValueError("Layout must be a non-empty square of characters")

    starts = [Position(x, y) for y, row in enumerate(rows) for x, ch in enumerate(row) if ch == "S"]
    goals = [Position(x, y) for y, row in enumerate(rows) for x, ch in enumerate(row) if ch == "G"]
    if len(starts) != 1 or len(goals) != 1:
        raise ValueError("Layout needs exactly one 'S' and one 'G'")
    goal = goals[0]

    cells = [
        [Cell(coord=Position(x, y), is_wall=ch == "#",
              reward=reward_goal if (x, y) == goal else reward_step)
         for x, ch in enumerate(row)]
        for y, row in enumerate(rows)
    ]
    return GridWorld(cells, goal, relocated_reward_goal, relocated_reward_step), starts[0]
