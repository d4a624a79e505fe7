"""Grid world: walls, rewards and movement rules for the maze."""

from typing import Iterator, List, Tuple

from .errors import InvalidMoveError, OutOfBoundsError
from .types import ACTIONS, Action, Cell, Position, move


class GridWorld:
    """An N x N grid of cells with a single goal.

    Cells are stored row-major, ``cells[y][x]``. The goal cell is never a wall.
    """

    def __init__(self, cells: List[List[Cell]], goal: Tuple[int, int],
                 relocated_reward_goal: float = 100.0, relocated_reward_step: float = -10.0):
        size = len(cells)
        if size == 0 or any(len(row) != size for row in cells):
            raise ValueError("Grid must be square and non-empty")

        self._cells = cells
        self._size = size
        self._goal = Position(*goal)
        self._check_bounds(self._goal)
        if self.cell(self._goal).is_wall:
            raise ValueError(f"Goal position {tuple(self._goal)} is a wall")
        self.relocated_reward_goal = relocated_reward_goal
        self.relocated_reward_step = relocated_reward_step

    @classmethod
    def generate(cls, size: int, wall_probability: float, start: Tuple[int, int],
                 goal: Tuple[int, int], rng, reward_goal: float = 1000.0,
                 reward_step: float = -1.0, **kwargs) -> "GridWorld":
        """
        Generate a random grid.

        One draw is taken from ``rng`` for every cell in row-major order, so the
        layout of the other cells does not depend on where start and goal sit.
        Start and goal are masked out of the wall draw.

        Args:
            size: Side length N (must be >= 1)
            wall_probability: Probability in [0, 1] that a cell becomes a wall
            start: Start coordinate, never a wall
            goal: Goal coordinate, never a wall
            rng: Source with a ``random()`` method (e.g. SeededRNG)
            reward_goal: Reward of the goal cell
            reward_step: Reward of every other cell

        Raises:
            ValueError: If size or wall_probability are out of range
            OutOfBoundsError: If start or goal lie outside the grid
        """
        if size <= 0:
            raise ValueError(f"Grid size must be positive, got {size}")
        if not (0.0 <= wall_probability <= 1.0):
            raise ValueError(f"Wall probability must be between 0.0 and 1.0, got {wall_probability}")

        start = Position(*start)
        goal = Position(*goal)
        for pos in (start, goal):
            x, y = pos
            if not (0 <= x < size and 0 <= y < size):
                raise OutOfBoundsError(pos, size)

        protected = {start, goal}
        cells = []
        for y in range(size):
            row = []
            for x in range(size):
                coord = Position(x, y)
                draw = rng.random() < wall_probability
                row.append(Cell(
                    coord=coord,
                    is_wall=draw and coord not in protected,
                    reward=reward_goal if coord == goal else reward_step,
                ))
            cells.append(row)

        return cls(cells, goal, **kwargs)

    # Properties

    @property
    def size(self) -> int:
        """Side length of the grid."""
        return self._size

    @property
    def goal(self) -> Position:
        return self._goal

    # Queries

    def in_bounds(self, pos: Tuple[int, int]) -> bool:
        """Check if coordinate is within grid bounds."""
        x, y = pos
        return 0 <= x < self._size and 0 <= y < self._size

    def _check_bounds(self, pos: Tuple[int, int]) -> None:
        if not self.in_bounds(pos):
            raise OutOfBoundsError(pos, self._size)

    def cell(self, pos: Tuple[int, int]) -> Cell:
        """Get the cell at ``pos``, raising OutOfBoundsError outside the grid."""
        self._check_bounds(pos)
        return self._cells[pos[1]][pos[0]]

    def is_wall(self, pos: Tuple[int, int]) -> bool:
        return self.cell(pos).is_wall

    def reward_at(self, pos: Tuple[int, int]) -> float:
        return self.cell(pos).reward

    def rows(self) -> Iterator[List[Cell]]:
        """Iterate rows top to bottom for renderers."""
        return iter(self._cells)

    def wall_count(self) -> int:
        return sum(cell.is_wall for row in self._cells for cell in row)

    def valid_actions(self, pos: Tuple[int, int]) -> Tuple[Action, ...]:
        """Actions leading to an in-bounds, non-wall cell, in priority order."""
        self._check_bounds(pos)
        valid = []
        for action in ACTIONS:
            next_pos = move(pos, action)
            if self.in_bounds(next_pos) and not self.is_wall(next_pos):
                valid.append(action)
        return tuple(valid)

    # Transitions

    def step(self, pos: Tuple[int, int], action: Action) -> Position:
        """
        Return the position reached by taking ``action`` from ``pos``.

        Raises:
            OutOfBoundsError: If ``pos`` is outside the grid
            InvalidMoveError: If the move leaves the grid or enters a wall
        """
        self._check_bounds(pos)
        if action not in ACTIONS:
            raise InvalidMoveError(pos, action)

        next_pos = move(pos, action)
        if not self.in_bounds(next_pos) or self.is_wall(next_pos):
            raise InvalidMoveError(pos, action)
        return next_pos

    # Mutation

    def relocate_goal(self, new_goal: Tuple[int, int]) -> None:
        """
        Move the goal and rewrite every cell's reward in one pass.

        A wall under the new goal is cleared; no other wall changes.
        """
        new_goal = Position(*new_goal)
        self._check_bounds(new_goal)

        goal_cell = self.cell(new_goal)
        if goal_cell.is_wall:
            goal_cell.is_wall = False

        for row in self._cells:
            for cell in row:
                cell.reward = (self.relocated_reward_goal if cell.coord == new_goal
                               else self.relocated_reward_step)
        self._goal = new_goal

    def __repr__(self) -> str:
        return f"GridWorld(size={self._size}, goal={tuple(self._goal)}, walls={self.wall_count()})"
