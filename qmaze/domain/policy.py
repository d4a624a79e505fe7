"""Epsilon-greedy action selection."""

from typing import Tuple

from .errors import AgentTrappedError, InvalidConfigurationError
from .gridworld import GridWorld
from .qtable import QTable
from .types import Action


class EpsilonGreedyPolicy:
    """Explores with probability epsilon, otherwise exploits the Q-table.

    Only actions that GridWorld reports as valid are ever considered, so the
    agent never picks a move into a wall or off the grid.
    """

    def __init__(self, grid: GridWorld, q_table: QTable):
        self.grid = grid
        self.q_table = q_table

    def select_action(self, pos: Tuple[int, int], epsilon: float, rng) -> Action:
        """
        Pick an action for ``pos``.

        Args:
            pos: Current agent position
            epsilon: Exploration probability in [0, 1]
            rng: Source with ``random()`` and ``choice()`` (e.g. SeededRNG)

        Raises:
            InvalidConfigurationError: If epsilon is outside [0, 1]
            AgentTrappedError: If no action is valid from ``pos``
        """
        if not 0.0 <= epsilon <= 1.0:
            raise InvalidConfigurationError(f"epsilon must be within [0, 1], got {epsilon}")

        valid_actions = self.grid.valid_actions(pos)
        if not valid_actions:
            raise AgentTrappedError(pos)

        if rng.random() < epsilon:
            return rng.choice(valid_actions)
        return self.q_table.best_action(pos, valid_actions)
