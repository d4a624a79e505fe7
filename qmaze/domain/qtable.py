"""Tabular Q-value storage."""

from typing import Dict, Iterable, Tuple

import numpy as np

from .errors import AgentTrappedError, OutOfBoundsError
from .types import ACTIONS, ACTION_TO_INT, Action


class QTable:
    """Q-value estimates for every (position, action) pair of an N x N grid.

    Values live in a ``(N, N, 4)`` float array indexed ``[y, x, action]`` so
    that ``max_values()`` lines up with the row-major cell layout.
    """

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError(f"QTable size must be positive, got {size}")
        self._size = size
        self._values = np.zeros((size, size, len(ACTIONS)), dtype=float)

    @property
    def size(self) -> int:
        return self._size

    def _index(self, pos: Tuple[int, int]) -> Tuple[int, int]:
        x, y = pos
        if not (0 <= x < self._size and 0 <= y < self._size):
            raise OutOfBoundsError(pos, self._size)
        return y, x

    def get(self, pos: Tuple[int, int], action: Action) -> float:
        """Get Q-value for state-action pair (0.0 until written)."""
        y, x = self._index(pos)
        return float(self._values[y, x, ACTION_TO_INT[action]])

    def set(self, pos: Tuple[int, int], action: Action, value: float) -> None:
        """Set Q-value for state-action pair."""
        y, x = self._index(pos)
        self._values[y, x, ACTION_TO_INT[action]] = value

    def values(self, pos: Tuple[int, int]) -> Dict[Action, float]:
        """All four estimates at ``pos`` keyed by action."""
        y, x = self._index(pos)
        return {action: float(self._values[y, x, i]) for i, action in enumerate(ACTIONS)}

    def max_value(self, pos: Tuple[int, int]) -> float:
        """Maximum estimate over the four actions; 0.0 for untouched cells."""
        y, x = self._index(pos)
        return float(self._values[y, x].max())

    def max_values(self) -> np.ndarray:
        """``(N, N)`` copy of per-cell maxima, indexed ``[y, x]``."""
        return self._values.max(axis=2)

    def best_action(self, pos: Tuple[int, int], candidates: Iterable[Action]) -> Action:
        """
        Highest-valued action among ``candidates``.

        Ties go to the earliest action in the order up, down, left, right,
        whatever order ``candidates`` arrives in.

        Raises:
            AgentTrappedError: If ``candidates`` is empty
        """
        y, x = self._index(pos)
        ordered = sorted(set(candidates), key=ACTION_TO_INT.__getitem__)
        if not ordered:
            raise AgentTrappedError(pos)

        q_values = self._values[y, x]
        best = ordered[0]
        best_value = q_values[ACTION_TO_INT[best]]
        for action in ordered[1:]:
            value = q_values[ACTION_TO_INT[action]]
            if value > best_value:
                best, best_value = action, value
        return best

    def reset(self) -> None:
        """Zero every estimate."""
        self._values.fill(0.0)
