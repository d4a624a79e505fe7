"""Tests for Q-value storage and greedy action choice."""

import numpy as np
import pytest

from qmaze.domain.errors import AgentTrappedError, OutOfBoundsError
from qmaze.domain.qtable import QTable


class TestQTableStorage:

    def test_defaults_to_zero(self):
        table = QTable(3)
        assert table.get((1, 2), "left") == 0.0
        assert table.values((0, 0)) == {"up": 0.0, "down": 0.0, "left": 0.0, "right": 0.0}
        assert table.max_value((2, 2)) == 0.0

    def test_set_and_get(self):
        table = QTable(3)
        table.set((2, 1), "down", 4.5)
        assert table.get((2, 1), "down") == 4.5
        assert table.get((1, 2), "down") == 0.0

    def test_max_value_is_a_pure_read(self):
        table = QTable(3)
        table.set((1, 1), "up", -3.0)
        table.set((1, 1), "right", 7.0)
        before = table.values((1, 1))
        assert table.max_value((1, 1)) == 7.0
        assert table.max_value((1, 1)) == 7.0
        assert table.values((1, 1)) == before

    def test_max_value_includes_untouched_actions(self):
        table = QTable(3)
        for action in ("up", "down", "left", "right"):
            table.set((0, 0), action, -5.0)
        assert table.max_value((0, 0)) == -5.0
        table.set((0, 1), "down", -5.0)
        assert table.max_value((0, 1)) == 0.0

    def test_max_values_layout(self):
        table = QTable(3)
        table.set((2, 0), "left", 9.0)
        grid = table.max_values()
        assert grid.shape == (3, 3)
        assert grid[0, 2] == 9.0
        assert np.count_nonzero(grid) == 1

    def test_out_of_bounds(self):
        table = QTable(3)
        with pytest.raises(OutOfBoundsError):
            table.get((3, 0), "up")
        with pytest.raises(OutOfBoundsError):
            table.set((0, -1), "up", 1.0)

    def test_reset(self):
        table = QTable(2)
        table.set((1, 1), "up", 3.0)
        table.reset()
        assert table.max_value((1, 1)) == 0.0

    def test_rejects_empty_size(self):
        with pytest.raises(ValueError):
            QTable(0)


class TestBestAction:

    def test_picks_highest_value(self):
        table = QTable(3)
        table.set((1, 1), "left", 2.0)
        table.set((1, 1), "right", 3.0)
        assert table.best_action((1, 1), ["up", "down", "left", "right"]) == "right"

    def test_ties_follow_priority_order(self):
        table = QTable(3)
        assert table.best_action((1, 1), ["right", "left", "down", "up"]) == "up"
        assert table.best_action((1, 1), ["right", "left"]) == "left"
        table.set((1, 1), "down", 1.0)
        table.set((1, 1), "right", 1.0)
        assert table.best_action((1, 1), ["right", "down", "up"]) == "down"

    def test_only_candidates_are_considered(self):
        table = QTable(3)
        table.set((1, 1), "up", 50.0)
        table.set((1, 1), "left", -2.0)
        table.set((1, 1), "right", -1.0)
        assert table.best_action((1, 1), ["left", "right"]) == "right"

    def test_no_candidates_means_trapped(self):
        table = QTable(3)
        with pytest.raises(AgentTrappedError):
            table.best_action((1, 1), [])
