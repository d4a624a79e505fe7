"""Tests for epsilon-greedy action selection."""

from collections import Counter

import pytest

from qmaze.domain.errors import AgentTrappedError, InvalidConfigurationError
from qmaze.domain.policy import EpsilonGreedyPolicy
from qmaze.domain.qtable import QTable
from qmaze.utils.rng import SeededRNG


@pytest.fixture
def policy(open_grid):
    return EpsilonGreedyPolicy(open_grid, QTable(open_grid.size))


class TestEpsilonGreedyPolicy:

    def test_greedy_when_epsilon_zero(self, policy):
        policy.q_table.set((1, 1), "left", 5.0)
        rng = SeededRNG(0)
        picks = {policy.select_action((1, 1), 0.0, rng) for _ in range(100)}
        assert picks == {"left"}

    def test_greedy_tie_break_without_estimates(self, policy):
        assert policy.select_action((0, 0), 0.0, SeededRNG(0)) == "down"

    def test_only_valid_actions_are_chosen(self, policy):
        rng = SeededRNG(3)
        picks = {policy.select_action((0, 0), 1.0, rng) for _ in range(200)}
        assert picks == {"down", "right"}

    def test_uniform_when_epsilon_one(self, policy):
        policy.q_table.set((1, 1), "up", 100.0)
        rng = SeededRNG(42)
        draws = 10_000
        counts = Counter(policy.select_action((1, 1), 1.0, rng) for _ in range(draws))
        for action in ("up", "down", "left", "right"):
            assert abs(counts[action] / draws - 0.25) < 0.02

    def test_same_seed_same_choices(self, policy):
        def picks(seed):
            rng = SeededRNG(seed)
            return [policy.select_action((1, 1), 0.5, rng) for _ in range(50)]

        assert picks(9) == picks(9)

    @pytest.mark.parametrize("epsilon", [-0.1, 1.5])
    def test_rejects_epsilon_out_of_range(self, policy, epsilon):
        with pytest.raises(InvalidConfigurationError):
            policy.select_action((1, 1), epsilon, SeededRNG(0))

    def test_trapped_agent(self, enclosed_grid):
        grid, start = enclosed_grid
        policy = EpsilonGreedyPolicy(grid, QTable(grid.size))
        with pytest.raises(AgentTrappedError):
            policy.select_action(start, 0.5, SeededRNG(0))
