"""Tests for the GridWorld: generation, movement rules and goal relocation."""

import pytest

from qmaze.domain.errors import InvalidMoveError, OutOfBoundsError
from qmaze.domain.gridworld import GridWorld
from qmaze.domain.types import Position
from qmaze.utils.grid_factory import grid_from_layout
from qmaze.utils.rng import SeededRNG


def wall_set(grid):
    return {tuple(cell.coord) for row in grid.rows() for cell in row if cell.is_wall}


class TestGeneration:
    """Random wall placement."""

    def test_same_seed_same_layout(self):
        a = GridWorld.generate(10, 0.2, (0, 0), (9, 9), SeededRNG(7))
        b = GridWorld.generate(10, 0.2, (0, 0), (9, 9), SeededRNG(7))
        assert wall_set(a) == wall_set(b)

    def test_different_seeds_differ(self):
        a = GridWorld.generate(10, 0.4, (0, 0), (9, 9), SeededRNG(1))
        b = GridWorld.generate(10, 0.4, (0, 0), (9, 9), SeededRNG(2))
        assert wall_set(a) != wall_set(b)

    def test_start_and_goal_never_walls(self):
        grid = GridWorld.generate(5, 1.0, (1, 2), (4, 0), SeededRNG(0))
        assert not grid.is_wall((1, 2))
        assert not grid.is_wall((4, 0))
        assert grid.wall_count() == 5 * 5 - 2

    def test_other_cells_do_not_depend_on_endpoints(self):
        a = GridWorld.generate(6, 0.3, (0, 0), (5, 5), SeededRNG(11))
        b = GridWorld.generate(6, 0.3, (2, 3), (5, 5), SeededRNG(11))
        assert wall_set(a) - {(2, 3)} == wall_set(b) - {(0, 0)}

    def test_no_walls_at_zero_probability(self):
        grid = GridWorld.generate(4, 0.0, (0, 0), (3, 3), SeededRNG(0))
        assert grid.wall_count() == 0

    def test_generation_rewards(self):
        grid = GridWorld.generate(4, 0.0, (0, 0), (3, 3), SeededRNG(0))
        assert grid.reward_at((3, 3)) == 1000.0
        assert all(
            cell.reward == -1.0 for row in grid.rows() for cell in row if cell.coord != (3, 3)
        )

    @pytest.mark.parametrize("size, probability", [(0, 0.2), (4, -0.1), (4, 1.5)])
    def test_rejects_bad_arguments(self, size, probability):
        with pytest.raises(ValueError):
            GridWorld.generate(size, probability, (0, 0), (0, 0), SeededRNG(0))

    def test_rejects_goal_outside_grid(self):
        with pytest.raises(OutOfBoundsError):
            GridWorld.generate(4, 0.2, (0, 0), (4, 4), SeededRNG(0))


class TestQueries:
    """Bounds, walls and valid actions."""

    def test_out_of_bounds_is_an_error(self, open_grid):
        with pytest.raises(OutOfBoundsError):
            open_grid.is_wall((3, 0))
        with pytest.raises(OutOfBoundsError):
            open_grid.reward_at((-1, 2))
        with pytest.raises(ValueError):
            open_grid.valid_actions((0, 5))

    def test_in_bounds(self, open_grid):
        assert open_grid.in_bounds((2, 2))
        assert not open_grid.in_bounds((2, 3))

    def test_corner_actions(self, open_grid):
        assert open_grid.valid_actions((0, 0)) == ("down", "right")
        assert open_grid.valid_actions((2, 2)) == ("up", "left")

    def test_center_actions_in_priority_order(self, open_grid):
        assert open_grid.valid_actions((1, 1)) == ("up", "down", "left", "right")

    def test_walls_are_excluded(self):
        grid, start = grid_from_layout([
            "S#.",
            "...",
            "..G",
        ])
        assert grid.is_wall((1, 0))
        assert grid.valid_actions(start) == ("down",)
        assert "up" not in grid.valid_actions((1, 1))


class TestStep:
    """Movement."""

    def test_moves(self, open_grid):
        assert open_grid.step((1, 1), "up") == (1, 0)
        assert open_grid.step((1, 1), "down") == (1, 2)
        assert open_grid.step((1, 1), "left") == (0, 1)
        assert open_grid.step((1, 1), "right") == Position(2, 1)

    def test_off_grid_move_is_invalid(self, open_grid):
        with pytest.raises(InvalidMoveError):
            open_grid.step((0, 0), "up")

    def test_move_into_wall_is_invalid(self):
        grid, start = grid_from_layout([
            "S#.",
            "...",
            "..G",
        ])
        with pytest.raises(InvalidMoveError):
            grid.step(start, "right")

    def test_unknown_action_is_invalid(self, open_grid):
        with pytest.raises(InvalidMoveError):
            open_grid.step((1, 1), "jump")


class TestRelocateGoal:
    """Bulk reward rewrite on goal relocation."""

    def test_rewrites_every_reward(self, open_grid):
        open_grid.relocate_goal((0, 2))
        assert open_grid.goal == (0, 2)
        assert open_grid.reward_at((0, 2)) == 100.0
        assert open_grid.reward_at((2, 2)) == -10.0
        rewards = [cell.reward for row in open_grid.rows() for cell in row]
        assert rewards.count(100.0) == 1
        assert rewards.count(-10.0) == 8

    def test_clears_wall_under_new_goal_only(self):
        grid, _ = grid_from_layout([
            "S#.",
            ".#.",
            "..G",
        ])
        grid.relocate_goal((1, 1))
        assert not grid.is_wall((1, 1))
        assert grid.is_wall((1, 0))
        assert grid.wall_count() == 1

    def test_out_of_bounds_goal(self, open_grid):
        with pytest.raises(OutOfBoundsError):
            open_grid.relocate_goal((3, 3))
        assert open_grid.goal == (2, 2)
