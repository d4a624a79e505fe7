"""Tests for the headless training script."""

import train_headless
from qmaze.utils.grid_factory import grid_from_layout


def test_trains_open_grid(capsys):
    code = train_headless.main([
        "--size", "4", "--walls", "0", "--seed", "1",
        "--episodes", "40", "--report-every", "20", "--epsilon", "0.3",
    ])
    out = capsys.readouterr().out
    assert code == 0
    assert "Episode 20:" in out
    assert "Episode 40:" in out
    assert "Greedy path" in out


def test_invalid_configuration(capsys):
    assert train_headless.main(["--alpha", "2.0"]) == 2
    assert "Invalid configuration" in capsys.readouterr().out


def test_render_path():
    grid, start = grid_from_layout(["S#", ".G"])
    picture = train_headless.render_path(grid, [start, (0, 1), (1, 1)])
    assert picture == "S #\n* G"
