"""Tests for src/analysis/heat_maps.py — first-pick value heat maps.

Tests verify data-matrix shapes and value invariants (no display required)
plus that each plot function returns a well-formed matplotlib Figure.
The Agg backend is activated before any pyplot import so CI/CD environments
without a display server can run the suite safely.
"""

from __future__ import annotations

import os

import matplotlib

matplotlib.use("Agg")  # must precede any pyplot import

import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np
import pytest

from src.analysis.heat_maps import (
    build_move_value_matrix,
    plot_initial_state_heatmap,
    plot_move_value_heatmap,
)
from src.engine.initial_states import all_initial_states
from src.solvers.backward_induction import Strategy


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


# ─── build_move_value_matrix ──────────────────────────────────────────────────


class TestBuildMoveValueMatrix:
    def test_shape(self, solved_n3: Strategy) -> None:
        matrix, labels = build_move_value_matrix(3, solved_n3)
        assert matrix.shape == (20, 3)
        assert len(labels) == 20

    def test_integer_values_in_range(self, solved_n3: Strategy) -> None:
        matrix, _ = build_move_value_matrix(3, solved_n3)
        assert matrix.dtype.kind == "i"
        assert matrix.min() >= -3
        assert matrix.max() <= 3

    def test_labels_follow_generator_order(self, solved_n3: Strategy) -> None:
        _, labels = build_move_value_matrix(3, solved_n3)
        assert labels[0] == "1 2 3"
        assert labels[-1] == "4 5 6"
        assert labels == [" ".join(map(str, s.mine)) for s in all_initial_states(3)]

    def test_documented_row(self, solved_n3: Strategy) -> None:
        matrix, labels = build_move_value_matrix(3, solved_n3)
        row = labels.index("1 4 5")
        assert matrix[row].tolist() == [-1, -1, -1]

    def test_row_max_is_position_value(self, solved_n3: Strategy) -> None:
        matrix, _ = build_move_value_matrix(3, solved_n3)
        for r, state in enumerate(all_initial_states(3)):
            assert matrix[r].max() == solved_n3[state].best_score

    def test_extreme_rows(self, solved_n3: Strategy) -> None:
        matrix, _ = build_move_value_matrix(3, solved_n3)
        assert matrix[0].tolist() == [-3, -3, -3]
        assert matrix[-1].tolist() == [3, 3, 3]

    def test_solves_when_table_missing(self) -> None:
        matrix, _ = build_move_value_matrix(2)
        assert matrix.shape == (6, 2)

    def test_fills_table_passed_in(self) -> None:
        table: Strategy = {}
        build_move_value_matrix(2, table)
        for state in all_initial_states(2):
            assert state in table

    def test_zero_teams_raises(self) -> None:
        with pytest.raises(ValueError):
            build_move_value_matrix(0)


# ─── Plot functions ───────────────────────────────────────────────────────────


class TestPlotMoveValueHeatmap:
    def test_returns_figure(self) -> None:
        matrix = np.array([[-1, 1], [2, 0]])
        fig = plot_move_value_heatmap(matrix, ["1 3", "2 4"], "test", show=False)
        assert isinstance(fig, matplotlib.figure.Figure)

    def test_marks_best_cells(self) -> None:
        matrix = np.array([[-1, 1], [2, 2]])
        fig = plot_move_value_heatmap(matrix, ["a", "b"], "test", show=False)
        texts = [t.get_text() for t in fig.axes[0].texts]
        assert texts == ["-1", "+1*", "+2*", "+2*"]

    def test_save_path_writes_file(self, tmp_path) -> None:
        path = str(tmp_path / "heat.png")
        plot_move_value_heatmap(np.array([[0]]), ["1"], "test", show=False, save_path=path)
        assert os.path.exists(path)
        assert os.path.getsize(path) > 0


class TestPlotInitialStateHeatmap:
    def test_returns_figure(self, solved_n3: Strategy) -> None:
        fig = plot_initial_state_heatmap(3, solved_n3, show=False)
        assert isinstance(fig, matplotlib.figure.Figure)

    def test_title_names_team_count(self, solved_n3: Strategy) -> None:
        fig = plot_initial_state_heatmap(3, solved_n3, show=False)
        assert "n=3" in fig._suptitle.get_text()

    def test_save_path_writes_file(self, tmp_path) -> None:
        path = str(tmp_path / "initial.png")
        plot_initial_state_heatmap(1, show=False, save_path=path)
        assert os.path.exists(path)
