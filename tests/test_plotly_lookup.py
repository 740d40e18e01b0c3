"""Tests for src/analysis/plotly_lookup.py — interactive Plotly lookup tool.

Tests verify that each public function returns a well-formed go.Figure with the
expected trace count, data invariants, and hover text.  The save helper is
tested against a temporary file path.

No display server is required: Plotly figures are in-memory objects and the
save helper writes HTML without rendering.
"""

from __future__ import annotations

import os

import plotly.graph_objects as go
import pytest

from src.analysis.plotly_lookup import (
    build_lookup_figure,
    build_score_distribution_figure,
    save_lookup_html,
)
from src.solvers.backward_induction import Strategy


# ─── build_lookup_figure ──────────────────────────────────────────────────────


class TestBuildLookupFigure:
    def test_returns_figure(self, solved_n3: Strategy) -> None:
        assert isinstance(build_lookup_figure(3, solved_n3), go.Figure)

    def test_single_heatmap_trace(self, solved_n3: Strategy) -> None:
        fig = build_lookup_figure(3, solved_n3)
        assert len(fig.data) == 1
        assert isinstance(fig.data[0], go.Heatmap)

    def test_z_shape(self, solved_n3: Strategy) -> None:
        z = build_lookup_figure(3, solved_n3).data[0].z
        assert len(z) == 20
        assert all(len(row) == 3 for row in z)

    def test_color_range_is_symmetric(self) -> None:
        trace = build_lookup_figure(2).data[0]
        assert trace.zmin == -2
        assert trace.zmax == 2

    def test_title_names_team_count(self) -> None:
        fig = build_lookup_figure(2)
        assert "n=2" in fig.layout.title.text

    def test_hover_text(self, solved_n3: Strategy) -> None:
        trace = build_lookup_figure(3, solved_n3).data[0]
        row = list(trace.y).index("1 4 5")
        hover = trace.text[row][0]
        assert "Own teams: <b>[1, 4, 5]</b>" in hover
        assert "Opponent: [2, 3, 6]" in hover
        assert "Value: <b>-1</b>" in hover
        assert "Optimal: yes" in hover


# ─── build_score_distribution_figure ──────────────────────────────────────────


class TestBuildScoreDistributionFigure:
    def test_one_trace_per_team_count(self) -> None:
        fig = build_score_distribution_figure(ns=(1, 2))
        assert len(fig.data) == 2
        assert [t.name for t in fig.data] == ["n=1", "n=2"]

    def test_shares_sum_to_one(self) -> None:
        fig = build_score_distribution_figure(ns=(2,))
        assert sum(fig.data[0].y) == pytest.approx(1.0)

    def test_two_per_side_shares(self) -> None:
        trace = build_score_distribution_figure(ns=(2,)).data[0]
        assert list(trace.x) == [-2, -1, 0, 1, 2]
        assert list(trace.customdata) == [2, 0, 3, 0, 1]

    def test_reuses_and_fills_table(self) -> None:
        table: Strategy = {}
        build_score_distribution_figure(table, ns=(1,))
        assert len(table) == 5


# ─── save_lookup_html ─────────────────────────────────────────────────────────


class TestSaveLookupHtml:
    def test_writes_file(self, tmp_path) -> None:
        path = str(tmp_path / "lookup.html")
        save_lookup_html(build_lookup_figure(1), path)
        assert os.path.exists(path)
        with open(path, encoding="utf-8") as fh:
            assert "plotly" in fh.read().lower()
