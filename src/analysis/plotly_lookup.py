"""Interactive Plotly lookup tool for the Ponte solver.

Three public functions:

    build_lookup_figure(n, strategy)
        — Interactive first-pick value heatmap over all starting positions.
    build_score_distribution_figure(strategy, ns)
        — Bar chart of starting-position values for each team count.
    save_lookup_html(fig, path)
        — Export any figure to a self-contained HTML file.

Hover over a heatmap cell to see both sides' teams, the pick, its value and
whether it is optimal.
"""

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go

from src.analysis.heat_maps import build_move_value_matrix
from src.analysis.strategy_report import summarize_initial_values
from src.engine.initial_states import all_initial_states
from src.solvers.backward_induction import Strategy, solve_game

# ─── Constants ────────────────────────────────────────────────────────────────

_VALUE_COLORSCALE: str = "RdYlGn"


# ─── Hover text builder ───────────────────────────────────────────────────────


def _build_hover(n: int, matrix: np.ndarray) -> list[list[str]]:
    """Return a positions×n list of hover strings for the lookup heatmap."""
    rows: list[list[str]] = []
    for r, state in enumerate(all_initial_states(n)):
        best = matrix[r].max()
        row: list[str] = []
        for c in range(n):
            val = int(matrix[r, c])
            lines = [
                f"Own teams: <b>{list(state.mine)}</b>",
                f"Opponent: {list(state.theirs)}",
                f"Pick: {c + 1} (team {state.mine[c]})",
                f"Value: <b>{val:+d}</b>",
                f"Optimal: {'yes' if val == best else 'no'}",
            ]
            row.append("<br>".join(lines))
        rows.append(row)
    return rows


# ─── Public figure builders ───────────────────────────────────────────────────


def build_lookup_figure(n: int, strategy: Strategy | None = None) -> go.Figure:
    """Build an interactive heatmap of first-pick values for n teams per side.

    Args:
        n:        Teams per side (>= 1).
        strategy: Optional table to reuse; solved into if incomplete.

    Returns:
        go.Figure with a single heatmap trace.
    """
    matrix, labels = build_move_value_matrix(n, strategy)
    fig = go.Figure(
        go.Heatmap(
            z=matrix.tolist(),
            x=[f"pick {c + 1}" for c in range(n)],
            y=labels,
            colorscale=_VALUE_COLORSCALE,
            zmin=-n,
            zmax=n,
            text=_build_hover(n, matrix),
            hovertemplate="%{text}<extra></extra>",
            colorbar={"title": "Net rounds"},
            name=f"n={n}",
        )
    )
    fig.update_layout(
        title_text=f"First-Pick Lookup — n={n} teams per side",
        title_font_size=15,
        height=max(320, 120 + 22 * len(labels)),
        width=520 + 60 * n,
    )
    fig.update_yaxes(title_text="Own team strengths", autorange="reversed")
    fig.update_xaxes(title_text="First pick")
    return fig


def build_score_distribution_figure(
    strategy: Strategy | None = None,
    ns: tuple[int, ...] = (1, 2, 3),
) -> go.Figure:
    """Bar chart: share of starting positions with each value, per team count.

    Args:
        strategy: Optional table to reuse; solved into for every n in *ns*.
        ns:       Team counts to include, one bar group each.

    Returns:
        go.Figure with one bar trace per n.
    """
    if strategy is None:
        strategy = {}
    fig = go.Figure()
    for n in ns:
        if any(s not in strategy for s in all_initial_states(n)):
            solve_game(n, strategy)
        summary = summarize_initial_values(strategy, n)
        share = summary.counts / summary.n_positions
        fig.add_trace(
            go.Bar(
                x=summary.scores.tolist(),
                y=share.tolist(),
                name=f"n={n}",
                customdata=summary.counts.tolist(),
                hovertemplate="Value %{x:+d}<br>Share %{y:.1%}<br>Count %{customdata}<extra></extra>",
            )
        )
    fig.update_layout(
        title_text="Starting-Position Values",
        title_font_size=15,
        barmode="group",
        height=420,
        width=780,
    )
    fig.update_xaxes(title_text="Value (net rounds, first picker)", dtick=1)
    fig.update_yaxes(title_text="Share of positions", tickformat=".0%")
    return fig


# ─── HTML export ───────────────────────────────────────────────────────────────


def save_lookup_html(fig: go.Figure, path: str) -> None:
    """Save a Plotly figure to a self-contained HTML file.

    The resulting file can be opened in any browser.  Plotly JS is loaded
    from the CDN so the file itself remains compact.

    Args:
        fig:  Any go.Figure produced by this module.
        path: Destination file path (e.g. ``"ponte_lookup.html"``).
    """
    fig.write_html(path, include_plotlyjs="cdn")


# ─── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    n = int(sys.argv[1]) if len(sys.argv) > 1 else 3
    print(f"Building interactive lookup figures for n={n} …")
    shared: Strategy = {}
    save_lookup_html(build_lookup_figure(n, shared), f"ponte_lookup_n{n}.html")
    save_lookup_html(
        build_score_distribution_figure(shared, tuple(range(1, n + 1))),
        "ponte_score_distribution.html",
    )
    print(f"Saved: ponte_lookup_n{n}.html, ponte_score_distribution.html")
