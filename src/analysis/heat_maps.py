"""Move-value heat maps for the Ponte solver.

One public data builder returns a NumPy matrix that can be used
programmatically or passed to the plot helpers:

    build_move_value_matrix(n, strategy)   — value of every first pick

Two public plot functions render matplotlib figures:

    plot_move_value_heatmap(matrix, labels, title, ...)  — one panel
    plot_initial_state_heatmap(n, ...)                   — convenience wrapper

Matrix convention:
    Shape  : (C(2n, n), n) — rows = starting positions in generator order,
                             cols = first pick (1-based move index 1..n)
    Values : value of that pick under optimal play afterwards, in [-n, n]
"""

from __future__ import annotations

import matplotlib
import matplotlib.colors
import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np

from src.engine.initial_states import all_initial_states
from src.solvers.backward_induction import Strategy, move_scores, solve_game

# ─── Constants ────────────────────────────────────────────────────────────────

_CMAP_NAME: str = "RdYlGn"
_BEST_MARKER: str = "*"


def _make_value_cmap() -> matplotlib.colors.Colormap:
    """RdYlGn gradient: red = rounds lost, green = rounds won."""
    return matplotlib.colormaps[_CMAP_NAME].copy()


# ─── Data builder ─────────────────────────────────────────────────────────────


def build_move_value_matrix(
    n: int,
    strategy: Strategy | None = None,
) -> tuple[np.ndarray, list[str]]:
    """Return (matrix, row_labels) of first-pick values for n teams per side.

    Args:
        n:        Teams per side (>= 1).
        strategy: Solved table covering all starting positions for n. If
                  None (or incomplete) the game is solved into it first.

    Returns:
        matrix:     int array of shape (C(2n, n), n).
        row_labels: One label per row, the acting side's teams, e.g. "1 4 5".
    """
    if n < 1:
        raise ValueError(f"Need at least one team per side, got {n}.")
    if strategy is None:
        strategy = {}
    states = list(all_initial_states(n))
    if any(s not in strategy for s in states):
        solve_game(n, strategy)

    matrix = np.zeros((len(states), n), dtype=int)
    labels: list[str] = []
    for r, state in enumerate(states):
        for move, score in move_scores(state, strategy).items():
            matrix[r, move - 1] = score
        labels.append(" ".join(str(t) for t in state.mine))
    return matrix, labels


# ─── Public plot functions ────────────────────────────────────────────────────


def plot_move_value_heatmap(
    matrix: np.ndarray,
    row_labels: list[str],
    title: str,
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot a first-pick value matrix as a single heat-map panel.

    Cells holding the row maximum (the optimal picks) are annotated with a
    star next to the value.

    Args:
        matrix:     (positions, n) array of pick values.
        row_labels: Label per row (acting side's team strengths).
        title:      Figure title.
        show:       If True, call plt.show() after rendering.
        save_path:  If not None, save the figure to this path before showing.

    Returns:
        matplotlib.figure.Figure.
    """
    n_rows, n_cols = matrix.shape
    bound = max(n_cols, 1)
    fig, ax = plt.subplots(figsize=(2.0 + 1.1 * n_cols, 1.5 + 0.32 * n_rows))
    fig.suptitle(title, fontsize=13, fontweight="bold")

    im = ax.imshow(matrix, cmap=_make_value_cmap(), vmin=-bound, vmax=bound, aspect="auto")

    ax.set_xticks(range(n_cols))
    ax.set_xticklabels([f"pick {c + 1}" for c in range(n_cols)], fontsize=9)
    ax.set_yticks(range(n_rows))
    ax.set_yticklabels(row_labels, fontsize=8)
    ax.set_xlabel("First pick (index into own teams)", fontsize=9)
    ax.set_ylabel("Own team strengths", fontsize=9)

    row_best = matrix.max(axis=1) if n_rows else np.array([])
    for r in range(n_rows):
        for c in range(n_cols):
            val = int(matrix[r, c])
            text = f"{val:+d}"
            if val == row_best[r]:
                text += _BEST_MARKER
            ax.text(c, r, text, ha="center", va="center", fontsize=8, fontweight="bold")

    plt.colorbar(im, ax=ax, label="Net rounds won", fraction=0.046, pad=0.04)
    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()

    return fig


def plot_initial_state_heatmap(
    n: int,
    strategy: Strategy | None = None,
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Convenience: build the n-per-side matrix and render it.

    Args:
        n:         Teams per side.
        strategy:  Optional solved (or partially solved) table to reuse.
        show:      If True, call plt.show().
        save_path: If not None, save to path.

    Returns:
        matplotlib.figure.Figure.
    """
    matrix, labels = build_move_value_matrix(n, strategy)
    return plot_move_value_heatmap(
        matrix,
        labels,
        f"First-Pick Values  (n={n} teams per side)",
        show=show,
        save_path=save_path,
    )


# ─── Entry point ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    n = int(sys.argv[1]) if len(sys.argv) > 1 else 3
    print(f"Generating first-pick heat map for n={n} …")
    plot_initial_state_heatmap(n, show=False, save_path=f"move_values_n{n}.png")
    print(f"Saved: move_values_n{n}.png")
