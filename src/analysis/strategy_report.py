"""Strategy tables and reports for the Ponte solver.

Serialization of a solved ``Strategy`` to a flat table, one row per position:

    strategy_to_frame(strategy)        — pandas DataFrame in listing order
    save_strategy_csv(strategy, path)  — write the table as CSV
    load_strategy_csv(path)            — read it back (for warm starts)

Text reports for inspecting a solve:

    summarize_initial_values(strategy, n)      — value histogram over starts
    print_strategy_summary(strategy, n)        — starting-position overview
    print_principal_variation(state, strategy) — one optimal line of play
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from os import PathLike

import numpy as np
import pandas as pd

from src.engine.game_state import GameState
from src.engine.initial_states import all_initial_states
from src.solvers.backward_induction import (
    Strategy,
    StrategyItem,
    principal_variation,
)

# ─── Table layout ─────────────────────────────────────────────────────────────

COLUMNS: list[str] = ["myTeams", "opponentTeams", "chosenTeam", "bestScore", "bestMove"]
"""CSV header. Sequence columns hold lists rendered like ``[1, 4, 5]``."""


def _format_seq(values: tuple[int, ...]) -> str:
    return str(list(values))


def _parse_seq(text: str) -> tuple[int, ...]:
    values = json.loads(text)
    if not isinstance(values, list) or not all(isinstance(v, int) for v in values):
        raise ValueError(f"Expected a list of integers, got {text!r}.")
    return tuple(values)


# ─── Serialization ────────────────────────────────────────────────────────────

def strategy_to_frame(strategy: Strategy) -> pd.DataFrame:
    """Return the table as a DataFrame, one row per position.

    Rows follow the GameState listing order: positions with more plies
    remaining first, then by ``mine`` and ``chosen``.

    Examples:
        >>> from src.solvers.backward_induction import solve_from_state
        >>> df = strategy_to_frame(solve_from_state(GameState([1], [2])))
        >>> df.iloc[0].tolist()
        ['[1]', '[2]', 0, -1, '[1]']
    """
    rows = [
        {
            "myTeams": _format_seq(state.mine),
            "opponentTeams": _format_seq(state.theirs),
            "chosenTeam": state.chosen,
            "bestScore": item.best_score,
            "bestMove": _format_seq(item.best_moves),
        }
        for state, item in sorted(strategy.items(), key=lambda kv: kv[0].sort_key())
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def save_strategy_csv(strategy: Strategy, path: str | PathLike) -> None:
    """Write the table to *path* as CSV with a header row and no index."""
    strategy_to_frame(strategy).to_csv(path, index=False)


def load_strategy_csv(path: str | PathLike) -> Strategy:
    """Read a table written by save_strategy_csv().

    States are rebuilt with ``sanitize=False``: the file stores them exactly
    as the solver keyed them.

    Raises:
        ValueError: If the header does not match or a row cannot be parsed.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    if list(df.columns) != COLUMNS:
        raise ValueError(f"Expected columns {COLUMNS}, got {list(df.columns)}.")

    strategy: Strategy = {}
    for row in df.itertuples(index=False):
        try:
            state = GameState(
                _parse_seq(row.myTeams),
                _parse_seq(row.opponentTeams),
                int(row.chosenTeam),
                sanitize=False,
            )
            item = StrategyItem(int(row.bestScore), _parse_seq(row.bestMove))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Malformed strategy row {tuple(row)}: {exc}") from exc
        strategy[state] = item
    return strategy


# ─── Summaries ────────────────────────────────────────────────────────────────

@dataclass
class InitialValueSummary:
    """Distribution of starting-position values for n teams per side.

    Attributes:
        n:                 Teams per side.
        scores:            Possible values -n..n (int array, length 2n+1).
        counts:            Number of starting positions with each value.
        mean:              Mean value over all starting positions.
        n_positions:       C(2n, n).
        n_all_moves_best:  Starting positions where every first pick is
                           optimal.
    """
    n: int
    scores: np.ndarray
    counts: np.ndarray
    mean: float
    n_positions: int
    n_all_moves_best: int


def summarize_initial_values(strategy: Strategy, n: int) -> InitialValueSummary:
    """Summarize the solved values of all starting positions.

    Every starting position must be in *strategy* (KeyError otherwise).
    """
    states = list(all_initial_states(n))
    items = [strategy[s] for s in states]
    values = np.array([item.best_score for item in items], dtype=int)
    counts = np.bincount(values + n, minlength=2 * n + 1)
    n_all_best = sum(1 for s, item in zip(states, items) if len(item.best_moves) == len(s.mine))
    return InitialValueSummary(
        n=n,
        scores=np.arange(-n, n + 1),
        counts=counts,
        mean=float(values.mean()) if len(values) else 0.0,
        n_positions=len(states),
        n_all_moves_best=n_all_best,
    )


def print_strategy_summary(strategy: Strategy, n: int) -> None:
    """Print the value distribution over starting positions with n per side.

    Args:
        strategy: Table containing every starting position for n.
        n:        Teams per side.
    """
    summary = summarize_initial_values(strategy, n)

    print("=" * 56)
    print(f"Starting Positions  (n={n} teams per side)")
    print("=" * 56)
    print(f"  Positions:           {summary.n_positions}")
    print(f"  Table size:          {len(strategy)}")
    print(f"  Mean value:          {summary.mean:+.4f} rounds")
    print(f"  All picks optimal:   {summary.n_all_moves_best}")
    print()
    print(f"  {'Value':>5}  {'Count':>5}  {'Share':>6}")
    print(f"  {'-----':>5}  {'-----':>5}  {'------':>6}")
    for score, count in zip(summary.scores, summary.counts):
        if count == 0:
            continue
        share = count / summary.n_positions
        print(f"  {int(score):>+5}  {int(count):>5}  {share:>6.1%}")
    print()


def print_principal_variation(state: GameState, strategy: Strategy) -> None:
    """Print one optimal line of play from *state*.

    The first player column tracks who acts: "A" owns *state*, "B" is the
    opponent. Scores are accumulated from A's perspective.
    """
    item = strategy[state]
    print("=" * 56)
    print(f"Optimal Line from {state}")
    print("=" * 56)
    print(f"  Value: {item.best_score:+d}   Best moves: {list(item.best_moves)}")
    print()
    print(f"  {'Ply':>3}  {'Side':>4}  {'Move':>4}  {'Team':>4}  {'Delta':>5}  {'A total':>7}")
    print(f"  {'---':>3}  {'----':>4}  {'----':>4}  {'----':>4}  {'-----':>5}  {'-------':>7}")

    side_a = True
    total = 0
    for ply, record in enumerate(principal_variation(state, strategy), start=1):
        team = record.state.mine[record.move - 1]
        total += record.score_delta if side_a else -record.score_delta
        print(
            f"  {ply:>3}  {'A' if side_a else 'B':>4}  {record.move:>4}  {team:>4}"
            f"  {record.score_delta:>+5}  {total:>+7}"
        )
        if record.switched:
            side_a = not side_a
    print()


# ─── Entry point ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from src.logging_config import setup_logging
    from src.solvers.backward_induction import DEFAULT_TEAMS_PER_SIDE, solve_game

    setup_logging("INFO")
    n = int(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_TEAMS_PER_SIDE
    out_path = sys.argv[2] if len(sys.argv) > 2 else f"ponte_strategy_n{n}.csv"

    strategy = solve_game(n)
    print_strategy_summary(strategy, n)
    print_principal_variation(next(iter(all_initial_states(n))), strategy)
    save_strategy_csv(strategy, out_path)
    print(f"Saved: {out_path}")
