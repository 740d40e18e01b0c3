"""
Exhaustive backward-induction solver for Ponte.

Computes, for every position reachable from a set of seed positions, the
game value under optimal play for both sides and every first move that
achieves it. Values are net rounds won (rounds won minus rounds lost) from
the perspective of the side acting in the position.

The transposition table (``Strategy``) is an ordinary dict owned by the
caller. Pass the same dict to several solves to share work between them, or
pass a table loaded from disk to warm-start a solve.

Two equivalent drivers are provided:

    solve_from_states  — explicit LIFO work list; a position stays on the
                         list until every child has an entry.
    solve_layered      — two passes: collect reachable positions grouped by
                         plies remaining, then resolve shortest first.

Every move strictly decreases plies remaining, so the positions form a DAG
and both drivers terminate.
"""

from __future__ import annotations

import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, NamedTuple

from src.engine.game_state import GameState
from src.engine.initial_states import all_initial_states
from src.engine.rules import apply_move, legal_moves
from src.logging_config import get_logger

logger = get_logger(__name__)

# ─── Constants ────────────────────────────────────────────────────────────────

DEFAULT_TEAMS_PER_SIDE: int = 3
"""Team count used by the ``__main__`` demo and the dashboard default."""

MAX_TEAMS_PER_SIDE: int = 6
"""Largest team count offered by the dashboard. Cost grows exponentially."""


# ─── Strategy types ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class StrategyItem:
    """Solved value of one position.

    Attributes:
        best_score: Net rounds won under optimal play, from the acting side's
                    perspective.
        best_moves: Every 1-based move achieving ``best_score``, ascending.
                    Empty iff the position is terminal.
    """
    best_score: int
    best_moves: tuple[int, ...]


Strategy = dict[GameState, StrategyItem]
"""Transposition table: position → solved value. Entries are write-once."""

TERMINAL_ITEM: StrategyItem = StrategyItem(0, ())


class PlyRecord(NamedTuple):
    """One ply along an optimal line of play."""
    state: GameState
    move: int
    score_delta: int
    switched: bool


# ─── Position evaluation ──────────────────────────────────────────────────────

def _child_score(score_delta: int, switched: bool, child: StrategyItem) -> int:
    """Value of a move: its own delta plus the child's value (negamax)."""
    return score_delta + (-child.best_score if switched else child.best_score)


def _resolve(
    state: GameState,
    strategy: Strategy,
) -> tuple[StrategyItem | None, list[GameState]]:
    """Try to determine the value of *state* from the table.

    Scans moves in ascending order. Ties keep every tying move.

    Returns:
        (item, missing). ``item`` is None when some children are not in the
        table yet; ``missing`` then lists them in move order. Once a missing
        child is found, later solved children are no longer scored because
        the value cannot be finalised on this pass anyway.
    """
    moves = legal_moves(state)
    if len(moves) == 0:
        return TERMINAL_ITEM, []

    best_score: int | None = None
    best_moves: list[int] = []
    missing: list[GameState] = []

    for move in moves:
        child, score_delta, switched = apply_move(state, move)
        child_item = strategy.get(child)
        if child_item is None:
            missing.append(child)
            continue
        if missing:
            continue
        score = _child_score(score_delta, switched, child_item)
        if best_score is None or score > best_score:
            best_score = score
            best_moves = [move]
        elif score == best_score:
            best_moves.append(move)

    if missing:
        return None, missing
    return StrategyItem(best_score, tuple(best_moves)), missing


# ─── Solvers ──────────────────────────────────────────────────────────────────

def solve_from_states(
    initial_states: Iterable[GameState],
    strategy: Strategy | None = None,
) -> Strategy:
    """Solve every position reachable from *initial_states*.

    Work-list fixpoint: peek the most recently pushed position; if all of its
    children are in the table, store its entry and pop it, otherwise push the
    missing children and revisit it once they are done. Positions that are
    already in the table (warm start, or pushed twice) are popped untouched,
    so existing entries are never overwritten.

    Args:
        initial_states: Seed positions. Several seeds sharing one table reuse
                        each other's subgames.
        strategy:       Table to fill. A new dict is created if None.

    Returns:
        The filled table (the same object when one was passed in).

    Example:
        >>> s = GameState([1, 4, 5], [2, 3, 6])
        >>> solve_from_states([s])[s]
        StrategyItem(best_score=-1, best_moves=(1, 2, 3))
    """
    if strategy is None:
        strategy = {}
    stack: list[GameState] = list(initial_states)
    size_before = len(strategy)
    revisits = 0
    t0 = time.perf_counter()

    while stack:
        state = stack[-1]
        if state in strategy:
            stack.pop()
            continue

        logger.debug("Analyzing state %s.", state)
        item, missing = _resolve(state, strategy)
        if item is None:
            logger.debug("Incomplete state %s: %d children pending.", state, len(missing))
            stack.extend(missing)
            revisits += 1
            continue

        logger.debug("Determined strategy %s for state %s.", item, state)
        strategy[state] = item
        stack.pop()

    logger.info(
        "Work-list solve: %d new states (%d revisits) in %.3fs; table size %d.",
        len(strategy) - size_before,
        revisits,
        time.perf_counter() - t0,
        len(strategy),
    )
    return strategy


def solve_from_state(
    initial_state: GameState,
    strategy: Strategy | None = None,
) -> Strategy:
    """Solve a single seed position. Thin wrapper around solve_from_states()."""
    return solve_from_states([initial_state], strategy)


def collect_reachable(
    initial_states: Iterable[GameState],
    strategy: Strategy | None = None,
) -> dict[int, set[GameState]]:
    """Group every unsolved position reachable from the seeds by plies left.

    Positions already in *strategy* are neither collected nor expanded: their
    subgames are solved.

    Returns:
        Dict mapping ``len(state)`` to the set of positions with that many
        plies remaining.
    """
    known = strategy if strategy is not None else {}
    layers: dict[int, set[GameState]] = defaultdict(set)
    frontier = [s for s in initial_states if s not in known]
    seen = set(frontier)

    while frontier:
        state = frontier.pop()
        layers[len(state)].add(state)
        for move in legal_moves(state):
            child = apply_move(state, move).state
            if child not in seen and child not in known:
                seen.add(child)
                frontier.append(child)

    return dict(layers)


def solve_layered(
    initial_states: Iterable[GameState],
    strategy: Strategy | None = None,
) -> Strategy:
    """Two-pass alternative to solve_from_states() with identical results.

    Pass 1 collects reachable unsolved positions grouped by plies remaining.
    Pass 2 resolves groups shortest first: a position depends only on
    positions with strictly fewer plies, so every child is already solved
    when its parent is reached and no revisits are needed.

    Args:
        initial_states: Seed positions.
        strategy:       Table to fill. A new dict is created if None.

    Returns:
        The filled table.
    """
    if strategy is None:
        strategy = {}
    t0 = time.perf_counter()
    layers = collect_reachable(initial_states, strategy)
    n_states = sum(len(group) for group in layers.values())
    logger.debug("Collected %d states in %d layers.", n_states, len(layers))

    for plies in sorted(layers):
        for state in sorted(layers[plies]):
            item, missing = _resolve(state, strategy)
            assert item is not None, f"Unsolved children {missing} below {state}"
            strategy[state] = item

    logger.info(
        "Layered solve: %d new states in %.3fs; table size %d.",
        n_states,
        time.perf_counter() - t0,
        len(strategy),
    )
    return strategy


def solve_game(
    n: int,
    strategy: Strategy | None = None,
    *,
    layered: bool = False,
) -> Strategy:
    """Solve every starting position with n teams per side into one table.

    Args:
        n:        Teams per side.
        strategy: Optional pre-filled table to warm-start from.
        layered:  If True use solve_layered(), else the work-list driver.
    """
    logger.info("Solving all starting positions with %d teams per side.", n)
    solver = solve_layered if layered else solve_from_states
    return solver(all_initial_states(n), strategy)


# ─── Queries on a solved table ────────────────────────────────────────────────

def move_scores(state: GameState, strategy: Strategy) -> dict[int, int]:
    """Return the value of every legal move from *state*.

    Every child must already be solved (e.g. *state* itself was solved into
    *strategy*); a missing child raises KeyError.

    Example:
        >>> s = GameState([1, 4, 5], [2, 3, 6])
        >>> move_scores(s, solve_from_state(s))
        {1: -1, 2: -1, 3: -1}
    """
    scores: dict[int, int] = {}
    for move in legal_moves(state):
        child, score_delta, switched = apply_move(state, move)
        scores[move] = _child_score(score_delta, switched, strategy[child])
    return scores


def principal_variation(state: GameState, strategy: Strategy) -> list[PlyRecord]:
    """Play out the game from *state*, always taking the first best move.

    Each record holds the position the mover faced, the move played, its
    score delta and whether the other side acts next.
    """
    line: list[PlyRecord] = []
    while not state.is_terminal:
        move = strategy[state].best_moves[0]
        next_state, score_delta, switched = apply_move(state, move)
        line.append(PlyRecord(state, move, score_delta, switched))
        state = next_state
    return line


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from src.engine.initial_states import count_initial_states
    from src.logging_config import setup_logging

    setup_logging("INFO")
    max_n = int(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_TEAMS_PER_SIDE

    print("Ponte Solver — exhaustive backward induction")
    strategy: Strategy = {}
    for n in range(1, max_n + 1):
        t0 = time.time()
        solve_game(n, strategy)
        elapsed = time.time() - t0
        values = [strategy[s].best_score for s in all_initial_states(n)]
        print(
            f"n={n}: {count_initial_states(n)} starting positions, "
            f"table size {len(strategy)}, solved in {elapsed:.2f}s, "
            f"mean value {sum(values) / len(values):+.3f}"
        )
