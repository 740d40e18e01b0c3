"""
Move generation and the transition function.

A move is a 1-based index into the acting side's ``mine`` tuple. What it
means depends on the round phase:

    chosen == 0  → PICK: name a team and hand control to the opponent.
                   No battle yet; score delta 0; sides always switch.
    chosen != 0  → RESPOND: send a team against the opponent's pick.
                   Stronger team wins the round (+1 / -1 for the mover).
                   Winner picks first next round.

Score convention:
    Deltas are from the perspective of whoever just moved. When ``switched``
    is True the next state belongs to the other side, so the caller negates
    the child's value (negamax).
"""

from __future__ import annotations

from enum import Enum, auto
from typing import NamedTuple

from .exceptions import InvalidMoveError, StrengthCollisionError
from .game_state import GameState
from .game_state import canonicalize as rerank


class Phase(Enum):
    PICK = auto()
    RESPOND = auto()


class Transition(NamedTuple):
    """Result of applying one move.

    Attributes:
        state:       The resulting position, from the perspective of whoever
                     acts next.
        score_delta: Rounds won (+1), lost (-1) or 0 for a pick, from the
                     mover's perspective.
        switched:    True if the other side acts in ``state``.
    """
    state: GameState
    score_delta: int
    switched: bool


def phase(state: GameState) -> Phase:
    """Return the round phase the acting side is in."""
    return Phase.PICK if state.chosen == 0 else Phase.RESPOND


def legal_moves(state: GameState) -> range:
    """Return the available moves. Empty means the game is over.

    Examples:
        >>> list(legal_moves(GameState([1, 4, 5], [2, 3, 6])))
        [1, 2, 3]
        >>> list(legal_moves(GameState([], [])))
        []
    """
    if len(state) == 0:
        return range(0)
    return range(1, len(state.mine) + 1)


def _remove_at(values: tuple[int, ...], index: int) -> tuple[int, ...]:
    """Return a copy of *values* without the element at 0-based *index*."""
    return values[:index] + values[index + 1:]


def apply_move(
    state: GameState,
    move: int,
    canonicalize: bool = True,
) -> Transition:
    """Apply a move and return the resulting Transition.

    The input state is never modified; the result always holds fresh tuples.

    Args:
        state:               Position to move from.
        move:                1-based index into ``state.mine``.
        canonicalize:        If True (default), re-rank the surviving teams
                             to 1..k-2 after a battle so equivalent positions
                             share one key.

    Returns:
        Transition(state, score_delta, switched).

    Raises:
        InvalidMoveError:       *move* is not in ``legal_moves(state)``.
        StrengthCollisionError: the responding team has the same strength as
                                the opponent's pick.

    Examples:
        >>> apply_move(GameState([1, 4, 5], [2, 3, 6]), 2)
        Transition(state=GameState(mine=(2, 3, 6), theirs=(1, 4, 5), chosen=2), score_delta=0, switched=True)
        >>> apply_move(GameState([2, 3, 6], [1, 4, 5], 2, sanitize=False), 3)
        Transition(state=GameState(mine=(2, 3), theirs=(1, 4), chosen=0), score_delta=1, switched=False)
    """
    moves = legal_moves(state)
    if move not in moves:
        raise InvalidMoveError(move, len(moves))

    # ── PICK: name a team, opponent responds next ────────────────────────────
    if state.chosen == 0:
        next_state = GameState(state.theirs, state.mine, move, sanitize=False)
        return Transition(next_state, 0, True)

    # ── RESPOND: battle against the opponent's pick ──────────────────────────
    my_team = state.mine[move - 1]
    their_team = state.chosen_strength
    if my_team == their_team:
        raise StrengthCollisionError(my_team)
    won = my_team > their_team

    mine = _remove_at(state.mine, move - 1)
    theirs = _remove_at(state.theirs, state.chosen - 1)
    if canonicalize:
        mine, theirs = rerank(mine, theirs)

    if won:
        # Winner picks first again
        return Transition(GameState(mine, theirs, sanitize=False), 1, False)
    # Perspective flips to the opponent, who won and picks first
    return Transition(GameState(theirs, mine, sanitize=False), -1, True)
