"""
Canonical game state for the Ponte team-dueling game.

Each side owns a set of teams identified by their relative strength (higher
number = stronger). A round goes:

    PICK (one side names a team) → RESPOND (other side names a team) → BATTLE

The stronger team wins the battle; both teams leave the game. The winner of a
battle picks first in the next round, so the same side may act twice in a row.

States are stored from the perspective of the side about to act:

    mine    — the acting side's team strengths, ascending.
    theirs  — the opponent's team strengths, ascending.
    chosen  — 0 if the acting side picks first this round, otherwise the
              1-based index into ``theirs`` of the team the opponent already
              picked (the acting side must respond).

Canonical form: the union of ``mine`` and ``theirs`` is exactly 1..k. Only the
relative order of strengths matters, so canonical states collapse every
strategically identical position onto one dictionary key.
"""

from __future__ import annotations

from dataclasses import InitVar, dataclass
from typing import Iterable

from .exceptions import MalformedStateError


# ─── Canonical form helpers ───────────────────────────────────────────────────

def is_canonical(mine: Iterable[int], theirs: Iterable[int]) -> bool:
    """Return True if the combined strengths are exactly 1..k.

    Examples:
        >>> is_canonical((1, 4, 5), (2, 3, 6))
        True
        >>> is_canonical((3, 6), (1, 5))
        False
        >>> is_canonical((), ())
        True
    """
    combined = sorted([*mine, *theirs])
    return combined == list(range(1, len(combined) + 1))


def canonicalize(
    mine: Iterable[int],
    theirs: Iterable[int],
) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Re-rank strengths to 1..k, preserving relative order.

    Collects the survivors of both sides, sorts them, and replaces each value
    by its 1-based rank. Strengths are assumed distinct.

    Examples:
        >>> canonicalize((6,), (1,))
        ((2,), (1,))
        >>> canonicalize((1, 5), (3, 6))
        ((1, 3), (2, 4))
        >>> canonicalize((1, 4), (2, 3))   # already canonical: no-op
        ((1, 4), (2, 3))
    """
    mine = tuple(mine)
    theirs = tuple(theirs)
    rank = {value: i for i, value in enumerate(sorted(mine + theirs), start=1)}
    return tuple(rank[v] for v in mine), tuple(rank[v] for v in theirs)


# ─── GameState ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a position, seen by the side about to act.

    Frozen (hashable) so it can be used as a key in the transposition table.
    Equality is structural over all three fields.

    Args:
        mine:     Acting side's team strengths.
        theirs:   Opponent's team strengths.
        chosen:   0, or 1-based index into ``theirs`` of the opponent's pick.
        sanitize: If True (default), sort both sequences and check that the
                  state is canonical and ``chosen`` is in range. Raises
                  MalformedStateError otherwise. Pass False on hot paths
                  where the caller already guarantees canonical input.

    Example:
        >>> GameState([5, 1, 4], [2, 6, 3])
        GameState(mine=(1, 4, 5), theirs=(2, 3, 6), chosen=0)
    """
    mine: tuple[int, ...]
    theirs: tuple[int, ...]
    chosen: int = 0
    sanitize: InitVar[bool] = True

    def __post_init__(self, sanitize: bool) -> None:
        mine = tuple(self.mine)
        theirs = tuple(self.theirs)
        if sanitize:
            mine = tuple(sorted(mine))
            theirs = tuple(sorted(theirs))
            if not is_canonical(mine, theirs):
                raise MalformedStateError(
                    f"Team strengths {list(mine)} and {list(theirs)} must "
                    f"partition 1..{len(mine) + len(theirs)} exactly."
                )
            if not (0 <= self.chosen <= len(theirs)):
                raise MalformedStateError(
                    f"chosen={self.chosen} out of range for {len(theirs)} opponent teams."
                )
        object.__setattr__(self, "mine", mine)
        object.__setattr__(self, "theirs", theirs)

    def __len__(self) -> int:
        """Number of plies (single team selections) left in the game."""
        n = min(len(self.mine), len(self.theirs))
        return 2 * n - (0 if self.chosen == 0 else 1)

    @property
    def is_terminal(self) -> bool:
        return len(self) == 0

    @property
    def chosen_strength(self) -> int | None:
        """Strength of the opponent's pending pick, or None when picking first."""
        if self.chosen == 0:
            return None
        return self.theirs[self.chosen - 1]

    # ── Listing order ────────────────────────────────────────────────────────

    def sort_key(self) -> tuple[int, tuple[int, ...], int]:
        """Key for deterministic listing: earlier in the game first.

        More plies remaining sorts first; ties break on ``mine``
        (lexicographic), then ``chosen``.
        """
        return (-len(self), self.mine, self.chosen)

    def __lt__(self, other: GameState) -> bool:
        if not isinstance(other, GameState):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        return f"{list(self.mine)} vs {list(self.theirs)} (chosen={self.chosen})"


EMPTY_STATE: GameState = GameState((), ())
"""The finished game: no teams left on either side."""
