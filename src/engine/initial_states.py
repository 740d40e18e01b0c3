"""
Initial position enumeration.

With n teams per side the 2n strengths 1..2n are split between the two
players. Every split is a distinct starting position, and the side that owns
``mine`` picks first. There are C(2n, n) of them.
"""

from __future__ import annotations

import itertools
import math
from typing import Iterator

from .game_state import GameState


def count_initial_states(n: int) -> int:
    """Return the number of starting positions with n teams per side.

    Examples:
        >>> count_initial_states(3)
        20
        >>> count_initial_states(0)
        1
    """
    if n < 0:
        raise ValueError(f"Teams per side must be non-negative, got {n}.")
    return math.comb(2 * n, n)


def all_initial_states(n: int) -> Iterator[GameState]:
    """Yield every canonical starting position with n teams per side.

    States are yielded lazily in lexicographic order of ``mine``; ``theirs``
    is the complement in 1..2n and ``chosen`` is 0.

    Args:
        n: Teams per side (>= 0). n == 0 yields the single empty position.

    Raises:
        ValueError: If n is negative.

    Examples:
        >>> [str(s) for s in all_initial_states(1)]
        ['[1] vs [2] (chosen=0)', '[2] vs [1] (chosen=0)']
    """
    if n < 0:
        raise ValueError(f"Teams per side must be non-negative, got {n}.")
    strengths = range(1, 2 * n + 1)
    for mine in itertools.combinations(strengths, n):
        taken = set(mine)
        theirs = tuple(s for s in strengths if s not in taken)
        yield GameState(mine, theirs)
