"""
Shared pytest fixtures for Ponte solver tests.

Provides a short constructor for positions and solved tables that several
test modules reuse.
"""

from __future__ import annotations

import pytest

from src.engine.game_state import GameState
from src.solvers.backward_induction import Strategy, solve_game


def pos(mine, theirs, chosen: int = 0, sanitize: bool = True) -> GameState:
    """Build a GameState from plain lists.

    Examples:
        >>> pos([1, 4, 5], [2, 3, 6])
        GameState(mine=(1, 4, 5), theirs=(2, 3, 6), chosen=0)
        >>> pos([3, 6], [1, 5], 2, sanitize=False).mine
        (3, 6)
    """
    return GameState(mine, theirs, chosen, sanitize=sanitize)


@pytest.fixture(scope="session")
def solved_n3() -> Strategy:
    """Table with every starting position for 3 teams per side solved."""
    return solve_game(3)


@pytest.fixture(scope="session")
def solved_upto_4() -> Strategy:
    """One shared table covering n = 1..4."""
    strategy: Strategy = {}
    for n in range(1, 5):
        solve_game(n, strategy)
    return strategy
