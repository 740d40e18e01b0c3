"""Ponte Solver — Streamlit Dashboard.

Four-tab interactive dashboard for exploring solved Ponte positions:
  Tab 1 — Move-Value Heat Map   (matplotlib, value of every first pick)
  Tab 2 — Interactive Lookup    (Plotly, hover for teams, pick and value)
  Tab 3 — Strategy Table        (full transposition table + CSV download)
  Tab 4 — Position Lookup       (solve any position, show optimal line)

Run:
    PYTHONPATH=. streamlit run app.py
"""

from __future__ import annotations

import contextlib
import io

import matplotlib

matplotlib.use("Agg")  # must be set before any other matplotlib imports

import streamlit as st

# ─── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Ponte Solver",
    page_icon="⚔️",
    layout="wide",
)

# ─── Lazy imports (inside functions to keep startup fast) ─────────────────────


@st.cache_resource
def _load_analysis_modules():
    """Import heavy analysis modules once (cached for the process lifetime)."""
    from src.analysis.heat_maps import plot_initial_state_heatmap
    from src.analysis.plotly_lookup import (
        build_lookup_figure,
        build_score_distribution_figure,
    )
    from src.analysis.strategy_report import (
        print_principal_variation,
        print_strategy_summary,
        strategy_to_frame,
    )
    from src.engine.game_state import GameState
    from src.logging_config import setup_logging
    from src.solvers.backward_induction import (
        DEFAULT_TEAMS_PER_SIDE,
        MAX_TEAMS_PER_SIDE,
        move_scores,
        solve_from_state,
    )

    return {
        "plot_initial_state_heatmap": plot_initial_state_heatmap,
        "build_lookup_figure": build_lookup_figure,
        "build_score_distribution_figure": build_score_distribution_figure,
        "print_principal_variation": print_principal_variation,
        "print_strategy_summary": print_strategy_summary,
        "strategy_to_frame": strategy_to_frame,
        "GameState": GameState,
        "setup_logging": setup_logging,
        "default_n": DEFAULT_TEAMS_PER_SIDE,
        "max_n": MAX_TEAMS_PER_SIDE,
        "move_scores": move_scores,
        "solve_from_state": solve_from_state,
    }


@st.cache_resource
def _solve(n: int):
    """Solve every starting position for n teams per side (cached per n)."""
    from src.solvers.backward_induction import solve_game

    return solve_game(n)


def _parse_teams(text: str) -> list[int]:
    """Parse "1 4 5" or "1, 4, 5" into a list of ints."""
    return [int(tok) for tok in text.replace(",", " ").split()]


m = _load_analysis_modules()

# ─── Sidebar controls ─────────────────────────────────────────────────────────

with st.sidebar:
    st.title("⚔️ Ponte Solver")
    st.markdown("---")

    n_teams = st.slider(
        "Teams per side",
        min_value=1,
        max_value=m["max_n"],
        value=m["default_n"],
        step=1,
    )

    log_level = st.selectbox(
        "Log level",
        options=["WARNING", "INFO", "DEBUG"],
        index=0,
    )

    st.markdown("---")
    st.caption("Exhaustive backward induction")
    st.caption("Engine → Solver → Analysis")

m["setup_logging"](log_level)

with st.spinner(f"Solving all starting positions for n={n_teams} …"):
    strategy = _solve(n_teams)
st.sidebar.success(f"Solved — {len(strategy):,} positions in table")

# ─── Tabs ─────────────────────────────────────────────────────────────────────

tab1, tab2, tab3, tab4 = st.tabs(
    [
        "Move-Value Heat Map",
        "Interactive Plotly Lookup",
        "Strategy Table",
        "Position Lookup",
    ]
)

# ── Tab 1: Move-Value Heat Map ────────────────────────────────────────────────

with tab1:
    st.header("First-Pick Values")
    st.caption(
        "Rows = own team strengths | Cols = first pick | "
        "Green = rounds won, Red = rounds lost, * = optimal"
    )
    fig = m["plot_initial_state_heatmap"](n_teams, strategy, show=False)
    st.pyplot(fig)

    st.markdown("---")
    st.subheader("Summary")
    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        m["print_strategy_summary"](strategy, n_teams)
    st.code(buf.getvalue(), language=None)

# ── Tab 2: Interactive Plotly Lookup ─────────────────────────────────────────

with tab2:
    st.header("Interactive Plotly Lookup")
    st.caption("Hover over any cell to see both sides' teams, the pick and its value.")

    fig_lookup = m["build_lookup_figure"](n_teams, strategy)
    st.plotly_chart(fig_lookup, use_container_width=True)

    st.markdown("---")
    st.subheader("Value Distribution")
    fig_dist = m["build_score_distribution_figure"](strategy, (n_teams,))
    st.plotly_chart(fig_dist, use_container_width=True)

# ── Tab 3: Strategy Table ─────────────────────────────────────────────────────

with tab3:
    st.header("Strategy Table")
    df = m["strategy_to_frame"](strategy)
    st.caption(f"{len(df):,} positions, earliest in the game first.")
    st.dataframe(df, use_container_width=True, hide_index=True)
    st.download_button(
        "Download CSV",
        data=df.to_csv(index=False),
        file_name=f"ponte_strategy_n{n_teams}.csv",
        mime="text/csv",
    )

# ── Tab 4: Position Lookup ────────────────────────────────────────────────────

with tab4:
    st.header("Position Lookup")
    st.caption(
        "Team strengths must together be exactly 1..k. "
        "Chosen = index of the opponent's pick (0 = you pick first)."
    )

    col1, col2, col3 = st.columns(3)
    mine_text = col1.text_input("Your teams", value="1 4 5")
    theirs_text = col2.text_input("Opponent teams", value="2 3 6")
    chosen = col3.number_input("Chosen", min_value=0, value=0, step=1)

    try:
        state = m["GameState"](_parse_teams(mine_text), _parse_teams(theirs_text), int(chosen))
    except ValueError as exc:
        st.error(f"Invalid position: {exc}")
    else:
        local = m["solve_from_state"](state, dict(strategy))
        item = local[state]

        col1, col2 = st.columns(2)
        col1.metric("Value", f"{item.best_score:+d}")
        col2.metric("Best moves", ", ".join(str(mv) for mv in item.best_moves) or "—")

        if not state.is_terminal:
            scores = m["move_scores"](state, local)
            st.dataframe(
                [
                    {"Move": mv, "Team": state.mine[mv - 1], "Value": sc}
                    for mv, sc in scores.items()
                ],
                use_container_width=True,
                hide_index=True,
            )

        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            m["print_principal_variation"](state, local)
        st.code(buf.getvalue(), language=None)
