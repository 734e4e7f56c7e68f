from typing import List

import pytest
try:
    from hypothesis import given, strategies as st  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - test infra
    pytest.skip("Hypothesis not installed", allow_module_level=True)

from xo.board import PLAYERS, Board, line_winners
from xo.symmetry import ALL_SYMS, apply_action_transform, canonical_key, literal_hash, transform_board
from xo.table import ActionValueTable

cells = st.lists(st.sampled_from(["X", "O", "_"]), min_size=9, max_size=9)


@st.composite
def played_games(draw):
    """A board reached by legal alternating play from the empty position."""
    b = Board()
    n = draw(st.integers(min_value=0, max_value=9))
    for _ in range(n):
        if b.terminal_outcome():
            break
        b.apply_move(draw(st.sampled_from(b.legal_actions())))
    return b


@given(cells)
def test_outcome_invariant_under_symmetry(board: List[str]):
    outcome = Board.from_cells(board).terminal_outcome()
    for k in ALL_SYMS:
        assert Board.from_cells(transform_board(board, k)).terminal_outcome() == outcome


@given(played_games())
def test_played_games_keep_count_invariant(b: Board):
    x, o = b.state.count("X"), b.state.count("O")
    assert x - o in (0, 1)
    assert len(line_winners(b.state)) <= 1
    assert len(b.history) == len(b.actions) + 1
    for i in range(len(b.actions)):
        assert b.mover(i) in PLAYERS


@given(played_games(), st.sampled_from(ALL_SYMS))
def test_written_key_found_from_any_variant(b: Board, kind: str):
    legal = b.legal_actions()
    if not legal:
        return
    action = legal[0]
    table = ActionValueTable()
    key = literal_hash(b.state, action)
    table.set(key, 1.0)
    s = transform_board(b.state, kind)
    a = apply_action_transform(action, kind)
    assert canonical_key(s, a, table) == key


@given(st.lists(st.floats(min_value=-1.0, max_value=1.0), min_size=1, max_size=30), st.randoms())
def test_incremental_mean_is_order_independent(returns: List[float], rnd):
    shuffled = returns[:]
    rnd.shuffle(shuffled)
    t1, t2 = ActionValueTable(), ActionValueTable()
    for g in returns:
        t1.record_return("k", g)
    for g in shuffled:
        t2.record_return("k", g)
    mean = sum(returns) / len(returns)
    assert t1.get("k") == pytest.approx(mean, abs=1e-9)
    assert t2.get("k") == pytest.approx(mean, abs=1e-9)
    assert t1.count("k") == len(returns)
