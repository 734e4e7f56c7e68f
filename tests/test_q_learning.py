import numpy as np
import pytest

from xo.board import PLAYER_O, PLAYER_X, Board
from xo.q_learning import GREEDY, QLearningAgent
from xo.rewards import terminal_only
from xo.symmetry import canonical_key


def _x_row_win():
    b = Board()
    for mv in [0, 3, 1, 4, 2]:
        b.apply_move(mv)
    return b


def test_winning_move_terminal_update():
    agent = QLearningAgent(PLAYER_X, alpha=0.5, discount=1.0, rng=np.random.default_rng(0))
    b = _x_row_win()
    agent.learn(b, terminal_only)
    h = b.history
    assert agent.table.get(canonical_key(h[4], 2, agent.table)) == pytest.approx(0.5)


def test_learns_from_opponent_moves():
    agent = QLearningAgent(PLAYER_X, alpha=0.5, discount=1.0, rng=np.random.default_rng(0))
    b = _x_row_win()
    agent.learn(b, terminal_only)
    # O's last move before losing
    assert agent.table.get("XX_O_____4") == pytest.approx(-0.5)
    # intermediate plies of both players were written
    assert "_________0" in agent.table
    assert "X________3" in agent.table
    assert "X__O_____1" in agent.table
    assert agent.table.get("_________0") == pytest.approx(0.0)
    assert len(agent.table) == 5


def test_repeated_episodes_converge_monotonically():
    agent = QLearningAgent(PLAYER_O, alpha=0.3, discount=1.0, rng=np.random.default_rng(1))
    key = "XX_OO____2"
    gaps = []
    for _ in range(12):
        agent.learn(_x_row_win(), terminal_only)
        gaps.append(abs(agent.table.get(key) - 1.0))
    assert all(later < earlier for earlier, later in zip(gaps, gaps[1:]))
    assert gaps[-1] < 0.02


def test_bootstrap_uses_greedy_successor_value():
    agent = QLearningAgent(PLAYER_X, alpha=1.0, discount=0.5, rng=np.random.default_rng(0))
    agent.table.set("XX_OO____2", 0.8)
    b = _x_row_win()
    agent.learn(b, terminal_only)
    # X's move at ply 2 bootstraps from the best action at ply 4 (value 0.8 before its own update)
    assert agent.table.get("X__O_____1") == pytest.approx(0.5 * 0.8)


def test_non_terminal_learn_is_noop():
    agent = QLearningAgent(PLAYER_O, rng=np.random.default_rng(0))
    b = Board()
    for mv in [0, 4]:
        b.apply_move(mv)
    agent.learn(b, terminal_only)
    assert len(agent.table) == 0


def test_epsilon_restored_after_learning():
    agent = QLearningAgent(PLAYER_O, epsilon=0.3, rng=np.random.default_rng(0))
    seen = []

    def spy(board, player, horizon=None):
        seen.append(agent.epsilon)
        return terminal_only(board, player, horizon)

    agent.learn(_x_row_win(), spy)
    assert agent.epsilon == 0.3
    assert seen and all(e == GREEDY for e in seen)


def test_epsilon_restored_when_reward_fails():
    agent = QLearningAgent(PLAYER_O, epsilon=0.2, rng=np.random.default_rng(0))

    def broken(board, player, horizon=None):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        agent.learn(_x_row_win(), broken)
    assert agent.epsilon == 0.2


def test_negative_alpha_rejected():
    with pytest.raises(ValueError):
        QLearningAgent(PLAYER_O, alpha=-0.1)
