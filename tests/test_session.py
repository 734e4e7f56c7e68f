import numpy as np
import pytest

from xo.agents import RandomAgent, make_agent
from xo.board import DRAW, PLAYER_O, PLAYER_X
from xo.config import AgentConfig
from xo.errors import InvalidAction, MisalignedPlayer
from xo.monte_carlo import MonteCarloAgent
from xo.session import GameSession


class SpyAgent:
    """Plays the lowest free cell and records when it is asked to learn."""

    def __init__(self, player=PLAYER_O):
        self.player = player
        self.learned_at = []

    def policy(self, board, horizon=None):
        return board.legal_actions(horizon)[0]

    def learn(self, board, reward_fn):
        self.learned_at.append(len(board.actions))


def test_learn_follows_each_exchange_and_human_win():
    agent = SpyAgent()
    s = GameSession(agent, human=PLAYER_X)
    assert agent.player == PLAYER_O
    assert s.human_move(0) == ""
    assert agent.learned_at == []
    assert s.board.actions == [0, 1]
    assert s.human_move(3) == ""
    assert s.human_move(6) == PLAYER_X
    assert agent.learned_at == [3, 5]
    assert s.board.actions == [0, 1, 3, 2, 6]
    assert s.tallies.wins == 1 and s.tallies.episodes == 1


def test_agent_finishing_learns_once_more():
    agent = SpyAgent()
    s = GameSession(agent)
    s.new_episode(human=PLAYER_O)
    assert agent.player == PLAYER_X
    assert s.board.actions == [0]
    s.human_move(3)
    s.human_move(4)
    assert s.outcome == PLAYER_X
    assert agent.learned_at == [2, 4, 5]
    assert s.tallies.losses == 1


def test_new_episode_random_side_assignment():
    agent = SpyAgent()
    s = GameSession(agent, rng=np.random.default_rng(0))
    humans = set()
    for _ in range(30):
        s.new_episode()
        humans.add(s.human)
        assert agent.player != s.human
        assert s.board.current_player == s.human
    assert humans == {PLAYER_X, PLAYER_O}


def test_move_after_end_rejected():
    s = GameSession(SpyAgent())
    for mv in (0, 3, 6):
        s.human_move(mv)
    with pytest.raises(InvalidAction):
        s.human_move(8)


def test_hyperparameter_updates_validated():
    agent = make_agent("q", PLAYER_O, AgentConfig(epsilon=0.1, discount=1.0, alpha=0.1))
    s = GameSession(agent)
    assert s.update_hyperparameters(epsilon="0.3", discount=0.9, alpha="2") == {
        "epsilon": 0.3, "discount": 0.9, "alpha": 2.0}
    s.update_hyperparameters(epsilon="1.5", discount="abc", alpha=-1)
    assert (agent.epsilon, agent.discount, agent.alpha) == (0.3, 0.9, 2.0)


def test_hyperparameter_missing_on_agent_is_skipped():
    agent = MonteCarloAgent(PLAYER_O)
    s = GameSession(agent)
    assert s.update_hyperparameters(alpha=0.5) == {}
    assert not hasattr(agent, "alpha")


def test_learning_agent_plays_many_episodes():
    rng = np.random.default_rng(7)
    agent = MonteCarloAgent(PLAYER_O, epsilon=0.2, rng=np.random.default_rng(8))
    s = GameSession(agent, rng=rng)
    for _ in range(40):
        s.new_episode()
        while not s.outcome:
            s.human_move(int(rng.choice(s.board.legal_actions())))
        assert agent.rewards == []
    t = s.tallies
    assert t.episodes == 40
    assert t.wins + t.losses + t.draws == 40
    assert len(agent.table) > 0


def test_random_agent_never_learns():
    agent = RandomAgent(PLAYER_O, rng=np.random.default_rng(0))
    s = GameSession(agent, rng=np.random.default_rng(1))
    while not s.outcome:
        s.human_move(s.board.legal_actions()[0])
    assert s.outcome in (PLAYER_X, PLAYER_O, DRAW)


def test_invalid_human_token():
    with pytest.raises(ValueError):
        GameSession(SpyAgent(), human="Z")


def test_agent_opens_when_it_holds_x_from_construction():
    agent = SpyAgent(PLAYER_X)
    s = GameSession(agent, human=PLAYER_O)
    assert agent.player == PLAYER_X
    assert s.board.actions == [0]
    assert s.board.current_player == PLAYER_O
    s.human_move(4)
    assert s.board.state[4] == PLAYER_O


def test_human_o_with_learning_agent_places_o():
    agent = MonteCarloAgent(PLAYER_X, rng=np.random.default_rng(1))
    s = GameSession(agent, human=PLAYER_O, rng=np.random.default_rng(2))
    assert len(s.board.actions) == 1
    move = s.board.legal_actions()[0]
    s.human_move(move)
    assert s.board.state[move] == PLAYER_O


def test_out_of_turn_human_move_rejected():
    s = GameSession(SpyAgent(), human=PLAYER_X)
    s.human = PLAYER_O
    before = s.board.state
    with pytest.raises(MisalignedPlayer):
        s.human_move(4)
    assert s.board.state == before
    assert s.board.actions == []
