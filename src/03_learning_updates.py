"""
Teaching module 03: One scripted episode, two learners.

What you learn here:
- Monte-Carlo averages discounted returns over the agent's own moves.
- Q-learning bootstraps from the best next value and learns from both sides.

Run:
  python src/03_learning_updates.py --demo
"""
import argparse

import numpy as np

from xo.board import Board
from xo.monte_carlo import MonteCarloAgent
from xo.q_learning import QLearningAgent
from xo.rewards import terminal_only


def demo(discount: float, alpha: float) -> None:
    mc = MonteCarloAgent('O', discount=discount, rng=np.random.default_rng(0))
    q = QLearningAgent('O', discount=discount, alpha=alpha, rng=np.random.default_rng(0))
    b = Board()
    for mv in [0, 3, 1]:
        b.apply_move(mv)
    mc.learn(b, terminal_only)
    for mv in [4, 2]:
        b.apply_move(mv)
    mc.learn(b, terminal_only)
    q.learn(b, terminal_only)
    print(b)
    print("Monte-Carlo table:")
    for key, value in sorted(mc.table.items()):
        print(f"  {key} {value:+.3f} n={mc.table.count(key)}")
    print("Q-learning table:")
    for key, value in sorted(q.table.items()):
        print(f"  {key} {value:+.3f}")


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Module 03: Learning updates")
    ap.add_argument('--demo', action='store_true')
    ap.add_argument('--discount', type=float, default=0.9)
    ap.add_argument('--alpha', type=float, default=0.5)
    args = ap.parse_args()
    if args.demo:
        demo(args.discount, args.alpha)
