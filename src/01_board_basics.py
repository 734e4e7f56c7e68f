"""
Teaching module 01: Board basics for tic-tac-toe.

What you learn here:
- How a position is stored: a tuple of 9 tokens in row-major order.
- How the board records one snapshot per ply so learners can look back.
- How wins, draws and unfinished games are told apart.

Run:
  python src/01_board_basics.py --demo
"""
import argparse

from xo.board import Board


def demo() -> None:
    examples = [
        "XXX______",  # X row
        "OOO_XX_X_",  # O row
        "XXOOOXXOX",  # draw
        "_________",  # start
    ]
    for cells in examples:
        b = Board.from_cells(cells)
        print(f"Board {cells} outcome={b.terminal_outcome() or 'none'} legal={b.legal_actions()}")

    b = Board()
    for mv in [4, 0, 8]:
        b.apply_move(mv)
    print(b)
    for i, state in enumerate(b.history):
        print(f"horizon {i}: {''.join(state)}")


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Module 01: Board basics")
    ap.add_argument('--demo', action='store_true', help='Print demo examples')
    args = ap.parse_args()
    if args.demo:
        demo()
