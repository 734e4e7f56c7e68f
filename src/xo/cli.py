from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional, TextIO

import numpy as np

from .agents import AGENT_KINDS, make_agent
from .board import DRAW, PLAYER_O, PLAYER_X, Board
from .config import AgentConfig
from .errors import InvalidAction, XOError
from .paths import runs_dir
from .session import GameSession
from .symmetry import literal_hash, orbit
from .tracking import session_params, tracking_run

HELP_TEXT = "moves: 0-8 (row-major) | n: new game | set <epsilon|discount|alpha> <value> | q: quit"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="xo", description="Tic-tac-toe against a learning agent")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose (debug) logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--info", action="store_true", help="Print environment and dependency info and exit")
    p.add_argument("--seed", type=int, default=None, help="Seed for reproducible agent behaviour")

    p_play = sub.add_parser("play", help="Play interactively on stdin/stdout while the agent learns")
    p_play.add_argument("--agent", choices=list(AGENT_KINDS), default="mc", help="Agent kind (default: mc)")
    p_play.add_argument("--epsilon", type=float, default=None, help="Exploration rate in [0,1]")
    p_play.add_argument("--discount", type=float, default=None, help="Discount factor in [0,1]")
    p_play.add_argument("--alpha", type=float, default=None, help="Q-learning rate (>= 0)")
    p_play.add_argument("--default-q", dest="default_q", type=float, default=None,
                        help="Value of unseen state/action pairs")
    p_play.add_argument("--human", choices=[PLAYER_X, PLAYER_O, "random"], default=PLAYER_X,
                        help="Your token in the first game; later games pick at random")
    p_play.add_argument("--tracking", choices=["none", "mlflow"], default="none",
                        help="Experiment tracking backend")
    p_play.add_argument("--log-dir", type=Path, default=None,
                        help="Directory for tracking logs (default: $XO_RUNS_DIR or ./runs)")

    p_out = sub.add_parser("outcome", help="Show the outcome and legal moves of a board")
    p_out.add_argument("--board", required=True, help="9 chars of X/O/_, e.g. XXX______")

    p_sym = sub.add_parser("symmetry", help="List the 8 symmetric keys of a state/action pair")
    p_sym.add_argument("--board", required=True, help="9 chars of X/O/_, e.g. X___O____")
    p_sym.add_argument("--action", type=int, required=True, help="Action index in [0, 8]")

    return p


def _parse_board(raw: str) -> Optional[Board]:
    raw = (raw or "").strip()
    try:
        return Board.from_cells(raw)
    except XOError as e:
        logging.error("Invalid board string %r: %s", raw, e)
        return None


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            print(f"{pkg}={getattr(mod, '__version__', '?')}")


def _summary(session: GameSession) -> str:
    t = session.tallies
    size = len(getattr(session.agent, "table", ()))
    return (f"episodes={t.episodes} wins={t.wins} losses={t.losses} draws={t.draws} "
            f"table_size={size}")


def play(ns: argparse.Namespace, stdin: TextIO, stdout: TextIO) -> int:
    rng = np.random.default_rng(ns.seed)
    try:
        config = AgentConfig.from_env().merged(
            epsilon=ns.epsilon, discount=ns.discount, alpha=ns.alpha, default_q=ns.default_q,
        ).validate()
    except ValueError as e:
        logging.error("%s", e)
        return 2
    agent = make_agent(ns.agent, PLAYER_O, config, rng=rng)
    session = GameSession(agent, rng=rng)
    log_dir = ns.log_dir if ns.log_dir is not None else runs_dir()

    def show() -> None:
        stdout.write(str(session.board) + "\n")
        stdout.flush()

    with tracking_run(ns.tracking == "mlflow", run_name="play", log_dir=log_dir) as tracker:
        if tracker.enabled:
            tracker.log_params(session_params(ns.agent, asdict(config)))
        session.new_episode(None if ns.human == "random" else ns.human)
        stdout.write(HELP_TEXT + "\n")
        stdout.write(f"You are {session.human}.\n")
        show()
        for line in stdin:
            cmd = line.strip()
            if not cmd:
                continue
            if cmd == "q":
                break
            if cmd == "n":
                session.new_episode()
                stdout.write(f"New game. You are {session.human}.\n")
                show()
                continue
            if cmd.startswith("set"):
                parts = cmd.split()
                if len(parts) != 3 or parts[1] not in ("epsilon", "discount", "alpha"):
                    logging.error("Usage: set <epsilon|discount|alpha> <value>")
                    continue
                applied = session.update_hyperparameters(**{parts[1]: parts[2]})
                logging.info("hyperparameters: %s", applied)
                continue
            if session.outcome:
                logging.warning("Game is over; type n for a new game or q to quit.")
                continue
            try:
                index = int(cmd)
            except ValueError:
                logging.error("Not a move: %r (%s)", cmd, HELP_TEXT)
                continue
            try:
                outcome = session.human_move(index)
            except InvalidAction as e:
                logging.error("%s", e)
                continue
            show()
            if outcome:
                result = "Draw!" if outcome == DRAW else f"{outcome} wins!"
                stdout.write(f"{result} (n: new game, q: quit)\n")
                t = session.tallies
                tracker.log_episode(t.episodes, {
                    "wins": t.wins, "losses": t.losses, "draws": t.draws,
                    "table_size": len(getattr(session.agent, "table", ())),
                })
        stdout.write(_summary(session) + "\n")
        stdout.flush()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("xo-learn"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    if ns.cmd == "play":
        return play(ns, sys.stdin, sys.stdout)

    if ns.cmd == "outcome":
        board = _parse_board(ns.board)
        if board is None:
            return 2
        logging.info("outcome=%s legal=%s", board.terminal_outcome() or "none", board.legal_actions())
        return 0

    if ns.cmd == "symmetry":
        board = _parse_board(ns.board)
        if board is None:
            return 2
        if ns.action not in board.legal_actions():
            logging.error("Action %s is not a legal move on %s", ns.action, ns.board)
            return 2
        logging.info("key=%s", literal_hash(board.state, ns.action))
        for kind, key in orbit(board.state, ns.action):
            logging.info("%-14s %s", kind, key)
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
