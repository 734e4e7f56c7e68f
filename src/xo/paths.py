"""Where run artifacts (tracking logs) go.

Environment first, then the enclosing git checkout, then the current
directory, so an installed package never writes under site-packages.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path


def repo_root(start: Path | None = None) -> Path:
    """XO_REPO_ROOT -> nearest parent of `start` holding .git -> CWD."""
    env = os.getenv("XO_REPO_ROOT")
    if env:
        return Path(env)
    here = (start if start is not None else Path(__file__)).resolve()
    for parent in [here, *here.parents][:6]:
        if (parent / ".git").exists():
            return parent
    return Path.cwd()


def runs_dir() -> Path:
    p = os.getenv("XO_RUNS_DIR")
    return Path(p) if p else repo_root() / "runs"


def get_git_commit() -> str | None:
    """Commit hash of the checkout, or None outside a repository."""
    try:
        out = subprocess.check_output(
            ["git", "-C", str(repo_root()), "rev-parse", "HEAD"],
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=2.0,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    return out.strip() or None
