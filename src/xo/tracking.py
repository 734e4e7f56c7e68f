"""
Optional MLflow tracking for play sessions.

MLflow is imported only when tracking is enabled; any tracking failure is
logged and play continues without it.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional

logger = logging.getLogger(__name__)


class Tracker:
    """Thin wrapper that turns every call into a no-op when disabled."""

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled
        self._mlflow = None

    def log_params(self, params: Mapping[str, object]) -> None:
        if self._mlflow is None:
            return
        try:
            self._mlflow.log_params(dict(params))
        except Exception as e:
            logger.warning("mlflow log_params failed: %s", e)

    def log_episode(self, step: int, metrics: Mapping[str, float]) -> None:
        if self._mlflow is None:
            return
        try:
            self._mlflow.log_metrics({k: float(v) for k, v in metrics.items()}, step=step)
        except Exception as e:
            logger.warning("mlflow log_metrics failed: %s", e)


@contextmanager
def tracking_run(enabled: bool, run_name: str, log_dir: Optional[Path] = None) -> Iterator[Tracker]:
    tracker = Tracker(enabled)
    if not enabled:
        yield tracker
        return
    try:
        import mlflow  # type: ignore

        if log_dir is not None:
            mlflow.set_tracking_uri((log_dir.resolve() / "mlruns").as_uri())
        run = mlflow.start_run(run_name=run_name)
    except Exception as e:
        logger.warning("Tracking disabled, could not start mlflow run: %s", e)
        yield tracker
        return
    tracker._mlflow = mlflow
    try:
        yield tracker
    finally:
        mlflow.end_run()
        logger.info("Tracked run %s", run.info.run_id)


def session_params(agent_kind: str, params: Dict[str, object]) -> Dict[str, object]:
    from .paths import get_git_commit

    out: Dict[str, object] = {"agent": agent_kind}
    out.update(params)
    commit = get_git_commit()
    if commit:
        out["git_commit"] = commit
    return out
