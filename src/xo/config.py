"""Agent hyperparameters and environment overrides.

Environment-first like the path helpers: XO_EPSILON, XO_DISCOUNT, XO_ALPHA and
XO_DEFAULT_Q seed the defaults, CLI flags override them.
"""
from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "XO_"


def coerce_fraction(raw: object, fallback: float, name: str = "value") -> float:
    """Parse a number in [0, 1]; log and return `fallback` when it is not one."""
    return _coerce(raw, fallback, name, lo=0.0, hi=1.0)


def coerce_rate(raw: object, fallback: float, name: str = "value") -> float:
    """Parse a number >= 0; log and return `fallback` otherwise."""
    return _coerce(raw, fallback, name, lo=0.0, hi=math.inf)


def _coerce(raw: object, fallback: float, name: str, lo: float, hi: float) -> float:
    try:
        val = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("Ignoring %s=%r: not a number, keeping %s", name, raw, fallback)
        return fallback
    if math.isnan(val) or val < lo or val > hi:
        logger.warning("Ignoring %s=%s: outside [%s, %s], keeping %s", name, val, lo, hi, fallback)
        return fallback
    return val


@dataclass
class AgentConfig:
    epsilon: float = 0.1
    discount: float = 1.0
    alpha: float = 0.1
    default_q: float = 0.0

    def validate(self) -> "AgentConfig":
        if not 0.0 <= self.epsilon <= 1.0:
            raise ValueError(f"epsilon must be in [0, 1], got {self.epsilon}")
        if not 0.0 <= self.discount <= 1.0:
            raise ValueError(f"discount must be in [0, 1], got {self.discount}")
        if self.alpha < 0.0:
            raise ValueError(f"alpha must be >= 0, got {self.alpha}")
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AgentConfig":
        env = os.environ if environ is None else environ
        cfg = cls()
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            current = getattr(cfg, f.name)
            if f.name == "default_q":
                try:
                    setattr(cfg, f.name, float(raw))
                except ValueError:
                    logger.warning("Ignoring %s%s=%r: not a number", ENV_PREFIX, f.name.upper(), raw)
            elif f.name == "alpha":
                setattr(cfg, f.name, coerce_rate(raw, current, f.name))
            else:
                setattr(cfg, f.name, coerce_fraction(raw, current, f.name))
        return cfg

    def merged(self, **overrides: Optional[float]) -> "AgentConfig":
        """Copy with every non-None override applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return AgentConfig(**values)
