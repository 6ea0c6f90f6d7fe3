"""Central repository for tunable local-search and solver defaults.

All numerical values that influence optimisation behaviour are collected here
so they can be updated from a single location without touching algorithmic
code.  The constants are exposed as frozen dataclasses so a configuration is
passed by value into each optimizer and never shared as mutable global state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ImprovementPolicy(Enum):
    """Which improving move a neighbourhood scan applies."""

    FIRST_IMPROVEMENT = "first"
    BEST_IMPROVEMENT = "best"

    @classmethod
    def from_name(cls, name: "str | ImprovementPolicy") -> "ImprovementPolicy":
        """Accept ``"first"``/``"best"`` or the full enum member name."""

        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        for policy in cls:
            if key in (policy.value, policy.name.lower()):
                return policy
        raise ValueError(f"Unknown improvement policy: {name!r}")


# Minimum cost reduction that counts as an improvement.  Guards against
# oscillation on floating-point noise.
DEFAULT_GAIN_DELTA = 1e-9


@dataclass(frozen=True)
class LocalSearchParams:
    """Knobs of one minimisation cycle (2-opt pass + relocate pass)."""

    gain_delta: float = DEFAULT_GAIN_DELTA
    two_opt_policy: ImprovementPolicy = ImprovementPolicy.BEST_IMPROVEMENT
    relocate_policy: ImprovementPolicy = ImprovementPolicy.BEST_IMPROVEMENT
    shuffle: bool = False
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.gain_delta <= 0:
            raise ValueError(f"gain_delta must be positive: {self.gain_delta}")


@dataclass(frozen=True)
class SolverParams:
    """Budget of the multi-cycle driver wrapped around the strategy."""

    max_cycles: int = 50
    time_limit_s: Optional[float] = None
    min_cycle_improvement: float = DEFAULT_GAIN_DELTA

    def __post_init__(self) -> None:
        if self.max_cycles < 1:
            raise ValueError(f"max_cycles must be at least 1: {self.max_cycles}")
        if self.time_limit_s is not None and self.time_limit_s <= 0:
            raise ValueError(f"time_limit_s must be positive: {self.time_limit_s}")


DEFAULT_LOCAL_SEARCH_PARAMS = LocalSearchParams()
DEFAULT_SOLVER_PARAMS = SolverParams()
