"""Configuration package: tunable defaults and instance loading."""

from .defaults import (
    DEFAULT_GAIN_DELTA,
    DEFAULT_LOCAL_SEARCH_PARAMS,
    DEFAULT_SOLVER_PARAMS,
    ImprovementPolicy,
    LocalSearchParams,
    SolverParams,
)

# NOTE: instance_loader is not re-exported here: it imports core, and core
# modules may import config.

__all__ = [
    "DEFAULT_GAIN_DELTA",
    "DEFAULT_LOCAL_SEARCH_PARAMS",
    "DEFAULT_SOLVER_PARAMS",
    "ImprovementPolicy",
    "LocalSearchParams",
    "SolverParams",
]
