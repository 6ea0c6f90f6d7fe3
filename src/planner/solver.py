"""Multi-cycle driver around a minimisation strategy.

A single ``Strategy.minimize`` call runs 2-opt then relocate once.  Relocation
can open new 2-opt improvements (and vice versa), so the solver repeats the
cycle until one of three things happens:

* a cycle improves the cost by no more than ``min_cycle_improvement``
  (the solution is a local optimum of both neighbourhoods);
* ``max_cycles`` cycles have run;
* ``time_limit_s`` has elapsed (checked between cycles; a running cycle is
  never interrupted).

The caller's solution is copied first and left untouched.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from config import DEFAULT_SOLVER_PARAMS, SolverParams
from core.problem import Problem
from core.solution import Solution
from planner.strategy import CycleReport, Strategy

logger = logging.getLogger(__name__)

STOP_CONVERGED = "converged"
STOP_MAX_CYCLES = "max_cycles"
STOP_TIME_LIMIT = "time_limit"


@dataclass
class SolveResult:
    """Container storing the outcome of the solver.

    Attributes
    ----------
    solution:
        The improved solution (a copy of the input).
    initial_cost:
        Cost of the input solution.
    final_cost:
        Cost of ``solution``.
    cycles:
        Number of ``minimize`` calls made.
    history:
        One :class:`CycleReport` per cycle, in order.
    elapsed_s:
        Wall-clock time spent in the solver.
    stop_reason:
        ``"converged"``, ``"max_cycles"`` or ``"time_limit"``.
    """

    solution: Solution
    initial_cost: float
    final_cost: float
    cycles: int
    history: List[CycleReport] = field(default_factory=list)
    elapsed_s: float = 0.0
    stop_reason: str = STOP_CONVERGED

    @property
    def improvement(self) -> float:
        return self.initial_cost - self.final_cost


class LocalSearchSolver:
    """Repeat a strategy's cycle until convergence or budget exhaustion."""

    def __init__(
        self,
        problem: Problem,
        strategy: Strategy,
        params: Optional[SolverParams] = None,
    ) -> None:
        self.problem = problem
        self.strategy = strategy
        self.params = params or DEFAULT_SOLVER_PARAMS

    def solve(self, initial: Solution) -> SolveResult:
        cost_matrix = self.problem.cost_matrix
        solution = initial.copy()
        initial_cost = solution.cost(cost_matrix)
        history: List[CycleReport] = []
        stop_reason = STOP_MAX_CYCLES
        start = time.perf_counter()

        logger.info(
            f"[SOLVER] start: cost={initial_cost:.3f}, vehicles={len(solution)}, {self.strategy}"
        )

        for _ in range(self.params.max_cycles):
            report = self.strategy.minimize(solution)
            history.append(report)
            if report.improvement <= self.params.min_cycle_improvement:
                stop_reason = STOP_CONVERGED
                break
            limit = self.params.time_limit_s
            if limit is not None and time.perf_counter() - start >= limit:
                stop_reason = STOP_TIME_LIMIT
                break

        elapsed = time.perf_counter() - start
        final_cost = solution.cost(cost_matrix)
        logger.info(
            f"[SOLVER] {stop_reason} after {len(history)} cycles in {elapsed:.2f}s: "
            f"cost {initial_cost:.3f} -> {final_cost:.3f}, vehicles={len(solution)}"
        )
        return SolveResult(
            solution=solution,
            initial_cost=initial_cost,
            final_cost=final_cost,
            cycles=len(history),
            history=history,
            elapsed_s=elapsed,
            stop_reason=stop_reason,
        )
