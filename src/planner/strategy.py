"""Minimisation strategies that sequence the local-search passes.

A strategy owns one call of the improvement cycle over a shared, mutable
:class:`~core.solution.Solution`:

1. optionally shuffle vehicle order (changes which local optimum is reached,
   never the validity of the result);
2. 2-opt every route;
3. assert validity;
4. append one void vehicle ``[depot, depot]`` at full capacity so the
   relocate pass can open a new route when that pays off;
5. relocate customers across the solution;
6. drop every vehicle whose route now carries zero demand;
7. assert validity again.

Validity failures raise :class:`~core.exceptions.InvariantViolationError`
and abort the cycle; the solution is never repaired in place.
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from config import DEFAULT_GAIN_DELTA, ImprovementPolicy, LocalSearchParams
from core.exceptions import InvariantViolationError
from core.problem import Problem
from core.solution import Solution
from planner.local_search import InterRouteOptimizer, IntraRouteOptimizer

logger = logging.getLogger(__name__)


@dataclass
class CycleReport:
    """Outcome of one ``minimize`` call."""

    cost_before: float
    cost_after: float
    two_opt_moves: int
    relocate_moves: int
    vehicles_pruned: int

    @property
    def improvement(self) -> float:
        return self.cost_before - self.cost_after

    @property
    def moves(self) -> int:
        return self.two_opt_moves + self.relocate_moves


class Strategy(ABC):
    """Interface of a minimisation cycle over a solution."""

    @abstractmethod
    def minimize(self, solution: Solution) -> CycleReport:
        """Improve ``solution`` in place."""


class SimpleStrategy(Strategy):
    """2-opt for intra-route and relocate for inter-route improvement.

    ``two_opt_policy`` and ``relocate_policy`` choose between
    FIRST_IMPROVEMENT and BEST_IMPROVEMENT independently.  The gain threshold
    is handed to both optimizers at construction time.
    """

    def __init__(
        self,
        problem: Problem,
        two_opt_policy: ImprovementPolicy = ImprovementPolicy.BEST_IMPROVEMENT,
        relocate_policy: ImprovementPolicy = ImprovementPolicy.BEST_IMPROVEMENT,
        shuffle: bool = False,
        *,
        gain_delta: float = DEFAULT_GAIN_DELTA,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.problem = problem
        self.two_opt_policy = ImprovementPolicy.from_name(two_opt_policy)
        self.relocate_policy = ImprovementPolicy.from_name(relocate_policy)
        self.shuffle = shuffle
        self.rng = rng or random.Random()

        self.intra_opt = IntraRouteOptimizer(problem.cost_matrix, gain_delta)
        self.inter_opt = InterRouteOptimizer(problem.cost_matrix, gain_delta)

    @classmethod
    def from_params(cls, problem: Problem, params: LocalSearchParams) -> "SimpleStrategy":
        return cls(
            problem,
            params.two_opt_policy,
            params.relocate_policy,
            params.shuffle,
            gain_delta=params.gain_delta,
            rng=random.Random(params.seed),
        )

    def minimize(self, solution: Solution) -> CycleReport:
        cost_matrix = self.problem.cost_matrix
        cost_before = solution.cost(cost_matrix)

        if self.shuffle:
            solution.shuffle(self.rng)

        # intra-route improvements on all routes
        two_opt_moves = self.intra_opt.two_opt(solution, self.two_opt_policy)
        self._assert_valid(solution, "2-opt")

        # inter-route improvements
        self._add_void_route(solution)
        relocate_moves = self.inter_opt.relocate(solution, self.relocate_policy)
        pruned = solution.remove_void_vehicles()
        self._assert_valid(solution, "relocate")

        report = CycleReport(
            cost_before=cost_before,
            cost_after=solution.cost(cost_matrix),
            two_opt_moves=two_opt_moves,
            relocate_moves=relocate_moves,
            vehicles_pruned=pruned,
        )
        logger.info(
            f"[STRATEGY] cost {report.cost_before:.3f} -> {report.cost_after:.3f} "
            f"(2-opt moves={two_opt_moves}, relocate moves={relocate_moves}, "
            f"pruned={pruned}, vehicles={len(solution)})"
        )
        return report

    def _add_void_route(self, solution: Solution) -> None:
        solution.add_vehicle(self.problem.void_vehicle())

    @staticmethod
    def _assert_valid(solution: Solution, stage: str) -> None:
        if not solution.is_valid():
            raise InvariantViolationError(f"found invalid solution after {stage}:\n{solution}")

    def __str__(self) -> str:
        return (
            f"OPTIONS (twoOpt, relocate) = {self.two_opt_policy.name},"
            f"{self.relocate_policy.name}"
        )
