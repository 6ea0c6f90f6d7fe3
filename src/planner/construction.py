"""Heuristic constructors for initial CVRP solutions.

* ``build_singleton_solution``: one vehicle per customer, ``[D, c, D]``.
  Always feasible and a common starting point for relocate-driven merging.
* ``build_nearest_neighbour_solution``: capacity-aware nearest neighbour.
  Opens a route at the depot and keeps appending the cheapest unvisited
  customer (from the current tail) that still fits; when nothing fits the
  route is closed and a new one is opened.
* ``solution_from_sequences``: rebuild a solution from customer id lists.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from core.node import Node
from core.problem import Problem
from core.solution import Solution
from core.vehicle import create_vehicle


def build_singleton_solution(problem: Problem) -> Solution:
    """One vehicle per customer, in customer order."""

    vehicles = [
        create_vehicle(problem.vehicle_capacity, problem.depot, [customer], vehicle_id=idx)
        for idx, customer in enumerate(problem.customers)
    ]
    return Solution(vehicles=vehicles)


def build_nearest_neighbour_solution(problem: Problem) -> Solution:
    """Greedy nearest-neighbour tours split by capacity."""

    cost = problem.cost_matrix.get_cost
    # deterministic tie-breaking on node id
    remaining: List[Node] = sorted(problem.customers)
    solution = Solution()

    while remaining:
        load = 0.0
        tail = problem.depot
        tour: List[Node] = []
        while True:
            candidates = [c for c in remaining if load + c.demand <= problem.vehicle_capacity]
            if not candidates:
                break
            nearest = min(candidates, key=lambda c: (cost(tail.node_id, c.node_id), c.node_id))
            tour.append(nearest)
            remaining.remove(nearest)
            load += nearest.demand
            tail = nearest
        solution.add_vehicle(
            create_vehicle(problem.vehicle_capacity, problem.depot, tour, vehicle_id=len(solution))
        )

    return solution


def solution_from_sequences(problem: Problem, sequences: Iterable[Sequence[int]]) -> Solution:
    """Build a solution from lists of customer ids (depots excluded)."""

    solution = Solution()
    for idx, sequence in enumerate(sequences):
        customers = [problem.customer_by_id(int(node_id)) for node_id in sequence]
        solution.add_vehicle(
            create_vehicle(problem.vehicle_capacity, problem.depot, customers, vehicle_id=idx)
        )
    return solution


INITIAL_SOLUTION_BUILDERS = {
    "singleton": build_singleton_solution,
    "nearest": build_nearest_neighbour_solution,
}


__all__ = [
    "INITIAL_SOLUTION_BUILDERS",
    "build_nearest_neighbour_solution",
    "build_singleton_solution",
    "solution_from_sequences",
]
