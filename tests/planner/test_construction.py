"""Tests for the initial solution constructors."""

import pytest

from core.node import create_customer, create_depot
from core.problem import Problem
from physics.distance import CostMatrix
from planner.construction import (
    INITIAL_SOLUTION_BUILDERS,
    build_nearest_neighbour_solution,
    build_singleton_solution,
    solution_from_sequences,
)


def _build_line_problem(num_customers: int = 4, demand: float = 4.0) -> Problem:
    coordinates = {0: (0.0, 0.0)}
    customers = []
    for node_id in range(1, num_customers + 1):
        coordinates[node_id] = (float(node_id), 0.0)
        customers.append(create_customer(node_id, demand))
    return Problem(create_depot(0), 10.0, CostMatrix.from_coordinates(coordinates), customers)


def test_singleton_solution_has_one_vehicle_per_customer():
    problem = _build_line_problem()
    solution = build_singleton_solution(problem)
    assert len(solution) == 4
    assert [v.route.node_ids() for v in solution] == [[0, c, 0] for c in range(1, 5)]
    assert solution.is_valid()
    assert all(v.capacity == problem.vehicle_capacity for v in solution)


def test_nearest_neighbour_splits_on_capacity():
    problem = _build_line_problem()
    solution = build_nearest_neighbour_solution(problem)
    assert [v.route.node_ids() for v in solution] == [[0, 1, 2, 0], [0, 3, 4, 0]]
    assert solution.is_valid()
    assert solution.is_feasible()


def test_nearest_neighbour_is_deterministic():
    problem = _build_line_problem(num_customers=7, demand=3.0)
    first = build_nearest_neighbour_solution(problem)
    second = build_nearest_neighbour_solution(problem)
    assert [v.route.node_ids() for v in first] == [v.route.node_ids() for v in second]
    assert sorted(n.node_id for n in first.customers()) == list(range(1, 8))


def test_solution_from_sequences():
    problem = _build_line_problem()
    solution = solution_from_sequences(problem, [[2, 1], [4, 3]])
    assert [v.route.node_ids() for v in solution] == [[0, 2, 1, 0], [0, 4, 3, 0]]
    with pytest.raises(KeyError):
        solution_from_sequences(problem, [[9]])


def test_builders_registry():
    assert set(INITIAL_SOLUTION_BUILDERS) == {"singleton", "nearest"}
