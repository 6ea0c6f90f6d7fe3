"""Tests for the 2-opt and relocate neighbourhoods."""

import pytest

from config import ImprovementPolicy
from core.node import create_customer, create_depot
from core.route import create_route_from_customers
from core.solution import Solution
from core.vehicle import create_vehicle
from physics.distance import CostMatrix
from planner.local_search import InterRouteOptimizer, IntraRouteOptimizer

DEPOT = create_depot(0)
POLICIES = [ImprovementPolicy.FIRST_IMPROVEMENT, ImprovementPolicy.BEST_IMPROVEMENT]


def _build_square():
    """Depot and three customers on the corners of a 10x10 square."""
    matrix = CostMatrix.from_coordinates(
        {0: (0.0, 0.0), 1: (0.0, 10.0), 2: (10.0, 0.0), 3: (10.0, 10.0)}
    )
    customers = {node_id: create_customer(node_id, 1.0) for node_id in (1, 2, 3)}
    return matrix, customers


def _build_asymmetric(num_customers: int) -> CostMatrix:
    ids = list(range(num_customers + 1))
    rows = [
        [0.0 if i == j else float((i * 7 + j * 3) % 11 + 1) for j in ids]
        for i in ids
    ]
    return CostMatrix.from_rows(ids, rows)


def _route(*ids):
    return create_route_from_customers(DEPOT, [create_customer(i, 1.0) for i in ids])


# ========== 2-opt ==========

@pytest.mark.parametrize("policy", POLICIES)
def test_two_opt_uncrosses_square(policy):
    matrix, customers = _build_square()
    route = create_route_from_customers(DEPOT, [customers[1], customers[2], customers[3]])
    assert route.cost(matrix) == pytest.approx(20.0 + 2 * 200 ** 0.5)

    optimizer = IntraRouteOptimizer(matrix)
    moves = optimizer.two_opt_route(route, policy)

    assert moves >= 1
    assert route.cost(matrix) == pytest.approx(40.0)
    assert route.is_valid()
    assert sorted(route.node_ids()) == [0, 0, 1, 2, 3]


def test_two_opt_leaves_local_optimum_untouched():
    matrix, customers = _build_square()
    route = create_route_from_customers(DEPOT, [customers[1], customers[3], customers[2]])
    optimizer = IntraRouteOptimizer(matrix)
    assert optimizer.find_move(route, ImprovementPolicy.BEST_IMPROVEMENT) is None
    assert optimizer.two_opt_route(route, ImprovementPolicy.FIRST_IMPROVEMENT) == 0
    assert route.node_ids() == [0, 1, 3, 2, 0]


def test_two_opt_gain_matches_brute_force_on_asymmetric_matrix():
    matrix = _build_asymmetric(6)
    route = _route(1, 2, 3, 4, 5, 6)
    optimizer = IntraRouteOptimizer(matrix)

    base = route.cost(matrix)
    gains = {}
    for a in range(1, route.size() - 2):
        for b in range(a + 1, route.size() - 1):
            candidate = route.copy()
            candidate.reverse_segment(a, b)
            gains[(a, b)] = base - candidate.cost(matrix)

    best = optimizer.find_move(route, ImprovementPolicy.BEST_IMPROVEMENT)
    best_gain = max(gains.values())
    if best_gain > optimizer.gain_delta:
        assert best is not None
        assert best.gain == pytest.approx(best_gain)
        assert gains[(best.a, best.b)] == pytest.approx(best.gain)
    else:
        assert best is None

    first = optimizer.find_move(route, ImprovementPolicy.FIRST_IMPROVEMENT)
    if first is not None:
        assert gains[(first.a, first.b)] == pytest.approx(first.gain)
        assert first.gain > optimizer.gain_delta


@pytest.mark.parametrize("policy", POLICIES)
def test_two_opt_pass_reaches_local_optimum(policy):
    matrix = _build_asymmetric(7)
    solution = Solution([create_vehicle(100.0, DEPOT, list(_route(1, 2, 3, 4, 5, 6, 7).customers()))])
    before = solution.cost(matrix)
    optimizer = IntraRouteOptimizer(matrix)

    optimizer.two_opt(solution, policy)

    route = solution.vehicles[0].route
    assert solution.cost(matrix) <= before
    assert route.is_valid()
    assert optimizer.find_move(route, policy) is None


def test_gain_delta_must_be_positive():
    matrix, _ = _build_square()
    with pytest.raises(ValueError):
        IntraRouteOptimizer(matrix, gain_delta=0.0)
    with pytest.raises(ValueError):
        InterRouteOptimizer(matrix, gain_delta=-1e-9)


def test_policy_names_are_accepted():
    matrix, customers = _build_square()
    route = create_route_from_customers(DEPOT, [customers[1], customers[2], customers[3]])
    IntraRouteOptimizer(matrix).two_opt_route(route, "best")
    assert route.cost(matrix) == pytest.approx(40.0)
    with pytest.raises(ValueError):
        ImprovementPolicy.from_name("greedy")


# ========== relocate ==========

def _build_pair_problem():
    """Two customers close to each other, far from the depot."""
    matrix = CostMatrix.from_rows(
        [0, 1, 2],
        [
            [0.0, 10.0, 10.0],
            [10.0, 0.0, 1.0],
            [10.0, 1.0, 0.0],
        ],
    )
    return matrix


@pytest.mark.parametrize("policy", POLICIES)
def test_relocate_merges_routes_when_capacity_allows(policy):
    matrix = _build_pair_problem()
    a, b = create_customer(1, 5.0), create_customer(2, 4.0)
    solution = Solution([create_vehicle(10.0, DEPOT, [a]), create_vehicle(10.0, DEPOT, [b])])

    moves = InterRouteOptimizer(matrix).relocate(solution, policy)

    assert moves == 1
    assert solution.cost(matrix) == pytest.approx(21.0)
    loads = sorted(vehicle.load() for vehicle in solution)
    assert loads == [0.0, 9.0]
    # the emptied route stays until the caller prunes it
    assert len(solution) == 2


def test_relocate_respects_capacity():
    matrix = _build_pair_problem()
    a, b = create_customer(1, 5.0), create_customer(2, 6.0)
    solution = Solution([create_vehicle(10.0, DEPOT, [a]), create_vehicle(10.0, DEPOT, [b])])

    moves = InterRouteOptimizer(matrix).relocate(solution, ImprovementPolicy.BEST_IMPROVEMENT)

    assert moves == 0
    assert [v.route.node_ids() for v in solution] == [[0, 1, 0], [0, 2, 0]]


def test_relocate_allows_exact_capacity_fill():
    matrix = _build_pair_problem()
    a, b = create_customer(1, 5.0), create_customer(2, 5.0)
    solution = Solution([create_vehicle(10.0, DEPOT, [a]), create_vehicle(10.0, DEPOT, [b])])

    InterRouteOptimizer(matrix).relocate(solution, ImprovementPolicy.BEST_IMPROVEMENT)

    assert sorted(v.load() for v in solution) == [0.0, 10.0]
    assert solution.is_feasible()


def test_relocate_gain_matches_cost_difference():
    matrix = _build_asymmetric(6)
    solution = Solution(
        [
            create_vehicle(100.0, DEPOT, list(_route(1, 2, 3).customers())),
            create_vehicle(100.0, DEPOT, list(_route(4, 5, 6).customers())),
        ]
    )
    optimizer = InterRouteOptimizer(matrix)

    for policy in POLICIES:
        move = optimizer.find_move(solution, policy)
        if move is None:
            continue
        candidate = solution.copy()
        optimizer.apply(candidate, move)
        assert solution.cost(matrix) - candidate.cost(matrix) == pytest.approx(move.gain)
        assert candidate.is_valid()


def test_relocate_within_route():
    # customer 2 sits on the far side of the depot: visiting it last is cheaper
    matrix = CostMatrix.from_coordinates(
        {0: (0.0, 0.0), 1: (10.0, 0.0), 2: (-1.0, 0.0), 3: (11.0, 0.0)}
    )
    solution = Solution([create_vehicle(10.0, DEPOT, list(_route(1, 2, 3).customers()))])
    before = solution.cost(matrix)

    moves = InterRouteOptimizer(matrix).relocate(solution, ImprovementPolicy.BEST_IMPROVEMENT)

    assert moves >= 1
    assert solution.cost(matrix) < before
    assert solution.is_valid()
    assert sorted(solution.vehicles[0].route.node_ids()) == [0, 0, 1, 2, 3]
