"""Local search heuristics driven by the minimisation strategy.

Two neighbourhoods are implemented on top of the Route primitives:

* :class:`IntraRouteOptimizer` runs 2-opt on every route independently.  A
  candidate reversal of positions ``[a, b]`` replaces arcs ``(a-1, a)`` and
  ``(b, b+1)`` with ``(a-1, b)`` and ``(a, b+1)``; the interior arcs flip
  direction, which matters when the cost matrix is asymmetric, so both
  directions of the segment are accumulated while ``b`` grows.
* :class:`InterRouteOptimizer` relocates single customers anywhere in the
  solution, within their own route or into another vehicle that has room.
  The gain of a move is the saving of removing the customer from its
  position minus the cost of inserting it between the two destination nodes.

Both optimizers share the same improvement contract: a candidate counts only
when its gain exceeds ``gain_delta``.  ``FIRST_IMPROVEMENT`` applies the first
qualifying move in scan order and restarts the scan; ``BEST_IMPROVEMENT``
scans the whole neighbourhood and applies the single best move.  A pass stops
when no candidate qualifies, i.e. at a local optimum of its neighbourhood.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from config import DEFAULT_GAIN_DELTA, ImprovementPolicy
from core.route import Route
from core.solution import Solution
from physics.distance import CostMatrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TwoOptMove:
    """Reversal of route positions ``[a, b]``."""

    a: int
    b: int
    gain: float


@dataclass(frozen=True)
class RelocateMove:
    """Move of the customer at ``source`` position ``index``.

    For a same-route move ``position`` is the ``j`` argument of
    :meth:`Route.relocate_node`; otherwise it is the insertion index in the
    destination route.
    """

    source: int
    index: int
    destination: int
    position: int
    gain: float

    @property
    def same_route(self) -> bool:
        return self.source == self.destination


def _check_gain_delta(gain_delta: float) -> float:
    if gain_delta <= 0:
        raise ValueError(f"gain_delta must be positive: {gain_delta}")
    return gain_delta


class IntraRouteOptimizer:
    """2-opt improvement applied to each route on its own."""

    def __init__(self, cost_matrix: CostMatrix, gain_delta: float = DEFAULT_GAIN_DELTA) -> None:
        self.cost_matrix = cost_matrix
        self.gain_delta = _check_gain_delta(gain_delta)

    def two_opt(self, solution: Solution, policy: ImprovementPolicy) -> int:
        """Bring every route to a 2-opt local optimum.

        Returns the number of reversals applied over the whole solution.
        Route membership never changes.
        """

        policy = ImprovementPolicy.from_name(policy)
        total = 0
        for vehicle in solution.vehicles:
            total += self.two_opt_route(vehicle.route, policy)
        logger.debug(f"[2-OPT] pass finished: {total} moves over {len(solution)} routes")
        return total

    def two_opt_route(self, route: Route, policy: ImprovementPolicy) -> int:
        """Apply improving reversals to one route until none qualifies."""

        policy = ImprovementPolicy.from_name(policy)
        moves = 0
        while True:
            move = self.find_move(route, policy)
            if move is None:
                return moves
            route.reverse_segment(move.a, move.b)
            moves += 1
            logger.debug(f"[2-OPT] reverse({move.a}, {move.b}) gain={move.gain:.6f} -> {route}")

    def find_move(self, route: Route, policy: ImprovementPolicy) -> Optional[TwoOptMove]:
        """Scan all pairs ``0 < a < b < size-1`` for a qualifying reversal."""

        ids = route.node_ids()
        size = len(ids)
        cost = self.cost_matrix.get_cost
        best: Optional[TwoOptMove] = None

        for a in range(1, size - 2):
            pred = ids[a - 1]
            enter = cost(pred, ids[a])
            forward = 0.0
            backward = 0.0
            for b in range(a + 1, size - 1):
                forward += cost(ids[b - 1], ids[b])
                backward += cost(ids[b], ids[b - 1])
                succ = ids[b + 1]
                gain = (
                    enter + cost(ids[b], succ) + forward
                    - cost(pred, ids[b]) - cost(ids[a], succ) - backward
                )
                if gain <= self.gain_delta:
                    continue
                if policy is ImprovementPolicy.FIRST_IMPROVEMENT:
                    return TwoOptMove(a, b, gain)
                if best is None or gain > best.gain:
                    best = TwoOptMove(a, b, gain)

        return best


class InterRouteOptimizer:
    """Customer relocation across the whole solution, capacity-aware."""

    def __init__(self, cost_matrix: CostMatrix, gain_delta: float = DEFAULT_GAIN_DELTA) -> None:
        self.cost_matrix = cost_matrix
        self.gain_delta = _check_gain_delta(gain_delta)

    def relocate(self, solution: Solution, policy: ImprovementPolicy) -> int:
        """Apply improving relocations until none qualifies anywhere.

        Routes emptied by a move stay in the solution as ``[depot, depot]``;
        pruning them is the caller's job.
        """

        policy = ImprovementPolicy.from_name(policy)
        moves = 0
        while True:
            move = self.find_move(solution, policy)
            if move is None:
                break
            self.apply(solution, move)
            moves += 1
        logger.debug(f"[RELOCATE] pass finished: {moves} moves")
        return moves

    def apply(self, solution: Solution, move: RelocateMove) -> None:
        source = solution.vehicles[move.source].route
        if move.same_route:
            source.relocate_node(move.index, move.position)
            logger.debug(
                f"[RELOCATE] route {move.source}: {move.index} -> after {move.position} "
                f"gain={move.gain:.6f}"
            )
            return

        destination = solution.vehicles[move.destination].route
        node = source.remove_at(move.index)
        destination.insert_at(move.position, node)
        logger.debug(
            f"[RELOCATE] customer {node.node_id}: route {move.source} -> route "
            f"{move.destination}@{move.position} gain={move.gain:.6f}"
        )

    def find_move(self, solution: Solution, policy: ImprovementPolicy) -> Optional[RelocateMove]:
        cost = self.cost_matrix.get_cost
        vehicles = solution.vehicles
        sequences = [vehicle.route.node_ids() for vehicle in vehicles]
        best: Optional[RelocateMove] = None

        for s, src_ids in enumerate(sequences):
            source_route = vehicles[s].route
            for i in range(1, len(src_ids) - 1):
                node = source_route.get(i)
                x = node.node_id
                prev_id, next_id = src_ids[i - 1], src_ids[i + 1]
                saving = cost(prev_id, x) + cost(x, next_id) - cost(prev_id, next_id)

                for d, dst_ids in enumerate(sequences):
                    if d == s:
                        # j in {i-1, i} puts the node back where it was
                        slots = ((j, src_ids[j], src_ids[j + 1])
                                 for j in range(len(src_ids) - 1) if j != i and j != i - 1)
                    else:
                        if not vehicles[d].can_accept(node.demand):
                            continue
                        slots = ((k, dst_ids[k - 1], dst_ids[k]) for k in range(1, len(dst_ids)))

                    for position, u, v in slots:
                        gain = saving - (cost(u, x) + cost(x, v) - cost(u, v))
                        if gain <= self.gain_delta:
                            continue
                        move = RelocateMove(s, i, d, position, gain)
                        if policy is ImprovementPolicy.FIRST_IMPROVEMENT:
                            return move
                        if best is None or gain > best.gain:
                            best = move

        return best
