"""
Solution data structure module
==============================
Ordered, mutable collection of vehicles shared by both optimization passes.

Design notes:
    - Vehicle order does not change the cost but decides move-discovery
      order (tie-breaking) and is what ``shuffle`` permutes
    - Vehicles are appended (void-route injection) and pruned (empty routes)
      during one minimize cycle; the Solution object itself is never
      replaced mid-cycle
    - ``copy()`` is a total deep copy so callers can keep a snapshot while a
      cycle mutates the working solution
"""

import random
from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from core.node import Node
from core.route import Route
from core.vehicle import Vehicle
from physics.distance import CostMatrix


@dataclass
class Solution:
    """Ordered list of vehicles (with their routes)."""

    vehicles: List[Vehicle] = field(default_factory=list)

    # ========== Mutation ==========

    def add_vehicle(self, vehicle: Vehicle) -> None:
        self.vehicles.append(vehicle)

    def remove_void_vehicles(self) -> int:
        """
        Drop every vehicle whose route demand is exactly zero.

        Returns:
            number of vehicles removed
        """
        kept = [vehicle for vehicle in self.vehicles if vehicle.route.demand() != 0]
        removed = len(self.vehicles) - len(kept)
        # in place: callers may hold a reference to the list
        self.vehicles[:] = kept
        return removed

    def shuffle(self, rng: random.Random) -> None:
        """Randomly permute vehicle order in place."""
        rng.shuffle(self.vehicles)

    # ========== Validation ==========

    def is_valid(self) -> bool:
        """
        Every route is valid and no customer is served by two routes.
        """
        seen = set()
        for vehicle in self.vehicles:
            route = vehicle.route
            if not route.is_valid():
                return False
            for node in route.customers():
                if node in seen:
                    return False
                seen.add(node)
        return True

    def is_feasible(self) -> bool:
        """Every vehicle load is within its capacity."""
        return all(not vehicle.is_overloaded() for vehicle in self.vehicles)

    # ========== Aggregates ==========

    def cost(self, cost_matrix: CostMatrix) -> float:
        return sum(vehicle.route.cost(cost_matrix) for vehicle in self.vehicles)

    def demand(self) -> float:
        return sum(vehicle.load() for vehicle in self.vehicles)

    def routes(self) -> List[Route]:
        return [vehicle.route for vehicle in self.vehicles]

    def customers(self) -> List[Node]:
        nodes: List[Node] = []
        for vehicle in self.vehicles:
            nodes.extend(vehicle.route.customers())
        return nodes

    def summary(self, cost_matrix: CostMatrix) -> Dict:
        """Headline metrics for logs and reports."""
        return {
            "num_vehicles": len(self.vehicles),
            "num_customers": len(self.customers()),
            "cost": self.cost(cost_matrix),
            "demand": self.demand(),
            "is_valid": self.is_valid(),
            "is_feasible": self.is_feasible(),
        }

    # ========== Copy ==========

    def copy(self) -> "Solution":
        return Solution(vehicles=[vehicle.copy() for vehicle in self.vehicles])

    # ========== Dunder protocol ==========

    def __iter__(self) -> Iterator[Vehicle]:
        return iter(self.vehicles)

    def __len__(self) -> int:
        return len(self.vehicles)

    def __str__(self) -> str:
        return "\n".join(str(vehicle) for vehicle in self.vehicles)
