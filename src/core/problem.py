"""
Problem instance module
=======================
Read-only description of a CVRP instance as consumed by the planner.

Holds the depot, the customers, the homogeneous vehicle capacity and the
cost matrix.  The planner never mutates a Problem; it only asks it for a
fresh void vehicle when the relocate pass needs a new destination.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional

from core.node import Node
from core.route import create_void_route
from core.vehicle import Vehicle
from physics.distance import CostMatrix


@dataclass(frozen=True)
class Problem:
    """
    CVRP instance.

    Attributes:
        depot: start/end node of every route
        vehicle_capacity: capacity of every vehicle
        cost_matrix: travel cost between node ids
        customers: customer nodes (positive demand)
        name: instance name, for reports
        num_vehicles: fleet size hint from the instance file, if any
    """

    depot: Node
    vehicle_capacity: float
    cost_matrix: CostMatrix
    customers: List[Node] = field(default_factory=list)
    name: str = ""
    num_vehicles: Optional[int] = None

    def __post_init__(self):
        if not self.depot.is_depot():
            raise ValueError(f"{self.depot!r} is not flagged as depot")
        if self.vehicle_capacity <= 0:
            raise ValueError(f"Vehicle capacity must be positive: {self.vehicle_capacity}")

        ids = {self.depot.node_id}
        for customer in self.customers:
            if customer.is_depot():
                raise ValueError(f"{customer!r} is flagged as depot")
            if customer.node_id in ids:
                raise ValueError(f"Duplicate node id {customer.node_id}")
            # zero-demand routes are pruned as unused, so every customer must carry demand
            if customer.demand <= 0:
                raise ValueError(f"Customer {customer.node_id} must have positive demand")
            if customer.demand > self.vehicle_capacity:
                raise ValueError(
                    f"Customer {customer.node_id} demand {customer.demand} "
                    f"exceeds vehicle capacity {self.vehicle_capacity}"
                )
            ids.add(customer.node_id)

        missing = [node_id for node_id in sorted(ids) if node_id not in self.cost_matrix]
        if missing:
            raise ValueError(f"Cost matrix has no entries for nodes {missing}")

    def total_demand(self) -> float:
        return sum(customer.demand for customer in self.customers)

    def lower_bound_vehicles(self) -> int:
        """Trivial bin-packing bound on the number of vehicles."""
        if not self.customers:
            return 0
        return math.ceil(self.total_demand() / self.vehicle_capacity)

    def void_vehicle(self) -> Vehicle:
        """New vehicle at full capacity with route ``[depot, depot]``."""
        return Vehicle(capacity=self.vehicle_capacity, route=create_void_route(self.depot))

    def customer_by_id(self, node_id: int) -> Node:
        for customer in self.customers:
            if customer.node_id == node_id:
                return customer
        raise KeyError(f"Unknown customer id {node_id}")
