"""
Vehicle data structure module
=============================
A vehicle is a capacity limit plus the route it drives.

Design notes:
    - Vehicle owns exactly one Route (composition)
    - Load is derived from the route, never stored
    - Capacity is reported, not enforced: the relocate pass checks
      ``can_accept`` before moving a customer in
"""

from dataclasses import dataclass
from typing import List, Optional

from core.node import Node
from core.route import Route, create_route_from_customers, create_void_route


# ========== Vehicle ==========

@dataclass
class Vehicle:
    """
    Capacitated vehicle.

    Attributes:
        capacity: maximum load
        route: the route driven by this vehicle
        vehicle_id: optional label used in reports
    """

    capacity: float
    route: Route
    vehicle_id: Optional[int] = None

    def __post_init__(self):
        if self.capacity < 0:
            raise ValueError(f"Vehicle capacity must be non-negative: {self.capacity}")

    # ========== Queries ==========

    def load(self) -> float:
        """Current load, i.e. the demand of the route."""
        return self.route.demand()

    def remaining_capacity(self) -> float:
        return self.capacity - self.load()

    def can_accept(self, demand: float) -> bool:
        """Whether adding ``demand`` keeps the load within capacity."""
        return self.load() + demand <= self.capacity

    def is_void(self) -> bool:
        """Whether the vehicle carries nothing (its route serves no demand)."""
        return self.load() == 0

    def is_overloaded(self) -> bool:
        return self.load() > self.capacity

    # ========== Copy ==========

    def copy(self) -> "Vehicle":
        return Vehicle(capacity=self.capacity, route=self.route.copy(), vehicle_id=self.vehicle_id)

    # ========== String representation ==========

    def __str__(self) -> str:
        label = f"V{self.vehicle_id}" if self.vehicle_id is not None else "V"
        return f"{label}({self.load():g}/{self.capacity:g}): {self.route}"


# ========== Convenience constructors ==========

def create_vehicle(capacity: float,
                   depot: Node,
                   customers: Optional[List[Node]] = None,
                   vehicle_id: Optional[int] = None) -> Vehicle:
    """
    Create a vehicle whose route visits ``customers`` in order.

    Without customers the vehicle gets a void route ``[depot, depot]``.
    """
    if customers:
        route = create_route_from_customers(depot, customers)
    else:
        route = create_void_route(depot)
    return Vehicle(capacity=capacity, route=route, vehicle_id=vehicle_id)
