"""
Node data structure module
==========================
Depot and customer points of a CVRP instance.

Design notes:
    - A single immutable type covers both roles; the ``depot`` flag tells
      them apart
    - Identity is the node id: two nodes are equal iff their ids are equal,
      so a node can be looked up in routes and sets by id alone
    - Demand is a non-negative quantity; the depot conventionally carries 0
"""

from dataclasses import dataclass


# ========== Node ==========

@dataclass(frozen=True, eq=False)
class Node:
    """
    Immutable depot/customer point.

    Attributes:
        node_id: unique non-negative identifier, also the CostMatrix key
        demand: quantity delivered at this node
        depot: True for the depot
    """
    node_id: int
    demand: float = 0.0
    depot: bool = False

    def __post_init__(self):
        if self.node_id < 0:
            raise ValueError(f"Node id must be non-negative: {self.node_id}")
        if self.demand < 0:
            raise ValueError(f"Demand must be non-negative: node {self.node_id} has {self.demand}")

    def is_depot(self) -> bool:
        return self.depot

    def __eq__(self, other) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.node_id == other.node_id

    def __hash__(self) -> int:
        return hash(self.node_id)

    def __lt__(self, other: "Node") -> bool:
        return self.node_id < other.node_id

    def __str__(self) -> str:
        if self.depot:
            return f"D{self.node_id}"
        return str(self.node_id)

    def __repr__(self) -> str:
        kind = "depot" if self.depot else "customer"
        return f"Node(id={self.node_id}, demand={self.demand}, {kind})"


# ========== Convenience constructors ==========

def create_depot(node_id: int = 0) -> Node:
    """Create the depot node (zero demand)."""
    return Node(node_id=node_id, demand=0.0, depot=True)


def create_customer(node_id: int, demand: float) -> Node:
    """
    Create a customer node.

    Example:
        customer = create_customer(3, demand=12.0)
    """
    return Node(node_id=node_id, demand=float(demand), depot=False)
