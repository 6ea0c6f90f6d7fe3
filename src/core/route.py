"""
Route data structure module
===========================
Depot-bookended node sequence with its invariant check and the two mutation
primitives used by the local-search passes.

Design notes:
    - Route = NodeSequence + validity predicate + move primitives
    - NodeSequence keeps the ordered list and the per-node occurrence counts
      in one container, so positional access and O(1) membership can never
      disagree; every mutation goes through it
    - Validity is checked explicitly by ``is_valid()``, it is never enforced
      implicitly by construction (a void route ``[D, D]`` is a legal object
      but not a valid route)

Primitives:
    1. reverse_segment(a, b): 2-opt, reverses the closed interval [a, b]
    2. relocate_node(i, j): moves the node at i right after the node
       originally at j
    3. insert_at / prepend / remove_at: building blocks for cross-route moves
"""

from typing import Dict, Iterator, List, Optional

from core.exceptions import InvalidOperationError
from core.node import Node
from physics.distance import CostMatrix


# ========== Ordered container ==========

class NodeSequence:
    """
    Order-preserving node container with O(1) membership.

    ``_counts`` maps each node to the number of times it occurs in
    ``_items``; the depot normally occurs twice.  ``_version`` increments on
    every mutation so iterators can detect modification.
    """

    __slots__ = ("_items", "_counts", "_version")

    def __init__(self) -> None:
        self._items: List[Node] = []
        self._counts: Dict[Node, int] = {}
        self._version = 0

    def insert(self, index: int, nodes) -> None:
        nodes = list(nodes)
        self._items[index:index] = nodes
        for node in nodes:
            self._counts[node] = self._counts.get(node, 0) + 1
        self._version += 1

    def pop(self, index: int) -> Node:
        node = self._items.pop(index)
        remaining = self._counts[node] - 1
        if remaining:
            self._counts[node] = remaining
        else:
            del self._counts[node]
        self._version += 1
        return node

    def reverse(self, start: int, stop: int) -> None:
        """Reverse ``[start, stop)`` in place (membership is unaffected)."""
        self._items[start:stop] = self._items[start:stop][::-1]
        self._version += 1

    def distinct(self) -> int:
        return len(self._counts)

    @property
    def version(self) -> int:
        return self._version

    def __getitem__(self, index: int) -> Node:
        return self._items[index]

    def __iter__(self) -> Iterator[Node]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, node) -> bool:
        return node in self._counts

    def as_list(self) -> List[Node]:
        return list(self._items)


# ========== Route ==========

class Route:
    """
    Vehicle route ``[depot, c1, ..., ck, depot]``.

    Function:
        1. Store the visiting order of one vehicle
        2. Aggregate demand and travel cost
        3. Check structural validity
        4. Provide the mutation primitives the optimizers are built on

    The route is owned by exactly one Vehicle.  All index preconditions are
    programming contracts: violations raise InvalidOperationError and are
    never recovered from internally.
    """

    def __init__(self, *nodes: Node) -> None:
        self._seq = NodeSequence()
        self.prepend(*nodes)

    # ========== Basic operations ==========

    def prepend(self, *nodes: Node) -> None:
        """Insert all nodes at the front, keeping their argument order."""
        self.insert_at(0, *nodes)

    def insert_at(self, index: int, *nodes: Node) -> None:
        """
        Insert one or more nodes at the given position.

        Parameters:
            index: position the first inserted node will occupy
            nodes: nodes to insert, in order
        """
        if index < 0 or index > len(self._seq):
            raise InvalidOperationError(f"insert index {index} out of range for {self}")
        self._seq.insert(index, nodes)

    def remove_at(self, index: int) -> Node:
        """
        Remove and return the node at ``index``.

        The endpoints hold the depot and can never be removed.
        """
        if index == 0 or index == len(self._seq) - 1:
            raise InvalidOperationError("cannot remove depots")
        if index < 0 or index >= len(self._seq):
            raise InvalidOperationError(f"index {index} out of range for {self}")
        return self._seq.pop(index)

    def get(self, index: int) -> Node:
        return self._seq[index]

    def size(self) -> int:
        return len(self._seq)

    def is_empty(self) -> bool:
        return len(self._seq) == 0

    # ========== Queries ==========

    def demand(self) -> float:
        """Total demand of the route's nodes (0 identifies a void route)."""
        amount = 0.0
        for node in self._seq:
            amount += node.demand
        return amount

    def cost(self, cost_matrix: CostMatrix) -> float:
        """
        Total travel cost over consecutive node pairs.

        No term is charged for the first node: cost models arcs, not nodes.
        """
        cost = 0.0
        pred: Optional[Node] = None
        for node in self._seq:
            if pred is not None:
                cost += cost_matrix.get_cost(pred.node_id, node.node_id)
            pred = node
        return cost

    def is_valid(self) -> bool:
        """
        Check route structure.

        A valid route starts and ends at the depot, visits at least one
        customer and visits every customer once.
        """
        # D ==> c ==> D
        if len(self._seq) < 3:
            return False

        if not self._seq[0].is_depot() or not self._seq[-1].is_depot():
            return False

        # the depot takes both endpoint slots, every other node occurs once
        if len(self._seq) - 1 != self._seq.distinct():
            return False

        return True

    def customers(self) -> List[Node]:
        """Interior nodes in visiting order."""
        return [node for node in self._seq.as_list()[1:-1] if not node.is_depot()]

    def node_ids(self) -> List[int]:
        return [node.node_id for node in self._seq]

    def index_of(self, node: Node) -> int:
        """Position of ``node`` in the route; ValueError if it is absent."""
        if node not in self._seq:
            raise ValueError(f"{node!r} is not in route {self}")
        return self._seq.as_list().index(node)

    # ========== Move primitives ==========

    def reverse_segment(self, a: int, b: int) -> None:
        """
        Reverse the nodes between positions a and b (inclusive).

        This is the 2-opt move: arcs (a-1, a) and (b, b+1) are replaced by
        (a-1, b) and (a, b+1).  Applying it twice with the same bounds
        restores the original order.

        Example:
            [D, 1, 2, 3, 4, 5, D] with a=1, b=5 becomes [D, 5, 4, 3, 2, 1, D]
        """
        self._check_valid()
        size = len(self._seq)
        self._check_range(a, size)
        self._check_range(b, size)
        if a <= 0:
            raise InvalidOperationError("cannot swap depots")
        if b >= size - 1:
            raise InvalidOperationError("cannot swap depots")
        if b <= a:
            raise InvalidOperationError(f"invalid indexes: {a}>={b}")

        self._seq.reverse(a, b + 1)

    def relocate_node(self, i: int, j: int) -> None:
        """
        Move the node at position i so that it follows the node originally at j.

        Parameters:
            i: position of the node to move
            j: the node ends up between the nodes originally at j and j+1
        """
        self._check_valid()
        size = len(self._seq)
        self._check_range(i, size)
        self._check_range(j, size)
        self._check_range(j + 1, size)
        if i <= 0 or i >= size - 1:
            raise InvalidOperationError("cannot move depots")
        if j >= size - 1:
            raise InvalidOperationError("cannot move depots")

        node = self._seq.pop(i)
        if i <= j:
            # removal shifted the target left by one
            self._seq.insert(j, (node,))
        else:
            self._seq.insert(j + 1, (node,))

    def _check_valid(self) -> None:
        if not self.is_valid():
            raise InvalidOperationError(f"check route validity: {self}")

    @staticmethod
    def _check_range(index: int, size: int) -> None:
        if index < 0 or index > size:
            raise InvalidOperationError(f"index {index} out of range")

    # ========== Copy ==========

    def copy(self) -> "Route":
        """
        Independent copy of the route.

        Nodes are immutable so they are shared; the sequence is not.
        """
        return Route(*self._seq.as_list())

    # ========== Dunder protocol ==========

    def __iter__(self) -> Iterator[Node]:
        version = self._seq.version
        for index in range(len(self._seq)):
            if self._seq.version != version:
                raise RuntimeError("route mutated during iteration")
            yield self._seq[index]
        if self._seq.version != version:
            raise RuntimeError("route mutated during iteration")

    def __len__(self) -> int:
        return len(self._seq)

    def __getitem__(self, index: int) -> Node:
        return self._seq[index]

    def __contains__(self, node) -> bool:
        return node in self._seq

    def __eq__(self, other) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return self.node_ids() == other.node_ids()

    __hash__ = None

    def __str__(self) -> str:
        return "[" + ", ".join(str(node) for node in self._seq) + "]"

    def __repr__(self) -> str:
        return f"Route({self.node_ids()})"


# ========== Convenience constructors ==========

def create_void_route(depot: Node) -> Route:
    """Route holding only the depot twice: a candidate destination for a new vehicle."""
    return Route(depot, depot)


def create_route_from_customers(depot: Node, customers: List[Node]) -> Route:
    """Build ``[depot, *customers, depot]``."""
    return Route(depot, *customers, depot)
