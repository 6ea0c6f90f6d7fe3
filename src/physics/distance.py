"""Travel-cost helpers shared by the routing core and the local-search passes.

It provides a precomputed ``CostMatrix`` that stores every pairwise cost in a
dense array keyed by node id.  The matrix need not be symmetric and is
read-only once built, so one instance can be shared by any number of solves.
"""

from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np


# Cost matrix class for precomputed travel costs
class CostMatrix:
    """
    Cost matrix - precomputed cost for every ordered pair of nodes.

    Lookup is O(1): node id -> row index -> array cell.
    """

    def __init__(self, node_ids: Sequence[int], values) -> None:
        """
        Parameters:
            node_ids: ids labelling rows and columns, in order
            values: square matrix, ``values[r][c]`` is the cost of the arc
                from ``node_ids[r]`` to ``node_ids[c]``
        """
        ids = [int(node_id) for node_id in node_ids]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate node ids in cost matrix: {ids}")

        matrix = np.array(values, dtype=float)
        if matrix.shape != (len(ids), len(ids)):
            raise ValueError(
                f"Cost matrix shape {matrix.shape} does not match {len(ids)} node ids"
            )
        if np.isnan(matrix).any():
            raise ValueError("Cost matrix contains NaN entries")

        matrix.flags.writeable = False
        self._matrix = matrix
        self._ids = ids
        self._index: Dict[int, int] = {node_id: idx for idx, node_id in enumerate(ids)}

    @classmethod
    def from_coordinates(cls,
                         coordinates: Dict[int, Tuple[float, float]],
                         rounding: bool = False) -> "CostMatrix":
        """
        Build a symmetric Euclidean matrix.

        Parameters:
            coordinates: node id -> (x, y)
            rounding: round every distance to the nearest integer (CVRPLIB EUC_2D)

        Example:
            cm = CostMatrix.from_coordinates({0: (0, 0), 1: (3, 4)})
            cm.get_cost(0, 1)  # 5.0
        """
        ids = list(coordinates.keys())
        points = np.array([coordinates[node_id] for node_id in ids], dtype=float).reshape(len(ids), 2)
        distances = euclidean_distance(
            points[:, None, 0], points[:, None, 1], points[None, :, 0], points[None, :, 1]
        )
        if rounding:
            distances = np.floor(distances + 0.5)
        return cls(ids, distances)

    @classmethod
    def from_rows(cls, node_ids: Sequence[int], rows: Iterable[Iterable[float]]) -> "CostMatrix":
        """Build from explicit rows (the matrix may be asymmetric)."""
        return cls(node_ids, [list(row) for row in rows])

    def get_cost(self, node_i: int, node_j: int) -> float:
        """Cost of travelling from ``node_i`` to ``node_j``."""
        try:
            return float(self._matrix[self._index[node_i], self._index[node_j]])
        except KeyError as exc:
            raise KeyError(f"Unknown node id {exc.args[0]} in cost matrix") from None

    def node_ids(self) -> List[int]:
        return list(self._ids)

    def is_symmetric(self, tolerance: float = 1e-12) -> bool:
        return bool(np.allclose(self._matrix, self._matrix.T, rtol=0.0, atol=tolerance))

    def as_array(self) -> np.ndarray:
        """Read-only view of the underlying array (row order = ``node_ids()``)."""
        return self._matrix

    def __contains__(self, node_id) -> bool:
        return node_id in self._index

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"CostMatrix(num_nodes={len(self._ids)})"


def euclidean_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """
    Straight-line distance between two points.

    Also accepts numpy arrays, broadcasting pairwise like the arithmetic
    operators do.

    Example:
        euclidean_distance(0, 0, 3, 4)  # 5.0
    """
    return np.hypot(x2 - x1, y2 - y1)
