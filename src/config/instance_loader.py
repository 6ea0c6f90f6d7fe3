"""Helpers for loading CVRP instances into :class:`core.problem.Problem`.

Two formats are understood:

* CVRPLIB ``.vrp`` files, read with :func:`vrplib.read_instance`.  Coordinate
  instances (``EUC_2D``, ``EXACT_2D``, ``FLOAT``) are turned into a
  :class:`CostMatrix` here, with ``EUC_2D`` distances rounded to the nearest
  integer; ``EXPLICIT`` instances use the matrix vrplib expands from the
  ``EDGE_WEIGHT_SECTION``.  Node ids follow the file numbering (1-based) and a
  single depot is required.
* A JSON payload::

      {
        "name": "toy",
        "capacity": 10,
        "depot": {"id": 0, "x": 0, "y": 0},
        "customers": [{"id": 1, "x": 3, "y": 4, "demand": 5}],
        "cost_matrix": [[...], ...]          # optional, row order = depot then customers
      }
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import vrplib

from core.node import create_customer, create_depot
from core.problem import Problem
from physics.distance import CostMatrix

_ROUNDED_WEIGHT_TYPES = {"EUC_2D"}
_COORD_WEIGHT_TYPES = {"EUC_2D", "EXACT_2D", "FLOAT"}


# ========== CVRPLIB ==========

def _vehicle_hint(instance: Dict[str, Any]) -> Optional[int]:
    for key in ("vehicles", "trucks"):
        if key in instance:
            return int(instance[key])
    match = re.search(r"-k(\d+)", str(instance.get("name", "")))
    if match:
        return int(match.group(1))
    match = re.search(r"trucks:\s*(\d+)", str(instance.get("comment", "")), flags=re.IGNORECASE)
    if match:
        return int(match.group(1))
    return None


def problem_from_vrplib(instance: Dict[str, Any]) -> Problem:
    """
    Build a Problem from the dictionary returned by ``vrplib.read_instance``.

    vrplib numbers nodes from 0 in file order; the Problem keeps the 1-based
    ids of the file.
    """
    for required in ("capacity", "demand"):
        if required not in instance:
            raise ValueError(f"Instance is missing the {required.upper()} field")

    demands = np.asarray(instance["demand"], dtype=float).reshape(-1)
    dimension = int(instance.get("dimension", len(demands)))
    if len(demands) != dimension:
        raise ValueError(f"DEMAND_SECTION lists {len(demands)} nodes, expected {dimension}")
    node_ids = [index + 1 for index in range(dimension)]

    depots = [int(index) for index in np.asarray(instance.get("depot", [0])).reshape(-1)]
    if len(depots) != 1:
        raise ValueError(f"Only single-depot instances are supported, got depots {depots}")
    depot_id = node_ids[depots[0]]

    weight_type = str(instance.get("edge_weight_type", "EUC_2D")).upper()
    if weight_type in _COORD_WEIGHT_TYPES:
        if "node_coord" not in instance:
            raise ValueError(f"{weight_type} instance has no NODE_COORD_SECTION")
        coords = np.asarray(instance["node_coord"], dtype=float)
        if len(coords) != dimension:
            raise ValueError("NODE_COORD_SECTION and DEMAND_SECTION list different nodes")
        cost_matrix = CostMatrix.from_coordinates(
            {node_id: (coords[idx][0], coords[idx][1]) for idx, node_id in enumerate(node_ids)},
            rounding=weight_type in _ROUNDED_WEIGHT_TYPES,
        )
    elif weight_type == "EXPLICIT":
        if "edge_weight" not in instance:
            raise ValueError("EXPLICIT instance has no EDGE_WEIGHT_SECTION")
        cost_matrix = CostMatrix(node_ids, instance["edge_weight"])
    else:
        raise ValueError(f"Unsupported EDGE_WEIGHT_TYPE: {weight_type}")

    customers = [
        create_customer(node_id, demands[idx])
        for idx, node_id in enumerate(node_ids)
        if node_id != depot_id
    ]
    return Problem(
        depot=create_depot(depot_id),
        vehicle_capacity=float(instance["capacity"]),
        cost_matrix=cost_matrix,
        customers=customers,
        name=str(instance.get("name", "")),
        num_vehicles=_vehicle_hint(instance),
    )


def load_cvrplib(path: str | Path) -> Problem:
    """Load a CVRPLIB ``.vrp`` file."""

    # coordinate distances are built in problem_from_vrplib with CVRPLIB rounding
    instance = vrplib.read_instance(str(path), compute_edge_weights=False)
    return problem_from_vrplib(instance)


# ========== JSON ==========

def problem_from_dict(data: Dict[str, Any]) -> Problem:
    """Build a Problem from the JSON payload described in the module docstring."""

    if "depot" not in data or "customers" not in data or "capacity" not in data:
        raise ValueError("Instance payload needs 'depot', 'customers' and 'capacity'")

    depot_raw = data["depot"]
    depot = create_depot(int(depot_raw.get("id", 0)))
    customers = [create_customer(int(raw["id"]), float(raw["demand"])) for raw in data["customers"]]
    node_ids = [depot.node_id] + [customer.node_id for customer in customers]

    if data.get("cost_matrix") is not None:
        cost_matrix = CostMatrix.from_rows(node_ids, data["cost_matrix"])
    else:
        coordinates = {depot.node_id: (float(depot_raw["x"]), float(depot_raw["y"]))}
        for raw in data["customers"]:
            coordinates[int(raw["id"])] = (float(raw["x"]), float(raw["y"]))
        cost_matrix = CostMatrix.from_coordinates(coordinates, rounding=bool(data.get("rounding", False)))

    num_vehicles = data.get("num_vehicles")
    return Problem(
        depot=depot,
        vehicle_capacity=float(data["capacity"]),
        cost_matrix=cost_matrix,
        customers=customers,
        name=str(data.get("name", "")),
        num_vehicles=int(num_vehicles) if num_vehicles is not None else None,
    )


def load_problem_json(path: str | Path) -> Problem:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return problem_from_dict(payload)


def load_problem(path: str | Path) -> Problem:
    """Load an instance, dispatching on the file suffix (``.json`` or ``.vrp``)."""

    suffix = Path(path).suffix.lower()
    if suffix == ".json":
        return load_problem_json(path)
    if suffix in (".vrp", ".txt", ""):
        return load_cvrplib(path)
    raise ValueError(f"Unsupported instance file type: {path}")


__all__ = [
    "load_cvrplib",
    "load_problem",
    "load_problem_json",
    "problem_from_dict",
    "problem_from_vrplib",
]
