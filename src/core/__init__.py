"""Routing core: nodes, routes, vehicles, solutions and problem instances."""
