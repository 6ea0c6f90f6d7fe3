"""Tests for the immutable Node type."""

import dataclasses

import pytest

from core.node import Node, create_customer, create_depot


def test_nodes_are_equal_iff_ids_are_equal():
    assert create_customer(3, 5.0) == create_customer(3, 7.0)
    assert create_customer(3, 5.0) != create_customer(4, 5.0)
    assert hash(create_customer(3, 5.0)) == hash(create_customer(3, 1.0))
    assert len({create_customer(1, 1.0), create_customer(1, 2.0), create_customer(2, 1.0)}) == 2


def test_depot_helpers():
    depot = create_depot()
    assert depot.is_depot()
    assert depot.node_id == 0
    assert depot.demand == 0.0
    assert str(depot) == "D0"
    assert str(create_customer(7, 1.0)) == "7"
    assert not create_customer(7, 1.0).is_depot()


def test_invalid_nodes_are_rejected():
    with pytest.raises(ValueError):
        Node(node_id=-1)
    with pytest.raises(ValueError):
        create_customer(1, -0.5)


def test_nodes_are_immutable():
    node = create_customer(1, 2.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.demand = 3.0


def test_nodes_order_by_id():
    nodes = [create_customer(3, 1.0), create_customer(1, 1.0), create_customer(2, 1.0)]
    assert [n.node_id for n in sorted(nodes)] == [1, 2, 3]
