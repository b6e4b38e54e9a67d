"""Tests for PortConstraintProcessor -- sides, ordering and boundary positions."""
from __future__ import annotations

import pytest

from layerflow.ports import PortConstraintProcessor
from layerflow.types import Graph, Node, Port


def _node(*ports: Port, width: float = 100, height: float = 60) -> Node:
    return Node(id="n", width=width, height=height, ports=list(ports))


class TestDetectSides:
    def test_sides_from_position(self):
        node = _node(
            Port(id="n1", x=50, y=0),
            Port(id="s1", x=50, y=60),
            Port(id="w1", x=0, y=30),
            Port(id="e1", x=100, y=30),
        )
        PortConstraintProcessor().detect_sides(node)
        assert [p.side for p in node.ports] == ["NORTH", "SOUTH", "WEST", "EAST"]

    def test_explicit_side_is_kept(self):
        node = _node(Port(id="p", x=50, y=0, side="SOUTH"))
        PortConstraintProcessor().process_node(node)
        assert node.ports[0].side == "SOUTH"
        assert node.ports[0].y == 60


class TestOrdering:
    def test_explicit_indices_preserved_and_compacted(self):
        ports = [
            Port(id="two", side="NORTH", index=2),
            Port(id="zero", side="NORTH", index=0),
            Port(id="one", side="NORTH", index=1),
        ]
        PortConstraintProcessor.order_ports_on_side("NORTH", ports)
        assert [p.id for p in ports] == ["zero", "one", "two"]
        assert [p.index for p in ports] == [0, 1, 2]

    def test_unindexed_north_ports_sorted_by_x(self):
        ports = [
            Port(id="right", side="NORTH", x=80),
            Port(id="left", side="NORTH", x=10),
            Port(id="mid", side="NORTH", x=40),
        ]
        PortConstraintProcessor.order_ports_on_side("NORTH", ports)
        assert [p.id for p in ports] == ["left", "mid", "right"]
        assert [p.index for p in ports] == [0, 1, 2]

    def test_unindexed_east_ports_sorted_by_y(self):
        ports = [Port(id="low", side="EAST", y=50), Port(id="high", side="EAST", y=5)]
        PortConstraintProcessor.order_ports_on_side("EAST", ports)
        assert [p.id for p in ports] == ["high", "low"]

    def test_explicit_before_unindexed(self):
        ports = [
            Port(id="free", side="SOUTH", x=0),
            Port(id="pinned", side="SOUTH", x=90, index=0),
        ]
        PortConstraintProcessor.order_ports_on_side("SOUTH", ports)
        assert [p.id for p in ports] == ["pinned", "free"]
        assert [p.index for p in ports] == [0, 1]

    def test_group_by_side_omits_absent_sides(self):
        groups = PortConstraintProcessor.group_ports_by_side(
            [Port(id="a", side="WEST"), Port(id="b", side="WEST"), Port(id="c", side="EAST")]
        )
        assert set(groups) == {"WEST", "EAST"}
        assert [p.id for p in groups["WEST"]] == ["a", "b"]


class TestPositions:
    def test_even_distribution_on_north(self):
        node = _node(Port(id="a", side="NORTH"), Port(id="b", side="NORTH"), Port(id="c", side="NORTH"))
        PortConstraintProcessor().process_node(node)
        assert [(p.x, p.y) for p in node.ports] == [(25, 0), (50, 0), (75, 0)]
        assert [p.offset for p in node.ports] == [25, 50, 75]

    def test_west_and_east(self):
        node = _node(Port(id="w", side="WEST"), Port(id="e1", side="EAST"), Port(id="e2", side="EAST"))
        PortConstraintProcessor().process_node(node)
        w, e1, e2 = node.ports
        assert (w.x, w.y) == (0, 30)
        assert (e1.x, e1.y) == (100, 20)
        assert (e2.x, e2.y) == (100, 40)
        assert e2.offset == 40

    def test_south_on_boundary(self):
        node = _node(Port(id="s", side="SOUTH"))
        PortConstraintProcessor().process_node(node)
        assert (node.ports[0].x, node.ports[0].y) == (50, 60)

    def test_fixed_pos_keeps_coordinates(self):
        node = _node(Port(id="p", x=17, y=0, side="NORTH"))
        node.layout_options.port_constraints = "FIXED_POS"
        PortConstraintProcessor().process_node(node)
        assert (node.ports[0].x, node.ports[0].y) == (17, 0)
        assert node.ports[0].offset == 17

    @pytest.mark.parametrize("size", [(0, 60), (100, 0)])
    def test_zero_sized_node_is_skipped(self, size):
        node = _node(Port(id="p", x=3, y=4), width=size[0], height=size[1])
        PortConstraintProcessor().process_node(node)
        assert node.ports[0].side == "UNDEFINED"
        assert (node.ports[0].x, node.ports[0].y) == (3, 4)

    def test_process_walks_nested_nodes(self):
        inner = Node(id="inner", width=40, height=40, ports=[Port(id="p", x=40, y=20)])
        graph = Graph(children=[Node(id="outer", children=[inner])])
        PortConstraintProcessor().process(graph)
        assert inner.ports[0].side == "EAST"
        assert inner.ports[0].index == 0
