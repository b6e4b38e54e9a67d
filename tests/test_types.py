"""Tests for the graph model -- ports, constraints, sections and id lookups."""
from __future__ import annotations

import pytest

from layerflow.errors import InvalidOptionError, ValidationError
from layerflow.geometry import Point
from layerflow.types import (
    EdgeSection,
    Edge,
    EndpointResolver,
    Graph,
    Node,
    NodeConstraints,
    Port,
    absolute_positions,
    iter_nodes,
)


def _nested_graph() -> Graph:
    return Graph(
        children=[
            Node(
                id="outer",
                x=10,
                y=20,
                children=[
                    Node(id="inner", x=5, y=5, ports=[Port(id="inner.p")], children=[Node(id="leaf", x=1, y=2)]),
                ],
                edges=[Edge(id="e_in", sources=["inner"], targets=["leaf"])],
            ),
            Node(id="other"),
        ],
        edges=[Edge(id="e_top", sources=["leaf"], targets=["other"])],
    )


class TestPort:
    @pytest.mark.parametrize(
        "x, y, side",
        [(50, 0, "NORTH"), (50, 60, "SOUTH"), (0, 30, "WEST"), (100, 30, "EAST")],
    )
    def test_detect_side_on_100x60_node(self, x, y, side):
        assert Port(id="p", x=x, y=y).detect_side(100, 60) == side

    def test_detect_side_tie_prefers_north(self):
        # corner: NORTH and WEST are both 0
        assert Port(id="p", x=0, y=0).detect_side(100, 60) == "NORTH"

    def test_side_is_case_insensitive(self):
        port = Port(id="p", side="east")
        assert port.side == "EAST"
        port.side = "north"
        assert port.side == "NORTH"

    def test_invalid_side_raises(self):
        with pytest.raises(InvalidOptionError):
            Port(id="p", side="UPWARDS")
        port = Port(id="q")
        with pytest.raises(InvalidOptionError):
            port.side = "diagonal"

    def test_owner_is_set_by_node(self):
        node = Node(id="n", ports=[Port(id="a")])
        node.add_port(Port(id="b"))
        assert [p.owner_id for p in node.ports] == ["n", "n"]


class TestNodeConstraints:
    def test_align_direction_normalized(self):
        assert NodeConstraints(align_direction="HORIZONTAL").align_direction == "horizontal"

    def test_align_direction_rejects_unknown(self):
        with pytest.raises(InvalidOptionError):
            NodeConstraints(align_direction="diagonal")

    def test_is_default(self):
        assert NodeConstraints().is_default()
        assert not NodeConstraints(position_priority=5).is_default()
        assert not NodeConstraints(fixed_position=True).is_default()


class TestEdgeSection:
    def test_points_and_length(self):
        section = EdgeSection(start_point=Point(0, 0), end_point=Point(10, 10))
        section.add_bend_point(10, 0)
        assert section.points() == [Point(0, 0), Point(10, 0), Point(10, 10)]
        assert section.length() == pytest.approx(20)

    def test_insert_bend_point(self):
        section = EdgeSection(start_point=Point(0, 0), end_point=Point(4, 4), bend_points=[Point(4, 0)])
        section.insert_bend_point(0, 2, 0)
        assert section.bend_points == [Point(2, 0), Point(4, 0)]

    def test_unrouted_section_has_no_points(self):
        assert EdgeSection().points() == []


class TestGraph:
    def test_all_nodes_pre_order(self):
        assert [n.id for n in _nested_graph().all_nodes()] == ["outer", "inner", "leaf", "other"]

    def test_all_edges_include_nested(self):
        assert {e.id for e in _nested_graph().all_edges()} == {"e_top", "e_in"}

    def test_find_and_resolve(self):
        graph = _nested_graph()
        assert graph.find_node("leaf").id == "leaf"
        assert graph.find_port("inner.p").owner_id == "inner"
        assert graph.resolve_endpoint("inner.p").id == "inner"
        assert graph.resolve_endpoint("nope") is None

    def test_is_hierarchical(self):
        assert _nested_graph().is_hierarchical()
        assert not Graph(children=[Node(id="a")]).is_hierarchical()

    def test_duplicate_ids_rejected(self):
        graph = Graph(children=[Node(id="a"), Node(id="b", children=[Node(id="a")])])
        with pytest.raises(ValidationError):
            graph.node_index()

    def test_absolute_positions(self):
        positions = absolute_positions(_nested_graph())
        assert positions["leaf"] == Point(16, 27)
        assert positions["other"] == Point(0, 0)

    def test_deep_chain_walks_without_recursion(self):
        root = Node(id="n0")
        current = root
        for i in range(1, 3000):
            child = Node(id=f"n{i}")
            current.children.append(child)
            current = child
        graph = Graph(children=[root])
        assert sum(1 for _ in iter_nodes(graph)) == 3000


class TestEndpointResolver:
    def test_child_of_lifts_to_direct_child(self):
        graph = _nested_graph()
        resolver = EndpointResolver(graph)
        assert resolver.child_of(graph, "leaf").id == "outer"
        outer = graph.children[0]
        assert resolver.child_of(outer, "leaf").id == "inner"
        assert resolver.child_of(outer, "other") is None

    def test_port_refs_resolve_to_owner(self):
        resolver = EndpointResolver(_nested_graph())
        assert resolver.node("inner.p").id == "inner"
        assert resolver.port("inner.p").id == "inner.p"
        assert resolver.port("inner") is None

    def test_depth_and_ancestors(self):
        resolver = EndpointResolver(_nested_graph())
        assert resolver.depth("other") == 0
        assert resolver.depth("leaf") == 2
        assert [n.id for n in resolver.ancestors("leaf")] == ["inner", "outer"]
