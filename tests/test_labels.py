"""Tests for LabelPlacer -- node, port and edge labels."""
from __future__ import annotations

import pytest

from layerflow import layout
from layerflow.geometry import Point
from layerflow.labels import LabelPlacer, estimate_label_size
from layerflow.types import Edge, EdgeSection, Graph, Label, Node, Port


class TestEstimate:
    def test_sizes_from_text(self):
        label = Label(text="abcd")
        estimate_label_size(label)
        assert label.width == pytest.approx(4 * 12 * 0.52)
        assert label.height == pytest.approx(12 * 1.3)

    def test_explicit_size_kept(self):
        label = Label(text="abcd", width=3, height=2)
        estimate_label_size(label)
        assert (label.width, label.height) == (3, 2)


class TestNodeLabels:
    def _node(self, placement: str | None = None) -> Node:
        node = Node(id="n", width=100, height=50, labels=[Label(text="x", width=20, height=10)])
        if placement:
            node.layout_options["nodeLabels.placement"] = placement
        return node

    def test_inside_top_is_default(self):
        node = self._node()
        LabelPlacer(Graph(children=[node])).place_node_labels(node)
        assert (node.labels[0].x, node.labels[0].y) == (40, 5)

    @pytest.mark.parametrize(
        "placement, y",
        [("INSIDE CENTER", 20), ("OUTSIDE TOP", -15), ("outside bottom", 55)],
    )
    def test_placements(self, placement, y):
        node = self._node(placement)
        LabelPlacer(Graph(children=[node])).place_node_labels(node)
        assert node.labels[0].y == y
        assert node.labels[0].x == 40

    def test_multiple_labels_stack(self):
        node = Node(
            id="n",
            width=100,
            height=100,
            labels=[Label(text="a", width=10, height=10), Label(text="b", width=10, height=10)],
        )
        LabelPlacer(Graph(children=[node])).place_node_labels(node)
        assert [lb.y for lb in node.labels] == [5, 20]


class TestPortLabels:
    @pytest.mark.parametrize(
        "side, expected",
        [("NORTH", (-3, -11)), ("SOUTH", (-3, 9)), ("WEST", (-15, -1)), ("EAST", (9, -1))],
    )
    def test_label_on_outer_side(self, side, expected):
        port = Port(id="p", width=4, height=4, side=side, labels=[Label(text="p", width=10, height=6)])
        LabelPlacer(Graph()).place_port_labels(port)
        assert (port.labels[0].x, port.labels[0].y) == expected


class TestEdgeLabels:
    def test_centered_on_middle_segment(self):
        edge = Edge(
            id="e",
            labels=[Label(text="lbl", width=10, height=4)],
            sections=[EdgeSection(
                start_point=Point(0, 0),
                bend_points=[Point(0, 50), Point(100, 50)],
                end_point=Point(100, 100),
            )],
        )
        LabelPlacer(Graph(edges=[edge])).place_edge_labels(edge)
        assert (edge.labels[0].x, edge.labels[0].y) == (45, 48)

    def test_unrouted_edge_untouched(self):
        edge = Edge(id="e", labels=[Label(text="lbl", x=1, y=2)])
        LabelPlacer(Graph(edges=[edge])).place_edge_labels(edge)
        assert (edge.labels[0].x, edge.labels[0].y) == (1, 2)


class TestLayoutIntegration:
    def _graph(self) -> Graph:
        return Graph(children=[Node(id="n", width=60, height=30, labels=[Label(text="hello", width=20, height=10)])])

    def test_labels_placed_by_layout(self):
        graph = layout(self._graph())
        assert graph.children[0].labels[0].x == 20

    def test_labels_can_be_disabled(self):
        graph = layout(self._graph(), {"labels.placement.disabled": True})
        assert graph.children[0].labels[0].x == 0
