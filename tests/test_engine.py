"""Tests for the ``layout()`` entry point and algorithm dispatch."""
from __future__ import annotations

import pytest

from layerflow import known_layout_algorithms, layout
from layerflow.errors import AlgorithmNotFoundError, ValidationError
from layerflow.types import Graph, Node

RECORD = {
    "id": "root",
    "children": [
        {"id": "a", "width": 30, "height": 30},
        {"id": "b", "width": 30, "height": 30},
    ],
    "edges": [{"id": "ab", "sources": ["a"], "targets": ["b"]}],
}


class TestLayout:
    def test_accepts_record(self):
        graph = layout(RECORD)
        assert isinstance(graph, Graph)
        a, b = graph.children
        assert b.y > a.y
        assert graph.edges[0].sections

    def test_mutates_and_returns_same_graph(self):
        graph = Graph(children=[Node(id="a", width=10, height=10)])
        assert layout(graph) is graph
        assert (graph.children[0].x, graph.children[0].y) == (12, 12)

    def test_algorithm_from_graph_options(self):
        graph = Graph(children=[Node(id="a", x=40, y=40, width=10, height=10)])
        graph.layout_options["elk.algorithm"] = "org.eclipse.elk.fixed"
        layout(graph)
        assert graph.width == 34

    def test_call_options_choose_algorithm_first(self):
        graph = Graph(children=[Node(id="a", width=10, height=10), Node(id="b", width=10, height=10)])
        graph.layout_options["algorithm"] = "nonexistent"
        layout(graph, {"algorithm": "box"})
        assert graph.children[1].x > graph.children[0].x

    def test_unknown_algorithm_raises(self):
        with pytest.raises(AlgorithmNotFoundError):
            layout(Graph(), {"algorithm": "stress"})

    def test_duplicate_ids_raise_before_layout(self):
        graph = Graph(children=[Node(id="a", x=5), Node(id="p", children=[Node(id="a")])])
        with pytest.raises(ValidationError):
            layout(graph)
        assert graph.children[0].x == 5

    def test_empty_graph(self):
        graph = layout(Graph())
        assert (graph.width, graph.height) == (0, 0)


class TestKnownAlgorithms:
    def test_lists_registered_algorithms(self):
        ids = [info.id for info in known_layout_algorithms()]
        assert ids == ["box", "disco", "fixed", "layered", "random"]

    def test_qualified_algorithm_name(self):
        graph = layout(RECORD, {"elk.algorithm": "org.eclipse.elk.layered"})
        assert graph.children[1].y > graph.children[0].y
