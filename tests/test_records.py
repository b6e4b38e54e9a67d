"""Tests for converting between plain-dict records and the graph model."""
from __future__ import annotations

import pytest

from layerflow.errors import InvalidOptionError, ValidationError
from layerflow.geometry import Point
from layerflow.records import graph_from_dict, graph_to_dict

RECORD = {
    "id": "g",
    "layoutOptions": {"elk.direction": "RIGHT", "spacing.nodeNode": 25, "custom.flag": True},
    "children": [
        {
            "id": "a",
            "width": 40,
            "height": 20,
            "ports": [{"id": "a.out", "side": "east"}],
            "labels": [{"text": "A"}],
            "constraints": {
                "alignGroup": "row",
                "alignDirection": "HORIZONTAL",
                "relativeTo": "b",
                "relativeOffset": {"x": 5, "y": 0},
                "layer": 1,
            },
            "children": [{"id": "a.1", "width": 5, "height": 5}],
        },
        {"id": "b", "x": 3, "y": 4, "width": 10, "height": 10},
    ],
    "edges": [
        {
            "id": "e",
            "sources": ["a.out"],
            "targets": ["b"],
            "sections": [{"startPoint": {"x": 1, "y": 2}, "endPoint": {"x": 3, "y": 4}, "bendPoints": [{"x": 1, "y": 4}]}],
        }
    ],
}


class TestFromDict:
    def test_structure(self):
        graph = graph_from_dict(RECORD)
        assert graph.id == "g"
        assert [n.id for n in graph.all_nodes()] == ["a", "a.1", "b"]
        a = graph.children[0]
        assert a.ports[0].side == "EAST"
        assert a.ports[0].owner_id == "a"
        assert a.labels[0].text == "A"
        assert graph.edges[0].sections[0].bend_points == [Point(1, 4)]

    def test_options_typed_and_passthrough(self):
        opts = graph_from_dict(RECORD).layout_options
        assert opts.direction == "RIGHT"
        assert opts.spacing_node_node == 25.0
        assert opts.properties == {"custom.flag": True}

    def test_constraints(self):
        c = graph_from_dict(RECORD).children[0].constraints
        assert c.align_direction == "horizontal"
        assert c.relative_to == "b"
        assert (c.relative_offset.x, c.relative_offset.y) == (5.0, 0.0)
        assert c.layer == 1
        assert c.fixed_position is False

    def test_invalid_side_raises(self):
        with pytest.raises(InvalidOptionError):
            graph_from_dict({"children": [{"id": "n", "ports": [{"id": "p", "side": "up"}]}]})

    def test_node_without_id(self):
        with pytest.raises(ValidationError):
            graph_from_dict({"children": [{"width": 3}]})

    def test_deep_record(self):
        record: dict = {"id": "n0"}
        current = record
        for i in range(1, 2000):
            child = {"id": f"n{i}"}
            current["children"] = [child]
            current = child
        graph = graph_from_dict({"children": [record]})
        assert len(graph.all_nodes()) == 2000


class TestToDict:
    def test_round_trip_keeps_option_keys(self):
        data = graph_to_dict(graph_from_dict(RECORD))
        assert data["layoutOptions"] == {"direction": "RIGHT", "spacing.nodeNode": 25.0, "custom.flag": True}

    def test_round_trip_structure(self):
        data = graph_to_dict(graph_from_dict(RECORD))
        a = data["children"][0]
        assert a["children"][0]["id"] == "a.1"
        assert a["ports"][0]["side"] == "EAST"
        assert a["constraints"]["relativeOffset"] == {"x": 5.0, "y": 0.0}
        assert a["constraints"]["alignDirection"] == "horizontal"
        section = data["edges"][0]["sections"][0]
        assert section["startPoint"] == {"x": 1.0, "y": 2.0}
        assert section["bendPoints"] == [{"x": 1.0, "y": 4.0}]

    def test_nodes_without_constraints_omit_key(self):
        data = graph_to_dict(graph_from_dict(RECORD))
        assert "constraints" not in data["children"][1]
