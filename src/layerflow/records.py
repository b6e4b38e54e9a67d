from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import ValidationError
from .geometry import Point
from .options import LayoutOptions
from .types import (
    Edge,
    EdgeSection,
    Graph,
    Label,
    Node,
    NodeConstraints,
    Port,
    RelativeOffset,
)

# ============================================================================
# Plain-dict records <-> in-memory graph
#
# Keys are camelCase (layoutOptions, startPoint, fixedPosition, ...); option
# keys inside layoutOptions are kept exactly as given.
# ============================================================================


def graph_from_dict(data: Mapping[str, Any]) -> Graph:
    return Graph(
        id=str(data.get("id", "root")),
        x=float(data.get("x", 0.0)),
        y=float(data.get("y", 0.0)),
        width=float(data.get("width", 0.0)),
        height=float(data.get("height", 0.0)),
        children=[node_from_dict(n) for n in data.get("children", ())],
        edges=[edge_from_dict(e) for e in data.get("edges", ())],
        layout_options=LayoutOptions.from_dict(data.get("layoutOptions")),
        properties=dict(data.get("properties", {})),
    )


def node_from_dict(data: Mapping[str, Any]) -> Node:
    """Build a node and its whole subtree.

    Nesting is unrolled with an explicit stack so deep trees do not hit the
    interpreter's recursion limit.
    """
    root = _shallow_node(data)
    stack = [(root, data)]
    while stack:
        node, record = stack.pop()
        for child_record in record.get("children", ()):
            child = _shallow_node(child_record)
            node.children.append(child)
            stack.append((child, child_record))
    return root


def _shallow_node(data: Mapping[str, Any]) -> Node:
    if "id" not in data:
        raise ValidationError("Node record without an id")
    constraints = data.get("constraints")
    return Node(
        id=str(data["id"]),
        x=float(data.get("x", 0.0)),
        y=float(data.get("y", 0.0)),
        width=float(data.get("width", 0.0)),
        height=float(data.get("height", 0.0)),
        labels=[label_from_dict(lb) for lb in data.get("labels", ())],
        ports=[port_from_dict(p) for p in data.get("ports", ())],
        edges=[edge_from_dict(e) for e in data.get("edges", ())],
        layout_options=LayoutOptions.from_dict(data.get("layoutOptions")),
        constraints=constraints_from_dict(constraints) if constraints is not None else None,
        properties=dict(data.get("properties", {})),
    )


def port_from_dict(data: Mapping[str, Any]) -> Port:
    return Port(
        id=str(data["id"]),
        x=float(data.get("x", 0.0)),
        y=float(data.get("y", 0.0)),
        width=float(data.get("width", 0.0)),
        height=float(data.get("height", 0.0)),
        side=data.get("side", "UNDEFINED"),
        index=int(data.get("index", -1)),
        offset=float(data.get("offset", 0.0)),
        labels=[label_from_dict(lb) for lb in data.get("labels", ())],
        layout_options=LayoutOptions.from_dict(data.get("layoutOptions")),
        properties=dict(data.get("properties", {})),
    )


def label_from_dict(data: Mapping[str, Any]) -> Label:
    return Label(
        text=str(data.get("text", "")),
        id=data.get("id"),
        x=float(data.get("x", 0.0)),
        y=float(data.get("y", 0.0)),
        width=float(data.get("width", 0.0)),
        height=float(data.get("height", 0.0)),
        layout_options=LayoutOptions.from_dict(data.get("layoutOptions")),
    )


def edge_from_dict(data: Mapping[str, Any]) -> Edge:
    return Edge(
        id=str(data["id"]),
        sources=[str(s) for s in data.get("sources", ())],
        targets=[str(t) for t in data.get("targets", ())],
        labels=[label_from_dict(lb) for lb in data.get("labels", ())],
        sections=[section_from_dict(s) for s in data.get("sections", ())],
        layout_options=LayoutOptions.from_dict(data.get("layoutOptions")),
        properties=dict(data.get("properties", {})),
    )


def section_from_dict(data: Mapping[str, Any]) -> EdgeSection:
    return EdgeSection(
        id=data.get("id"),
        start_point=_point(data.get("startPoint")),
        end_point=_point(data.get("endPoint")),
        bend_points=[_point(p) for p in data.get("bendPoints", ())],
        incoming_shape=data.get("incomingShape"),
        outgoing_shape=data.get("outgoingShape"),
    )


def constraints_from_dict(data: Mapping[str, Any]) -> NodeConstraints:
    offset = data.get("relativeOffset")
    layer = data.get("layer")
    return NodeConstraints(
        fixed_position=bool(data.get("fixedPosition", False)),
        layer=int(layer) if layer is not None else None,
        align_group=data.get("alignGroup"),
        align_direction=data.get("alignDirection"),
        relative_to=data.get("relativeTo"),
        relative_offset=(
            RelativeOffset(x=float(offset.get("x", 0.0)), y=float(offset.get("y", 0.0)))
            if offset is not None
            else None
        ),
        position_priority=int(data.get("positionPriority", 0)),
    )


def _point(data: Mapping[str, Any] | None) -> Point | None:
    if data is None:
        return None
    return Point(x=float(data.get("x", 0.0)), y=float(data.get("y", 0.0)))


# ============================================================================
# Back to records
# ============================================================================


def graph_to_dict(graph: Graph) -> dict[str, Any]:
    result: dict[str, Any] = {
        "id": graph.id,
        "x": graph.x,
        "y": graph.y,
        "width": graph.width,
        "height": graph.height,
        "children": [node_to_dict(n) for n in graph.children],
        "edges": [edge_to_dict(e) for e in graph.edges],
    }
    _put_extras(result, graph.layout_options, graph.properties)
    return result


def node_to_dict(node: Node) -> dict[str, Any]:
    root = _shallow_node_dict(node)
    stack = [(node, root)]
    while stack:
        current, record = stack.pop()
        for child in current.children:
            child_record = _shallow_node_dict(child)
            record["children"].append(child_record)
            stack.append((child, child_record))
    return root


def _shallow_node_dict(node: Node) -> dict[str, Any]:
    result: dict[str, Any] = {
        "id": node.id,
        "x": node.x,
        "y": node.y,
        "width": node.width,
        "height": node.height,
        "labels": [label_to_dict(lb) for lb in node.labels],
        "ports": [port_to_dict(p) for p in node.ports],
        "children": [],
        "edges": [edge_to_dict(e) for e in node.edges],
    }
    if node.constraints is not None:
        result["constraints"] = constraints_to_dict(node.constraints)
    _put_extras(result, node.layout_options, node.properties)
    return result


def port_to_dict(port: Port) -> dict[str, Any]:
    result: dict[str, Any] = {
        "id": port.id,
        "x": port.x,
        "y": port.y,
        "width": port.width,
        "height": port.height,
        "labels": [label_to_dict(lb) for lb in port.labels],
        "side": port.side,
        "index": port.index,
        "offset": port.offset,
    }
    _put_extras(result, port.layout_options, port.properties)
    return result


def label_to_dict(label: Label) -> dict[str, Any]:
    result: dict[str, Any] = {
        "text": label.text,
        "x": label.x,
        "y": label.y,
        "width": label.width,
        "height": label.height,
    }
    if label.id is not None:
        result["id"] = label.id
    _put_extras(result, label.layout_options, {})
    return result


def edge_to_dict(edge: Edge) -> dict[str, Any]:
    result: dict[str, Any] = {
        "id": edge.id,
        "sources": list(edge.sources),
        "targets": list(edge.targets),
        "labels": [label_to_dict(lb) for lb in edge.labels],
        "sections": [section_to_dict(s) for s in edge.sections],
    }
    _put_extras(result, edge.layout_options, edge.properties)
    return result


def section_to_dict(section: EdgeSection) -> dict[str, Any]:
    result: dict[str, Any] = {
        "startPoint": _point_dict(section.start_point),
        "endPoint": _point_dict(section.end_point),
        "bendPoints": [_point_dict(p) for p in section.bend_points],
    }
    if section.id is not None:
        result["id"] = section.id
    if section.incoming_shape is not None:
        result["incomingShape"] = section.incoming_shape
    if section.outgoing_shape is not None:
        result["outgoingShape"] = section.outgoing_shape
    return result


def constraints_to_dict(constraints: NodeConstraints) -> dict[str, Any]:
    result: dict[str, Any] = {
        "fixedPosition": constraints.fixed_position,
        "positionPriority": constraints.position_priority,
    }
    if constraints.layer is not None:
        result["layer"] = constraints.layer
    if constraints.align_group is not None:
        result["alignGroup"] = constraints.align_group
    if constraints.align_direction is not None:
        result["alignDirection"] = constraints.align_direction
    if constraints.relative_to is not None:
        result["relativeTo"] = constraints.relative_to
    if constraints.relative_offset is not None:
        result["relativeOffset"] = {
            "x": constraints.relative_offset.x,
            "y": constraints.relative_offset.y,
        }
    return result


def _point_dict(point: Point | None) -> dict[str, float] | None:
    if point is None:
        return None
    return {"x": point.x, "y": point.y}


def _put_extras(result: dict[str, Any], options: LayoutOptions, properties: dict[str, Any]) -> None:
    opts = options.to_dict()
    if opts:
        result["layoutOptions"] = opts
    if properties:
        result["properties"] = dict(properties)
