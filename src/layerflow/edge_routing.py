from __future__ import annotations

import logging
from typing import Any

from .bezier import (
    calculate_control_points,
    calculate_curve,
    horizontal_control_points,
    vertical_control_points,
)
from .geometry import Point, Rectangle
from .options import LayoutOptions
from .types import (
    EAST,
    NORTH,
    SOUTH,
    WEST,
    Edge,
    EdgeSection,
    EndpointResolver,
    Graph,
    Node,
    Port,
    absolute_positions,
    iter_edges,
)

logger = logging.getLogger(__name__)

ORTHOGONAL = "ORTHOGONAL"
POLYLINE = "POLYLINE"
SPLINES = "SPLINES"

_HORIZONTAL_DIRECTIONS = ("RIGHT", "LEFT", "HORIZONTAL")
_VERTICAL_DIRECTIONS = ("DOWN", "UP", "VERTICAL")

# Outward unit steps per port side.
_SIDE_NORMALS = {
    NORTH: Point(0.0, -1.0),
    SOUTH: Point(0.0, 1.0),
    WEST: Point(-1.0, 0.0),
    EAST: Point(1.0, 0.0),
}

# Container side a route enters through, per flow direction.
_ENTRY_SIDES = {
    "DOWN": NORTH,
    "VERTICAL": NORTH,
    "UP": SOUTH,
    "RIGHT": WEST,
    "HORIZONTAL": WEST,
    "LEFT": EAST,
}
_OPPOSITE_SIDES = {NORTH: SOUTH, SOUTH: NORTH, WEST: EAST, EAST: WEST}


# ============================================================================
# Polyline helpers
# ============================================================================


def snap_to_orthogonal(points: list[Point], vertical_first: bool = True) -> list[Point]:
    """Turn every diagonal step into an axis-parallel corner."""
    if len(points) < 2:
        return points

    result: list[Point] = [points[0]]
    for curr in points[1:]:
        prev = result[-1]
        if _same(prev.x, curr.x) or _same(prev.y, curr.y):
            result.append(curr)
            continue
        if vertical_first:
            result.append(Point(x=prev.x, y=curr.y))
        else:
            result.append(Point(x=curr.x, y=prev.y))
        result.append(curr)
    return remove_collinear(result)


def remove_collinear(points: list[Point]) -> list[Point]:
    """Drop the middle point of every axis-parallel run of three."""
    if len(points) < 3:
        return points
    out: list[Point] = [points[0]]
    for b, c in zip(points[1:-1], points[2:]):
        a = out[-1]
        if (_same(a.x, b.x) and _same(b.x, c.x)) or (_same(a.y, b.y) and _same(b.y, c.y)):
            continue
        out.append(b)
    out.append(points[-1])
    return out


def _same(a: float, b: float) -> bool:
    return abs(a - b) < 1e-6


# ============================================================================
# EdgeRouter
# ============================================================================


class EdgeRouter:
    """Routes every edge of a laid-out graph into a single absolute section."""

    def __init__(self, graph: Graph, options: LayoutOptions | None = None) -> None:
        self.graph = graph
        self.options = graph.layout_options.merged(options)
        self.resolver = EndpointResolver(graph)
        self.positions = absolute_positions(graph)
        self._loops_per_node: dict[str, int] = {}

    def route_all(self) -> int:
        """Route all edges; returns how many received a section."""
        self._loops_per_node = {}
        routed = 0
        for edge in iter_edges(self.graph):
            if self.route_edge(edge):
                routed += 1
        logger.debug("Routed %d edge(s) in '%s'", routed, self.graph.id)
        return routed

    def route_edge(self, edge: Edge) -> bool:
        source = self.resolver.node(edge.source)
        target = self.resolver.node(edge.target)
        if source is None or target is None:
            logger.debug("Skipping edge '%s': endpoint not found", edge.id)
            return False

        section = edge.sections[0] if edge.sections else EdgeSection(id=f"{edge.id}_s0")
        section.bend_points = []
        edge.sections = [section]

        style = self._option(edge, "edgeRouting", ORTHOGONAL).upper()
        if source is target:
            self._route_self_loop(edge, section, source, style)
        else:
            self._route_between(edge, section, source, target, style)
        return True

    # -- options ------------------------------------------------------------

    def _option(self, edge: Edge, key: str, default: Any = None) -> Any:
        value = edge.layout_options.get(key, None)
        if value is None:
            value = self.options.get(key, None)
        return default if value is None else value

    def _flow_direction(self, edge: Edge) -> str | None:
        direction = self._option(edge, "direction")
        return str(direction).upper() if direction is not None else None

    # -- geometry -----------------------------------------------------------

    def _rect(self, node: Node) -> Rectangle:
        origin = self.positions[node.id]
        return Rectangle(x=origin.x, y=origin.y, width=node.width, height=node.height)

    def _port_point(self, node: Node, port: Port) -> Point:
        origin = self.positions[node.id]
        return Point(x=origin.x + port.x, y=origin.y + port.y)

    def _anchor(self, node: Node, ref: str | None) -> tuple[Point, Port | None]:
        port = self.resolver.port(ref)
        if port is not None:
            return self._port_point(node, port), port
        return self._rect(node).center(), None

    # -- regular edges ------------------------------------------------------

    def _route_between(
        self, edge: Edge, section: EdgeSection, source: Node, target: Node, style: str
    ) -> None:
        start, source_port = self._anchor(source, edge.source)
        end, target_port = self._anchor(target, edge.target)
        clip_source = source_port is None
        clip_target = target_port is None

        # A container endpoint attaches on its own border, facing the nested node.
        if clip_source and self._contains(source, target):
            start = self._inner_border_point(edge, source, end, entering=True)
            clip_source = False
        elif clip_target and self._contains(target, source):
            end = self._inner_border_point(edge, target, start, entering=False)
            clip_target = False

        if style == SPLINES:
            points = [start, end]
        elif style == POLYLINE:
            points = [start, end]
        elif source_port is not None and target_port is not None:
            points = [start, *_port_aware_bends(start, end, source_port.side, target_port.side), end]
        else:
            points = self._orthogonal_points(edge, start, end)
        points = remove_collinear(points)

        # Node-center endpoints are clipped where their first segment leaves the node.
        if clip_source:
            points[0] = self._rect(source).segment_exit(points[0], points[1])
        if clip_target:
            points[-1] = self._rect(target).segment_exit(points[-1], points[-2])

        if style == SPLINES:
            points = self._spline_points(edge, points[0], points[-1])

        section.start_point = points[0]
        section.end_point = points[-1]
        section.bend_points = list(points[1:-1])

    def _contains(self, outer: Node, inner: Node) -> bool:
        return any(a.id == outer.id for a in self.resolver.ancestors(inner.id))

    def _inner_border_point(self, edge: Edge, container: Node, toward: Point, entering: bool) -> Point:
        """Point on ``container``'s border in line with ``toward``.

        An entering route starts on the side the flow comes from; a leaving
        route ends on the opposite side.
        """
        rect = self._rect(container)
        side = _ENTRY_SIDES.get(self._flow_direction(edge) or "DOWN", NORTH)
        if not entering:
            side = _OPPOSITE_SIDES[side]
        if side == NORTH:
            return Point(toward.x, rect.top)
        if side == SOUTH:
            return Point(toward.x, rect.bottom)
        if side == WEST:
            return Point(rect.left, toward.y)
        return Point(rect.right, toward.y)

    def _orthogonal_points(self, edge: Edge, start: Point, end: Point) -> list[Point]:
        direction = self._flow_direction(edge) or "DOWN"
        if direction in _HORIZONTAL_DIRECTIONS:
            mid_x = (start.x + end.x) / 2
            return [start, Point(mid_x, start.y), Point(mid_x, end.y), end]
        mid_y = (start.y + end.y) / 2
        return [start, Point(start.x, mid_y), Point(end.x, mid_y), end]

    def _spline_points(self, edge: Edge, start: Point, end: Point) -> list[Point]:
        curvature = float(self._option(edge, "spline.curvature", 0.5))
        segments = int(self._option(edge, "spline.segments", 20))
        direction = self._flow_direction(edge)
        if direction in _HORIZONTAL_DIRECTIONS:
            c1, c2 = horizontal_control_points(start, end, curvature)
        elif direction in _VERTICAL_DIRECTIONS:
            c1, c2 = vertical_control_points(start, end, curvature)
        else:
            c1, c2 = calculate_control_points(start, end, curvature)
        return calculate_curve(start, end, c1, c2, segments)

    # -- self-loops ---------------------------------------------------------

    def _self_loop_side(self, edge: Edge, node: Node) -> str:
        for opts in (edge.layout_options, node.layout_options, self.options):
            side = opts.get("elk.selfLoopSide", None)
            if side is not None:
                return str(side).upper()
        return EAST

    def _route_self_loop(self, edge: Edge, section: EdgeSection, node: Node, style: str) -> None:
        index = self._loops_per_node.get(node.id, 0)
        self._loops_per_node[node.id] = index + 1
        offset = self.options.self_loop_offset * (index + 1)

        source_port = self.resolver.port(edge.source)
        target_port = self.resolver.port(edge.target)
        if source_port is not None or target_port is not None:
            points = self._self_loop_via_ports(node, source_port, target_port, offset)
        elif style == SPLINES:
            points = self._spline_self_loop(edge, node, offset)
        else:
            points = self._orthogonal_self_loop(edge, node, offset)

        section.start_point = points[0]
        section.end_point = points[-1]
        section.bend_points = list(points[1:-1])

    def _orthogonal_self_loop(self, edge: Edge, node: Node, offset: float) -> list[Point]:
        rect = self._rect(node)
        c = rect.center()
        side = self._self_loop_side(edge, node)
        if side in (NORTH, SOUTH):
            y = rect.top if side == NORTH else rect.bottom
            out = y - offset if side == NORTH else y + offset
            spread = rect.width / 4
            a, b = Point(c.x - spread, y), Point(c.x + spread, y)
            return [a, Point(a.x, out), Point(b.x, out), b]
        x = rect.left if side == WEST else rect.right
        out = x - offset if side == WEST else x + offset
        spread = rect.height / 4
        a, b = Point(x, c.y - spread), Point(x, c.y + spread)
        return [a, Point(out, a.y), Point(out, b.y), b]

    def _spline_self_loop(self, edge: Edge, node: Node, offset: float) -> list[Point]:
        ends = self._orthogonal_self_loop(edge, node, offset)
        start, end = ends[0], ends[-1]
        radius = (node.width + node.height) / 4 + offset
        normal = _SIDE_NORMALS.get(self._self_loop_side(edge, node), _SIDE_NORMALS[EAST])
        c1 = start + normal * radius
        c2 = end + normal * radius
        segments = int(self._option(edge, "spline.segments", 20))
        return calculate_curve(start, end, c1, c2, segments)

    def _self_loop_via_ports(
        self, node: Node, source_port: Port | None, target_port: Port | None, offset: float
    ) -> list[Point]:
        rect = self._rect(node)
        start = self._port_point(node, source_port) if source_port else rect.center()
        end = self._port_point(node, target_port) if target_port else rect.center()
        start_side = source_port.side if source_port else EAST
        end_side = target_port.side if target_port else EAST
        start_out = start + _SIDE_NORMALS.get(start_side, _SIDE_NORMALS[EAST]) * offset
        end_out = end + _SIDE_NORMALS.get(end_side, _SIDE_NORMALS[EAST]) * offset
        leaves_vertically = start_side in (NORTH, SOUTH)
        middle = snap_to_orthogonal([start_out, end_out], vertical_first=not leaves_vertically)
        return remove_collinear([start, *middle, end])


def _port_aware_bends(start: Point, end: Point, source_side: str, target_side: str) -> list[Point]:
    """Bend points joining two ports so each route leaves and enters square to its side."""
    horizontal = (EAST, WEST)
    vertical = (NORTH, SOUTH)
    if source_side in horizontal and target_side in horizontal:
        mid_x = (start.x + end.x) / 2
        return [Point(mid_x, start.y), Point(mid_x, end.y)]
    if source_side in vertical and target_side in vertical:
        mid_y = (start.y + end.y) / 2
        return [Point(start.x, mid_y), Point(end.x, mid_y)]
    if source_side in horizontal and target_side in vertical:
        return [Point(end.x, start.y)]
    if source_side in vertical and target_side in horizontal:
        return [Point(start.x, end.y)]
    mid_y = (start.y + end.y) / 2
    return [Point(start.x, mid_y), Point(end.x, mid_y)]
