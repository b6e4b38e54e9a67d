from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Literal, Union

from .errors import InvalidOptionError, ValidationError
from .geometry import Point, Rectangle
from .options import LayoutOptions

# ============================================================================
# Ports
# ============================================================================

PortSide = Literal["NORTH", "SOUTH", "EAST", "WEST", "UNDEFINED"]

NORTH: PortSide = "NORTH"
SOUTH: PortSide = "SOUTH"
EAST: PortSide = "EAST"
WEST: PortSide = "WEST"
UNDEFINED: PortSide = "UNDEFINED"

PORT_SIDES: tuple[PortSide, ...] = (NORTH, SOUTH, EAST, WEST, UNDEFINED)


def normalize_port_side(value: Any) -> PortSide:
    """Upper-case a side name, rejecting anything outside PORT_SIDES."""
    if value is None:
        return UNDEFINED
    side = str(value).upper()
    if side not in PORT_SIDES:
        raise InvalidOptionError(
            f"Invalid port side: {value}. Must be one of {', '.join(PORT_SIDES)}",
            option="side",
            value=value,
        )
    return side  # type: ignore[return-value]


@dataclass(slots=True)
class Label:
    text: str = ""
    id: str | None = None
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    layout_options: LayoutOptions = field(default_factory=LayoutOptions)


@dataclass(slots=True)
class Port:
    id: str
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    side: PortSide = UNDEFINED
    index: int = -1
    offset: float = 0.0
    labels: list[Label] = field(default_factory=list)
    layout_options: LayoutOptions = field(default_factory=LayoutOptions)
    properties: dict[str, Any] = field(default_factory=dict)
    # id of the owning node; set when the port is attached
    owner_id: str | None = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "side":
            value = normalize_port_side(value)
        object.__setattr__(self, name, value)

    def detect_side(self, node_width: float, node_height: float) -> PortSide:
        """Side of a ``node_width`` x ``node_height`` box this port sits closest to.

        Ties go to the first of NORTH, SOUTH, WEST, EAST.
        """
        if node_width <= 0 or node_height <= 0:
            return UNDEFINED
        rel_x = self.x / node_width
        rel_y = self.y / node_height
        distances = (
            (NORTH, rel_y),
            (SOUTH, 1.0 - rel_y),
            (WEST, rel_x),
            (EAST, 1.0 - rel_x),
        )
        return min(distances, key=lambda item: item[1])[0]


# ============================================================================
# Node constraints
# ============================================================================

AlignDirection = Literal["horizontal", "vertical"]

HORIZONTAL: AlignDirection = "horizontal"
VERTICAL: AlignDirection = "vertical"
ALIGN_DIRECTIONS: tuple[AlignDirection, ...] = (HORIZONTAL, VERTICAL)


@dataclass(frozen=True, slots=True)
class RelativeOffset:
    x: float = 0.0
    y: float = 0.0


@dataclass(slots=True)
class NodeConstraints:
    fixed_position: bool = False
    layer: int | None = None
    align_group: str | None = None
    align_direction: AlignDirection | None = None
    relative_to: str | None = None
    relative_offset: RelativeOffset | None = None
    # Carried for callers; nothing in layerflow orders by it.
    position_priority: int = 0

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "align_direction" and value is not None:
            normalized = str(value).lower()
            if normalized not in ALIGN_DIRECTIONS:
                raise InvalidOptionError(
                    f"Invalid align_direction: {value}. Must be horizontal or vertical",
                    option="align_direction",
                    value=value,
                )
            value = normalized
        object.__setattr__(self, name, value)

    def is_default(self) -> bool:
        return (
            not self.fixed_position
            and self.layer is None
            and self.align_group is None
            and self.align_direction is None
            and self.relative_to is None
            and self.relative_offset is None
            and self.position_priority == 0
        )


# ============================================================================
# Edges
# ============================================================================


@dataclass(slots=True)
class EdgeSection:
    id: str | None = None
    start_point: Point | None = None
    end_point: Point | None = None
    bend_points: list[Point] = field(default_factory=list)
    incoming_shape: str | None = None
    outgoing_shape: str | None = None

    def points(self) -> list[Point]:
        """start -> bend points -> end, without gaps."""
        if self.start_point is None or self.end_point is None:
            return []
        return [self.start_point, *self.bend_points, self.end_point]

    def add_bend_point(self, x: float, y: float) -> None:
        self.bend_points.append(Point(x=x, y=y))

    def insert_bend_point(self, index: int, x: float, y: float) -> None:
        self.bend_points.insert(index, Point(x=x, y=y))

    def length(self) -> float:
        pts = self.points()
        return sum(a.distance_to(b) for a, b in zip(pts, pts[1:]))


@dataclass(slots=True)
class Edge:
    id: str
    sources: list[str] = field(default_factory=list)
    targets: list[str] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)
    sections: list[EdgeSection] = field(default_factory=list)
    layout_options: LayoutOptions = field(default_factory=LayoutOptions)
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def source(self) -> str | None:
        return self.sources[0] if self.sources else None

    @property
    def target(self) -> str | None:
        return self.targets[0] if self.targets else None

    @property
    def reversed(self) -> bool:
        return bool(self.properties.get("reversed", False))

    def is_self_loop(self) -> bool:
        return self.source is not None and self.source == self.target


# ============================================================================
# Nodes and the root graph
# ============================================================================


@dataclass(slots=True)
class Node:
    id: str
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    labels: list[Label] = field(default_factory=list)
    ports: list[Port] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    layout_options: LayoutOptions = field(default_factory=LayoutOptions)
    constraints: NodeConstraints | None = None
    properties: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for port in self.ports:
            port.owner_id = self.id

    def add_port(self, port: Port) -> Port:
        port.owner_id = self.id
        self.ports.append(port)
        return port

    def is_hierarchical(self) -> bool:
        return bool(self.children)

    def bounds(self) -> Rectangle:
        return Rectangle(x=self.x, y=self.y, width=self.width, height=self.height)

    def find_node(self, node_id: str) -> Node | None:
        for node in iter_nodes(self, include_self=True):
            if node.id == node_id:
                return node
        return None

    def all_nodes(self) -> list[Node]:
        """This node followed by every descendant, pre-order."""
        return list(iter_nodes(self, include_self=True))

    def all_edges(self) -> list[Edge]:
        return list(iter_edges(self))


@dataclass(slots=True)
class Graph:
    id: str = "root"
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    children: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    layout_options: LayoutOptions = field(default_factory=LayoutOptions)
    properties: dict[str, Any] = field(default_factory=dict)

    def is_hierarchical(self) -> bool:
        return any(child.is_hierarchical() for child in self.children)

    def all_nodes(self) -> list[Node]:
        return list(iter_nodes(self))

    def all_edges(self) -> list[Edge]:
        return list(iter_edges(self))

    def find_node(self, node_id: str) -> Node | None:
        for node in iter_nodes(self):
            if node.id == node_id:
                return node
        return None

    def find_port(self, port_id: str) -> Port | None:
        for node in iter_nodes(self):
            for port in node.ports:
                if port.id == port_id:
                    return port
        return None

    def resolve_endpoint(self, ref: str) -> Node | None:
        """Node named by an edge endpoint, which may be a node id or a port id."""
        node = self.find_node(ref)
        if node is not None:
            return node
        port = self.find_port(ref)
        if port is not None and port.owner_id is not None:
            return self.find_node(port.owner_id)
        return None

    def node_index(self) -> dict[str, Node]:
        """Map every reachable node id to its node; duplicate ids are an error."""
        index: dict[str, Node] = {}
        for node in iter_nodes(self):
            if node.id in index:
                raise ValidationError(f"Duplicate node id '{node.id}' in graph '{self.id}'")
            index[node.id] = node
        return index

    def port_index(self) -> dict[str, Port]:
        index: dict[str, Port] = {}
        for node in iter_nodes(self):
            for port in node.ports:
                if port.owner_id is None:
                    port.owner_id = node.id
                index[port.id] = port
        return index

    def parent_index(self) -> dict[str, Container]:
        """Map every node id to the graph or node that directly contains it."""
        parents: dict[str, Container] = {}
        stack: list[Container] = [self]
        while stack:
            container = stack.pop()
            for child in container.children:
                parents[child.id] = container
                stack.append(child)
        return parents


Container = Union[Graph, Node]


def iter_nodes(container: Container, include_self: bool = False) -> Iterator[Node]:
    """Pre-order walk over the node tree using an explicit stack."""
    if include_self and isinstance(container, Node):
        yield container
    stack: list[Iterator[Node]] = [iter(container.children)]
    while stack:
        node = next(stack[-1], None)
        if node is None:
            stack.pop()
            continue
        yield node
        if node.children:
            stack.append(iter(node.children))


def iter_edges(container: Container) -> Iterator[Edge]:
    """Edges owned by ``container`` and by every node below it."""
    yield from container.edges
    for node in iter_nodes(container):
        yield from node.edges


def absolute_positions(graph: Graph) -> dict[str, Point]:
    """Root-frame top-left corner of every node."""
    positions: dict[str, Point] = {}
    stack: list[tuple[Container, float, float]] = [(graph, 0.0, 0.0)]
    while stack:
        container, ox, oy = stack.pop()
        for child in container.children:
            ax, ay = ox + child.x, oy + child.y
            positions[child.id] = Point(x=ax, y=ay)
            if child.children:
                stack.append((child, ax, ay))
    return positions


class EndpointResolver:
    """Resolves edge endpoint ids (node or port ids) to nodes by lookup.

    Built once per graph; lookups are dictionary hits, nodes and ports are
    addressed by id rather than held through back-references.
    """

    def __init__(self, graph: Graph) -> None:
        self.nodes = graph.node_index()
        self.ports = graph.port_index()
        self.parents = graph.parent_index()

    def node(self, ref: str | None) -> Node | None:
        if ref is None:
            return None
        node = self.nodes.get(ref)
        if node is not None:
            return node
        port = self.ports.get(ref)
        if port is not None and port.owner_id is not None:
            return self.nodes.get(port.owner_id)
        return None

    def port(self, ref: str | None) -> Port | None:
        if ref is None or ref in self.nodes:
            return None
        return self.ports.get(ref)

    def depth(self, node_id: str) -> int:
        depth = 0
        current = self.parents.get(node_id)
        while isinstance(current, Node):
            depth += 1
            current = self.parents.get(current.id)
        return depth

    def ancestors(self, node_id: str) -> list[Node]:
        """Containing nodes from the direct parent outwards (the root graph excluded)."""
        chain: list[Node] = []
        current = self.parents.get(node_id)
        while isinstance(current, Node):
            chain.append(current)
            current = self.parents.get(current.id)
        return chain

    def child_of(self, container: Container, ref: str | None) -> Node | None:
        """The direct child of ``container`` that is, or contains, the endpoint."""
        node = self.node(ref)
        while node is not None:
            parent = self.parents.get(node.id)
            if parent is container:
                return node
            node = parent if isinstance(parent, Node) else None
        return None

