from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .errors import GraphTooDeepError
from .geometry import Rectangle
from .options import LAYOUT_DEFAULTS, Padding, parse_padding
from .ports import PortConstraintProcessor
from .types import (
    Container,
    EdgeSection,
    EndpointResolver,
    Graph,
    Node,
    absolute_positions,
    iter_edges,
)

if TYPE_CHECKING:
    from .base import BaseAlgorithm

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH: int = LAYOUT_DEFAULTS["hierarchy.maxDepth"]


class HierarchicalProcessor:
    """Lays out a node tree bottom-up with a flat algorithm.

    Every compound node is finished (children placed, padding applied, size
    fitted) before its parent's level is laid out, so the parent sees the
    child's final size.
    """

    def __init__(self, algorithm: BaseAlgorithm, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.algorithm = algorithm
        self.max_depth = max_depth
        self._ports = PortConstraintProcessor()

    def layout(self, container: Container) -> None:
        for node in self._compound_nodes_post_order(container):
            self._layout_compound(node)
        if isinstance(container, Node):
            if container.children:
                self._layout_compound(container)
        else:
            self.algorithm.layout_flat(container)

    def _compound_nodes_post_order(self, container: Container) -> list[Node]:
        """Compound nodes strictly below ``container``, deepest first."""
        order: list[Node] = []
        stack: list[tuple[Node, int]] = [(child, 1) for child in container.children]
        while stack:
            node, depth = stack.pop()
            if depth > self.max_depth:
                raise GraphTooDeepError(node.id, depth, self.max_depth)
            if node.children:
                order.append(node)
                stack.extend((child, depth + 1) for child in node.children)
        # Pre-order reversed puts every node after all of its descendants.
        order.reverse()
        return order

    def _layout_compound(self, node: Node) -> None:
        self.algorithm.layout_flat(node)
        padding = self.get_padding(node)
        bounds = self.calculate_children_bounds(node)
        dx = padding.left - bounds.x
        dy = padding.top - bounds.y
        for child in node.children:
            child.x += dx
            child.y += dy
        node.width = bounds.width + padding.horizontal
        node.height = bounds.height + padding.vertical
        self._ports.process_node(node)
        logger.debug("Composed '%s' to %sx%s", node.id, node.width, node.height)

    @staticmethod
    def get_padding(node: Node) -> Padding:
        return parse_padding(node.layout_options.get("padding", None))

    @staticmethod
    def calculate_children_bounds(node: Container) -> Rectangle:
        return Rectangle.bounding([child.bounds() for child in node.children])

    # -- cross-hierarchy edges ---------------------------------------------

    def handle_cross_hierarchy_edges(self, graph: Graph) -> int:
        """Add a bend point where each cross-level route leaves its container.

        Only edges whose endpoints sit at different nesting depths count.
        Works on routed sections in absolute coordinates. Returns the number
        of bend points inserted.
        """
        resolver = EndpointResolver(graph)
        positions = absolute_positions(graph)
        inserted = 0
        for edge in iter_edges(graph):
            if not edge.sections:
                continue
            source = resolver.node(edge.source)
            target = resolver.node(edge.target)
            if source is None or target is None or source is target:
                continue
            if resolver.depth(source.id) == resolver.depth(target.id):
                continue
            boundary = _outermost_exclusive_container(resolver, source, target)
            if boundary is None:
                continue
            container, holds_source = boundary
            origin = positions[container.id]
            rect = Rectangle(x=origin.x, y=origin.y, width=container.width, height=container.height)
            if _insert_boundary_point(edge.sections[0], rect, from_start=holds_source):
                inserted += 1
        if inserted:
            logger.debug("Inserted %d cross-hierarchy bend point(s)", inserted)
        return inserted


def _outermost_exclusive_container(
    resolver: EndpointResolver, source: Node, target: Node
) -> tuple[Node, bool] | None:
    """Outermost node holding exactly one endpoint, and whether that is the source."""
    source_chain = resolver.ancestors(source.id)
    target_chain = resolver.ancestors(target.id)
    source_ids = {n.id for n in source_chain}
    target_ids = {n.id for n in target_chain}
    source_only = [n for n in source_chain if n.id not in target_ids and n is not target]
    target_only = [n for n in target_chain if n.id not in source_ids and n is not source]
    candidates = [(n, True) for n in source_only] + [(n, False) for n in target_only]
    if not candidates:
        return None
    return min(candidates, key=lambda item: resolver.depth(item[0].id))


def _insert_boundary_point(section: EdgeSection, rect: Rectangle, from_start: bool) -> bool:
    points = section.points()
    if len(points) < 2:
        return False
    if not from_start:
        points = points[::-1]
    for i in range(len(points) - 1):
        inside, outside = points[i], points[i + 1]
        if rect.contains(outside):
            continue
        crossing = rect.segment_exit(inside, outside)
        if crossing.distance_to(inside) < 1e-9:
            return False
        # index among bend points in the section's own order
        bend_index = i if from_start else len(points) - 2 - i
        section.bend_points.insert(bend_index, crossing)
        return True
    return False
