from __future__ import annotations

import logging

from ..types import Container, Edge, EndpointResolver, Node
from .level import level_edges, resolver_for

logger = logging.getLogger(__name__)


class CycleBreaker:
    """First Sugiyama phase: reverse back edges so the level becomes acyclic.

    Depth-first search from every unvisited child, in child order. An edge
    whose target is still on the DFS stack closes a cycle and is queued;
    reversal happens only once the whole traversal is done, so every
    decision is made against the original topology.
    """

    def __init__(self, container: Container, resolver: EndpointResolver | None = None) -> None:
        self.container = container
        self.resolver = resolver or resolver_for(container)
        self.reversed_edges: list[Edge] = []

    def break_cycles(self) -> list[Edge]:
        outgoing: dict[str, list[tuple[Edge, Node]]] = {c.id: [] for c in self.container.children}
        for edge, source, target in level_edges(self.container, self.resolver):
            if source is not None and target is not None:
                outgoing[source.id].append((edge, target))

        visited: set[str] = set()
        in_stack: set[str] = set()
        queued: set[int] = set()

        for root in self.container.children:
            if root.id in visited:
                continue
            visited.add(root.id)
            in_stack.add(root.id)
            stack = [(root, iter(outgoing[root.id]))]
            while stack:
                node, pending = stack[-1]
                step = next(pending, None)
                if step is None:
                    in_stack.discard(node.id)
                    stack.pop()
                    continue
                edge, target = step
                if target.id in in_stack:
                    if id(edge) not in queued:
                        queued.add(id(edge))
                        self.reversed_edges.append(edge)
                elif target.id not in visited:
                    visited.add(target.id)
                    in_stack.add(target.id)
                    stack.append((target, iter(outgoing[target.id])))

        for edge in self.reversed_edges:
            _reverse(edge)
        if self.reversed_edges:
            logger.debug(
                "Reversed %d edge(s) in '%s': %s",
                len(self.reversed_edges),
                self.container.id,
                [e.id for e in self.reversed_edges],
            )
        return self.reversed_edges


def _reverse(edge: Edge) -> None:
    edge.sources, edge.targets = edge.targets, edge.sources
    edge.properties["reversed"] = True
