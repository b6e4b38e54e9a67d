from __future__ import annotations

from ..types import Container, Edge, EndpointResolver, Graph, Node, iter_edges

# ============================================================================
# One flat level of a (possibly nested) graph
#
# A level is a container's direct children plus every edge below the
# container whose endpoints fall into two different direct children.
# Endpoints deeper in the tree are lifted to the child that contains them.
# ============================================================================


def resolver_for(container: Container) -> EndpointResolver:
    if isinstance(container, Graph):
        return EndpointResolver(container)
    return EndpointResolver(Graph(id=f"{container.id}_level", children=[container]))


def level_edges(
    container: Container, resolver: EndpointResolver
) -> list[tuple[Edge, Node | None, Node | None]]:
    """Every edge touching this level as ``(edge, source_child, target_child)``.

    Either child is ``None`` when that endpoint does not resolve into the
    level. Self-loops at this level (both ends in the same child) are dropped.
    """
    result: list[tuple[Edge, Node | None, Node | None]] = []
    for edge in iter_edges(container):
        source = resolver.child_of(container, edge.source)
        target = resolver.child_of(container, edge.target)
        if source is None and target is None:
            continue
        if source is not None and source is target:
            continue
        result.append((edge, source, target))
    return result
