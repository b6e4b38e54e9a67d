from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .constraints import ConstraintProcessor
from .edge_routing import EdgeRouter
from .geometry import Rectangle
from .hierarchy import HierarchicalProcessor
from .labels import LabelPlacer
from .options import LayoutOptions, parse_padding
from .ports import PortConstraintProcessor
from .types import Container, EndpointResolver, Graph

logger = logging.getLogger(__name__)


def as_options(options: LayoutOptions | Mapping[str, Any] | None) -> LayoutOptions:
    if options is None:
        return LayoutOptions()
    if isinstance(options, LayoutOptions):
        return options
    return LayoutOptions.from_dict(options)


class BaseAlgorithm:
    """Shared layout pipeline; subclasses only place the children of one level.

    ``layout(graph)`` runs, in order: port constraints, pre-layout constraint
    tagging, hierarchical or flat placement, root padding, post-layout
    constraint enforcement, edge routing, cross-hierarchy bend points and
    label placement.
    """

    name = "base"
    description = ""

    def __init__(self, options: LayoutOptions | Mapping[str, Any] | None = None) -> None:
        self.options = as_options(options)
        self._graph_options = LayoutOptions()

    def level_options(self, container: Container) -> LayoutOptions:
        """Call options over the level's own options over the graph's options."""
        return self._graph_options.merged(container.layout_options).merged(self.options)

    def layout(self, graph: Graph) -> Graph:
        self._graph_options = graph.layout_options
        options = self._graph_options.merged(self.options)
        # Builds the id index, so duplicate ids fail before anything moves.
        EndpointResolver(graph)

        PortConstraintProcessor().process(graph)

        constraints = ConstraintProcessor()
        constrained = constraints.has_constraints(graph)
        if constrained:
            constraints.apply_pre_layout(graph)

        hierarchical = bool(options.get("hierarchical")) or graph.is_hierarchical()
        processor = HierarchicalProcessor(self, max_depth=int(options.get("hierarchy.maxDepth")))
        if hierarchical:
            processor.layout(graph)
        else:
            self.layout_flat(graph)
        self.apply_padding(graph)

        if constrained:
            constraints.enforce_post_layout(graph)
            for violation in constraints.validate_all(graph):
                logger.warning("Constraint violation (%s): %s", violation.kind, violation)

        EdgeRouter(graph, self.options).route_all()
        if hierarchical:
            processor.handle_cross_hierarchy_edges(graph)

        if not options.get("labels.placement.disabled"):
            LabelPlacer(graph, self.options).place_all()
        return graph

    def layout_flat(self, container: Container) -> None:
        raise NotImplementedError(f"{type(self).__name__} must implement layout_flat")

    def apply_padding(self, graph: Graph) -> None:
        """Shift the root's children inside its padding and size the root to fit."""
        if not graph.children:
            return
        pad = parse_padding(self._graph_options.merged(self.options).get("padding", None))
        bbox = Rectangle.bounding([child.bounds() for child in graph.children])
        for child in graph.children:
            child.x += pad.left - bbox.x
            child.y += pad.top - bbox.y
        graph.width = bbox.width + pad.horizontal
        graph.height = bbox.height + pad.vertical
