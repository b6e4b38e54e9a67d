from __future__ import annotations

import logging

from ..base import BaseAlgorithm
from ..types import Container
from .cycle_breaker import CycleBreaker
from .layer_assigner import LayerAssigner
from .level import resolver_for
from .node_placer import NodePlacer

logger = logging.getLogger(__name__)


class LayeredAlgorithm(BaseAlgorithm):
    """Sugiyama-style layout: break cycles, assign layers, place nodes.

    There is no crossing-minimization phase; nodes keep their child order
    within each layer.
    """

    name = "layered"
    description = "Layer-based layout for directed graphs"

    def layout_flat(self, container: Container) -> None:
        if not container.children:
            return
        options = self.level_options(container)
        resolver = resolver_for(container)

        CycleBreaker(container, resolver).break_cycles()
        layers = LayerAssigner(container, resolver).assign_layers()
        NodePlacer(
            container,
            layers,
            layer_spacing=float(options.get("spacing.nodeNodeBetweenLayers")),
            node_spacing=float(options.get("spacing.nodeNode")),
            direction=str(options.get("direction")),
        ).place_nodes()
        logger.debug(
            "Laid out '%s': %d node(s) in %d layer(s)",
            container.id,
            len(container.children),
            len(layers),
        )
