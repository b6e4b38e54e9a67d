from __future__ import annotations

from ..types import Container, Node


class NodePlacer:
    """Assigns coordinates to already-layered nodes.

    Layers stack along the layer axis (y for DOWN/UP, x for RIGHT/LEFT); each
    layer's thickness is its largest node. Inside a layer nodes line up
    flush from 0 in layer order. UP and LEFT mirror the layer axis.
    """

    def __init__(
        self,
        container: Container,
        layers: list[list[Node]],
        layer_spacing: float = 60.0,
        node_spacing: float = 20.0,
        direction: str = "DOWN",
    ) -> None:
        self.container = container
        self.layers = layers
        self.layer_spacing = layer_spacing
        self.node_spacing = node_spacing
        self.direction = (direction or "DOWN").upper()

    def place_nodes(self) -> None:
        is_horizontal = self.direction in ("RIGHT", "LEFT")
        is_reversed = self.direction in ("UP", "LEFT")

        def along(node: Node) -> float:
            return node.width if is_horizontal else node.height

        def across(node: Node) -> float:
            return node.height if is_horizontal else node.width

        thickness = [max((along(n) for n in layer), default=0.0) for layer in self.layers]
        extent = sum(thickness) + self.layer_spacing * max(len(self.layers) - 1, 0)

        baseline = 0.0
        for layer, layer_thickness in zip(self.layers, thickness):
            offset = 0.0
            for node in layer:
                rank = baseline
                if is_reversed:
                    rank = extent - baseline - along(node)
                if is_horizontal:
                    node.x, node.y = rank, offset
                else:
                    node.x, node.y = offset, rank
                offset += across(node) + self.node_spacing
            baseline += layer_thickness + self.layer_spacing
