from __future__ import annotations

from .geometry import Point
from .options import LayoutOptions
from .types import NORTH, SOUTH, WEST, Edge, Graph, Label, Node, Port, iter_edges, iter_nodes

# ============================================================================
# Label sizing -- rough proportional-font metrics for labels without a size
# ============================================================================

LABEL_FONT_SIZE = 12.0
_CHAR_WIDTH_RATIO = 0.52
_LINE_HEIGHT_RATIO = 1.3

NODE_LABEL_PLACEMENTS = ("INSIDE CENTER", "INSIDE TOP", "OUTSIDE TOP", "OUTSIDE BOTTOM")


def estimate_label_size(label: Label) -> None:
    """Fill in width/height from the text when the caller left them at 0."""
    if label.width <= 0:
        label.width = len(label.text) * LABEL_FONT_SIZE * _CHAR_WIDTH_RATIO
    if label.height <= 0 and label.text:
        label.height = LABEL_FONT_SIZE * _LINE_HEIGHT_RATIO


class LabelPlacer:
    """Positions node, port and edge labels after nodes and edges are final.

    Node and port labels are relative to their owner; edge labels use the
    same absolute frame as edge sections.
    """

    def __init__(self, graph: Graph, options: LayoutOptions | None = None) -> None:
        self.graph = graph
        self.options = graph.layout_options.merged(options)
        self.spacing = float(self.options.get("spacing.nodeLabel"))

    def place_all(self) -> None:
        for node in iter_nodes(self.graph):
            self.place_node_labels(node)
            for port in node.ports:
                self.place_port_labels(port)
        for edge in iter_edges(self.graph):
            self.place_edge_labels(edge)

    def place_node_labels(self, node: Node) -> None:
        if not node.labels:
            return
        placement = str(
            node.layout_options.get("nodeLabels.placement", None)
            or self.options.get("nodeLabels.placement")
        ).upper()
        if placement not in NODE_LABEL_PLACEMENTS:
            placement = "INSIDE TOP"

        for label in node.labels:
            estimate_label_size(label)
        stack_height = sum(label.height for label in node.labels) + self.spacing * (len(node.labels) - 1)

        if placement == "INSIDE CENTER":
            y = (node.height - stack_height) / 2
        elif placement == "OUTSIDE TOP":
            y = -stack_height - self.spacing
        elif placement == "OUTSIDE BOTTOM":
            y = node.height + self.spacing
        else:
            y = self.spacing

        for label in node.labels:
            label.x = (node.width - label.width) / 2
            label.y = y
            y += label.height + self.spacing

    def place_port_labels(self, port: Port) -> None:
        for label in port.labels:
            estimate_label_size(label)
            if port.side == NORTH:
                label.x = (port.width - label.width) / 2
                label.y = -label.height - self.spacing
            elif port.side == SOUTH:
                label.x = (port.width - label.width) / 2
                label.y = port.height + self.spacing
            elif port.side == WEST:
                label.x = -label.width - self.spacing
                label.y = (port.height - label.height) / 2
            else:
                label.x = port.width + self.spacing
                label.y = (port.height - label.height) / 2

    def place_edge_labels(self, edge: Edge) -> None:
        if not edge.labels or not edge.sections:
            return
        points = edge.sections[0].points()
        if len(points) < 2:
            return
        mid = len(points) // 2
        a, b = points[mid - 1], points[mid]
        center = Point(x=(a.x + b.x) / 2, y=(a.y + b.y) / 2)
        for label in edge.labels:
            estimate_label_size(label)
            label.x = center.x - label.width / 2
            label.y = center.y - label.height / 2
