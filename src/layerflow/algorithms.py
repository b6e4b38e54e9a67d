from __future__ import annotations

import logging
import math
import random
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from grandalf.graphs import Edge as GEdge
from grandalf.graphs import Graph as GGraph
from grandalf.graphs import Vertex

from .base import BaseAlgorithm
from .errors import AlgorithmNotFoundError
from .geometry import Rectangle
from .layered import LayeredAlgorithm
from .layered.level import level_edges, resolver_for
from .options import LayoutOptions
from .types import Container, Graph, Node

logger = logging.getLogger(__name__)

# ============================================================================
# Peer algorithms
# ============================================================================


class BoxAlgorithm(BaseAlgorithm):
    """Uniform grid; column count follows ``aspectRatio``."""

    name = "box"
    description = "Packs nodes into a grid of equally sized cells"

    def layout_flat(self, container: Container) -> None:
        nodes = container.children
        if not nodes:
            return
        options = self.level_options(container)
        aspect_ratio = float(options.get("aspectRatio"))
        spacing = float(options.get("spacing.nodeNode"))
        cols = max(math.ceil(math.sqrt(len(nodes) * aspect_ratio)), 1)
        cell_w = max(n.width for n in nodes)
        cell_h = max(n.height for n in nodes)
        for i, node in enumerate(nodes):
            row, col = divmod(i, cols)
            node.x = col * (cell_w + spacing)
            node.y = row * (cell_h + spacing)


class FixedAlgorithm(BaseAlgorithm):
    """Keeps the coordinates the caller supplied."""

    name = "fixed"
    description = "Keeps node positions as given"

    def layout_flat(self, container: Container) -> None:
        return None


class RandomAlgorithm(BaseAlgorithm):
    name = "random"
    description = "Scatters nodes over an area sized for their total footprint"

    def layout_flat(self, container: Container) -> None:
        nodes = container.children
        if not nodes:
            return
        options = self.level_options(container)
        aspect_ratio = float(options.get("aspectRatio"))
        spacing = float(options.get("spacing.nodeNode"))
        seed = options.get("random.seed", None)
        rng = random.Random(seed)

        area = sum((n.width + spacing) * (n.height + spacing) for n in nodes)
        width = math.sqrt(area * aspect_ratio)
        height = width / aspect_ratio
        for node in nodes:
            node.x = rng.random() * max(width - node.width, 0.0)
            node.y = rng.random() * max(height - node.height, 0.0)


class DiscoAlgorithm(BaseAlgorithm):
    """Lays out each connected component on its own, then packs the components.

    Components come from grandalf's connected-component split of the level.
    """

    name = "disco"
    description = "Arranges disconnected components side by side"

    def layout_flat(self, container: Container) -> None:
        if not container.children:
            return
        options = self.level_options(container)
        algorithm_name = normalize_algorithm_name(options.get("disco.componentAlgorithm"))
        if algorithm_name == self.name:
            algorithm_name = LayeredAlgorithm.name
        spacing = float(options.get("disco.componentSpacing"))
        arrangement = str(options.get("disco.componentArrangement")).lower()

        components = find_components(container)
        inner = create_algorithm(algorithm_name, self.options)
        inner._graph_options = self._graph_options
        for i, nodes in enumerate(components):
            view = Graph(
                id=f"{container.id}_component_{i}",
                children=nodes,
                edges=list(container.edges),
                layout_options=container.layout_options,
            )
            inner.layout_flat(view)

        if arrangement == "grid":
            _arrange_grid(components, spacing)
        elif arrangement == "column":
            _arrange_line(components, spacing, horizontal=False)
        else:
            _arrange_line(components, spacing, horizontal=True)
        logger.debug("Arranged %d component(s) of '%s'", len(components), container.id)


def find_components(container: Container) -> list[list[Node]]:
    """Connected components of one level, each in child order, ordered by first child."""
    order = {child.id: i for i, child in enumerate(container.children)}
    by_id = {child.id: child for child in container.children}
    vertices = {child.id: Vertex(child.id) for child in container.children}
    edges = []
    for _edge, source, target in level_edges(container, resolver_for(container)):
        if source is not None and target is not None:
            edges.append(GEdge(vertices[source.id], vertices[target.id]))

    g = GGraph(list(vertices.values()), edges)
    components = [
        [by_id[nid] for nid in sorted((v.data for v in core.sV), key=order.__getitem__)]
        for core in g.C
    ]
    components.sort(key=lambda nodes: order[nodes[0].id])
    return components


def _component_bounds(nodes: list[Node]) -> Rectangle:
    return Rectangle.bounding([n.bounds() for n in nodes])


def _arrange_line(components: list[list[Node]], spacing: float, horizontal: bool) -> None:
    cursor = 0.0
    for nodes in components:
        box = _component_bounds(nodes)
        for node in nodes:
            if horizontal:
                node.x += cursor - box.x
                node.y -= box.y
            else:
                node.x -= box.x
                node.y += cursor - box.y
        cursor += (box.width if horizontal else box.height) + spacing


def _arrange_grid(components: list[list[Node]], spacing: float) -> None:
    cols = math.ceil(math.sqrt(len(components)))
    y = 0.0
    for start in range(0, len(components), cols):
        x = 0.0
        row_height = 0.0
        for nodes in components[start:start + cols]:
            box = _component_bounds(nodes)
            for node in nodes:
                node.x += x - box.x
                node.y += y - box.y
            x += box.width + spacing
            row_height = max(row_height, box.height)
        y += row_height + spacing


# ============================================================================
# Registry
# ============================================================================


@dataclass(frozen=True, slots=True)
class AlgorithmInfo:
    id: str
    name: str
    description: str
    category: str = "general"
    supports_hierarchy: bool = True


_ALGORITHMS: dict[str, type[BaseAlgorithm]] = {}
_METADATA: dict[str, AlgorithmInfo] = {}


def normalize_algorithm_name(name: Any) -> str:
    """``org.eclipse.elk.layered`` -> ``layered``."""
    return str(name).rsplit(".", 1)[-1].lower()


def register_algorithm(cls: type[BaseAlgorithm], category: str = "general") -> type[BaseAlgorithm]:
    key = normalize_algorithm_name(cls.name)
    _ALGORITHMS[key] = cls
    _METADATA[key] = AlgorithmInfo(
        id=key,
        name=key.capitalize(),
        description=cls.description,
        category=category,
    )
    return cls


def get_algorithm(name: Any) -> type[BaseAlgorithm]:
    cls = _ALGORITHMS.get(normalize_algorithm_name(name))
    if cls is None:
        raise AlgorithmNotFoundError(str(name))
    return cls


def create_algorithm(
    name: Any, options: LayoutOptions | Mapping[str, Any] | None = None
) -> BaseAlgorithm:
    return get_algorithm(name)(options)


def available_algorithms() -> list[str]:
    return sorted(_ALGORITHMS)


def algorithm_info(name: Any) -> AlgorithmInfo:
    get_algorithm(name)
    return _METADATA[normalize_algorithm_name(name)]


register_algorithm(LayeredAlgorithm, category="layered")
register_algorithm(BoxAlgorithm, category="packing")
register_algorithm(FixedAlgorithm)
register_algorithm(RandomAlgorithm)
register_algorithm(DiscoAlgorithm, category="packing")
