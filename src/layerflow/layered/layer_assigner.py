from __future__ import annotations

import logging

from ..errors import UnresolvedCycleError
from ..types import Container, EndpointResolver, Node
from .level import level_edges, resolver_for

logger = logging.getLogger(__name__)

_DONE = object()


class LayerAssigner:
    """Longest-path layering of one level.

    ``layer(n)`` is 0 for a node without incoming edges, otherwise one more
    than its deepest predecessor. An incoming edge whose source does not
    resolve into the level counts as a predecessor on layer 0. A node with a
    requested layer is moved down to it when longest-path puts it higher.
    """

    def __init__(self, container: Container, resolver: EndpointResolver | None = None) -> None:
        self.container = container
        self.resolver = resolver or resolver_for(container)
        self._layers: dict[str, int] = {}

    def assign_layers(self) -> list[list[Node]]:
        self._layers = {}
        preds: dict[str, list[Node | None]] = {c.id: [] for c in self.container.children}
        for _edge, source, target in level_edges(self.container, self.resolver):
            if target is not None:
                preds[target.id].append(source)

        for node in self.container.children:
            if node.id not in self._layers:
                self._compute(node, preds)

        depth = max(self._layers.values(), default=-1) + 1
        layers: list[list[Node]] = [[] for _ in range(depth)]
        for node in self.container.children:
            layer = self._layers[node.id]
            node.properties["_assigned_layer"] = layer
            layers[layer].append(node)

        logger.debug("Assigned %d layer(s) in '%s'", len(layers), self.container.id)
        return layers

    def layer_for(self, node_id: str) -> int | None:
        return self._layers.get(node_id)

    def _compute(self, start: Node, preds: dict[str, list[Node | None]]) -> None:
        # Post-order over predecessors; a node is finished once all of its
        # predecessors have a layer.
        path = [start.id]
        on_path = {start.id}
        stack = [(start, iter(preds[start.id]))]
        while stack:
            node, pending = stack[-1]
            pred = next(pending, _DONE)
            if pred is _DONE:
                incoming = preds[node.id]
                if incoming:
                    self._layers[node.id] = 1 + max(
                        self._layers.get(p.id, 0) if p is not None else 0 for p in incoming
                    )
                else:
                    self._layers[node.id] = 0
                requested = _requested_layer(node)
                if requested is not None and requested > self._layers[node.id]:
                    self._layers[node.id] = requested
                stack.pop()
                path.pop()
                on_path.discard(node.id)
                continue
            if pred is None or pred.id in self._layers:
                continue
            if pred.id in on_path:
                cycle = path[path.index(pred.id):]
                raise UnresolvedCycleError(cycle)
            path.append(pred.id)
            on_path.add(pred.id)
            stack.append((pred, iter(preds[pred.id])))


def _requested_layer(node: Node) -> int | None:
    # A requested layer can push a node further down but never above its
    # predecessors.
    if node.constraints is not None and node.constraints.layer is not None:
        return node.constraints.layer
    return None
