from __future__ import annotations

import logging

from .types import EAST, NORTH, SOUTH, UNDEFINED, WEST, Container, Node, Port, PortSide, iter_nodes

logger = logging.getLogger(__name__)

# Boundary sides in the order they are laid out.
_BOUNDARY_SIDES: tuple[PortSide, ...] = (NORTH, SOUTH, WEST, EAST)


class PortConstraintProcessor:
    """Gives every port of every node a side, an index and a boundary position."""

    def process(self, container: Container) -> None:
        for node in iter_nodes(container, include_self=isinstance(container, Node)):
            self.process_node(node)

    def process_node(self, node: Node) -> None:
        if not node.ports or node.width <= 0 or node.height <= 0:
            return
        self.detect_sides(node)
        by_side = self.group_ports_by_side(node.ports)
        for side, ports in by_side.items():
            self.order_ports_on_side(side, ports)
        self.position_ports_on_boundaries(node, by_side)

    def detect_sides(self, node: Node) -> None:
        for port in node.ports:
            if port.side == UNDEFINED:
                port.side = port.detect_side(node.width, node.height)

    @staticmethod
    def group_ports_by_side(ports: list[Port]) -> dict[PortSide, list[Port]]:
        groups: dict[PortSide, list[Port]] = {}
        for port in ports:
            groups.setdefault(port.side, []).append(port)
        return groups

    @staticmethod
    def order_ports_on_side(side: PortSide, ports: list[Port]) -> None:
        """Sort in place: explicit indices first, then by position along the side.

        Afterwards indices run 0..n-1 in the new order.
        """
        horizontal = side in (NORTH, SOUTH)

        def key(port: Port) -> tuple[int, float]:
            if port.index >= 0:
                return 0, port.index
            return 1, port.x if horizontal else port.y

        ports.sort(key=key)
        for i, port in enumerate(ports):
            port.index = i

    def position_ports_on_boundaries(self, node: Node, by_side: dict[PortSide, list[Port]]) -> None:
        fixed = node.layout_options.port_constraints == "FIXED_POS"
        for side in _BOUNDARY_SIDES:
            ports = by_side.get(side)
            if not ports:
                continue
            horizontal = side in (NORTH, SOUTH)
            if fixed:
                for port in ports:
                    port.offset = port.x if horizontal else port.y
                continue
            count = len(ports)
            if horizontal:
                step = node.width / (count + 1)
                y = 0.0 if side == NORTH else node.height
                for k, port in enumerate(ports):
                    port.x, port.y = step * (k + 1), y
                    port.offset = port.x
            else:
                step = node.height / (count + 1)
                x = 0.0 if side == WEST else node.width
                for k, port in enumerate(ports):
                    port.x, port.y = x, step * (k + 1)
                    port.offset = port.y
        logger.debug("Positioned %d port(s) on '%s'", len(node.ports), node.id)
