from __future__ import annotations

import logging
from dataclasses import dataclass

from .types import HORIZONTAL, VERTICAL, Container, Node, iter_nodes

logger = logging.getLogger(__name__)

# ============================================================================
# Violation records
# ============================================================================

FIXED_MOVED = "fixed_moved"
ALIGNMENT_MISMATCH = "alignment_mismatch"
RELATIVE_MISSING = "relative_missing"
RELATIVE_POSITION = "relative_position"
LAYER_MISMATCH = "layer_mismatch"

POSITION_TOLERANCE = 0.01


@dataclass(frozen=True, slots=True)
class ConstraintViolation:
    kind: str
    node_id: str
    message: str

    def __str__(self) -> str:
        return self.message


# ============================================================================
# ConstraintProcessor
# ============================================================================


class ConstraintProcessor:
    """Tags, enforces and checks per-node positioning constraints.

    Pre-layout tagging records what the layout must respect (original
    coordinates of fixed nodes, requested layers). Post-layout enforcement
    puts fixed nodes back, then aligns groups, then applies relative
    offsets. Validation reports problems as records and never raises.
    """

    def has_constraints(self, graph: Container) -> bool:
        return any(_constrained(node) for node in iter_nodes(graph))

    def apply_pre_layout(self, graph: Container) -> None:
        for node in iter_nodes(graph):
            c = node.constraints
            if c is None:
                continue
            if c.fixed_position:
                node.properties["_constraint_fixed"] = True
                node.properties["_constraint_original_x"] = node.x
                node.properties["_constraint_original_y"] = node.y
            if c.layer is not None:
                node.properties["_constraint_layer"] = c.layer

    def enforce_post_layout(self, graph: Container) -> None:
        if not self.has_constraints(graph):
            return
        self.restore_fixed_positions(graph)
        self.apply_alignment(graph)
        self.apply_relative_positions(graph)

    def apply_all(self, graph: Container) -> None:
        if not self.has_constraints(graph):
            return
        self.apply_pre_layout(graph)
        self.apply_alignment(graph)
        self.apply_relative_positions(graph)

    # -- enforcement --------------------------------------------------------

    def restore_fixed_positions(self, graph: Container) -> None:
        for node in iter_nodes(graph):
            if node.properties.get("_constraint_fixed"):
                node.x = node.properties["_constraint_original_x"]
                node.y = node.properties["_constraint_original_y"]

    def apply_alignment(self, graph: Container) -> None:
        for (_group, direction), nodes in _alignment_groups(graph).items():
            if len(nodes) < 2:
                continue
            if direction == HORIZONTAL:
                mean_y = sum(n.y for n in nodes) / len(nodes)
                for node in nodes:
                    node.y = mean_y
            elif direction == VERTICAL:
                mean_x = sum(n.x for n in nodes) / len(nodes)
                for node in nodes:
                    node.x = mean_x

    def apply_relative_positions(self, graph: Container) -> None:
        """Place every relative node at ``reference + offset``.

        References are resolved anywhere in the graph. A node whose reference
        is itself relative is placed after it.
        """
        index = {node.id: node for node in iter_nodes(graph)}
        dependents = [
            node
            for node in index.values()
            if node.constraints is not None
            and node.constraints.relative_to is not None
            and node.constraints.relative_offset is not None
        ]
        pending = {node.id for node in dependents}
        done: set[str] = set()

        for start in dependents:
            if start.id in done:
                continue
            stack = [start]
            visiting = {start.id}
            while stack:
                node = stack[-1]
                ref_id = node.constraints.relative_to
                reference = index.get(ref_id)
                if reference is None:
                    logger.warning(
                        "Node '%s' references non-existent node '%s' for relative positioning",
                        node.id,
                        ref_id,
                    )
                elif reference.id in pending and reference.id not in done:
                    if reference.id not in visiting:
                        visiting.add(reference.id)
                        stack.append(reference)
                        continue
                    logger.warning(
                        "Relative constraints of '%s' and '%s' reference each other",
                        node.id,
                        reference.id,
                    )
                if reference is not None:
                    offset = node.constraints.relative_offset
                    node.x = reference.x + offset.x
                    node.y = reference.y + offset.y
                done.add(node.id)
                visiting.discard(node.id)
                stack.pop()

    # -- validation ---------------------------------------------------------

    def validate_all(self, graph: Container) -> list[ConstraintViolation]:
        if not self.has_constraints(graph):
            return []
        violations: list[ConstraintViolation] = []
        violations.extend(self._validate_fixed(graph))
        violations.extend(self._validate_layers(graph))
        violations.extend(self._validate_relative(graph))
        violations.extend(self._validate_alignment(graph))
        return violations

    def _validate_fixed(self, graph: Container) -> list[ConstraintViolation]:
        result = []
        for node in iter_nodes(graph):
            if not node.properties.get("_constraint_fixed"):
                continue
            ox = node.properties["_constraint_original_x"]
            oy = node.properties["_constraint_original_y"]
            if not (_close(node.x, ox) and _close(node.y, oy)):
                result.append(ConstraintViolation(
                    FIXED_MOVED,
                    node.id,
                    f"Node '{node.id}' has fixed_position constraint but was moved "
                    f"from ({ox}, {oy}) to ({node.x}, {node.y})",
                ))
        return result

    def _validate_layers(self, graph: Container) -> list[ConstraintViolation]:
        result = []
        for node in iter_nodes(graph):
            if node.constraints is None or node.constraints.layer is None:
                continue
            assigned = node.properties.get("_assigned_layer")
            if assigned is None or assigned == node.constraints.layer:
                continue
            result.append(ConstraintViolation(
                LAYER_MISMATCH,
                node.id,
                f"Node '{node.id}' constrained to layer {node.constraints.layer} "
                f"but assigned to layer {assigned}",
            ))
        return result

    def _validate_relative(self, graph: Container) -> list[ConstraintViolation]:
        index = {node.id: node for node in iter_nodes(graph)}
        result = []
        for node in index.values():
            c = node.constraints
            if c is None or c.relative_to is None:
                continue
            reference = index.get(c.relative_to)
            if reference is None:
                result.append(ConstraintViolation(
                    RELATIVE_MISSING,
                    node.id,
                    f"Node '{node.id}' has relative_to constraint referencing "
                    f"'{c.relative_to}' which doesn't exist",
                ))
                continue
            if c.relative_offset is None:
                continue
            ex = reference.x + c.relative_offset.x
            ey = reference.y + c.relative_offset.y
            if not (_close(node.x, ex) and _close(node.y, ey)):
                result.append(ConstraintViolation(
                    RELATIVE_POSITION,
                    node.id,
                    f"Node '{node.id}' relative position incorrect. "
                    f"Expected ({ex}, {ey}), got ({node.x}, {node.y})",
                ))
        return result

    def _validate_alignment(self, graph: Container) -> list[ConstraintViolation]:
        result = []
        for (group, direction), nodes in _alignment_groups(graph).items():
            if len(nodes) < 2:
                continue
            axis = "y" if direction == HORIZONTAL else "x"
            values = [getattr(n, axis) for n in nodes]
            if max(values) - min(values) > POSITION_TOLERANCE:
                distinct = list(dict.fromkeys(values))
                result.append(ConstraintViolation(
                    ALIGNMENT_MISMATCH,
                    nodes[0].id,
                    f"Alignment group '{group}' ({direction}) has nodes with "
                    f"different {axis} coordinates: {distinct}",
                ))
        return result


def _constrained(node: Node) -> bool:
    return node.constraints is not None and not node.constraints.is_default()


def _alignment_groups(graph: Container) -> dict[tuple[str, str], list[Node]]:
    groups: dict[tuple[str, str], list[Node]] = {}
    for node in iter_nodes(graph):
        c = node.constraints
        if c is None or c.align_group is None or c.align_direction is None:
            continue
        groups.setdefault((c.align_group, c.align_direction), []).append(node)
    return groups


def _close(a: float, b: float) -> bool:
    return abs(a - b) <= POSITION_TOLERANCE
