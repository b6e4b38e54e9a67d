from __future__ import annotations

# ============================================================================
# Exception taxonomy
#
# Structural problems (bad option values, duplicate ids) raise immediately.
# Constraint violations are never raised -- see constraints.validate_all().
# ============================================================================


class LayoutError(Exception):
    """Base class for every error raised by layerflow."""


class InvalidOptionError(LayoutError, ValueError):
    """An option or attribute value is malformed (padding, port side, ...)."""

    def __init__(self, message: str, option: str | None = None, value: object = None) -> None:
        super().__init__(message)
        self.option = option
        self.value = value


class ValidationError(LayoutError):
    """The graph structure itself is inconsistent (e.g. duplicate node ids)."""


class AlgorithmNotFoundError(LayoutError):
    def __init__(self, algorithm_name: str) -> None:
        super().__init__(f"Unknown layout algorithm: {algorithm_name}")
        self.algorithm_name = algorithm_name


class GraphTooDeepError(LayoutError):
    """Node nesting exceeds the configured maximum depth."""

    def __init__(self, node_id: str, depth: int, max_depth: int) -> None:
        super().__init__(
            f"Graph too deep: node '{node_id}' is nested {depth} levels "
            f"(limit {max_depth})"
        )
        self.node_id = node_id
        self.depth = depth
        self.max_depth = max_depth


class UnresolvedCycleError(LayoutError):
    """Layering met a directed cycle that cycle breaking did not remove."""

    def __init__(self, node_ids: list[str]) -> None:
        super().__init__(
            "Unresolved cycle through nodes: " + " -> ".join(node_ids)
        )
        self.node_ids = node_ids
