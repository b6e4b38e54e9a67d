"""layerflow -- layered, hierarchical graph layout: positions, ports, routes and labels."""

from __future__ import annotations

from .errors import (
    LayoutError,
    InvalidOptionError,
    ValidationError,
    AlgorithmNotFoundError,
    GraphTooDeepError,
    UnresolvedCycleError,
)
from .geometry import Point, Vector, Rectangle, Dimension
from .options import LayoutOptions, Padding, parse_padding, LAYOUT_DEFAULTS
from .types import (
    Graph,
    Node,
    Edge,
    EdgeSection,
    Port,
    Label,
    NodeConstraints,
    RelativeOffset,
)
from .constraints import ConstraintProcessor, ConstraintViolation
from .ports import PortConstraintProcessor
from .hierarchy import HierarchicalProcessor
from .base import BaseAlgorithm
from .algorithms import (
    BoxAlgorithm,
    DiscoAlgorithm,
    FixedAlgorithm,
    RandomAlgorithm,
    AlgorithmInfo,
    register_algorithm,
    get_algorithm,
)
from .layered import LayeredAlgorithm
from .records import graph_from_dict, graph_to_dict
from .engine import layout, known_layout_algorithms

__all__ = [
    "layout",
    "known_layout_algorithms",
    "graph_from_dict",
    "graph_to_dict",
    "Graph",
    "Node",
    "Edge",
    "EdgeSection",
    "Port",
    "Label",
    "NodeConstraints",
    "RelativeOffset",
    "LayoutOptions",
    "Padding",
    "parse_padding",
    "LAYOUT_DEFAULTS",
    "Point",
    "Vector",
    "Rectangle",
    "Dimension",
    "ConstraintProcessor",
    "ConstraintViolation",
    "PortConstraintProcessor",
    "HierarchicalProcessor",
    "BaseAlgorithm",
    "LayeredAlgorithm",
    "BoxAlgorithm",
    "DiscoAlgorithm",
    "FixedAlgorithm",
    "RandomAlgorithm",
    "AlgorithmInfo",
    "register_algorithm",
    "get_algorithm",
    "LayoutError",
    "InvalidOptionError",
    "ValidationError",
    "AlgorithmNotFoundError",
    "GraphTooDeepError",
    "UnresolvedCycleError",
]
