from __future__ import annotations

from .algorithm import LayeredAlgorithm
from .cycle_breaker import CycleBreaker
from .layer_assigner import LayerAssigner
from .node_placer import NodePlacer

__all__ = ["CycleBreaker", "LayerAssigner", "LayeredAlgorithm", "NodePlacer"]
