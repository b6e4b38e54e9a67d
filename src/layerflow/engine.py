from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .algorithms import AlgorithmInfo, algorithm_info, available_algorithms, create_algorithm
from .base import as_options
from .options import LayoutOptions
from .records import graph_from_dict
from .types import Graph

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "layered"


def layout(
    graph: Graph | Mapping[str, Any],
    options: LayoutOptions | Mapping[str, Any] | None = None,
) -> Graph:
    """Lay out ``graph`` in place and return it.

    ``graph`` may be a :class:`Graph` or a plain-dict record. The algorithm
    is taken from ``options``, then from the graph's own layout options,
    then defaults to ``layered``.

    Raises:
        AlgorithmNotFoundError: the requested algorithm is not registered.
        ValidationError: node ids are not unique.
    """
    if isinstance(graph, Mapping):
        graph = graph_from_dict(graph)
    call_options = as_options(options)
    name = call_options.algorithm or graph.layout_options.algorithm or DEFAULT_ALGORITHM
    algorithm = create_algorithm(name, call_options)
    logger.debug("Laying out '%s' with %s", graph.id, type(algorithm).__name__)
    return algorithm.layout(graph)


def known_layout_algorithms() -> list[AlgorithmInfo]:
    return [algorithm_info(name) for name in available_algorithms()]
