"""Assembly of lineage graphs: discover -> color -> render.

### EXPLAINER
This module wires the components in `modules/` into the two graphs the tool
can draw:
- `lineage_graph`: everything derived from (and feeding) an artifact,
  followed through as many executions as the metadata records.
- `io_graph`: the direct inputs and outputs of one execution.

Each call builds a fresh `Graph`, renders it and throws it away. A missing
origin (or any missing record reached on the way) aborts the whole call, so
callers never get a partial document.
"""

from __future__ import annotations

import logging
from typing import Optional

from modules.coloring import resolve_colors
from modules.nodes import Graph, NodeId
from modules.renderer import render
from modules.traversal import AdjacencyPolicy, discover

logger = logging.getLogger(__name__)


def build_graph(store, origin: NodeId, policy: AdjacencyPolicy) -> Graph:
    """Discover the graph around `origin` and resolve its type colors."""
    nodes, edges = discover(store, origin, policy)
    types, colors = resolve_colors(store, nodes)
    logger.info(
        "Built %s graph from %s: %d nodes, %d edges",
        policy.value,
        origin,
        len(nodes),
        len(edges),
    )
    return Graph(origin=origin, nodes=nodes, edges=edges, types=types, colors=colors)


def lineage_graph(store, artifact_id: int, url_template: Optional[str] = None) -> str:
    """DOT document with the lineage of artifact `artifact_id`."""
    graph = build_graph(store, NodeId.artifact(artifact_id), AdjacencyPolicy.LINEAGE)
    return render(graph, url_template)


def io_graph(store, execution_id: int, url_template: Optional[str] = None) -> str:
    """DOT document with the inputs and outputs of execution `execution_id`."""
    graph = build_graph(store, NodeId.execution(execution_id), AdjacencyPolicy.IO)
    return render(graph, url_template)
