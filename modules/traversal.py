"""Worklist traversal that discovers the nodes and edges around an origin.

### EXPLAINER
Starting from one artifact or execution, we pop ids off a stack, fetch each
record once, ask the active adjacency policy for its edges and push both
endpoints of every edge back onto the stack. An id already present in the
node map is skipped, which is what makes the walk terminate on cyclic
lineage.

Two adjacency policies:
- `LINEAGE`: artifact -> the input-class events consuming it; execution ->
  the output-class events it produced. This follows the lineage arbitrarily
  deep.
- `IO`: execution -> every directional event touching it; artifact -> none.
  Starting from an execution this yields exactly its inputs and outputs.

Events without a direction (UNKNOWN and friends) are ignored by both.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Dict, FrozenSet, List, Set, Tuple

from . import store as mlmd_store
from .nodes import Edge, Node, NodeId, NodeKind, is_directional, is_input_event, is_output_event

logger = logging.getLogger(__name__)


def _lineage_edges(store, node_id: NodeId) -> List[Edge]:
    events = mlmd_store.get_events(store, node_id)
    if node_id.kind is NodeKind.ARTIFACT:
        wanted = is_input_event
    elif node_id.kind is NodeKind.EXECUTION:
        wanted = is_output_event
    else:
        raise ValueError(f"unsupported node kind: {node_id.kind!r}")
    return [Edge.from_event(e) for e in events if wanted(e.type)]


def _io_edges(store, node_id: NodeId) -> List[Edge]:
    if node_id.kind is NodeKind.ARTIFACT:
        return []
    if node_id.kind is NodeKind.EXECUTION:
        events = mlmd_store.get_events(store, node_id)
        return [Edge.from_event(e) for e in events if is_directional(e.type)]
    raise ValueError(f"unsupported node kind: {node_id.kind!r}")


class AdjacencyPolicy(enum.Enum):
    LINEAGE = "lineage"
    IO = "io"


_ADJACENCY: Dict[AdjacencyPolicy, Callable[..., List[Edge]]] = {
    AdjacencyPolicy.LINEAGE: _lineage_edges,
    AdjacencyPolicy.IO: _io_edges,
}


def adjacent_edges(store, node_id: NodeId, policy: AdjacencyPolicy) -> List[Edge]:
    return _ADJACENCY[policy](store, node_id)


def discover(
    store, origin: NodeId, policy: AdjacencyPolicy = AdjacencyPolicy.LINEAGE
) -> Tuple[Dict[NodeId, Node], FrozenSet[Edge]]:
    """Return every node and edge reachable from `origin` under `policy`.

    Raises:
      NodeNotFoundError: if the origin, or any id reached through an event,
        does not resolve to exactly one record.
    """
    stack: List[NodeId] = [origin]
    nodes: Dict[NodeId, Node] = {}
    edges: Set[Edge] = set()

    while stack:
        node_id = stack.pop()
        if node_id in nodes:
            continue

        nodes[node_id] = mlmd_store.get_node(store, node_id)
        logger.debug("Visited %s", node_id)

        for edge in adjacent_edges(store, node_id, policy):
            stack.append(edge.from_node())
            stack.append(edge.to_node())
            edges.add(edge)

    logger.debug(
        "Discovered %d nodes and %d edges from %s (%s)",
        len(nodes),
        len(edges),
        origin,
        policy.value,
    )
    return nodes, frozenset(edges)
