"""Type lookup and per-type fill colors for lineage graphs.

### EXPLAINER
Once traversal has finished we know every node, so types are fetched in two
batched calls (artifact types, then execution types) instead of one call per
node. Each kind then gets its own palette: a white -> mid-gray gradient is
interpolated in linear RGB and sampled at N evenly spaced stops, N being the
number of distinct types of that kind. Stops are handed out in ascending
type-id order, so the same set of types always gets the same colors no
matter which order traversal found them in.

An artifact type and an execution type may end up with the same color; the
node shape already tells the two kinds apart.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

import numpy as np

from lineage import config as cfg
from . import store as mlmd_store
from .errors import TypeNotFoundError
from .nodes import Color, Node, NodeId, NodeKind, Type

logger = logging.getLogger(__name__)


def _srgb_to_linear(c: np.ndarray) -> np.ndarray:
    return np.where(c <= 0.04045, c / 12.92, ((c + 0.055) / 1.055) ** 2.4)


def _linear_to_srgb(c: np.ndarray) -> np.ndarray:
    c = np.clip(c, 0.0, 1.0)
    return np.where(c <= 0.0031308, c * 12.92, 1.055 * np.power(c, 1.0 / 2.4) - 0.055)


def gradient_colors(
    count: int,
    start: Sequence[float] = cfg.GRADIENT_START,
    end: Sequence[float] = cfg.GRADIENT_END,
) -> List[Color]:
    """Sample `count` evenly spaced 8-bit colors from `start` to `end`.

    A single stop is the start color; two or more include both endpoints.
    """
    if count <= 0:
        return []
    lin_start = _srgb_to_linear(np.asarray(start, dtype=float))
    lin_end = _srgb_to_linear(np.asarray(end, dtype=float))
    positions = np.linspace(0.0, 1.0, count) if count > 1 else np.zeros(1)
    samples = lin_start + positions[:, np.newaxis] * (lin_end - lin_start)
    quantized = np.clip(np.round(_linear_to_srgb(samples) * 255.0), 0, 255).astype(int)
    return [tuple(int(v) for v in row) for row in quantized]


def fetch_types(store, nodes: Dict[NodeId, Node]) -> Dict[int, Type]:
    """Batch-fetch the artifact and execution types used by `nodes`."""
    artifact_type_ids = {n.type_id for n in nodes.values() if n.kind is NodeKind.ARTIFACT}
    execution_type_ids = {n.type_id for n in nodes.values() if n.kind is NodeKind.EXECUTION}
    logger.debug(
        "Fetching %d artifact types and %d execution types",
        len(artifact_type_ids),
        len(execution_type_ids),
    )

    types: Dict[int, Type] = {}
    for t in mlmd_store.get_artifact_types(store, artifact_type_ids):
        types[t.id] = Type.from_artifact_type(t)
    for t in mlmd_store.get_execution_types(store, execution_type_ids):
        types[t.id] = Type.from_execution_type(t)

    for kind, wanted in (
        (NodeKind.ARTIFACT, artifact_type_ids),
        (NodeKind.EXECUTION, execution_type_ids),
    ):
        for type_id in sorted(wanted):
            if type_id not in types or types[type_id].kind is not kind:
                raise TypeNotFoundError(kind.value, type_id)
    return types


def assign_colors(types: Dict[int, Type]) -> Dict[int, Color]:
    """Map each type id to its color, one gradient per node kind."""
    colors: Dict[int, Color] = {}
    for kind in (NodeKind.ARTIFACT, NodeKind.EXECUTION):
        ids = sorted(i for i, t in types.items() if t.kind is kind)
        colors.update(zip(ids, gradient_colors(len(ids))))
    return colors


def resolve_colors(
    store, nodes: Dict[NodeId, Node]
) -> Tuple[Dict[int, Type], Dict[int, Color]]:
    types = fetch_types(store, nodes)
    return types, assign_colors(types)
