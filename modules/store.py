"""Thin adapter over `ml_metadata.MetadataStore` used by graph traversal.

### EXPLAINER
Traversal only needs six store calls: fetch one artifact/execution by id,
fetch the events touching one artifact/execution, and batch-fetch artifact
and execution types by id. They are wrapped here so that:
- a missing id becomes `NodeNotFoundError` instead of an empty list,
- the type lookups are skipped entirely when there is nothing to ask for.

Anything exposing the same `get_*_by_id` / `get_events_by_*_ids` methods as
`MetadataStore` works (the tests use a small in-memory double). Errors raised
by the store itself are left untouched.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ml_metadata.metadata_store import metadata_store
from ml_metadata.proto import metadata_store_pb2

from lineage import config as cfg
from .errors import NodeNotFoundError
from .nodes import Node, NodeId, NodeKind

logger = logging.getLogger(__name__)


def connect(path: Optional[str] = None) -> metadata_store.MetadataStore:
    """Open the SQLite-backed MLMD store at `path` (default: cfg.METADATA_PATH)."""
    config = cfg.get_metadata_connection_config(path)
    logger.debug("Connecting to MLMD at %s", config.sqlite.filename_uri)
    return metadata_store.MetadataStore(config)


def connect_fake() -> metadata_store.MetadataStore:
    """Open an empty in-memory MLMD store."""
    config = metadata_store_pb2.ConnectionConfig()
    config.fake_database.SetInParent()
    return metadata_store.MetadataStore(config)


def get_node(store, node_id: NodeId) -> Node:
    """Fetch the record behind `node_id`; raise if it is not exactly one."""
    if node_id.kind is NodeKind.ARTIFACT:
        found = store.get_artifacts_by_id([node_id.id])
        if len(found) != 1:
            raise NodeNotFoundError(node_id.kind.value, node_id.id)
        return Node.from_artifact(found[0])
    if node_id.kind is NodeKind.EXECUTION:
        found = store.get_executions_by_id([node_id.id])
        if len(found) != 1:
            raise NodeNotFoundError(node_id.kind.value, node_id.id)
        return Node.from_execution(found[0])
    raise ValueError(f"unsupported node kind: {node_id.kind!r}")


def get_events(store, node_id: NodeId) -> List[metadata_store_pb2.Event]:
    """All events that touch the given artifact or execution."""
    if node_id.kind is NodeKind.ARTIFACT:
        return list(store.get_events_by_artifact_ids([node_id.id]))
    if node_id.kind is NodeKind.EXECUTION:
        return list(store.get_events_by_execution_ids([node_id.id]))
    raise ValueError(f"unsupported node kind: {node_id.kind!r}")


def get_artifact_types(store, type_ids: Iterable[int]) -> List[metadata_store_pb2.ArtifactType]:
    ids = sorted(set(type_ids))
    if not ids:
        return []
    return list(store.get_artifact_types_by_id(ids))


def get_execution_types(
    store, type_ids: Iterable[int]
) -> List[metadata_store_pb2.ExecutionType]:
    ids = sorted(set(type_ids))
    if not ids:
        return []
    return list(store.get_execution_types_by_id(ids))
