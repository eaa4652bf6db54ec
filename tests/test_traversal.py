from __future__ import annotations

import pytest
from ml_metadata.proto import metadata_store_pb2

from modules.errors import NodeNotFoundError
from modules.nodes import NodeId, NodeKind
from modules.traversal import AdjacencyPolicy, adjacent_edges, discover

Event = metadata_store_pb2.Event


def _cycle(store):
    store.add_artifact_type(1, "Examples")
    store.add_execution_type(2, "Transform")
    store.add_artifact(1, 1)
    store.add_execution(10, 2)
    store.add_event(1, 10, Event.OUTPUT)
    store.add_event(1, 10, Event.INPUT)
    return store


def test_cycle_terminates_and_visits_each_node_once(memory_store):
    nodes, edges = discover(_cycle(memory_store), NodeId.artifact(1))
    assert set(nodes) == {NodeId.artifact(1), NodeId.execution(10)}
    assert len(edges) == 2
    assert memory_store.calls["get_artifacts_by_id"] == 1
    assert memory_store.calls["get_executions_by_id"] == 1


def test_every_edge_endpoint_is_discovered(chain_store):
    nodes, edges = discover(chain_store, NodeId.artifact(1))
    for edge in edges:
        assert edge.from_node() in nodes
        assert edge.to_node() in nodes


def test_lineage_follows_multiple_hops(chain_store):
    nodes, edges = discover(chain_store, NodeId.artifact(1), AdjacencyPolicy.LINEAGE)
    assert set(nodes) == {
        NodeId.artifact(1),
        NodeId.execution(10),
        NodeId.artifact(2),
        NodeId.execution(11),
        NodeId.artifact(3),
    }
    assert len(edges) == 4


def test_lineage_only_follows_inputs_of_artifacts(chain_store):
    nodes, _ = discover(chain_store, NodeId.artifact(2))
    assert set(nodes) == {NodeId.artifact(2), NodeId.execution(11), NodeId.artifact(3)}


def test_io_stays_one_hop_around_the_execution(chain_store):
    nodes, edges = discover(chain_store, NodeId.execution(11), AdjacencyPolicy.IO)
    assert set(nodes) == {
        NodeId.execution(11),
        NodeId.artifact(2),
        NodeId.artifact(3),
        NodeId.artifact(4),
    }
    assert [n for n in nodes if n.kind is NodeKind.EXECUTION] == [NodeId.execution(11)]
    assert len(edges) == 3


def test_io_does_not_expand_artifacts(chain_store):
    assert adjacent_edges(chain_store, NodeId.artifact(2), AdjacencyPolicy.IO) == []


def test_unknown_events_are_not_edges(memory_store):
    memory_store.add_artifact_type(1, "Examples")
    memory_store.add_execution_type(2, "Trainer")
    memory_store.add_artifact(1, 1)
    memory_store.add_execution(10, 2)
    memory_store.add_event(1, 10, Event.UNKNOWN)

    nodes, edges = discover(memory_store, NodeId.execution(10), AdjacencyPolicy.IO)
    assert set(nodes) == {NodeId.execution(10)}
    assert not edges


def test_duplicate_events_collapse(memory_store):
    _cycle(memory_store)
    memory_store.add_event(1, 10, Event.INPUT)
    _, edges = discover(memory_store, NodeId.artifact(1))
    assert len(edges) == 2


def test_missing_origin_raises(memory_store):
    with pytest.raises(NodeNotFoundError, match="no such artifact: 999"):
        discover(memory_store, NodeId.artifact(999))


def test_missing_record_on_the_way_raises(memory_store):
    memory_store.add_artifact_type(1, "Examples")
    memory_store.add_artifact(1, 1)
    memory_store.add_event(1, 42, Event.INPUT)
    with pytest.raises(NodeNotFoundError, match="no such execution: 42"):
        discover(memory_store, NodeId.artifact(1))


class _Broken(Exception):
    pass


def test_store_errors_propagate_unchanged(memory_store, monkeypatch):
    _cycle(memory_store)

    def boom(ids):
        raise _Broken("connection reset")

    monkeypatch.setattr(memory_store, "get_events_by_artifact_ids", boom)
    with pytest.raises(_Broken):
        discover(memory_store, NodeId.artifact(1))
