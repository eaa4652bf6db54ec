"""Shared fixtures: an in-memory store double and MLMD record builders."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Sequence, Union

import pytest
from ml_metadata.proto import metadata_store_pb2

from modules.store import connect_fake

Event = metadata_store_pb2.Event


class MemoryStore:
    """Minimal stand-in for `MetadataStore` with call counting.

    Mirrors the real client: `get_*_by_id` silently drops unknown ids.
    """

    def __init__(self) -> None:
        self.artifacts: Dict[int, metadata_store_pb2.Artifact] = {}
        self.executions: Dict[int, metadata_store_pb2.Execution] = {}
        self.artifact_types: Dict[int, metadata_store_pb2.ArtifactType] = {}
        self.execution_types: Dict[int, metadata_store_pb2.ExecutionType] = {}
        self.events: List[metadata_store_pb2.Event] = []
        self.calls: Counter = Counter()

    # -- builders ---------------------------------------------------------

    def add_artifact_type(self, type_id: int, name: str, **properties: int) -> None:
        t = metadata_store_pb2.ArtifactType(id=type_id, name=name)
        for key, value in properties.items():
            t.properties[key] = value
        self.artifact_types[type_id] = t

    def add_execution_type(self, type_id: int, name: str) -> None:
        self.execution_types[type_id] = metadata_store_pb2.ExecutionType(id=type_id, name=name)

    def add_artifact(self, artifact_id: int, type_id: int, **fields) -> metadata_store_pb2.Artifact:
        a = metadata_store_pb2.Artifact(id=artifact_id, type_id=type_id, **fields)
        self.artifacts[artifact_id] = a
        return a

    def add_execution(self, execution_id: int, type_id: int, **fields) -> metadata_store_pb2.Execution:
        e = metadata_store_pb2.Execution(id=execution_id, type_id=type_id, **fields)
        self.executions[execution_id] = e
        return e

    def add_event(
        self,
        artifact_id: int,
        execution_id: int,
        event_type: int,
        path: Sequence[Union[int, str]] = (),
        time: int = 0,
    ) -> metadata_store_pb2.Event:
        ev = make_event(artifact_id, execution_id, event_type, path, time)
        self.events.append(ev)
        return ev

    # -- MetadataStore API ------------------------------------------------

    def get_artifacts_by_id(self, ids: Iterable[int]):
        self.calls["get_artifacts_by_id"] += 1
        return [self.artifacts[i] for i in ids if i in self.artifacts]

    def get_executions_by_id(self, ids: Iterable[int]):
        self.calls["get_executions_by_id"] += 1
        return [self.executions[i] for i in ids if i in self.executions]

    def get_events_by_artifact_ids(self, ids: Iterable[int]):
        self.calls["get_events_by_artifact_ids"] += 1
        wanted = set(ids)
        return [e for e in self.events if e.artifact_id in wanted]

    def get_events_by_execution_ids(self, ids: Iterable[int]):
        self.calls["get_events_by_execution_ids"] += 1
        wanted = set(ids)
        return [e for e in self.events if e.execution_id in wanted]

    def get_artifact_types_by_id(self, ids: Iterable[int]):
        self.calls["get_artifact_types_by_id"] += 1
        return [self.artifact_types[i] for i in ids if i in self.artifact_types]

    def get_execution_types_by_id(self, ids: Iterable[int]):
        self.calls["get_execution_types_by_id"] += 1
        return [self.execution_types[i] for i in ids if i in self.execution_types]


def make_event(
    artifact_id: int,
    execution_id: int,
    event_type: int,
    path: Sequence[Union[int, str]] = (),
    time: int = 0,
) -> metadata_store_pb2.Event:
    ev = metadata_store_pb2.Event(
        artifact_id=artifact_id,
        execution_id=execution_id,
        type=event_type,
        milliseconds_since_epoch=time,
    )
    for step in path:
        if isinstance(step, int):
            ev.path.steps.add().index = step
        else:
            ev.path.steps.add().key = step
    return ev


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def chain_store(memory_store: MemoryStore) -> MemoryStore:
    """a1 -> e10 -> a2 -> e11 -> a3, with a4 as a second input of e11."""
    s = memory_store
    s.add_artifact_type(1, "Examples")
    s.add_artifact_type(2, "Model")
    s.add_execution_type(3, "Trainer")
    s.add_execution_type(4, "Pusher")
    s.add_artifact(1, 1, uri="/data/examples")
    s.add_artifact(2, 2, uri="/models/1")
    s.add_artifact(3, 2, uri="/serving/1")
    s.add_artifact(4, 1, uri="/data/extra")
    s.add_execution(10, 3)
    s.add_execution(11, 4)
    s.add_event(1, 10, Event.INPUT)
    s.add_event(2, 10, Event.OUTPUT)
    s.add_event(2, 11, Event.INPUT)
    s.add_event(4, 11, Event.DECLARED_INPUT)
    s.add_event(3, 11, Event.OUTPUT)
    return s


@pytest.fixture
def fake_mlmd():
    """Real ml-metadata client backed by its in-memory fake database."""
    return connect_fake()


@pytest.fixture
def event_factory():
    return make_event
