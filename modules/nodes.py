"""Node, edge and type wrappers that unify artifacts and executions.

### EXPLAINER
MLMD keeps artifacts and executions in separate id spaces, so artifact 1 and
execution 1 are different things. Every graph vertex is therefore keyed by a
`NodeId` that carries the kind next to the numeric id.

- `Node` wraps one artifact or execution record.
- `Edge` wraps one event. Its direction is derived from the event type:
  input-class events point artifact -> execution, output-class events point
  execution -> artifact. Any other event type has no direction and is never
  turned into an edge.
- `Type` wraps one artifact or execution type.
- `Graph` is the finished, read-only result handed to the renderer.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Tuple, Union

from ml_metadata.proto import metadata_store_pb2

from . import records

_Event = metadata_store_pb2.Event

INPUT_EVENT_TYPES: FrozenSet[int] = frozenset(
    {_Event.INPUT, _Event.DECLARED_INPUT, _Event.INTERNAL_INPUT}
)
OUTPUT_EVENT_TYPES: FrozenSet[int] = frozenset(
    {_Event.OUTPUT, _Event.DECLARED_OUTPUT, _Event.INTERNAL_OUTPUT}
)


class NodeKind(str, enum.Enum):
    ARTIFACT = "artifact"
    EXECUTION = "execution"


_SHAPES: Dict[NodeKind, str] = {
    NodeKind.ARTIFACT: "ellipse",
    NodeKind.EXECUTION: "box",
}


def shape_for(kind: NodeKind) -> str:
    return _SHAPES[kind]


def is_input_event(event_type: int) -> bool:
    return event_type in INPUT_EVENT_TYPES


def is_output_event(event_type: int) -> bool:
    return event_type in OUTPUT_EVENT_TYPES


def is_directional(event_type: int) -> bool:
    return is_input_event(event_type) or is_output_event(event_type)


@dataclass(frozen=True, order=True)
class NodeId:
    kind: NodeKind
    id: int

    @classmethod
    def artifact(cls, artifact_id: int) -> "NodeId":
        return cls(NodeKind.ARTIFACT, int(artifact_id))

    @classmethod
    def execution(cls, execution_id: int) -> "NodeId":
        return cls(NodeKind.EXECUTION, int(execution_id))

    def __str__(self) -> str:
        return f"{self.id}@{self.kind.value}"


Record = Union[metadata_store_pb2.Artifact, metadata_store_pb2.Execution]


@dataclass(frozen=True, eq=False)
class Node:
    kind: NodeKind
    record: Record

    @classmethod
    def from_artifact(cls, artifact: metadata_store_pb2.Artifact) -> "Node":
        return cls(NodeKind.ARTIFACT, artifact)

    @classmethod
    def from_execution(cls, execution: metadata_store_pb2.Execution) -> "Node":
        return cls(NodeKind.EXECUTION, execution)

    @property
    def id(self) -> NodeId:
        return NodeId(self.kind, self.record.id)

    @property
    def type_id(self) -> int:
        return self.record.type_id

    @property
    def label(self) -> str:
        return str(self.record.id)

    @property
    def shape(self) -> str:
        return shape_for(self.kind)

    def style(self, origin: NodeId) -> str:
        if self.id == origin:
            return "bold,dashed,filled"
        return "solid,filled"

    def tooltip(self, type_name: str) -> str:
        """Pretty-printed JSON of the record, headed by its type name."""
        if self.kind is NodeKind.ARTIFACT:
            payload = records.artifact_payload(self.record, type_name)
        elif self.kind is NodeKind.EXECUTION:
            payload = records.execution_payload(self.record, type_name)
        else:
            raise ValueError(f"unsupported node kind: {self.kind!r}")
        return records.to_pretty_json(payload)


@dataclass(frozen=True)
class Edge:
    """One event between an artifact and an execution.

    Two events with identical fields collapse into the same edge; events that
    differ only in type (e.g. INPUT vs OUTPUT) stay separate.
    """

    artifact_id: int
    execution_id: int
    event_type: int
    path: Tuple[records.Step, ...] = ()
    create_time: int = 0

    @classmethod
    def from_event(cls, event: metadata_store_pb2.Event) -> "Edge":
        return cls(
            artifact_id=event.artifact_id,
            execution_id=event.execution_id,
            event_type=event.type,
            path=tuple(records.path_steps(event)),
            create_time=event.milliseconds_since_epoch,
        )

    @property
    def artifact_node(self) -> NodeId:
        return NodeId.artifact(self.artifact_id)

    @property
    def execution_node(self) -> NodeId:
        return NodeId.execution(self.execution_id)

    def _require_direction(self) -> None:
        if not is_directional(self.event_type):
            raise ValueError(
                f"event type {_Event.Type.Name(self.event_type)} has no direction"
            )

    def from_node(self) -> NodeId:
        self._require_direction()
        if is_input_event(self.event_type):
            return self.artifact_node
        return self.execution_node

    def to_node(self) -> NodeId:
        self._require_direction()
        if is_input_event(self.event_type):
            return self.execution_node
        return self.artifact_node

    def label(self) -> str:
        return records.path_label(list(self.path))

    def sort_key(self) -> Tuple[int, int, int, int, str]:
        return (
            self.artifact_id,
            self.execution_id,
            self.event_type,
            self.create_time,
            self.label(),
        )


TypeRecord = Union[metadata_store_pb2.ArtifactType, metadata_store_pb2.ExecutionType]


@dataclass(frozen=True, eq=False)
class Type:
    kind: NodeKind
    record: TypeRecord

    @classmethod
    def from_artifact_type(cls, artifact_type: metadata_store_pb2.ArtifactType) -> "Type":
        return cls(NodeKind.ARTIFACT, artifact_type)

    @classmethod
    def from_execution_type(
        cls, execution_type: metadata_store_pb2.ExecutionType
    ) -> "Type":
        return cls(NodeKind.EXECUTION, execution_type)

    @property
    def id(self) -> int:
        return self.record.id

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def shape(self) -> str:
        return shape_for(self.kind)

    @property
    def properties(self) -> Dict[str, str]:
        """Property schema as name -> "INT" | "DOUBLE" | "STRING" | ..."""
        return {
            name: metadata_store_pb2.PropertyType.Name(self.record.properties[name])
            for name in sorted(self.record.properties)
        }

    def tooltip(self) -> str:
        return records.to_pretty_json(
            {"id": self.id, "name": self.name, "properties": self.properties}
        )


Color = Tuple[int, int, int]


def hex_color(color: Color) -> str:
    return "#{:02x}{:02x}{:02x}".format(*color)


@dataclass(frozen=True)
class Graph:
    origin: NodeId
    nodes: Dict[NodeId, Node]
    edges: FrozenSet[Edge]
    types: Dict[int, Type]
    colors: Dict[int, Color]

    def type_of(self, node: Node) -> Type:
        return self.types[node.type_id]

    def color_of(self, type_id: int) -> str:
        return hex_color(self.colors[type_id])

    def types_of_kind(self, kind: NodeKind) -> List[Type]:
        """Types of one kind, ascending by type id."""
        return [self.types[i] for i in sorted(self.types) if self.types[i].kind is kind]
