"""JSON projections of MLMD records for tooltips and edge labels.

### EXPLAINER
Graph nodes carry the full artifact/execution record in their tooltip so a
user hovering over a node in the rendered SVG sees everything MLMD knows
about it. This module flattens the protobuf records into plain dicts:
- Property values become bare ints/floats/strings (struct and proto values
  go through `json_format`).
- Timestamps are converted from milliseconds to float seconds.
- Enum fields (artifact `state`, execution `last_known_state`) are emitted by
  name.

Event paths are projected to a list of steps where each step is an int
(list index) or a str (dict key).
"""

from __future__ import annotations

import base64
import json
import math
from typing import Any, Dict, List, Union

from google.protobuf import json_format
from ml_metadata.proto import metadata_store_pb2

from .errors import SerializationError

Step = Union[int, str]


def value_to_python(value: metadata_store_pb2.Value) -> Any:
    """Return the plain Python value held by an MLMD `Value` message.

    Non-finite doubles become None so the tooltip stays valid JSON. An
    `Any` whose message type is not in the local descriptor pool is kept
    as its type URL plus the base64 of its serialized bytes.
    """
    which = value.WhichOneof("value")
    if which == "int_value":
        return value.int_value
    if which == "double_value":
        return value.double_value if math.isfinite(value.double_value) else None
    if which == "string_value":
        return value.string_value
    if which == "bool_value":
        return value.bool_value
    if which == "struct_value":
        return json_format.MessageToDict(value.struct_value)
    if which == "proto_value":
        try:
            return json_format.MessageToDict(value.proto_value)
        except (TypeError, json_format.Error):
            return {
                "@type": value.proto_value.type_url,
                "value": base64.b64encode(value.proto_value.value).decode("ascii"),
            }
    return None


def _properties(props) -> Dict[str, Any]:
    return {name: value_to_python(props[name]) for name in sorted(props)}


def _seconds(millis: int) -> float:
    return millis / 1000.0


def artifact_payload(artifact: metadata_store_pb2.Artifact, type_name: str) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "type": type_name,
        "id": artifact.id,
        "type_id": artifact.type_id,
    }
    if artifact.HasField("external_id"):
        payload["external_id"] = artifact.external_id
    if artifact.HasField("name"):
        payload["name"] = artifact.name
    if artifact.HasField("uri"):
        payload["uri"] = artifact.uri
    payload["state"] = metadata_store_pb2.Artifact.State.Name(artifact.state)
    payload["ctime"] = _seconds(artifact.create_time_since_epoch)
    payload["mtime"] = _seconds(artifact.last_update_time_since_epoch)
    payload["properties"] = _properties(artifact.properties)
    payload["custom_properties"] = _properties(artifact.custom_properties)
    return payload


def execution_payload(
    execution: metadata_store_pb2.Execution, type_name: str
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "type": type_name,
        "id": execution.id,
        "type_id": execution.type_id,
    }
    if execution.HasField("external_id"):
        payload["external_id"] = execution.external_id
    if execution.HasField("name"):
        payload["name"] = execution.name
    payload["state"] = metadata_store_pb2.Execution.State.Name(
        execution.last_known_state
    )
    payload["ctime"] = _seconds(execution.create_time_since_epoch)
    payload["mtime"] = _seconds(execution.last_update_time_since_epoch)
    payload["properties"] = _properties(execution.properties)
    payload["custom_properties"] = _properties(execution.custom_properties)
    return payload


def path_steps(event: metadata_store_pb2.Event) -> List[Step]:
    """Return the event's path as a list of index (int) or key (str) steps."""
    steps: List[Step] = []
    for step in event.path.steps:
        which = step.WhichOneof("value")
        if which == "index":
            steps.append(step.index)
        elif which == "key":
            steps.append(step.key)
    return steps


def to_pretty_json(payload: Dict[str, Any]) -> str:
    try:
        return json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"cannot encode tooltip: {exc}") from exc


def path_label(steps: List[Step]) -> str:
    """Compact JSON array of path steps, or "" for an empty path."""
    if not steps:
        return ""
    try:
        return json.dumps(
            list(steps), separators=(",", ":"), ensure_ascii=False, allow_nan=False
        )
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"cannot encode event path: {exc}") from exc
