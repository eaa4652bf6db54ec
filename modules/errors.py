"""Errors raised while building or rendering a lineage graph.

Store failures (``ml_metadata.errors.*``) are not wrapped; they reach the
caller unchanged.
"""


class LineageError(Exception):
    """Base exception for lineage graph errors."""


class NodeNotFoundError(LineageError):
    """An artifact or execution id does not resolve to exactly one record."""

    def __init__(self, kind: str, node_id: int):
        super().__init__(f"no such {kind}: {node_id}")
        self.kind = kind
        self.node_id = node_id


class TypeNotFoundError(LineageError):
    """A node refers to a type id the store does not know."""

    def __init__(self, kind: str, type_id: int):
        super().__init__(f"no such {kind} type: {type_id}")
        self.kind = kind
        self.type_id = type_id


class UrlTemplateError(LineageError):
    """The node URL template failed to compile or to render."""


class SerializationError(LineageError):
    """A tooltip or edge label could not be encoded as JSON."""
