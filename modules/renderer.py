"""DOT rendering of a discovered lineage graph.

### EXPLAINER
The document is assembled with `graphviz.Digraph` and contains:
- One node per artifact/execution: ellipses for artifacts, boxes for
  executions, filled with the color of the node's type. The origin node is
  drawn bold and dashed. Hovering shows the full record as JSON and, if a
  URL template is configured, clicking opens the rendered URL.
- One edge per event, labeled with the event path (if any).
- Two legend clusters (artifact types, execution types). Entries inside a
  legend are chained by invisible, arrowless edges in ascending type-id
  order so `dot` stacks them in a single column.

URL templates are Jinja2 strings with two variables, `node_type`
("artifact" or "execution") and `id`. Undefined variables are errors.
Tooltip, label and URL text goes through `graphviz.escape` so backslashes
survive and `<...>` is never taken for an HTML label; `graphviz` itself
quotes identifiers and escapes embedded double quotes.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import graphviz
import jinja2

from lineage import config as cfg
from .errors import LineageError, UrlTemplateError
from .nodes import Graph, Node, NodeKind

logger = logging.getLogger(__name__)

_LEGENDS = (
    (NodeKind.ARTIFACT, "cluster_artifact_legend", cfg.ARTIFACT_LEGEND_LABEL),
    (NodeKind.EXECUTION, "cluster_execution_legend", cfg.EXECUTION_LEGEND_LABEL),
)


def compile_url_template(template: Optional[str]) -> Optional[jinja2.Template]:
    if template is None:
        return None
    env = jinja2.Environment(undefined=jinja2.StrictUndefined, autoescape=False)
    try:
        return env.from_string(template)
    except jinja2.TemplateError as exc:
        raise UrlTemplateError(f"invalid URL template {template!r}: {exc}") from exc


def node_url(node: Node, template: Optional[jinja2.Template]) -> str:
    if template is None:
        return ""
    try:
        return template.render(node_type=node.kind.value, id=node.record.id)
    except jinja2.TemplateError as exc:
        raise UrlTemplateError(f"cannot render URL for {node.id}: {exc}") from exc


def legend_key(type_id: int, kind: NodeKind) -> str:
    return f"{type_id}@{kind.value}_type"


def _check_endpoints(graph: Graph) -> None:
    for edge in graph.edges:
        for endpoint in (edge.from_node(), edge.to_node()):
            if endpoint not in graph.nodes:
                raise LineageError(f"edge endpoint {endpoint} was never discovered")


def _add_legend(dot: graphviz.Digraph, graph: Graph, kind: NodeKind, name: str, label: str) -> None:
    with dot.subgraph(name=name) as legend:
        legend.attr(label=label)
        previous = None
        for ty in graph.types_of_kind(kind):
            key = legend_key(ty.id, kind)
            legend.node(
                key,
                label=graphviz.escape(ty.name),
                shape=ty.shape,
                style="filled",
                fillcolor=graph.color_of(ty.id),
                tooltip=graphviz.escape(ty.tooltip()),
            )
            if previous is not None:
                legend.edge(previous, key, penwidth="0", arrowhead="none")
            previous = key


def build_document(graph: Graph, url_template: Optional[str] = None) -> graphviz.Digraph:
    """Build the `graphviz.Digraph` for `graph` without serializing it."""
    template = compile_url_template(url_template)
    _check_endpoints(graph)

    dot = graphviz.Digraph(name=cfg.GRAPH_NAME)
    if cfg.CONCENTRATE_EDGES:
        dot.attr(concentrate="true")

    for node_id in sorted(graph.nodes):
        node = graph.nodes[node_id]
        ty = graph.type_of(node)
        dot.node(
            str(node_id),
            label=node.label,
            shape=node.shape,
            style=node.style(graph.origin),
            tooltip=graphviz.escape(node.tooltip(ty.name)),
            fillcolor=graph.color_of(node.type_id),
            URL=graphviz.escape(node_url(node, template)),
        )

    for edge in sorted(graph.edges, key=lambda e: e.sort_key()):
        dot.edge(
            str(edge.from_node()),
            str(edge.to_node()),
            label=graphviz.escape(edge.label()),
        )

    for kind, name, label in _LEGENDS:
        _add_legend(dot, graph, kind, name, label)

    return dot


def render(graph: Graph, url_template: Optional[str] = None) -> str:
    """Render `graph` as DOT source."""
    source = build_document(graph, url_template).source
    logger.info(
        "Rendered %s: %d nodes, %d edges, %d types",
        graph.origin,
        len(graph.nodes),
        len(graph.edges),
        len(graph.types),
    )
    return source


def write_graph(document: str, path: str, fmt: str = "dot") -> str:
    """Write DOT source to `path`, or lay it out as `fmt` with Graphviz.

    Returns the path of the written file. Formats other than "dot" need the
    Graphviz `dot` executable on PATH.
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    if fmt == "dot":
        out = path if path.endswith(".dot") else f"{path}.dot"
        with open(out, "w", encoding="utf-8") as f:
            f.write(document)
        return out
    return graphviz.Source(document).render(path, format=fmt, cleanup=True)
