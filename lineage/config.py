"""Configuration constants for the MLMD lineage graph tool.

### EXPLAINER
This module centralizes the configurable aspects of graph generation:
- Location of the MLMD (ML Metadata) SQLite database to read from.
- Name and layout attributes of the generated DOT document.
- The two-stop gradient used to color artifact and execution types.
- Default URL template and output format used by the scripts.
- Logging level and format.

It is imported by the scripts and the graph assembly so that every entry
point talks to the same store with the same rendering defaults.

Values can be overridden per-environment by reading environment variables.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Tuple

from ml_metadata.proto import metadata_store_pb2


# ------------------------------------------------------------------------------
# Metadata store
# ------------------------------------------------------------------------------

# Repository root (assumed as current working directory by default).
REPO_ROOT: str = os.environ.get("REPO_ROOT", os.getcwd())

OUTPUT_BASE: str = os.environ.get("OUTPUT_BASE", os.path.join(REPO_ROOT, "outputs"))

# MLMD (Metadata) SQLite file written by the pipeline runs we visualize.
METADATA_PATH: str = os.environ.get(
    "METADATA_PATH", os.path.join(OUTPUT_BASE, "mlmd", "metadata.db")
)

# ------------------------------------------------------------------------------
# Graph document
# ------------------------------------------------------------------------------

GRAPH_NAME: str = os.environ.get("GRAPH_NAME", "artifact_lineage_graph")

# Merge parallel edges when the document is laid out by `dot`.
CONCENTRATE_EDGES: bool = os.environ.get("CONCENTRATE_EDGES", "true").lower() in {
    "1",
    "true",
    "yes",
}

ARTIFACT_LEGEND_LABEL: str = "Artifact Legend"
EXECUTION_LEGEND_LABEL: str = "Execution Legend"

# Type colors are sampled from a linear gradient between these two sRGB
# colors (white -> mid-gray), independently for artifact and execution types.
GRADIENT_START: Tuple[float, float, float] = (1.0, 1.0, 1.0)
GRADIENT_END: Tuple[float, float, float] = (0.5, 0.5, 0.5)

# ------------------------------------------------------------------------------
# Script defaults
# ------------------------------------------------------------------------------

# Jinja2 template for node URLs, e.g. "https://mlmd.example.com/{{ node_type }}s/{{ id }}".
URL_TEMPLATE: Optional[str] = os.environ.get("URL_TEMPLATE") or None

# "dot" prints the DOT source; anything else ("svg", "png", ...) is rendered
# with the Graphviz binary next to OUTPUT_FILE.
OUTPUT_FORMAT: str = os.environ.get("OUTPUT_FORMAT", "dot")
OUTPUT_FILE: str = os.environ.get(
    "OUTPUT_FILE", os.path.join(OUTPUT_BASE, "graphs", GRAPH_NAME)
)

LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "WARNING")

# ------------------------------------------------------------------------------
# Utility helpers
# ------------------------------------------------------------------------------

def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger for script use.

    Logs go to stderr so that DOT output on stdout stays clean.
    """
    level_name = (level or LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def get_metadata_connection_config(
    path: Optional[str] = None,
) -> metadata_store_pb2.ConnectionConfig:
    """Return the MLMD SQLite connection config for `path` (or METADATA_PATH)."""
    config = metadata_store_pb2.ConnectionConfig()
    config.sqlite.filename_uri = path or METADATA_PATH
    config.sqlite.connection_mode = (
        metadata_store_pb2.SqliteMetadataSourceConfig.READWRITE_OPENCREATE
    )
    return config
