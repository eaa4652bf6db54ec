"""Print a DOT lineage graph from the MLMD (SQLite) metadata store.

### EXPLAINER
Connects to `outputs/mlmd/metadata.db` (see `lineage/config.py`) and draws
either the lineage of an artifact or the inputs/outputs of an execution:

    python scripts/show_lineage.py lineage 12
    python scripts/show_lineage.py io 7 "https://mlmd.example.com/{{ node_type }}s/{{ id }}"

Pipe the output to `dot -Tsvg` or set OUTPUT_FORMAT=svg to let this script
render the image itself.
"""

from __future__ import annotations

import os
import sys
from typing import List, Optional

from lineage import config as cfg
from lineage.graph import io_graph, lineage_graph
from modules.renderer import write_graph
from modules.store import connect

_GRAPHS = {"lineage": lineage_graph, "io": io_graph}
_USAGE = "usage: show_lineage.py {lineage,io} ID [URL_TEMPLATE]"


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if len(args) not in (2, 3) or args[0] not in _GRAPHS or not args[1].isdigit():
        raise SystemExit(_USAGE)

    if not os.path.exists(cfg.METADATA_PATH):
        raise SystemExit(f"MLMD not found at {cfg.METADATA_PATH}. Run the pipeline first.")

    cfg.setup_logging()
    store = connect(cfg.METADATA_PATH)
    url_template = args[2] if len(args) == 3 else cfg.URL_TEMPLATE
    document = _GRAPHS[args[0]](store, int(args[1]), url_template)

    if cfg.OUTPUT_FORMAT == "dot":
        print(document)
    else:
        print(f"Wrote {write_graph(document, cfg.OUTPUT_FILE, cfg.OUTPUT_FORMAT)}")


if __name__ == "__main__":
    main()
