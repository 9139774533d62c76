"""
Graph operations package.

Pure functions over finished graphs: merging, integrity validation and
serialization to and from the persisted JSON artifacts.
"""

from .merge import merge_all, merge_graphs
from .serialization import GRAPH_SCHEMA, GraphSerializer, TreeSerializer
from .validation import validate_graph

__all__ = [
    "merge_graphs",
    "merge_all",
    "validate_graph",
    "GRAPH_SCHEMA",
    "GraphSerializer",
    "TreeSerializer",
]
