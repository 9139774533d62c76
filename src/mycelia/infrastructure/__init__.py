"""
Infrastructure package: file discovery, source loading and artifact persistence.
"""

from .sources import (
    DEFAULT_PATTERNS,
    GRAPH_FILENAME,
    TREE_FILENAME,
    ArtifactWriter,
    LoadResult,
    SourceLoader,
    load_graph,
)

__all__ = [
    "DEFAULT_PATTERNS",
    "GRAPH_FILENAME",
    "TREE_FILENAME",
    "ArtifactWriter",
    "LoadResult",
    "SourceLoader",
    "load_graph",
]
