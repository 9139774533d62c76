"""
Core package for the Mycelia compiler.

Holds the node and edge models, the tag registry, the graph store and the
operations and projections defined over finished graphs.
"""

from .enums import EdgeType, NodePrimitive, Severity
from .graph import (
    SCHEMA_VERSION,
    Graph,
    GraphIndexes,
    GraphMetadata,
    GraphStats,
    compute_stats,
    create_empty_graph,
    rebuild_indexes,
)
from .registry import (
    DEFAULT_TAG_MAPPINGS,
    TagMapping,
    TagRegistry,
    create_registry,
    get_tag_mapping,
    register_tag,
    with_tag,
    with_tags,
)
from .renderable import (
    RenderableNode,
    RenderableTree,
    RenderableTreeMeta,
    ResolvedReference,
    UnresolvedReference,
    project_graph,
)

__all__ = [
    "EdgeType",
    "NodePrimitive",
    "Severity",
    "SCHEMA_VERSION",
    "Graph",
    "GraphIndexes",
    "GraphMetadata",
    "GraphStats",
    "compute_stats",
    "create_empty_graph",
    "rebuild_indexes",
    "DEFAULT_TAG_MAPPINGS",
    "TagMapping",
    "TagRegistry",
    "create_registry",
    "get_tag_mapping",
    "register_tag",
    "with_tag",
    "with_tags",
    "RenderableNode",
    "RenderableTree",
    "RenderableTreeMeta",
    "ResolvedReference",
    "UnresolvedReference",
    "project_graph",
]
