"""
Core domain models package for the knowledge graph.

This package provides the node primitives, edges and source-location models
produced by the compiler.
"""

from .base import (
    BaseNode,
    Position,
    SourceReference,
    format_timestamp,
    validate_attributes,
    validate_identifier,
)
from .edge import Edge, make_edge_id
from .node import (
    NODE_CLASSES,
    ContentNode,
    MetaNode,
    Node,
    ReferenceNode,
    create_content_node,
    create_meta_node,
    create_reference_node,
    is_content_node,
    is_meta_node,
    is_reference_node,
)

__all__ = [
    # Base
    "BaseNode",
    "Position",
    "SourceReference",
    "format_timestamp",
    "validate_attributes",
    "validate_identifier",
    # Node models
    "Node",
    "NODE_CLASSES",
    "ContentNode",
    "ReferenceNode",
    "MetaNode",
    "create_content_node",
    "create_reference_node",
    "create_meta_node",
    "is_content_node",
    "is_reference_node",
    "is_meta_node",
    # Edge models
    "Edge",
    "make_edge_id",
]
