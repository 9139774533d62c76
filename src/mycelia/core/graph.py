"""
Knowledge graph store with rebuildable multi-indexes.

This module provides the Graph container produced by the compiler: the authoritative
node and edge collections plus derived lookup indexes and aggregate statistics.

Indexes are pure derived data. They are never maintained incrementally; after any
structural change they are regenerated from the node and edge collections with
``rebuild_indexes``, which depends on nothing but its two arguments. This keeps the
indexes from drifting away from the data they describe.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .enums import EdgeType
from .exceptions import GraphOperationError, NodeNotFoundError
from .models import Edge, MetaNode, Node, NODE_CLASSES, format_timestamp

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "0.1.0"


@dataclass
class GraphIndexes:
    """
    Pre-computed lookup maps.

    Attributes:
        by_type (Dict[str, List[str]]): Node type -> node ids
        by_tag (Dict[str, List[str]]): Tag value -> annotated node ids
        by_primitive (Dict[str, List[str]]): Primitive name -> node ids
        by_source (Dict[str, List[str]]): Source file -> node ids
        inbound (Dict[str, List[str]]): Node id -> incoming edge ids
        outbound (Dict[str, List[str]]): Node id -> outgoing edge ids
    """

    by_type: Dict[str, List[str]] = field(default_factory=dict)
    by_tag: Dict[str, List[str]] = field(default_factory=dict)
    by_primitive: Dict[str, List[str]] = field(default_factory=dict)
    by_source: Dict[str, List[str]] = field(default_factory=dict)
    inbound: Dict[str, List[str]] = field(default_factory=dict)
    outbound: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class GraphStats:
    """Aggregate counts derived from the node and edge collections."""

    node_count: int = 0
    edge_count: int = 0
    type_breakdown: Dict[str, int] = field(default_factory=dict)


@dataclass
class GraphMetadata:
    """
    Metadata about graph generation.

    Attributes:
        generated_at (str): ISO-8601 timestamp of generation
        version (str): Graph schema version
        files (int): Number of source files compiled into the graph
        sources (List[str]): Source file paths
        stats (GraphStats): Derived counts
    """

    generated_at: str = field(default_factory=format_timestamp)
    version: str = SCHEMA_VERSION
    files: int = 0
    sources: List[str] = field(default_factory=list)
    stats: GraphStats = field(default_factory=GraphStats)


@dataclass
class Graph:
    """
    Complete knowledge graph.

    Attributes:
        nodes (Dict[str, Node]): All nodes keyed by id
        edges (List[Edge]): All edges; ids are unique
        indexes (GraphIndexes): Derived lookup maps
        meta (GraphMetadata): Generation metadata and statistics
    """

    nodes: Dict[str, Node] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    indexes: GraphIndexes = field(default_factory=GraphIndexes)
    meta: GraphMetadata = field(default_factory=GraphMetadata)

    def has_node(self, node_id: str) -> bool:
        """Check if a node exists in the graph."""
        return node_id in self.nodes

    def get_node(self, node_id: str) -> Node:
        """
        Get a node by id.

        Raises:
            NodeNotFoundError: If the node does not exist
        """
        try:
            return self.nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(f"Node '{node_id}' not found in the graph") from None

    def edge_map(self) -> Dict[str, Edge]:
        """Map edge ids to edges."""
        return {edge.id: edge for edge in self.edges}

    def get_outgoing_edges(
        self, node_id: str, edge_type: Optional[EdgeType] = None
    ) -> Iterator[Edge]:
        """Iterate over the outgoing edges of a node, optionally filtered by type."""
        for edge in self.edges:
            if edge.from_node == node_id and (edge_type is None or edge.type == edge_type):
                yield edge

    def get_incoming_edges(
        self, node_id: str, edge_type: Optional[EdgeType] = None
    ) -> Iterator[Edge]:
        """Iterate over the incoming edges of a node, optionally filtered by type."""
        for edge in self.edges:
            if edge.to_node == node_id and (edge_type is None or edge.type == edge_type):
                yield edge

    def refresh(self) -> None:
        """Regenerate indexes and stats from the node and edge collections."""
        self.indexes = rebuild_indexes(self.nodes, self.edges)
        self.meta.stats = compute_stats(self.nodes, self.edges)


def _append(index: Dict[str, List[str]], key: str, value: str) -> None:
    index.setdefault(key, []).append(value)


def rebuild_indexes(nodes: Dict[str, Node], edges: List[Edge]) -> GraphIndexes:
    """
    Build all indexes from scratch.

    Iterates the nodes once and the edges once. Every node gets an inbound and an
    outbound entry, possibly empty; edge endpoints that are not nodes get entries too.

    Raises:
        GraphOperationError: If a node is not one of the three primitives
    """
    indexes = GraphIndexes()

    for node_id, node in nodes.items():
        if not isinstance(node, tuple(NODE_CLASSES.values())):
            raise GraphOperationError(f"Node '{node_id}' is not a known primitive: {node!r}")

        _append(indexes.by_type, node.type, node_id)
        _append(indexes.by_primitive, node.primitive.value, node_id)
        _append(indexes.by_source, node.source.file, node_id)

        if isinstance(node, MetaNode) and node.meta_type == "tag":
            tagged = indexes.by_tag.setdefault(node.value, [])
            if node.target and node.target not in tagged:
                tagged.append(node.target)

        indexes.inbound[node_id] = []
        indexes.outbound[node_id] = []

    for edge in edges:
        _append(indexes.outbound, edge.from_node, edge.id)
        _append(indexes.inbound, edge.to_node, edge.id)

    logger.debug(f"Rebuilt indexes for {len(nodes)} nodes and {len(edges)} edges")
    return indexes


def compute_stats(nodes: Dict[str, Node], edges: List[Edge]) -> GraphStats:
    """Count nodes, edges and nodes per type."""
    return GraphStats(
        node_count=len(nodes),
        edge_count=len(edges),
        type_breakdown=dict(Counter(node.type for node in nodes.values())),
    )


def create_empty_graph(
    version: str = SCHEMA_VERSION, sources: Optional[List[str]] = None
) -> Graph:
    """Create an empty graph with initialized structures."""
    sources = list(sources or [])
    return Graph(meta=GraphMetadata(version=version, files=len(sources), sources=sources))
