"""
Renderable tree projection.

This module converts a finished graph into a single-rooted tree for presentation
layers to walk recursively. Nodes without an inbound "contains" edge become
children of a synthetic virtual root, so consumers can always assume exactly one
root even for multi-document graphs.

Each projected node carries its outgoing "references" edges as resolved
references. A reference to a missing node is kept with ``exists=False`` and also
listed in the tree metadata, so renderers can flag broken links.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from .enums import EdgeType, NodePrimitive
from .exceptions import GraphOperationError
from .graph import Graph
from .models import ContentNode, Edge, MetaNode, Node, ReferenceNode

logger = logging.getLogger(__name__)

ROOT_ID = "root"
ROOT_TYPE = "root"
PREVIEW_LENGTH = 160


@dataclass
class ResolvedReference:
    """
    Reference that has been resolved against the graph.

    Attributes:
        id (str): Target node id
        type (str): Target type, "unknown" when the target is missing
        primitive (Optional[NodePrimitive]): Target primitive, None when missing
        title (str): Display title of the target
        url (Optional[str]): Deep link path ``/{type}/{id}``
        preview (Optional[str]): Brief preview of the target content
        exists (bool): Whether the target node exists
    """

    id: str
    type: str
    primitive: Optional[NodePrimitive]
    title: str
    exists: bool
    url: Optional[str] = None
    preview: Optional[str] = None


@dataclass
class UnresolvedReference:
    """Reference whose target could not be found."""

    source_node_id: str
    target_id: str
    reason: str


@dataclass
class RenderableNode:
    """Tree node ready for recursive rendering."""

    id: str
    type: str
    primitive: NodePrimitive
    props: Dict[str, Any] = field(default_factory=dict)
    children: List["RenderableNode"] = field(default_factory=list)
    content: Optional[Any] = None
    resolved_refs: List[ResolvedReference] = field(default_factory=list)


@dataclass
class RenderableTreeMeta:
    """Summary of a projection."""

    total_nodes: int = 0
    unresolved_refs: List[UnresolvedReference] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class RenderableTree:
    """Complete renderable tree with metadata."""

    root: RenderableNode
    meta: RenderableTreeMeta = field(default_factory=RenderableTreeMeta)


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def node_url(node_type: Optional[str], node_id: Optional[str]) -> str:
    """Build the simple ``/{type}/{id}`` path for a node."""
    return f"/{_slug(node_type or 'unknown')}/{_slug(node_id or 'unknown')}"


def node_title(node: Node) -> str:
    """Display title of a node."""
    if isinstance(node, ContentNode):
        return node.title or node.id
    if isinstance(node, MetaNode):
        return node.value or node.id
    if isinstance(node, ReferenceNode):
        title = node.attributes.get("title")
        return title if isinstance(title, str) and title else node.id
    raise GraphOperationError(f"Unknown node primitive: {node!r}")


def node_content(node: Node) -> Optional[Any]:
    """Text or value shown for a node."""
    if isinstance(node, ContentNode):
        return node.content if node.content else node.value
    if isinstance(node, MetaNode):
        return node.value
    if isinstance(node, ReferenceNode):
        return None
    raise GraphOperationError(f"Unknown node primitive: {node!r}")


class TreeProjector:
    """
    Projects one graph into a RenderableTree.

    A projector is single-use: it accumulates unresolved references and warnings
    for the graph it was created with.
    """

    def __init__(self, graph: Graph):
        self.graph = graph
        self.edges: Dict[str, Edge] = graph.edge_map()
        self.meta = RenderableTreeMeta()
        self._visited: Set[str] = set()

    def root_ids(self) -> List[str]:
        """Node ids with no inbound "contains" edge, in node order."""
        contained = {edge.to_node for edge in self.graph.edges if edge.type == EdgeType.CONTAINS}
        return [node_id for node_id in self.graph.nodes if node_id not in contained]

    def resolve_references(self, node_id: str) -> List[ResolvedReference]:
        """Resolve the outgoing "references" edges of a node."""
        resolved: List[ResolvedReference] = []
        for edge_id in self.graph.indexes.outbound.get(node_id, []):
            edge = self.edges.get(edge_id)
            if edge is None or edge.type != EdgeType.REFERENCES:
                continue

            target = self.graph.nodes.get(edge.to_node)
            if target is None:
                resolved.append(
                    ResolvedReference(
                        id=edge.to_node,
                        type="unknown",
                        primitive=None,
                        title=edge.to_node,
                        exists=False,
                    )
                )
                self.meta.unresolved_refs.append(
                    UnresolvedReference(
                        source_node_id=node_id,
                        target_id=edge.to_node,
                        reason="Target node not found",
                    )
                )
                continue

            content = node_content(target)
            preview = str(content)[:PREVIEW_LENGTH] if content else None
            resolved.append(
                ResolvedReference(
                    id=target.id,
                    type=target.type,
                    primitive=target.primitive,
                    title=node_title(target),
                    exists=True,
                    url=node_url(target.type, target.id),
                    preview=preview,
                )
            )
        return resolved

    def project_node(self, node_id: str, ancestors: Set[str]) -> Optional[RenderableNode]:
        """Convert one graph node and its descendants."""
        node = self.graph.nodes.get(node_id)
        if node is None:
            self.meta.warnings.append(f"Child node '{node_id}' does not exist")
            return None
        if node_id in ancestors:
            self.meta.warnings.append(f"Containment cycle detected at node '{node_id}'")
            return None

        self._visited.add(node_id)
        rendered = RenderableNode(
            id=node.id,
            type=node.type,
            primitive=node.primitive,
            props=dict(node.attributes),
            content=node_content(node),
            resolved_refs=self.resolve_references(node_id),
        )
        self.meta.total_nodes += 1

        if isinstance(node, ContentNode):
            path = ancestors | {node_id}
            for child_id in node.children:
                child = self.project_node(child_id, path)
                if child is not None:
                    rendered.children.append(child)
        return rendered

    def project(self) -> RenderableTree:
        """Build the tree under a synthetic virtual root."""
        root = RenderableNode(id=ROOT_ID, type=ROOT_TYPE, primitive=NodePrimitive.CONTENT)
        self.meta.total_nodes += 1

        for node_id in self.root_ids():
            child = self.project_node(node_id, set())
            if child is not None:
                root.children.append(child)

        for node_id in self.graph.nodes:
            if node_id not in self._visited:
                self.meta.warnings.append(f"Node '{node_id}' is not reachable from any root")

        logger.debug(
            f"Projected {self.meta.total_nodes} renderable nodes with "
            f"{len(self.meta.unresolved_refs)} unresolved references"
        )
        return RenderableTree(root=root, meta=self.meta)


def project_graph(graph: Graph) -> RenderableTree:
    """Project a graph into a single-rooted RenderableTree."""
    return TreeProjector(graph).project()
