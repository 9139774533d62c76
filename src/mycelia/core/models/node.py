"""
Node models for the knowledge graph.

This module defines the three node primitives. They form a closed sum type,
``Node = Union[ContentNode, ReferenceNode, MetaNode]``, rather than a class
hierarchy: each consumer dispatches over exactly these three classes and raises
on anything else.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..enums import NodePrimitive
from .base import SourceReference, validate_attributes, validate_dataclass, validate_identifier


@validate_dataclass
@dataclass
class ContentNode:
    """
    Node carrying text or an atomic value, with ordered children.

    Attributes:
        id (str): Identifier, unique within a graph
        type (str): Tag-derived semantic category (e.g. "project")
        source (SourceReference): Originating document location
        title (Optional[str]): Display title
        content (Optional[str]): Free text body
        value (Optional[Any]): Atomic scalar value
        children (List[str]): Ordered child ids, mirroring outgoing "contains" edges
        attributes (Dict[str, Any]): Arbitrary tag attributes
        created_at (Optional[str]): ISO-8601 creation timestamp
        updated_at (Optional[str]): ISO-8601 update timestamp
    """

    id: str
    type: str
    source: SourceReference
    title: Optional[str] = None
    content: Optional[str] = None
    value: Optional[Any] = None
    children: List[str] = field(default_factory=list)
    attributes: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    primitive: NodePrimitive = field(default=NodePrimitive.CONTENT, init=False)

    def __post_init__(self):
        validate_identifier("id", self.id)
        validate_attributes(self.attributes)

    def add_child(self, child_id: str) -> bool:
        """
        Append a child id unless it is already present.

        Returns:
            bool: True if the child was appended
        """
        if child_id in self.children:
            return False
        self.children.append(child_id)
        return True


@validate_dataclass
@dataclass
class ReferenceNode:
    """
    Node pointing at another node.

    The target may not exist yet; a dangling target is a valid transient state.

    Attributes:
        id (str): Identifier, unique within a graph
        type (str): Tag-derived semantic category
        source (SourceReference): Originating document location
        target (str): Id of the referenced node
        link_type (str): Free-form relation label
        attributes (Dict[str, Any]): Arbitrary tag attributes
    """

    id: str
    type: str
    source: SourceReference
    target: str = ""
    link_type: str = "references"
    attributes: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    primitive: NodePrimitive = field(default=NodePrimitive.REFERENCE, init=False)

    def __post_init__(self):
        validate_identifier("id", self.id)
        validate_attributes(self.attributes)


@validate_dataclass
@dataclass
class MetaNode:
    """
    Annotation about another node (tag, comment, status, ...).

    Attributes:
        id (str): Identifier, unique within a graph
        type (str): Tag-derived semantic category
        source (SourceReference): Originating document location
        meta_type (str): Kind of annotation (e.g. "tag", "comment")
        value (str): Annotation value
        target (Optional[str]): Id of the annotated node
        attributes (Dict[str, Any]): Arbitrary tag attributes
    """

    id: str
    type: str
    source: SourceReference
    meta_type: str = "tag"
    value: str = ""
    target: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    primitive: NodePrimitive = field(default=NodePrimitive.META, init=False)

    def __post_init__(self):
        validate_identifier("id", self.id)
        validate_attributes(self.attributes)


Node = Union[ContentNode, ReferenceNode, MetaNode]

NODE_CLASSES = {
    NodePrimitive.CONTENT: ContentNode,
    NodePrimitive.REFERENCE: ReferenceNode,
    NodePrimitive.META: MetaNode,
}


def is_content_node(node: Node) -> bool:
    """Check whether a node is a ContentNode."""
    return isinstance(node, ContentNode)


def is_reference_node(node: Node) -> bool:
    """Check whether a node is a ReferenceNode."""
    return isinstance(node, ReferenceNode)


def is_meta_node(node: Node) -> bool:
    """Check whether a node is a MetaNode."""
    return isinstance(node, MetaNode)


def create_content_node(
    id: str,
    type: str,
    source: SourceReference,
    title: Optional[str] = None,
    content: Optional[str] = None,
    value: Optional[Any] = None,
    children: Optional[List[str]] = None,
    attributes: Optional[Dict[str, Any]] = None,
    created_at: Optional[str] = None,
    updated_at: Optional[str] = None,
) -> ContentNode:
    """Create a ContentNode with empty children and attributes by default."""
    return ContentNode(
        id=id,
        type=type,
        source=source,
        title=title,
        content=content,
        value=value,
        children=list(children or []),
        attributes=dict(attributes or {}),
        created_at=created_at,
        updated_at=updated_at,
    )


def create_reference_node(
    id: str,
    type: str,
    source: SourceReference,
    target: str,
    link_type: str,
    attributes: Optional[Dict[str, Any]] = None,
    created_at: Optional[str] = None,
    updated_at: Optional[str] = None,
) -> ReferenceNode:
    """Create a ReferenceNode with empty attributes by default."""
    return ReferenceNode(
        id=id,
        type=type,
        source=source,
        target=target,
        link_type=link_type,
        attributes=dict(attributes or {}),
        created_at=created_at,
        updated_at=updated_at,
    )


def create_meta_node(
    id: str,
    type: str,
    source: SourceReference,
    meta_type: str,
    value: str,
    target: Optional[str] = None,
    attributes: Optional[Dict[str, Any]] = None,
    created_at: Optional[str] = None,
    updated_at: Optional[str] = None,
) -> MetaNode:
    """Create a MetaNode with empty attributes by default."""
    return MetaNode(
        id=id,
        type=type,
        source=source,
        meta_type=meta_type,
        value=value,
        target=target,
        attributes=dict(attributes or {}),
        created_at=created_at,
        updated_at=updated_at,
    )
