"""
Edge models for the knowledge graph.

This module defines the model representing a directed, typed relationship between
two nodes. Edge ids are derived from the endpoints and the type, so two edges with
the same id are by construction the same relationship.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..enums import EdgeType
from .base import validate_dataclass, validate_identifier


def make_edge_id(from_node: str, edge_type: EdgeType, to_node: str) -> str:
    """Build the deterministic edge id ``{from}-{type}-{to}``."""
    return f"{from_node}-{edge_type.value}-{to_node}"


@validate_dataclass
@dataclass
class Edge:
    """
    Directed relationship between two nodes.

    Attributes:
        from_node (str): Source node id
        to_node (str): Target node id
        type (EdgeType): Kind of relationship
        id (str): Deduplication key, derived from the endpoints and type when empty
        attributes (Optional[Dict[str, Any]]): Optional edge attributes
    """

    from_node: str
    to_node: str
    type: EdgeType
    id: str = ""
    attributes: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """Validate edge after initialization."""
        validate_identifier("source node", self.from_node)
        validate_identifier("target node", self.to_node)
        if not isinstance(self.type, EdgeType):
            raise TypeError("type must be an EdgeType enum")
        if not self.id:
            self.id = make_edge_id(self.from_node, self.type, self.to_node)

    @classmethod
    def create(
        cls,
        from_node: str,
        to_node: str,
        edge_type: EdgeType,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> "Edge":
        """Create an edge whose id is derived from its endpoints and type."""
        return cls(from_node=from_node, to_node=to_node, type=edge_type, attributes=attributes)
