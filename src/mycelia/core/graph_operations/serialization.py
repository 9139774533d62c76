"""Graph and tree serialization.

This module provides functionality for exporting and importing the persisted
artifacts consumed by external collaborators:
- Graph <-> JSON, with the camelCase keys of the persisted format
- RenderableTree -> JSON
- Schema validation (jsonschema) when loading a graph

Loading a malformed graph artifact is the one unrecoverable failure mode of the
package and raises SerializationError.
"""

import json
from typing import Any, Dict, List, Optional

from jsonschema import ValidationError as JsonSchemaError
from jsonschema import validate

from ..enums import EdgeType, NodePrimitive
from ..exceptions import SerializationError
from ..graph import Graph, GraphIndexes, GraphMetadata, GraphStats
from ..models import (
    ContentNode,
    Edge,
    MetaNode,
    Node,
    Position,
    ReferenceNode,
    SourceReference,
)
from ..renderable import RenderableNode, RenderableTree

_ID_LISTS = {"type": "object", "additionalProperties": {"type": "array", "items": {"type": "string"}}}

_POSITION_SCHEMA = {
    "type": "object",
    "required": ["line", "column"],
    "properties": {
        "line": {"type": "integer", "minimum": 1},
        "column": {"type": "integer", "minimum": 1},
        "offset": {"type": "integer", "minimum": 0},
    },
}

GRAPH_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["nodes", "edges", "indexes", "meta"],
    "properties": {
        "nodes": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["id", "type", "primitive", "source"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "type": {"type": "string"},
                    "primitive": {"enum": [p.value for p in NodePrimitive]},
                    "source": {
                        "type": "object",
                        "required": ["file"],
                        "properties": {
                            "file": {"type": "string"},
                            "start": _POSITION_SCHEMA,
                            "end": _POSITION_SCHEMA,
                        },
                    },
                    "attributes": {"type": "object"},
                    "children": {"type": "array", "items": {"type": "string"}},
                    "created_at": {"type": "string"},
                    "updated_at": {"type": "string"},
                },
                "allOf": [
                    {
                        "if": {"properties": {"primitive": {"const": "Reference"}}},
                        "then": {"required": ["target", "link_type"]},
                    },
                    {
                        "if": {"properties": {"primitive": {"const": "Meta"}}},
                        "then": {"required": ["meta_type", "value"]},
                    },
                ],
            },
        },
        "edges": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "from", "to", "type"],
                "properties": {
                    "id": {"type": "string"},
                    "from": {"type": "string", "minLength": 1},
                    "to": {"type": "string", "minLength": 1},
                    "type": {"enum": [t.value for t in EdgeType]},
                    "attributes": {"type": "object"},
                },
            },
        },
        "indexes": {
            "type": "object",
            "required": ["byType", "byTag", "byPrimitive", "bySource", "inbound", "outbound"],
            "properties": {
                name: _ID_LISTS
                for name in ("byType", "byTag", "byPrimitive", "bySource", "inbound", "outbound")
            },
        },
        "meta": {
            "type": "object",
            "required": ["generatedAt", "version", "files", "sources", "stats"],
            "properties": {
                "generatedAt": {"type": "string"},
                "version": {"type": "string"},
                "files": {"type": "integer", "minimum": 0},
                "sources": {"type": "array", "items": {"type": "string"}},
                "stats": {
                    "type": "object",
                    "required": ["nodeCount", "edgeCount", "typeBreakdown"],
                    "properties": {
                        "nodeCount": {"type": "integer", "minimum": 0},
                        "edgeCount": {"type": "integer", "minimum": 0},
                        "typeBreakdown": {
                            "type": "object",
                            "additionalProperties": {"type": "integer"},
                        },
                    },
                },
            },
        },
    },
}

_INDEX_KEYS = {
    "by_type": "byType",
    "by_tag": "byTag",
    "by_primitive": "byPrimitive",
    "by_source": "bySource",
    "inbound": "inbound",
    "outbound": "outbound",
}


def _without_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def serialize_position(position: Optional[Position]) -> Optional[Dict[str, Any]]:
    """Convert a Position to a dictionary."""
    if position is None:
        return None
    return _without_none({"line": position.line, "column": position.column, "offset": position.offset})


def deserialize_position(data: Optional[Dict[str, Any]]) -> Optional[Position]:
    """Convert a dictionary to a Position."""
    if data is None:
        return None
    return Position(line=data["line"], column=data["column"], offset=data.get("offset"))


def serialize_node(node: Node) -> Dict[str, Any]:
    """Convert a node to a JSON-compatible dictionary."""
    data: Dict[str, Any] = {
        "id": node.id,
        "type": node.type,
        "primitive": node.primitive.value,
        "source": _without_none(
            {
                "file": node.source.file,
                "start": serialize_position(node.source.start),
                "end": serialize_position(node.source.end),
            }
        ),
        "created_at": node.created_at,
        "updated_at": node.updated_at,
    }

    if isinstance(node, ContentNode):
        data.update(
            title=node.title, content=node.content, value=node.value, children=list(node.children)
        )
    elif isinstance(node, ReferenceNode):
        data.update(target=node.target, link_type=node.link_type)
    elif isinstance(node, MetaNode):
        data.update(meta_type=node.meta_type, value=node.value, target=node.target)
    else:
        raise SerializationError(f"Unknown node primitive: {node!r}")

    data["attributes"] = dict(node.attributes)
    return _without_none(data)


def deserialize_node(data: Dict[str, Any]) -> Node:
    """Convert a dictionary to the node class named by its primitive."""
    source_data = data["source"]
    common = {
        "id": data["id"],
        "type": data["type"],
        "source": SourceReference(
            file=source_data["file"],
            start=deserialize_position(source_data.get("start")),
            end=deserialize_position(source_data.get("end")),
        ),
        "attributes": dict(data.get("attributes", {})),
        "created_at": data.get("created_at"),
        "updated_at": data.get("updated_at"),
    }

    primitive = NodePrimitive(data["primitive"])
    if primitive is NodePrimitive.CONTENT:
        return ContentNode(
            title=data.get("title"),
            content=data.get("content"),
            value=data.get("value"),
            children=list(data.get("children", [])),
            **common,
        )
    if primitive is NodePrimitive.REFERENCE:
        return ReferenceNode(target=data["target"], link_type=data["link_type"], **common)
    if primitive is NodePrimitive.META:
        return MetaNode(
            meta_type=data["meta_type"], value=data["value"], target=data.get("target"), **common
        )
    raise SerializationError(f"Unknown node primitive: {primitive}")


def serialize_edge(edge: Edge) -> Dict[str, Any]:
    """Convert an edge to a JSON-compatible dictionary."""
    return _without_none(
        {
            "id": edge.id,
            "from": edge.from_node,
            "to": edge.to_node,
            "type": edge.type.value,
            "attributes": dict(edge.attributes) if edge.attributes is not None else None,
        }
    )


def deserialize_edge(data: Dict[str, Any]) -> Edge:
    """Convert a dictionary to an Edge."""
    attributes = data.get("attributes")
    return Edge(
        from_node=data["from"],
        to_node=data["to"],
        type=EdgeType(data["type"]),
        id=data["id"],
        attributes=dict(attributes) if attributes is not None else None,
    )


class GraphSerializer:
    """Handles graph serialization operations."""

    @staticmethod
    def to_dict(graph: Graph) -> Dict[str, Any]:
        """Convert a graph to the persisted dictionary format."""
        return {
            "nodes": {node_id: serialize_node(node) for node_id, node in graph.nodes.items()},
            "edges": [serialize_edge(edge) for edge in graph.edges],
            "indexes": {
                key: {name: list(ids) for name, ids in getattr(graph.indexes, attr).items()}
                for attr, key in _INDEX_KEYS.items()
            },
            "meta": {
                "generatedAt": graph.meta.generated_at,
                "version": graph.meta.version,
                "files": graph.meta.files,
                "sources": list(graph.meta.sources),
                "stats": {
                    "nodeCount": graph.meta.stats.node_count,
                    "edgeCount": graph.meta.stats.edge_count,
                    "typeBreakdown": dict(graph.meta.stats.type_breakdown),
                },
            },
        }

    @staticmethod
    def to_json(graph: Graph, indent: Optional[int] = None) -> str:
        """Convert a graph to a JSON string."""
        return json.dumps(GraphSerializer.to_dict(graph), indent=indent)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Graph:
        """Create a graph from the persisted dictionary format.

        Indexes and stats are loaded as stored, not recomputed, so that
        validate_graph can report drift in hand-edited artifacts.

        Raises:
            SerializationError: If the data does not match the graph schema
        """
        try:
            validate(instance=data, schema=GRAPH_SCHEMA)
        except JsonSchemaError as e:
            raise SerializationError(f"Graph schema validation failed: {e.message}") from e

        try:
            nodes = {node_id: deserialize_node(node) for node_id, node in data["nodes"].items()}
            edges = [deserialize_edge(edge) for edge in data["edges"]]
        except (KeyError, TypeError, ValueError) as e:
            raise SerializationError(f"Invalid graph data format: {e}") from e

        indexes = GraphIndexes(
            **{
                attr: {name: list(ids) for name, ids in data["indexes"][key].items()}
                for attr, key in _INDEX_KEYS.items()
            }
        )
        meta_data = data["meta"]
        stats = meta_data["stats"]
        meta = GraphMetadata(
            generated_at=meta_data["generatedAt"],
            version=meta_data["version"],
            files=meta_data["files"],
            sources=list(meta_data["sources"]),
            stats=GraphStats(
                node_count=stats["nodeCount"],
                edge_count=stats["edgeCount"],
                type_breakdown=dict(stats["typeBreakdown"]),
            ),
        )
        return Graph(nodes=nodes, edges=edges, indexes=indexes, meta=meta)

    @staticmethod
    def from_json(json_str: str) -> Graph:
        """Create a graph from a JSON string.

        Raises:
            SerializationError: If the JSON is invalid or does not match the schema
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise SerializationError(f"Invalid JSON format: {e}") from e
        return GraphSerializer.from_dict(data)


def _serialize_renderable_node(node: RenderableNode) -> Dict[str, Any]:
    return _without_none(
        {
            "id": node.id,
            "type": node.type,
            "primitive": node.primitive.value,
            "props": dict(node.props),
            "children": [_serialize_renderable_node(child) for child in node.children],
            "content": node.content,
            "resolvedRefs": [
                _without_none(
                    {
                        "id": ref.id,
                        "type": ref.type,
                        "primitive": ref.primitive.value if ref.primitive else None,
                        "title": ref.title,
                        "url": ref.url,
                        "preview": ref.preview,
                        "exists": ref.exists,
                    }
                )
                for ref in node.resolved_refs
            ],
        }
    )


class TreeSerializer:
    """Handles renderable tree serialization."""

    @staticmethod
    def to_dict(tree: RenderableTree) -> Dict[str, Any]:
        """Convert a renderable tree to the persisted dictionary format."""
        unresolved: List[Dict[str, Any]] = [
            {"sourceNodeId": ref.source_node_id, "targetId": ref.target_id, "reason": ref.reason}
            for ref in tree.meta.unresolved_refs
        ]
        return {
            "root": _serialize_renderable_node(tree.root),
            "meta": {
                "totalNodes": tree.meta.total_nodes,
                "unresolvedRefs": unresolved,
                "warnings": list(tree.meta.warnings),
            },
        }

    @staticmethod
    def to_json(tree: RenderableTree, indent: Optional[int] = None) -> str:
        """Convert a renderable tree to a JSON string."""
        return json.dumps(TreeSerializer.to_dict(tree), indent=indent)
