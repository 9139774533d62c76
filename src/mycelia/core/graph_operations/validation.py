"""Graph integrity validation.

Validation is read-only: it reports problems and never repairs them. Whether a
dangling edge is fatal or advisory is left to the caller.

- Errors (graph is invalid): edges whose endpoints are not nodes
- Warnings (graph is suspicious but usable): index entries naming missing nodes,
  statistics that disagree with the collections they summarise
"""

from typing import Dict, List

from ...utils.validation import ValidationResult
from ..graph import Graph


def _check_index(
    graph: Graph, index_name: str, index: Dict[str, List[str]], warnings: List[str]
) -> None:
    for key, node_ids in index.items():
        for node_id in node_ids:
            if node_id not in graph.nodes:
                warnings.append(f'Index {index_name}["{key}"] references missing node "{node_id}"')


def validate_graph(graph: Graph) -> ValidationResult:
    """Validate graph structure.

    Args:
        graph: Graph to inspect

    Returns:
        ValidationResult whose ``valid`` flag is True iff every edge endpoint exists
    """
    errors: List[str] = []
    warnings: List[str] = []

    for edge in graph.edges:
        if edge.from_node not in graph.nodes:
            errors.append(f'Edge "{edge.id}" references missing source node "{edge.from_node}"')
        if edge.to_node not in graph.nodes:
            errors.append(f'Edge "{edge.id}" references missing target node "{edge.to_node}"')

    indexes = graph.indexes
    _check_index(graph, "byType", indexes.by_type, warnings)
    _check_index(graph, "byPrimitive", indexes.by_primitive, warnings)
    _check_index(graph, "bySource", indexes.by_source, warnings)
    _check_index(graph, "byTag", indexes.by_tag, warnings)
    for index_name, index in (("inbound", indexes.inbound), ("outbound", indexes.outbound)):
        for node_id in index:
            if node_id not in graph.nodes:
                warnings.append(f'Index {index_name} has an entry for missing node "{node_id}"')

    stats = graph.meta.stats
    actual_nodes = len(graph.nodes)
    if stats.node_count != actual_nodes:
        warnings.append(
            f"Metadata nodeCount ({stats.node_count}) doesn't match actual ({actual_nodes})"
        )
    actual_edges = len(graph.edges)
    if stats.edge_count != actual_edges:
        warnings.append(
            f"Metadata edgeCount ({stats.edge_count}) doesn't match actual ({actual_edges})"
        )

    return ValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        context={"node_count": actual_nodes, "edge_count": actual_edges},
    )
