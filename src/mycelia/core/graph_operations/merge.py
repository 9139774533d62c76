"""Graph merge operations.

Merging is pure and order-sensitive: nodes from the later graph overwrite nodes
with the same id from the earlier one, edges are deduplicated by id, and the
indexes and statistics of the result are rebuilt from scratch. Inputs are never
mutated.
"""

import logging
from copy import deepcopy
from typing import Dict, Iterable, List

from ..exceptions import GraphOperationError
from ..graph import Graph, GraphMetadata, compute_stats, create_empty_graph, rebuild_indexes
from ..models import Edge, Node, format_timestamp

logger = logging.getLogger(__name__)


def merge_graphs(first: Graph, second: Graph) -> Graph:
    """Merge two graphs into a new graph.

    Args:
        first: Earlier graph
        second: Later graph; wins on node id collisions

    Returns:
        New graph holding the union of both inputs

    Raises:
        GraphOperationError: If either argument is not a Graph
    """
    if not isinstance(first, Graph) or not isinstance(second, Graph):
        raise GraphOperationError("merge_graphs expects two Graph instances")

    nodes: Dict[str, Node] = deepcopy(first.nodes)
    collisions = [node_id for node_id in second.nodes if node_id in nodes]
    nodes.update(deepcopy(second.nodes))
    if collisions:
        logger.debug(f"Merge replaced {len(collisions)} colliding nodes: {collisions}")

    # Later edge wins on id collision but keeps the first-seen position
    edge_map: Dict[str, Edge] = {}
    for edge in [*first.edges, *second.edges]:
        edge_map[edge.id] = edge
    edges: List[Edge] = deepcopy(list(edge_map.values()))

    sources = list(dict.fromkeys([*first.meta.sources, *second.meta.sources]))

    return Graph(
        nodes=nodes,
        edges=edges,
        indexes=rebuild_indexes(nodes, edges),
        meta=GraphMetadata(
            generated_at=format_timestamp(),
            version=first.meta.version,
            files=first.meta.files + second.meta.files,
            sources=sources,
            stats=compute_stats(nodes, edges),
        ),
    )


def merge_all(graphs: Iterable[Graph]) -> Graph:
    """Fold an ordered sequence of graphs into one, left to right.

    An empty sequence yields an empty graph.
    """
    graphs = list(graphs)
    if not graphs:
        return create_empty_graph()

    merged = deepcopy(graphs[0])
    for graph in graphs[1:]:
        merged = merge_graphs(merged, graph)
    logger.debug(f"Merged {len(graphs)} graphs into {merged.meta.stats.node_count} nodes")
    return merged
