"""Shared test fixtures."""

from typing import List, Optional

import pytest

from mycelia.core.enums import EdgeType
from mycelia.core.graph import Graph, GraphMetadata, compute_stats, rebuild_indexes
from mycelia.core.models import (
    ContentNode,
    Edge,
    MetaNode,
    Node,
    ReferenceNode,
    SourceReference,
)
from mycelia.core.registry import TagRegistry, create_registry


def build_graph(nodes: List[Node], edges: Optional[List[Edge]] = None, file: str = "test.md") -> Graph:
    """Build a graph with consistent indexes and stats."""
    node_map = {node.id: node for node in nodes}
    edge_list = list(edges or [])
    return Graph(
        nodes=node_map,
        edges=edge_list,
        indexes=rebuild_indexes(node_map, edge_list),
        meta=GraphMetadata(files=1, sources=[file], stats=compute_stats(node_map, edge_list)),
    )


@pytest.fixture
def source() -> SourceReference:
    """Fixture providing a source reference."""
    return SourceReference(file="test.md")


@pytest.fixture
def registry() -> TagRegistry:
    """Fixture providing a fresh default registry."""
    return create_registry()


@pytest.fixture
def project_graph_fixture(source) -> Graph:
    """Fixture providing a project with two tasks, a tag and a link."""
    project = ContentNode(id="p", type="project", source=source, title="Project", children=["t1", "t2"])
    task1 = ContentNode(id="t1", type="task", source=source, title="One", content="Do one")
    task2 = ContentNode(id="t2", type="task", source=source, title="Two", content="Do two")
    tag = MetaNode(id="tag1", type="tag", source=source, value="python", target="p")
    link = ReferenceNode(id="l1", type="link", source=source, target="t1")
    edges = [
        Edge.create("p", "t1", EdgeType.CONTAINS),
        Edge.create("p", "t2", EdgeType.CONTAINS),
        Edge.create("l1", "t1", EdgeType.REFERENCES),
    ]
    return build_graph([project, task1, task2, tag, link], edges)


@pytest.fixture
def graph_builder():
    """Fixture providing the build_graph helper."""
    return build_graph
