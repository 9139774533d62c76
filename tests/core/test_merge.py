"""
Tests for graph merging.
"""

from copy import deepcopy

import pytest

from mycelia.core.enums import EdgeType
from mycelia.core.exceptions import GraphOperationError
from mycelia.core.graph_operations import merge_all, merge_graphs
from mycelia.core.models import ContentNode, Edge, SourceReference


def _node(node_id: str, title: str, file: str) -> ContentNode:
    return ContentNode(id=node_id, type="project", source=SourceReference(file=file), title=title)


def test_later_graph_wins_on_id_collision(graph_builder):
    """Test merging two graphs defining the same node id."""
    first = graph_builder([_node("p", "First", "file1.md")], file="file1.md")
    second = graph_builder([_node("p", "Second", "file2.md")], file="file2.md")

    merged = merge_graphs(first, second)
    assert list(merged.nodes) == ["p"]
    assert merged.nodes["p"].title == "Second"
    assert merged.meta.sources == ["file1.md", "file2.md"]
    assert merged.meta.files == 2
    assert merged.meta.stats.node_count == 1


def test_edges_deduplicated_by_id(graph_builder):
    """Test an edge present in both graphs appears once."""
    edge = Edge.create("a", "b", EdgeType.CONTAINS)
    first = graph_builder([_node("a", "A", "1.md"), _node("b", "B", "1.md")], [edge])
    second = graph_builder([_node("c", "C", "2.md")], [deepcopy(edge), Edge.create("a", "c", EdgeType.REFERENCES)])

    merged = merge_graphs(first, second)
    assert [e.id for e in merged.edges] == ["a-contains-b", "a-references-c"]
    assert merged.indexes.outbound["a"] == ["a-contains-b", "a-references-c"]


def test_merge_does_not_mutate_inputs(project_graph_fixture, graph_builder):
    """Test inputs are left untouched."""
    other = graph_builder([_node("x", "X", "other.md")], file="other.md")
    before_nodes = deepcopy(project_graph_fixture.nodes)
    before_edges = deepcopy(project_graph_fixture.edges)

    merged = merge_graphs(project_graph_fixture, other)
    merged.nodes["p"].children.append("x")

    assert project_graph_fixture.nodes == before_nodes
    assert project_graph_fixture.edges == before_edges
    assert "x" not in project_graph_fixture.nodes


def test_merge_keeps_first_version(graph_builder):
    """Test the version of the first graph is kept."""
    first = graph_builder([_node("a", "A", "1.md")])
    first.meta.version = "9.9.9"
    second = graph_builder([_node("b", "B", "2.md")])
    assert merge_graphs(first, second).meta.version == "9.9.9"


def test_merge_rejects_non_graphs(project_graph_fixture):
    """Test merging something that is not a graph."""
    with pytest.raises(GraphOperationError):
        merge_graphs(project_graph_fixture, {"nodes": {}})


def test_merge_all(graph_builder):
    """Test folding a sequence of graphs left to right."""
    graphs = [
        graph_builder([_node("p", "One", "1.md")], file="1.md"),
        graph_builder([_node("q", "Two", "2.md")], file="2.md"),
        graph_builder([_node("p", "Three", "3.md")], file="3.md"),
    ]
    merged = merge_all(graphs)
    assert set(merged.nodes) == {"p", "q"}
    assert merged.nodes["p"].title == "Three"
    assert merged.meta.sources == ["1.md", "2.md", "3.md"]


def test_merge_all_empty():
    """Test merging nothing yields an empty graph."""
    merged = merge_all([])
    assert merged.nodes == {}
    assert merged.edges == []


def test_merge_all_single_graph_is_copied(project_graph_fixture):
    """Test a single graph is returned as a copy."""
    merged = merge_all([project_graph_fixture])
    assert merged == project_graph_fixture
    assert merged is not project_graph_fixture
