"""
Tests for renderable tree projection.
"""

from mycelia.core.enums import EdgeType, NodePrimitive
from mycelia.core.models import ContentNode, Edge, MetaNode, ReferenceNode, SourceReference
from mycelia.core.renderable import ROOT_ID, node_title, node_url, project_graph


def _content(node_id: str, **kwargs) -> ContentNode:
    return ContentNode(id=node_id, type=kwargs.pop("type", "note"), source=SourceReference(file="t.md"), **kwargs)


def test_two_roots_share_virtual_root(graph_builder):
    """Test independent roots hang off a single virtual root."""
    graph = graph_builder([_content("a"), _content("b")])
    tree = project_graph(graph)

    assert tree.root.id == ROOT_ID
    assert tree.root.type == "root"
    assert tree.root.primitive == NodePrimitive.CONTENT
    assert [child.id for child in tree.root.children] == ["a", "b"]
    assert tree.meta.total_nodes == 3


def test_hierarchy_follows_children(project_graph_fixture):
    """Test contained nodes appear under their parent only."""
    tree = project_graph(project_graph_fixture)

    root_ids = [child.id for child in tree.root.children]
    assert root_ids == ["p", "tag1", "l1"]
    project = tree.root.children[0]
    assert [child.id for child in project.children] == ["t1", "t2"]
    assert project.props == {}
    assert tree.meta.warnings == []


def test_content_values(graph_builder):
    """Test the content shown for each primitive."""
    source = SourceReference(file="t.md")
    graph = graph_builder(
        [
            _content("c", content="Body"),
            _content("v", value=42),
            MetaNode(id="m", type="status", source=source, meta_type="status", value="done"),
            ReferenceNode(id="r", type="link", source=source, target="c"),
        ]
    )
    by_id = {child.id: child for child in project_graph(graph).root.children}
    assert by_id["c"].content == "Body"
    assert by_id["v"].content == 42
    assert by_id["m"].content == "done"
    assert by_id["r"].content is None


def test_resolved_references(graph_builder):
    """Test references edges become resolved references."""
    long_text = "x" * 300
    graph = graph_builder(
        [_content("a", content="see b"), _content("b", type="essay", title="Bee", content=long_text)],
        [Edge.create("a", "b", EdgeType.REFERENCES)],
    )
    tree = project_graph(graph)
    node_a = tree.root.children[0]

    assert len(node_a.resolved_refs) == 1
    ref = node_a.resolved_refs[0]
    assert ref.exists
    assert ref.title == "Bee"
    assert ref.type == "essay"
    assert ref.primitive == NodePrimitive.CONTENT
    assert ref.url == "/essay/b"
    assert ref.preview == "x" * 160
    assert tree.meta.unresolved_refs == []


def test_unresolved_reference(graph_builder):
    """Test a dangling references edge is kept and reported."""
    graph = graph_builder([_content("a")], [Edge.create("a", "ghost", EdgeType.REFERENCES)])
    tree = project_graph(graph)

    ref = tree.root.children[0].resolved_refs[0]
    assert ref.exists is False
    assert ref.type == "unknown"
    assert ref.primitive is None
    assert len(tree.meta.unresolved_refs) == 1
    unresolved = tree.meta.unresolved_refs[0]
    assert unresolved.source_node_id == "a"
    assert unresolved.target_id == "ghost"


def test_contains_edges_are_not_references(project_graph_fixture):
    """Test only references edges are resolved."""
    tree = project_graph(project_graph_fixture)
    assert tree.root.children[0].resolved_refs == []


def test_missing_child_is_skipped_with_warning(graph_builder):
    """Test a child id that does not exist."""
    graph = graph_builder([_content("a", children=["ghost"])])
    tree = project_graph(graph)
    assert tree.root.children[0].children == []
    assert any("ghost" in warning for warning in tree.meta.warnings)


def test_containment_cycle_terminates(graph_builder):
    """Test a containment cycle is cut and reported."""
    graph = graph_builder(
        [_content("top", children=["a"]), _content("a", children=["b"]), _content("b", children=["a"])],
        [
            Edge.create("top", "a", EdgeType.CONTAINS),
            Edge.create("a", "b", EdgeType.CONTAINS),
            Edge.create("b", "a", EdgeType.CONTAINS),
        ],
    )
    tree = project_graph(graph)
    top = tree.root.children[0]
    assert top.children[0].id == "a"
    assert top.children[0].children[0].id == "b"
    assert top.children[0].children[0].children == []
    assert any("cycle" in warning for warning in tree.meta.warnings)


def test_projection_does_not_mutate(project_graph_fixture):
    """Test the graph is left untouched."""
    before = project_graph_fixture.indexes
    project_graph(project_graph_fixture)
    assert project_graph_fixture.indexes == before
    assert project_graph_fixture.nodes["p"].children == ["t1", "t2"]


def test_node_url_slugs():
    """Test deep link construction."""
    assert node_url("Research Note", "My Id!") == "/research-note/my-id"
    assert node_url(None, None) == "/unknown/unknown"


def test_reference_title_is_text():
    """Test a bare title attribute on a reference falls back to its id."""
    source = SourceReference(file="t.md")
    bare = ReferenceNode(id="r1", type="ref", source=source, attributes={"title": True})
    named = ReferenceNode(id="r2", type="ref", source=source, attributes={"title": "Paper"})

    assert node_title(bare) == "r1"
    assert node_title(named) == "Paper"
