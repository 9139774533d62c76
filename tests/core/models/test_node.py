"""
Tests for node models.
"""

import pytest

from mycelia.core.enums import NodePrimitive
from mycelia.core.models import (
    ContentNode,
    MetaNode,
    ReferenceNode,
    SourceReference,
    create_content_node,
    create_meta_node,
    create_reference_node,
    is_content_node,
    is_meta_node,
    is_reference_node,
)


def test_content_node_defaults(source):
    """Test ContentNode creation with defaults."""
    node = ContentNode(id="p", type="project", source=source)
    assert node.primitive == NodePrimitive.CONTENT
    assert node.children == []
    assert node.attributes == {}
    assert node.title is None


def test_primitive_is_fixed_per_class(source):
    """Test each primitive class carries its own primitive."""
    assert ReferenceNode(id="r", type="link", source=source).primitive == NodePrimitive.REFERENCE
    assert MetaNode(id="m", type="tag", source=source).primitive == NodePrimitive.META


def test_primitive_not_settable_through_init(source):
    """Test primitive is not an init argument."""
    with pytest.raises(TypeError):
        ContentNode(id="p", type="project", source=source, primitive=NodePrimitive.META)


def test_empty_id_rejected(source):
    """Test node validation with empty id."""
    with pytest.raises(ValueError, match="id must be a non-empty string"):
        ContentNode(id="  ", type="project", source=source)


def test_invalid_field_type_rejected(source):
    """Test runtime type checking of node fields."""
    with pytest.raises(TypeError, match="Invalid field types in ContentNode"):
        ContentNode(id="p", type="project", source=source, children="t1")


def test_non_string_attribute_key_rejected(source):
    """Test attribute keys must be strings."""
    with pytest.raises((ValueError, TypeError)):
        MetaNode(id="m", type="tag", source=source, attributes={1: "x"})


def test_add_child_is_idempotent(source):
    """Test add_child never duplicates a child id."""
    node = ContentNode(id="p", type="project", source=source)
    assert node.add_child("t1") is True
    assert node.add_child("t2") is True
    assert node.add_child("t1") is False
    assert node.children == ["t1", "t2"]


def test_factories_copy_collections(source):
    """Test factory helpers do not share caller collections."""
    attributes = {"status": "open"}
    children = ["a"]
    node = create_content_node("p", "project", source, children=children, attributes=attributes)
    node.children.append("b")
    node.attributes["status"] = "closed"
    assert children == ["a"]
    assert attributes == {"status": "open"}


def test_reference_and_meta_factories(source):
    """Test reference and meta factories."""
    ref = create_reference_node("r", "link", source, target="p", link_type="references")
    meta = create_meta_node("m", "tag", source, meta_type="tag", value="python", target="p")
    assert ref.target == "p"
    assert meta.value == "python"
    assert meta.target == "p"


def test_type_guards(source):
    """Test exhaustive primitive guards."""
    content = ContentNode(id="c", type="note", source=source)
    ref = ReferenceNode(id="r", type="ref", source=source)
    meta = MetaNode(id="m", type="tag", source=source)

    assert is_content_node(content) and not is_content_node(ref)
    assert is_reference_node(ref) and not is_reference_node(meta)
    assert is_meta_node(meta) and not is_meta_node(content)


def test_source_reference_positions():
    """Test positions are validated."""
    from mycelia.core.models import Position

    ref = SourceReference(file="a.md", start=Position(line=1, column=1, offset=0))
    assert ref.start.line == 1
    with pytest.raises(ValueError):
        Position(line=0, column=1)


def test_all_primitives_satisfy_base_protocol(source):
    """Test every primitive carries the shared node fields."""
    from mycelia.core.models import BaseNode

    for node in (
        ContentNode(id="c", type="note", source=source),
        ReferenceNode(id="r", type="ref", source=source),
        MetaNode(id="m", type="tag", source=source),
    ):
        assert isinstance(node, BaseNode)
