"""
Tests for the markup reader.
"""

import pytest

from mycelia.core.exceptions import MarkupSyntaxError
from mycelia.parser.ast import Document, Element, Text, iter_elements
from mycelia.parser.markup import find_code_regions, parse_attributes, parse_markup


def test_nested_elements_preserve_case():
    """Test tag and attribute names keep their original case."""
    doc = parse_markup('<Project id="p" createdAt="2024-01-01"><Task id="t">Do it</Task></Project>')

    assert isinstance(doc, Document)
    project = doc.children[0]
    assert isinstance(project, Element)
    assert project.name == "Project"
    assert project.attributes == {"id": "p", "createdAt": "2024-01-01"}
    task = project.children[0]
    assert task.name == "Task"
    assert task.children == [Text(value="Do it", start=task.children[0].start)]


def test_attribute_forms():
    """Test quoted, unquoted, boolean and expression attribute values."""
    name, attributes = parse_attributes("<Note a=\"x &amp; y\" b='single' c=bare flag d={1 + 2}>")
    assert name == "Note"
    assert attributes == {"a": "x & y", "b": "single", "c": "bare", "flag": True, "d": "1 + 2"}
    assert list(attributes) == ["a", "b", "c", "flag", "d"]


def test_self_closing_and_void_elements():
    """Test elements that have no closing tag."""
    doc = parse_markup('<Note id="n">before<Tag value="x" />mid<br>after</Note>')
    note = doc.children[0]

    names = [child.name for child in note.children if isinstance(child, Element)]
    assert names == ["Tag", "br"]
    texts = [child.value for child in note.children if isinstance(child, Text)]
    assert texts == ["before", "mid", "after"]


def test_positions():
    """Test line, column and offset of elements and text."""
    text = "# Title\n\n<Project id=\"p\">\n  Body\n</Project>\n"
    doc = parse_markup(text)
    project = next(iter_elements(doc))

    assert project.start.line == 3
    assert project.start.column == 1
    assert project.start.offset == text.index("<Project")
    assert project.end.line == 5
    assert project.end.offset == text.index("</Project>") + len("</Project>")
    body = project.children[0]
    assert body.start.line == 3
    assert body.start.offset == text.index(">", text.index("<Project")) + 1


def test_mismatched_close_tag_closes_nearest_match():
    """Test a closing tag that skips an open element."""
    doc = parse_markup("<Project><Task>one</Project><Note>two</Note>")
    assert [child.name for child in doc.children] == ["Project", "Note"]
    project = doc.children[0]
    assert project.children[0].name == "Task"


def test_stray_close_tag_ignored():
    """Test a closing tag without an open element."""
    doc = parse_markup("text</Task><Note>n</Note>")
    assert isinstance(doc.children[0], Text)
    assert doc.children[1].name == "Note"


def test_unclosed_elements_end_at_document_end():
    """Test elements left open at the end of the text."""
    text = "<Project><Task>open"
    doc = parse_markup(text)
    project = doc.children[0]
    assert project.end.offset == len(text)
    assert project.children[0].end.offset == len(text)


def test_plain_markdown_is_text():
    """Test markdown without tags yields only text."""
    doc = parse_markup("# Heading\n\nSome *prose* with a < b.\n")
    assert all(isinstance(child, Text) for child in doc.children)
    assert list(iter_elements(doc)) == []


def test_non_text_input_rejected():
    """Test non-string input raises MarkupSyntaxError."""
    with pytest.raises(MarkupSyntaxError):
        parse_markup(b"<Project />")


CODE_SAMPLE = (
    "# Doc\n\n```mdx\n<Project id=\"example\">demo</Project>\n```\n\n"
    "Inline `<Task id=\"t\">x</Task>` code.\n"
)


def test_code_regions():
    """Test fenced blocks and inline spans are located."""
    assert find_code_regions(CODE_SAMPLE) == [
        (CODE_SAMPLE.index("```mdx"), CODE_SAMPLE.index("```\n\nInline") + 3),
        (CODE_SAMPLE.index("`<Task"), CODE_SAMPLE.index("` code") + 1),
    ]


def test_tags_in_code_are_text():
    """Test tag syntax inside code is kept verbatim as text."""
    doc = parse_markup(CODE_SAMPLE)
    assert list(iter_elements(doc)) == []
    assert "".join(child.value for child in doc.children) == CODE_SAMPLE


def test_code_inside_element():
    """Test inline code within a tag stays text and keeps entities literal."""
    doc = parse_markup('<Note id="n">Use `<Tag />` here &amp; `a &amp; b`</Note>')
    assert [element.name for element in iter_elements(doc)] == ["Note"]
    note = doc.children[0]
    assert "".join(child.value for child in note.children) == "Use `<Tag />` here & `a &amp; b`"


def test_unclosed_fence_runs_to_end():
    """Test a fence without a closing line covers the rest of the text."""
    doc = parse_markup("~~~\n<Task>x</Task>\n")
    assert list(iter_elements(doc)) == []


def test_unmatched_backtick_is_literal():
    """Test a lone backtick does not hide the tags after it."""
    doc = parse_markup("a ` b <Task>x</Task>")
    assert [element.name for element in iter_elements(doc)] == ["Task"]


def test_positions_after_code():
    """Test element positions are unaffected by code before them."""
    text = "`<a>` and `&x;`\n<Task id=\"t\">x</Task>"
    task = next(iter_elements(parse_markup(text)))
    assert task.start.line == 2
    assert task.start.column == 1
    assert task.start.offset == text.index("<Task")
