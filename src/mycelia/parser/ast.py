"""
Document tree types.

The compiler walks a small, format-neutral tree: a Document holding Elements
(tag-like markup with attributes) and Text runs. Any reader producing this tree
can feed the compiler; ``mycelia.parser.markup`` is the bundled one.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from ..core.models import Position


@dataclass
class Text:
    """A run of character data."""

    value: str
    start: Optional[Position] = None


@dataclass
class Element:
    """
    A tag-like element.

    Attributes:
        name (str): Tag name in its original case
        attributes (Dict[str, Any]): Attribute values in source order; boolean
            attributes are True, expression values are the raw expression text
        children (List[Union[Element, Text]]): Child elements and text runs
        start (Optional[Position]): Position of the opening tag
        end (Optional[Position]): Position just past the closing tag
    """

    name: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    children: List[Union["Element", Text]] = field(default_factory=list)
    start: Optional[Position] = None
    end: Optional[Position] = None


@dataclass
class Document:
    """Root of a document tree."""

    children: List[Union[Element, Text]] = field(default_factory=list)


TreeNode = Union[Document, Element, Text]


def iter_elements(node: Union[Document, Element]) -> Iterator[Element]:
    """Yield every element below a node, depth-first in document order."""
    for child in node.children:
        if isinstance(child, Element):
            yield child
            yield from iter_elements(child)
