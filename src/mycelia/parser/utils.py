"""
Helpers used by the document compiler.

Pure functions for id generation, text extraction, date normalisation and node
construction from a tag mapping.
"""

import re
import secrets
import unicodedata
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from ..core.enums import NodePrimitive
from ..core.models import (
    Node,
    SourceReference,
    create_content_node,
    create_meta_node,
    create_reference_node,
    format_timestamp,
)
from ..core.registry import TagMapping, TagRegistry
from .ast import Element, Text

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y-%m",
    "%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
)


def slugify(text: str) -> str:
    """
    Convert text to a lower-case, hyphen separated slug.

    Example:
        slugify("Hello World!")  # -> "hello-world"
    """
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")


def generate_node_id(
    tag_name: str,
    candidate_id: Optional[Any] = None,
    fallback_content: Optional[str] = None,
    max_slug_length: int = 50,
    suffix_bytes: int = 4,
) -> str:
    """
    Pick the id of a node.

    An explicit non-empty id is used verbatim. Otherwise the id is a slug of the
    leading text (or of the tag name when that slug is empty) plus a random hex
    suffix, so two anonymous elements with the same text get different ids.
    """
    if isinstance(candidate_id, str) and candidate_id.strip():
        return candidate_id

    base = slugify((fallback_content or "")[:max_slug_length]) or slugify(tag_name) or "node"
    return f"{base}-{secrets.token_hex(suffix_bytes)}"


def extract_direct_text(element: Element, registry: TagRegistry) -> str:
    """
    Collect the text of an element, excluding text inside nested recognised tags.

    Text inside unrecognised tags is kept. Whitespace runs collapse to one space.
    """
    parts: List[str] = []

    def collect(child: Union[Element, Text]) -> None:
        if isinstance(child, Text):
            parts.append(child.value)
        elif isinstance(child, Element) and registry.lookup(child.name) is None:
            for grandchild in child.children:
                collect(grandchild)

    for child in element.children:
        collect(child)
    return re.sub(r"\s+", " ", "".join(parts)).strip()


def parse_date(value: Any) -> Optional[str]:
    """
    Parse a date attribute into UTC ISO-8601 with milliseconds.

    Accepts ISO-8601 (with or without time and offset) and a few common
    written forms. Naive values are taken as UTC.

    Returns:
        The normalised timestamp, or None when the value cannot be parsed
    """
    text = str(value).strip()
    try:
        return format_timestamp(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass
    for date_format in _DATE_FORMATS:
        try:
            return format_timestamp(datetime.strptime(text, date_format))
        except ValueError:
            continue
    return None


def normalize_date(value: Any) -> Optional[str]:
    """Normalise a date attribute, passing unparsable values through as strings."""
    if value is None or value is True or value == "":
        return None
    parsed = parse_date(value)
    return parsed if parsed is not None else str(value)


def _string(value: Any) -> Optional[str]:
    if value is None or value is True or value is False:
        return None
    return str(value)


def create_node_from_mapping(
    node_id: str,
    tag_name: str,
    mapping: TagMapping,
    attributes: Dict[str, Any],
    content: str,
    source: SourceReference,
) -> Node:
    """
    Build the node for a recognised element.

    Args:
        node_id: Id chosen for the node
        tag_name: Element name as written in the document
        mapping: Registry entry for the tag
        attributes: Merged (defaults then explicit) and transformed attributes
        content: Direct text of the element
        source: Originating document location

    Raises:
        ValueError: If the mapping names an unknown primitive
    """
    node_type = _string(attributes.get("type")) or tag_name.lower()

    if mapping.primitive is NodePrimitive.CONTENT:
        return create_content_node(
            id=node_id,
            type=node_type,
            source=source,
            title=_string(attributes.get("title"))
            or _string(attributes.get("name"))
            or content.split("\n")[0]
            or node_id,
            content=content or None,
            value=attributes.get("value"),
            attributes=attributes,
        )
    if mapping.primitive is NodePrimitive.REFERENCE:
        return create_reference_node(
            id=node_id,
            type=node_type,
            source=source,
            target=_string(attributes.get("to")) or _string(attributes.get("target")) or "",
            link_type=_string(attributes.get("link_type")) or "references",
            attributes=attributes,
        )
    if mapping.primitive is NodePrimitive.META:
        return create_meta_node(
            id=node_id,
            type=node_type,
            source=source,
            meta_type=_string(attributes.get("meta_type")) or "tag",
            value=content or _string(attributes.get("value")) or "",
            target=_string(attributes.get("target")),
            attributes=attributes,
        )
    raise ValueError(f"Unknown primitive: {mapping.primitive}")
