"""
Tag registry mapping user-facing tag names onto node primitives.

A registry is a mapping of lower-cased tag names to TagMapping entries. Two styles of
customisation are supported:

- ``register_tag`` mutates a given registry, for simple default-setup call sites.
- ``with_tag`` / ``with_tags`` return a new registry and leave the original untouched,
  for contexts such as a long-lived server that customises registries per request.

The immutable variants are copy-on-write over the mutable core. Unknown tag names are
not an error here; the compiler decides how to react.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Mapping, MutableMapping, Optional

from .enums import NodePrimitive
from ..utils.validation import validate_dataclass

AttributeValidator = Callable[[Dict[str, Any]], bool]
AttributeTransform = Callable[[Dict[str, Any]], Dict[str, Any]]


@validate_dataclass
@dataclass
class TagMapping:
    """
    How a tag becomes a node.

    Attributes:
        primitive (NodePrimitive): Primitive the tag maps to
        attributes (Optional[Dict[str, Any]]): Defaults merged under tag-provided attributes
        validate (Optional[Callable]): Predicate over the merged attributes
        transform (Optional[Callable]): Rewrites the merged attributes
        description (Optional[str]): Human readable description
    """

    primitive: NodePrimitive
    attributes: Optional[Dict[str, Any]] = None
    validate: Optional[AttributeValidator] = None
    transform: Optional[AttributeTransform] = None
    description: Optional[str] = None

    def __post_init__(self):
        # Plain primitive names ("Content", ...) are accepted from configuration files
        self.primitive = NodePrimitive(self.primitive)


def _content(description: str) -> TagMapping:
    return TagMapping(NodePrimitive.CONTENT, description=description)


def _reference(link_type: str, description: str) -> TagMapping:
    return TagMapping(NodePrimitive.REFERENCE, {"link_type": link_type}, description=description)


def _meta(meta_type: str, description: str) -> TagMapping:
    return TagMapping(NodePrimitive.META, {"meta_type": meta_type}, description=description)


DEFAULT_TAG_MAPPINGS: Dict[str, TagMapping] = {
    # Projects and writing
    "project": _content("A project with tasks and notes"),
    "essay": _content("Long-form writing"),
    "research": _content("Research notes or findings"),
    "section": _content("A section grouping other content"),
    "task": _content("A unit of work"),
    "note": _content("A short note"),
    "log": _content("A log entry"),
    "skill": _content("A skill or competency"),
    "person": _content("A person"),
    # Media
    "song": _content("A song"),
    "track": _content("A music track"),
    "book": _content("A book"),
    "film": _content("A film"),
    # References
    "reference": _reference("references", "Reference to another node"),
    "ref": _reference("references", "Short form of reference"),
    "link": _reference("references", "Link to another node"),
    "collaborator": _reference("collaborates", "Collaboration with another node"),
    # Metadata
    "tag": _meta("tag", "Tag annotating the enclosing node"),
    "comment": _meta("comment", "Comment on the enclosing node"),
    "annotation": _meta("annotation", "Annotation on the enclosing node"),
    "date": _meta("date", "Date attached to the enclosing node"),
    "status": _meta("status", "Status of the enclosing node"),
}


class TagRegistry(MutableMapping[str, TagMapping]):
    """
    Mutable mapping of tag names to TagMapping entries.

    Keys are stored lower-cased, so ``registry["Project"]`` and
    ``registry["project"]`` address the same entry.
    """

    def __init__(self, mappings: Optional[Mapping[str, TagMapping]] = None):
        self._mappings: Dict[str, TagMapping] = {}
        if mappings:
            for name, mapping in mappings.items():
                self[name] = mapping

    def __getitem__(self, tag_name: str) -> TagMapping:
        return self._mappings[tag_name.lower()]

    def __setitem__(self, tag_name: str, mapping: TagMapping) -> None:
        if not isinstance(mapping, TagMapping):
            raise TypeError(f"mapping for tag '{tag_name}' must be a TagMapping")
        self._mappings[tag_name.lower()] = mapping

    def __delitem__(self, tag_name: str) -> None:
        del self._mappings[tag_name.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mappings)

    def __len__(self) -> int:
        return len(self._mappings)

    def __repr__(self) -> str:
        return f"TagRegistry({sorted(self._mappings)})"

    def lookup(self, tag_name: str) -> Optional[TagMapping]:
        """Return the mapping for a tag name, or None when the tag is unknown."""
        return self._mappings.get(tag_name.lower())

    def copy(self) -> "TagRegistry":
        """Return an independent registry with the same entries."""
        return TagRegistry(self._mappings)


def create_registry(custom_mappings: Optional[Mapping[str, TagMapping]] = None) -> TagRegistry:
    """Create a new registry with the default mappings plus any custom ones."""
    registry = TagRegistry(DEFAULT_TAG_MAPPINGS)
    if custom_mappings:
        registry.update(custom_mappings)
    return registry


def register_tag(registry: TagRegistry, tag_name: str, mapping: TagMapping) -> None:
    """Register (or overwrite) a tag mapping in place."""
    registry[tag_name] = mapping


def get_tag_mapping(registry: TagRegistry, tag_name: str) -> Optional[TagMapping]:
    """Get a tag mapping, or None if the tag is not registered."""
    return registry.lookup(tag_name)


def with_tag(registry: TagRegistry, tag_name: str, mapping: TagMapping) -> TagRegistry:
    """Return a new registry with an additional tag; the original is untouched."""
    updated = registry.copy()
    updated[tag_name] = mapping
    return updated


def with_tags(registry: TagRegistry, mappings: Mapping[str, TagMapping]) -> TagRegistry:
    """Return a new registry with several additional tags; the original is untouched."""
    updated = registry.copy()
    updated.update(mappings)
    return updated
