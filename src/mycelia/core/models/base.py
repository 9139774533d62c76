"""
Core domain models base module for the knowledge graph.

This module provides the source-location models and the validation helpers shared by
the node and edge models, together with the BaseNode protocol describing the fields
every primitive carries.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from ...utils.validation import validate_dataclass
from ..enums import NodePrimitive


def format_timestamp(dt: Optional[datetime] = None) -> str:
    """Format a datetime (default: now) as UTC ISO-8601 with millisecond precision."""
    if dt is None:
        dt = datetime.now(timezone.utc)
    elif dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def validate_identifier(name: str, value: str) -> None:
    """Validate that an identifier is a non-empty string."""
    if not value.strip():
        raise ValueError(f"{name} must be a non-empty string")


def validate_attributes(attributes: Dict[str, Any]) -> None:
    """Validate that attribute keys are strings."""
    for key in attributes:
        if not isinstance(key, str):
            raise ValueError(f"attribute key {key!r} must be a string")


@validate_dataclass
@dataclass
class Position:
    """
    A point in a source document.

    Attributes:
        line (int): 1-based line number
        column (int): 1-based column number
        offset (Optional[int]): 0-based character offset from the start of the document
    """

    line: int
    column: int
    offset: Optional[int] = None

    def __post_init__(self):
        if self.line < 1 or self.column < 1:
            raise ValueError("line and column must be positive")


@validate_dataclass
@dataclass
class SourceReference:
    """
    Where a node originated.

    Used for diagnostics and traceability, never for identity.

    Attributes:
        file (str): Path of the originating document
        start (Optional[Position]): Start of the originating element
        end (Optional[Position]): End of the originating element
    """

    file: str
    start: Optional[Position] = None
    end: Optional[Position] = None


@runtime_checkable
class BaseNode(Protocol):
    """Protocol defining the fields shared by all node primitives."""

    id: str
    type: str
    primitive: NodePrimitive
    source: SourceReference
    attributes: Dict[str, Any]
    created_at: Optional[str]
    updated_at: Optional[str]
