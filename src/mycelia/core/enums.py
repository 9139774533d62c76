"""
Enumerations for node primitives, edge types and diagnostic severities.

This module defines the closed vocabularies used throughout the compiler:
- NodePrimitive: The three structural node kinds every tag maps onto
- EdgeType: The relationship kinds that may connect two nodes
- Severity: Diagnostic severities reported by the compiler

All enumerations are string-valued so that they serialize to JSON unchanged.
"""

from enum import Enum


class NodePrimitive(str, Enum):
    """
    Structural kind of a node.

    Every user-facing tag is mapped onto exactly one primitive, which decides
    the node's shape:
    - CONTENT: Titled text or value with ordered children (e.g. project, task)
    - REFERENCE: Pointer to another node (e.g. link, collaborator)
    - META: Annotation about another node (e.g. tag, comment)
    """

    CONTENT = "Content"
    REFERENCE = "Reference"
    META = "Meta"


class EdgeType(str, Enum):
    """Enumeration of relationship types between nodes."""

    CONTAINS = "contains"  # Parent contains child
    REFERENCES = "references"  # Node references another node
    MENTIONS = "mentions"  # Node mentions a person or concept
    COLLABORATES = "collaborates"  # Collaboration between nodes
    DERIVES = "derives"  # Derived or aggregated data
    TAGS = "tags"  # Node is tagged with meta
    CUSTOM = "custom"  # User-defined relationship


class Severity(str, Enum):
    """Severity of a compiler diagnostic."""

    ERROR = "error"
    WARNING = "warning"
