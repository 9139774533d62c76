"""
Custom exceptions for the Mycelia compiler.

This module defines the hierarchy of exceptions used throughout the package. Most
document problems are reported as diagnostics rather than raised; the exceptions
below cover the cases where a caller must be told that an operation failed outright,
or where the compiler needs an internal signal that is later converted into a
diagnostic.
"""

from typing import Optional


class GraphOperationError(Exception):
    """
    Raised when graph operations fail.

    Examples:
        * Unknown node primitive encountered while indexing
        * Merge of objects that are not graphs
    """

    def __str__(self) -> str:
        """Format graph operation error message."""
        return f"Graph Operation Error: {super().__str__()}"


class MalformedDocumentError(Exception):
    """
    Raised when a document tree cannot be traversed.

    The compiler never lets this escape: it is caught at the document boundary
    and reported as a single error-severity diagnostic.

    Examples:
        * Root object is not a Document
        * Element without a tag name
    """


class MarkupSyntaxError(Exception):
    """
    Raised when raw document text cannot be read into an element tree.

    Attributes:
        line (Optional[int]): 1-based line of the failure, if known
        column (Optional[int]): 1-based column of the failure, if known
    """

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


class SerializationError(Exception):
    """
    Raised when a persisted graph cannot be loaded.

    This is the only unrecoverable failure mode of the package: a graph
    artifact that is not valid JSON or does not match the graph schema.

    Examples:
        * Truncated graph.json
        * Node with an unknown primitive
        * Missing indexes block
    """


class StorageError(Exception):
    """
    Raised when reading sources or writing artifacts fails.

    Examples:
        * Output directory not writable
        * Disk full while writing graph.json
    """


class ConfigurationError(Exception):
    """
    Raised when configuration is invalid.

    Examples:
        * Negative id suffix length
        * Registry that is not a TagRegistry
    """


class NodeNotFoundError(Exception):
    """
    Raised when a requested node is not found.

    Examples:
        * Node lookup by non-existent ID
    """
