"""
Tests for custom exceptions.
"""

import pytest

from mycelia.core.exceptions import (
    ConfigurationError,
    GraphOperationError,
    MarkupSyntaxError,
    NodeNotFoundError,
)
from mycelia.core.graph import create_empty_graph


def test_graph_operation_error_message():
    """Test graph operation error message formatting."""
    error = GraphOperationError("test message")
    assert str(error) == "Graph Operation Error: test message"


def test_markup_syntax_error_location():
    """Test markup errors carry their location."""
    error = MarkupSyntaxError("bad tag", line=3, column=7)
    assert str(error) == "bad tag"
    assert (error.line, error.column) == (3, 7)


def test_node_not_found_raised_by_lookup():
    """Test a missing node lookup raises NodeNotFoundError."""
    with pytest.raises(NodeNotFoundError, match="'missing'"):
        create_empty_graph().get_node("missing")


def test_configuration_error_is_exception():
    """Test configuration errors are plain exceptions."""
    assert issubclass(ConfigurationError, Exception)
