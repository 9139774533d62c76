"""
Validation package for Mycelia.

This package provides validation utilities used to keep the node, edge and
configuration dataclasses type-safe at runtime.
"""

from .base import (
    DataclassRule,
    RangeRule,
    ValidationResult,
    ValidationRule,
    validate_dataclass,
)

__all__ = [
    "ValidationResult",
    "ValidationRule",
    "RangeRule",
    "DataclassRule",
    "validate_dataclass",
]
