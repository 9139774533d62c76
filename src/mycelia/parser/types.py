"""
Compiler diagnostics, results and configuration.

Diagnostics are plain records rather than exceptions: a document compile always
returns a CompileResult, and the caller decides whether any error diagnostic is
fatal for its use case.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.enums import Severity
from ..core.exceptions import ConfigurationError
from ..core.graph import SCHEMA_VERSION, Graph
from ..core.registry import TagRegistry, create_registry
from ..utils.validation import RangeRule, validate_dataclass


@validate_dataclass
@dataclass
class ParseError:
    """
    Diagnostic produced while reading or compiling a document.

    Attributes:
        message (str): Human readable description
        file (str): Document the diagnostic refers to
        line (Optional[int]): 1-based line, if known
        column (Optional[int]): 1-based column, if known
        severity (Severity): Error or warning
    """

    message: str
    file: str
    line: Optional[int] = None
    column: Optional[int] = None
    severity: Severity = Severity.ERROR

    def __post_init__(self):
        self.severity = Severity(self.severity)

    def __str__(self) -> str:
        location = self.file
        if self.line is not None:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        return f"{location}: {self.severity.value}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert the diagnostic to a JSON-compatible dictionary."""
        data: Dict[str, Any] = {
            "message": self.message,
            "file": self.file,
            "severity": self.severity.value,
        }
        if self.line is not None:
            data["line"] = self.line
        if self.column is not None:
            data["column"] = self.column
        return data


@dataclass
class CompileResult:
    """
    Outcome of compiling one or more documents.

    Attributes:
        graph (Graph): Compiled graph, possibly partial when errors occurred
        errors (List[ParseError]): Structural diagnostics
        warnings (List[str]): Recoverable problems such as unknown tags
    """

    graph: Graph
    errors: List[ParseError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Whether any error-severity diagnostic was produced."""
        return any(error.severity == Severity.ERROR for error in self.errors)


_SUFFIX_BYTES_RULE = RangeRule(min_value=1, max_value=32)
_SLUG_LENGTH_RULE = RangeRule(min_value=1)


@validate_dataclass
@dataclass
class CompilerConfig:
    """
    Compiler configuration.

    Attributes:
        registry (TagRegistry): Tag registry consulted for every element
        version (str): Graph schema version stamped into graph metadata
        id_suffix_bytes (int): Random bytes in generated id suffixes
        max_slug_length (int): Characters of direct text used for generated ids
        infer_references (bool): Whether to add implicit "references" edges
    """

    registry: TagRegistry = field(default_factory=create_registry)
    version: str = SCHEMA_VERSION
    id_suffix_bytes: int = 4
    max_slug_length: int = 50
    infer_references: bool = True

    def __post_init__(self):
        if not isinstance(self.registry, TagRegistry):
            raise ConfigurationError("registry must be a TagRegistry")
        if not _SUFFIX_BYTES_RULE.validate(self.id_suffix_bytes):
            raise ConfigurationError(
                f"id_suffix_bytes must be between 1 and 32, got {self.id_suffix_bytes!r}"
            )
        if not _SLUG_LENGTH_RULE.validate(self.max_slug_length):
            raise ConfigurationError(
                f"max_slug_length must be positive, got {self.max_slug_length!r}"
            )
        if not self.version:
            raise ConfigurationError("version must be a non-empty string")
