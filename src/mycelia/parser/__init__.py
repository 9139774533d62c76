"""
Document parsing and compilation.

Reads markdown/MDX markup into a document tree and compiles that tree into a
knowledge graph using a tag registry.
"""

from .ast import Document, Element, Text, iter_elements
from .compiler import DocumentCompiler, compile_document, compile_sources, compile_text
from .markup import MarkupReader, parse_markup
from .types import CompileResult, CompilerConfig, ParseError
from .utils import (
    create_node_from_mapping,
    extract_direct_text,
    generate_node_id,
    normalize_date,
    parse_date,
    slugify,
)

__all__ = [
    # Tree
    "Document",
    "Element",
    "Text",
    "iter_elements",
    "MarkupReader",
    "parse_markup",
    # Compiler
    "DocumentCompiler",
    "compile_document",
    "compile_text",
    "compile_sources",
    "CompileResult",
    "CompilerConfig",
    "ParseError",
    # Helpers
    "create_node_from_mapping",
    "extract_direct_text",
    "generate_node_id",
    "normalize_date",
    "parse_date",
    "slugify",
]
