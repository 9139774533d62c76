"""
Mycelia - Semantic Document to Knowledge Graph Compiler

This package compiles markdown/MDX documents annotated with semantic tags into a
typed knowledge graph. It includes:

- A configurable tag registry mapping tags onto three node primitives
- A markup reader and a two-pass document compiler
- Graph indexes, merging, integrity validation and serialization
- Projection of a graph into a single-rooted renderable tree
- Asynchronous source loading and artifact writing for the bundled CLI
"""

__version__ = "0.1.0"

# Version compatibility check
import sys

if sys.version_info < (3, 10):
    raise RuntimeError("Mycelia requires Python 3.10 or higher")

# Import commonly used components for easier access
from .core.graph import Graph
from .core.models import ContentNode, Edge, MetaNode, Node, ReferenceNode
from .core.registry import TagMapping, TagRegistry, create_registry
from .core.renderable import RenderableTree, project_graph
from .core.graph_operations import merge_all, merge_graphs, validate_graph
from .parser import CompileResult, compile_document, compile_sources, compile_text

__all__ = [
    "Graph",
    "Node",
    "ContentNode",
    "ReferenceNode",
    "MetaNode",
    "Edge",
    "TagMapping",
    "TagRegistry",
    "create_registry",
    "RenderableTree",
    "project_graph",
    "merge_graphs",
    "merge_all",
    "validate_graph",
    "CompileResult",
    "compile_document",
    "compile_text",
    "compile_sources",
]
