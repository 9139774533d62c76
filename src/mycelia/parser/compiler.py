"""
Document compiler.

Turns a document tree into a knowledge graph in two passes:

1. Node creation: every element whose tag is known to the registry becomes a
   node; ``parent`` and ``to``/``target`` attributes become edges.
2. Hierarchy: each node is attached to its nearest enclosing node, producing
   ``contains`` edges and the mirrored ``ContentNode.children`` lists.

A post-pass then infers ``references`` edges from node ids mentioned in content,
and the indexes and statistics are rebuilt from scratch.

Compiling never raises for problems in the document. Unknown tags and rejected
attributes become warnings; a malformed tree becomes a single error diagnostic
and the graph assembled up to that point is still returned.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple, Union

from ..core.enums import EdgeType, Severity
from ..core.exceptions import MalformedDocumentError, MarkupSyntaxError
from ..core.graph import Graph, create_empty_graph
from ..core.graph_operations.merge import merge_all
from ..core.models import ContentNode, Edge, MetaNode, SourceReference
from ..core.registry import TagMapping, TagRegistry
from .ast import Document, Element, Text
from .markup import parse_markup
from .types import CompileResult, CompilerConfig, ParseError
from .utils import (
    create_node_from_mapping,
    extract_direct_text,
    generate_node_id,
    normalize_date,
    parse_date,
)

logger = logging.getLogger(__name__)

_DATE_ATTRIBUTES = {
    "created_at": ("created_at", "createdAt"),
    "updated_at": ("updated_at", "updatedAt"),
}


@dataclass
class _Compilation:
    """Mutable state of one document compile."""

    filename: str
    graph: Graph
    warnings: List[str] = field(default_factory=list)
    element_ids: Dict[int, str] = field(default_factory=dict)
    edge_ids: Set[str] = field(default_factory=set)
    current: Optional[Element] = None

    def add_edge(self, from_node: str, to_node: str, edge_type: EdgeType) -> bool:
        edge = Edge.create(from_node, to_node, edge_type)
        if edge.id in self.edge_ids:
            return False
        self.edge_ids.add(edge.id)
        self.graph.edges.append(edge)
        return True

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)


class DocumentCompiler:
    """
    Compiles document trees into graphs.

    The compiler only reads its configuration, so one instance may compile any
    number of documents.
    """

    def __init__(self, config: Optional[CompilerConfig] = None):
        self.config = config or CompilerConfig()

    @property
    def registry(self) -> TagRegistry:
        return self.config.registry

    def compile(self, root: Any, filename: str) -> CompileResult:
        """
        Compile one document tree.

        Args:
            root: Document tree, normally produced by ``parse_markup``
            filename: Source file name recorded on nodes and diagnostics

        Returns:
            CompileResult with the graph and any diagnostics
        """
        state = _Compilation(
            filename=filename, graph=create_empty_graph(self.config.version, [filename])
        )
        errors: List[ParseError] = []

        try:
            if not isinstance(root, Document):
                raise MalformedDocumentError(
                    f"Expected a Document root, got {type(root).__name__}"
                )
            for child in self._children(root):
                self._create_nodes(child, state)
            state.current = None
            for child in root.children:
                self._build_hierarchy(child, None, state)
            self._reconcile_children(state)
            if self.config.infer_references:
                self._infer_references(state)
        except Exception as e:
            logger.error(f"Failed to compile {filename}: {e}")
            start = state.current.start if state.current is not None else None
            errors.append(
                ParseError(
                    message=f"Parse error: {e}",
                    file=filename,
                    line=start.line if start else None,
                    column=start.column if start else None,
                    severity=Severity.ERROR,
                )
            )

        state.graph.refresh()
        logger.info(
            f"Compiled {filename}: {state.graph.meta.stats.node_count} nodes, "
            f"{state.graph.meta.stats.edge_count} edges, {len(state.warnings)} warnings"
        )
        return CompileResult(graph=state.graph, errors=errors, warnings=state.warnings)

    def _children(self, node: Union[Document, Element]) -> List[Union[Element, Text]]:
        children = getattr(node, "children", None)
        if not isinstance(children, list):
            raise MalformedDocumentError(f"Node {node!r} has no child list")
        for child in children:
            if not isinstance(child, (Element, Text)):
                raise MalformedDocumentError(f"Unexpected tree node: {child!r}")
        return children

    def _create_nodes(self, node: Union[Element, Text], state: _Compilation) -> None:
        """First pass: depth-first node creation."""
        if isinstance(node, Text):
            return

        state.current = node
        if not isinstance(node.name, str) or not node.name:
            raise MalformedDocumentError("Element without a tag name")

        self._create_node(node, state)
        for child in self._children(node):
            self._create_nodes(child, state)

    def _apply_hooks(
        self, element: Element, mapping: TagMapping, state: _Compilation
    ) -> Optional[Dict[str, Any]]:
        """
        Merge default attributes and run the tag's validate and transform hooks.

        Returns:
            The final attributes, or None when the element is rejected
        """
        tag_name = element.name
        attributes: Dict[str, Any] = {**(mapping.attributes or {}), **element.attributes}
        rejected = f"Invalid attributes for tag '{tag_name}' in {state.filename}"
        try:
            if mapping.validate is not None and not mapping.validate(attributes):
                state.warn(rejected)
                return None
            if mapping.transform is not None:
                attributes = mapping.transform(dict(attributes))
        except Exception as e:
            state.warn(f"{rejected}: {e}")
            return None

        if not isinstance(attributes, dict):
            state.warn(f"{rejected}: transform returned {type(attributes).__name__}")
            return None
        return attributes

    def _create_node(self, element: Element, state: _Compilation) -> None:
        tag_name = element.name
        mapping = self.registry.lookup(tag_name)
        if mapping is None:
            state.warn(f"Unknown tag '{tag_name}' in {state.filename}")
            return

        attributes = self._apply_hooks(element, mapping, state)
        if attributes is None:
            return

        text = extract_direct_text(element, self.registry)
        node_id = generate_node_id(
            tag_name.lower(),
            attributes.get("id"),
            text,
            max_slug_length=self.config.max_slug_length,
            suffix_bytes=self.config.id_suffix_bytes,
        )
        node = create_node_from_mapping(
            node_id,
            tag_name,
            mapping,
            attributes,
            text,
            SourceReference(file=state.filename, start=element.start, end=element.end),
        )

        for field_name, names in _DATE_ATTRIBUTES.items():
            raw = next((attributes[name] for name in names if attributes.get(name)), None)
            # bare attributes carry True, not a date
            if raw is None or isinstance(raw, bool):
                continue
            if parse_date(raw) is None:
                state.warn(f"Unparsable date '{raw}' on '{node_id}' in {state.filename}")
            setattr(node, field_name, normalize_date(raw))

        if node_id in state.graph.nodes:
            logger.debug(f"Node '{node_id}' redefined in {state.filename}; keeping the later one")
        state.graph.nodes[node_id] = node
        state.element_ids[id(element)] = node_id
        logger.debug(f"Created {node.primitive.value} node '{node_id}' from <{tag_name}>")

        parent = attributes.get("parent")
        if isinstance(parent, str) and parent:
            state.add_edge(parent, node_id, EdgeType.CONTAINS)

        target = attributes.get("to") or attributes.get("target")
        if isinstance(target, str) and target:
            state.add_edge(node_id, target, EdgeType.REFERENCES)

    def _build_hierarchy(
        self, node: Union[Element, Text], parent_id: Optional[str], state: _Compilation
    ) -> None:
        """Second pass: attach nodes to their nearest enclosing node."""
        if isinstance(node, Text):
            return

        state.current = node
        node_id = state.element_ids.get(id(node))
        if node_id is not None and parent_id is not None and node_id != parent_id:
            parent = state.graph.nodes.get(parent_id)
            child = state.graph.nodes.get(node_id)
            if isinstance(parent, ContentNode) and child is not None:
                parent.add_child(node_id)
                state.add_edge(parent_id, node_id, EdgeType.CONTAINS)
            if isinstance(child, MetaNode) and child.target is None:
                child.target = parent_id

        next_parent = node_id if node_id is not None else parent_id
        for child in node.children:
            self._build_hierarchy(child, next_parent, state)

    def _reconcile_children(self, state: _Compilation) -> None:
        """Rebuild every children list from the contains edges, in edge order."""
        children: Dict[str, List[str]] = {}
        for edge in state.graph.edges:
            if edge.type == EdgeType.CONTAINS:
                children.setdefault(edge.from_node, []).append(edge.to_node)

        for node_id, node in state.graph.nodes.items():
            if isinstance(node, ContentNode):
                node.children = children.get(node_id, [])

    def _infer_references(self, state: _Compilation) -> None:
        """Add a references edge for every node id mentioned in another node's content."""
        node_ids = list(state.graph.nodes)
        for node_id, node in state.graph.nodes.items():
            if not isinstance(node, ContentNode) or not node.content:
                continue
            for candidate in node_ids:
                if candidate != node_id and candidate in node.content:
                    if state.add_edge(node_id, candidate, EdgeType.REFERENCES):
                        logger.debug(f"Inferred reference {node_id} -> {candidate}")


def compile_document(
    root: Any, filename: str, registry: Optional[TagRegistry] = None
) -> CompileResult:
    """Compile one document tree with the given (or default) registry."""
    config = CompilerConfig(registry=registry) if registry is not None else CompilerConfig()
    return DocumentCompiler(config).compile(root, filename)


def compile_text(
    text: str,
    filename: str,
    registry: Optional[TagRegistry] = None,
    config: Optional[CompilerConfig] = None,
) -> CompileResult:
    """
    Read markup text and compile it.

    A document that cannot be read yields one error diagnostic and an empty graph.
    """
    if config is None:
        config = CompilerConfig(registry=registry) if registry is not None else CompilerConfig()
    try:
        root = parse_markup(text, filename)
    except MarkupSyntaxError as e:
        logger.error(f"Failed to read {filename}: {e}")
        return CompileResult(
            graph=create_empty_graph(config.version, [filename]),
            errors=[ParseError(message=str(e), file=filename, line=e.line, column=e.column)],
        )
    return DocumentCompiler(config).compile(root, filename)


def compile_sources(
    sources: Iterable[Tuple[str, str]],
    registry: Optional[TagRegistry] = None,
    config: Optional[CompilerConfig] = None,
) -> CompileResult:
    """
    Compile several ``(content, filename)`` pairs into one graph.

    Documents are compiled independently and folded with ``merge_all`` in input
    order, so a node id defined in several files resolves to the last file.
    """
    if config is None:
        config = CompilerConfig(registry=registry) if registry is not None else CompilerConfig()

    graphs: List[Graph] = []
    errors: List[ParseError] = []
    warnings: List[str] = []
    for content, filename in sources:
        try:
            result = compile_text(content, filename, config=config)
        except Exception as e:
            logger.error(f"Failed to compile {filename}: {e}")
            result = CompileResult(
                graph=create_empty_graph(config.version, [filename]),
                errors=[ParseError(message=f"Failed to compile: {e}", file=filename)],
            )
        graphs.append(result.graph)
        errors.extend(result.errors)
        warnings.extend(result.warnings)

    graph = merge_all(graphs) if graphs else create_empty_graph(config.version)
    logger.info(
        f"Compiled {len(graphs)} documents into {graph.meta.stats.node_count} nodes "
        f"and {graph.meta.stats.edge_count} edges"
    )
    return CompileResult(graph=graph, errors=errors, warnings=warnings)
