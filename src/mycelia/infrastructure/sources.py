"""
Source discovery, loading and artifact persistence.

This module keeps all file I/O out of the compiler. It handles:
- Expanding paths and glob patterns into document files
- Reading documents concurrently with aiofiles
- Writing the graph.json and renderable.json artifacts
- Loading a previously written graph artifact

Unreadable sources are reported as per-file diagnostics so that one bad file
does not stop a build. Failing to write or read an artifact raises StorageError.
"""

import asyncio
import glob
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import aiofiles

from ..core.enums import Severity
from ..core.exceptions import StorageError
from ..core.graph import Graph
from ..core.graph_operations.serialization import GraphSerializer, TreeSerializer
from ..core.renderable import RenderableTree
from ..parser.types import ParseError

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ("**/*.md", "**/*.mdx")
GRAPH_FILENAME = "graph.json"
TREE_FILENAME = "renderable.json"


def _is_pattern(path: str) -> bool:
    return any(char in path for char in "*?[")


@dataclass
class LoadResult:
    """
    Documents read from disk.

    Attributes:
        sources (List[Tuple[str, str]]): ``(content, filename)`` pairs in input order
        errors (List[ParseError]): One diagnostic per unreadable file
    """

    sources: List[Tuple[str, str]] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)


class SourceLoader:
    """
    Finds and reads source documents.

    Attributes:
        patterns (Tuple[str, ...]): Glob patterns applied inside directories
        encoding (str): Text encoding of source files
        max_concurrency (int): Upper bound on files open at once
    """

    def __init__(
        self,
        patterns: Sequence[str] = DEFAULT_PATTERNS,
        encoding: str = "utf-8",
        max_concurrency: int = 32,
    ):
        self.patterns = tuple(patterns)
        self.encoding = encoding
        self.max_concurrency = max_concurrency

    def discover(self, paths: Iterable[str]) -> List[str]:
        """
        Expand files, directories and glob patterns into a list of files.

        Directories are searched recursively with the loader's patterns. Literal
        paths that do not exist are kept so that loading reports them.

        Returns:
            Deduplicated file paths, sorted within each input path
        """
        found: Dict[str, None] = {}
        for path in paths:
            if os.path.isdir(path):
                matches = [
                    match
                    for pattern in self.patterns
                    for match in glob.glob(os.path.join(path, pattern), recursive=True)
                ]
            elif _is_pattern(path):
                matches = glob.glob(path, recursive=True)
                if not matches:
                    logger.warning(f"Pattern '{path}' matched no files")
            else:
                matches = [path]

            for match in sorted(matches):
                if not os.path.isdir(match):
                    found[match] = None

        logger.debug(f"Discovered {len(found)} source files")
        return list(found)

    async def read_file(self, path: str) -> str:
        """
        Read one source file.

        Raises:
            StorageError: If the file cannot be read or decoded
        """
        try:
            async with aiofiles.open(path, "r", encoding=self.encoding) as f:
                return await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read file {path}: {e}") from e

    async def load(self, paths: Iterable[str]) -> LoadResult:
        """
        Read files concurrently.

        Args:
            paths: Files to read, typically the output of ``discover``

        Returns:
            LoadResult with the readable documents and one error per failure
        """
        paths = list(paths)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def read(path: str) -> str:
            async with semaphore:
                return await self.read_file(path)

        contents = await asyncio.gather(*(read(path) for path in paths), return_exceptions=True)

        result = LoadResult()
        for path, content in zip(paths, contents):
            if isinstance(content, StorageError):
                logger.error(str(content))
                result.errors.append(
                    ParseError(message=str(content), file=path, severity=Severity.ERROR)
                )
            elif isinstance(content, BaseException):
                raise content
            else:
                result.sources.append((content, path))

        logger.info(f"Loaded {len(result.sources)} of {len(paths)} source files")
        return result


class ArtifactWriter:
    """Writes compiled artifacts to an output directory."""

    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent

    async def _write(self, path: str, text: str) -> None:
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(text)

    async def write(self, out_dir: str, graph: Graph, tree: RenderableTree) -> Dict[str, str]:
        """
        Write ``graph.json`` and ``renderable.json`` into ``out_dir``.

        Returns:
            Mapping of artifact name to the path written

        Raises:
            StorageError: If the directory or either file cannot be written
        """
        paths = {
            "graph": os.path.join(out_dir, GRAPH_FILENAME),
            "renderable": os.path.join(out_dir, TREE_FILENAME),
        }
        try:
            os.makedirs(out_dir, exist_ok=True)
            await asyncio.gather(
                self._write(paths["graph"], GraphSerializer.to_json(graph, indent=self.indent)),
                self._write(paths["renderable"], TreeSerializer.to_json(tree, indent=self.indent)),
            )
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write artifacts to {out_dir}: {str(e)}")
            raise StorageError(f"Artifact write failed: {str(e)}") from e

        logger.info(f"Wrote {GRAPH_FILENAME} and {TREE_FILENAME} to {out_dir}")
        return paths

    async def write_tree(self, path: str, tree: RenderableTree) -> None:
        """
        Write only a renderable tree.

        Raises:
            StorageError: If the file cannot be written
        """
        try:
            await self._write(path, TreeSerializer.to_json(tree, indent=self.indent))
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write {path}: {str(e)}")
            raise StorageError(f"Artifact write failed: {str(e)}") from e


async def load_graph(path: str) -> Graph:
    """
    Load a graph artifact written by ArtifactWriter.

    Raises:
        StorageError: If the file cannot be read
        SerializationError: If the content is not a valid graph
    """
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()
    except OSError as e:
        logger.error(f"Failed to read graph {path}: {str(e)}")
        raise StorageError(f"Graph loading failed: {str(e)}") from e
    return GraphSerializer.from_json(content)
