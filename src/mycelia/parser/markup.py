"""
Markup reader producing the document tree walked by the compiler.

Markdown and MDX documents mix prose with JSX-like tags. Only the tags matter to
the compiler, so the reader tokenises the text with the standard library
``html.parser`` and keeps everything else as plain text runs. Fenced code blocks
and inline code spans are always text, even when they show tag syntax.

``HTMLParser`` lower-cases tag and attribute names and does not understand
``{expression}`` values, so attributes are re-read from the raw start tag.
"""

import html
import logging
import re
from bisect import bisect_right
from html.parser import HTMLParser
from typing import Any, Dict, List, Optional, Tuple, Union

from ..core.exceptions import MarkupSyntaxError
from ..core.models import Position
from .ast import Document, Element, Text

logger = logging.getLogger(__name__)

# "link" and "track" are semantic tags in this markup, so they are not void here
VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "meta", "param", "source", "wbr"}
)

_TAG_NAME_RE = re.compile(r"<\s*([^\s/>]+)")
_ATTRIBUTE_RE = re.compile(
    r"""([^\s"'<>/=]+)(?:\s*=\s*("[^"]*"|'[^']*'|\{[^}]*\}|[^\s"'=<>`]+))?"""
)
_FENCE_OPEN_RE = re.compile(r" {0,3}(`{3,}|~{3,})(.*)$")
_FENCE_CLOSE_RE = re.compile(r" {0,3}(`{3,}|~{3,})[ \t]*$")
_BACKTICKS_RE = re.compile(r"`+")
_BLANK_LINE_RE = re.compile(r"\n[ \t]*\r?\n")

# Stand-ins for "<" and "&" inside code, so HTMLParser reads code as plain text
_CODE_LT = "\ufdd0"
_CODE_AMP = "\ufdd1"


def _inline_code_spans(text: str, start: int, end: int) -> List[Tuple[int, int]]:
    spans: List[Tuple[int, int]] = []
    runs = list(_BACKTICKS_RE.finditer(text, start, end))
    index = 0
    while index < len(runs):
        opener = runs[index]
        closer = None
        for candidate in range(index + 1, len(runs)):
            if _BLANK_LINE_RE.search(text, opener.end(), runs[candidate].start()):
                break
            if len(runs[candidate].group()) == len(opener.group()):
                closer = candidate
                break
        if closer is None:
            index += 1
            continue
        spans.append((opener.start(), runs[closer].end()))
        index = closer + 1
    return spans


def find_code_regions(text: str) -> List[Tuple[int, int]]:
    """
    Locate fenced code blocks and inline code spans.

    A fence opens with three or more backticks or tildes and closes with a line
    of at least as many of the same character; an unclosed fence runs to the end
    of the text. Inline spans pair backtick runs of equal length and never cross
    a blank line.

    Returns:
        Sorted ``(start, end)`` offsets, fence markers and backticks included
    """
    regions: List[Tuple[int, int]] = []
    fence: Optional[Tuple[str, int, int]] = None
    prose_start = 0
    offset = 0
    for line in text.split("\n"):
        stripped = line.rstrip("\r")
        if fence is None:
            match = _FENCE_OPEN_RE.match(stripped)
            if match and not (match.group(1)[0] == "`" and "`" in match.group(2)):
                regions.extend(_inline_code_spans(text, prose_start, offset))
                fence = (match.group(1)[0], len(match.group(1)), offset)
        else:
            match = _FENCE_CLOSE_RE.match(stripped)
            if match and match.group(1)[0] == fence[0] and len(match.group(1)) >= fence[1]:
                regions.append((fence[2], offset + len(stripped)))
                fence = None
                prose_start = offset + len(stripped)
        offset += len(line) + 1

    if fence is not None:
        regions.append((fence[2], len(text)))
    else:
        regions.extend(_inline_code_spans(text, prose_start, len(text)))
    return regions


def _mask_code(text: str) -> str:
    parts: List[str] = []
    last = 0
    for start, end in find_code_regions(text):
        parts.append(text[last:start])
        parts.append(text[start:end].replace("<", _CODE_LT).replace("&", _CODE_AMP))
        last = end
    parts.append(text[last:])
    return "".join(parts)


def _unmask_code(text: str) -> str:
    return text.replace(_CODE_LT, "<").replace(_CODE_AMP, "&")


def parse_attributes(start_tag: str) -> Tuple[str, Dict[str, Any]]:
    """
    Read the tag name and attributes from a raw start tag, preserving case.

    Returns:
        Tuple of the tag name and an ordered attribute dictionary
    """
    name_match = _TAG_NAME_RE.match(start_tag)
    if not name_match:
        raise MarkupSyntaxError(f"Malformed start tag: {start_tag!r}")

    attributes: Dict[str, Any] = {}
    body = start_tag[name_match.end():]
    for match in _ATTRIBUTE_RE.finditer(body):
        attr_name, raw = match.group(1), match.group(2)
        if raw is None:
            attributes[attr_name] = True
        elif raw[0] in "\"'":
            attributes[attr_name] = html.unescape(raw[1:-1])
        elif raw[0] == "{":
            attributes[attr_name] = raw[1:-1].strip()
        else:
            attributes[attr_name] = html.unescape(raw)
    return name_match.group(1), attributes


class MarkupReader(HTMLParser):
    """Builds a Document from markup text. One instance reads one document."""

    def __init__(self, text: str, filename: str = "<string>"):
        super().__init__(convert_charrefs=True)
        self.text = text
        self.filename = filename
        self.document = Document()
        self._stack: List[Element] = []
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", text)]

    def _position_at(self, offset: int) -> Position:
        line_index = bisect_right(self._line_starts, offset) - 1
        return Position(
            line=line_index + 1,
            column=offset - self._line_starts[line_index] + 1,
            offset=offset,
        )

    def _current_offset(self) -> int:
        line, column = self.getpos()
        return self._line_starts[line - 1] + column

    def _append(self, child: Union[Element, Text]) -> None:
        parent = self._stack[-1] if self._stack else self.document
        parent.children.append(child)

    def _open(self, closed: bool) -> None:
        start_tag = _unmask_code(self.get_starttag_text() or "")
        offset = self._current_offset()
        name, attributes = parse_attributes(start_tag)
        element = Element(name=name, attributes=attributes, start=self._position_at(offset))
        self._append(element)

        if closed or name.lower() in VOID_ELEMENTS:
            element.end = self._position_at(offset + len(start_tag))
        else:
            self._stack.append(element)

    def handle_starttag(self, tag, attrs):
        self._open(closed=False)

    def handle_startendtag(self, tag, attrs):
        self._open(closed=True)

    def handle_endtag(self, tag):
        offset = self._current_offset()
        close = self.text.find(">", offset)
        end = self._position_at(close + 1 if close != -1 else len(self.text))

        for index in range(len(self._stack) - 1, -1, -1):
            if self._stack[index].name.lower() == tag.lower():
                for element in self._stack[index:]:
                    element.end = end
                del self._stack[index:]
                return
        logger.debug(f"Ignoring stray closing tag </{tag}> in {self.filename}")

    def handle_data(self, data):
        if data:
            start = self._position_at(self._current_offset())
            self._append(Text(value=_unmask_code(data), start=start))

    def read(self) -> Document:
        """Parse the whole text and return the document tree."""
        try:
            self.feed(_mask_code(self.text))
            self.close()
        except (AssertionError, ValueError) as e:
            line, column = self.getpos()
            raise MarkupSyntaxError(
                f"Cannot read {self.filename}: {e}", line=line, column=column + 1
            ) from e

        end = self._position_at(len(self.text))
        for element in self._stack:
            element.end = end
        if self._stack:
            logger.debug(f"Closed {len(self._stack)} unterminated elements in {self.filename}")
        self._stack.clear()
        return self.document


def parse_markup(text: str, filename: str = "<string>") -> Document:
    """
    Read markdown/MDX text into a Document tree.

    Args:
        text: Document text
        filename: Name used in diagnostics

    Raises:
        MarkupSyntaxError: If the text cannot be tokenised
    """
    if not isinstance(text, str):
        raise MarkupSyntaxError(f"Expected document text for {filename}, got {type(text).__name__}")
    return MarkupReader(text, filename).read()
