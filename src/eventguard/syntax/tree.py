"""Immutable syntax trees with functional text edits."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

import tree_sitter

from ..errors import DeclarationNotFoundError
from ..models import Span
from .registry import get_parser

logger = logging.getLogger(__name__)

EVENT_FIELD_DECLARATION = "event_field_declaration"
EVENT_DECLARATION = "event_declaration"
EVENT_DECLARATION_TYPES = (EVENT_FIELD_DECLARATION, EVENT_DECLARATION)


@dataclass(frozen=True)
class TextEdit:
    """Replacement of the byte range [start, end) with new text."""

    start: int
    end: int
    replacement: bytes

    @property
    def delta(self) -> int:
        return len(self.replacement) - (self.end - self.start)

    def map_offset(self, offset: int) -> int:
        """Map an offset in the old source to the same position in the new one.

        Offsets inside the replaced range map to its start.
        """
        if offset < self.start:
            return offset
        if offset >= self.end:
            return offset + self.delta
        return self.start


@dataclass(frozen=True)
class SyntaxTree:
    """A parsed source file.

    Never mutated: every edit re-parses into a new SyntaxTree. Nodes taken from
    one SyntaxTree are meaningless in another and must be re-resolved by span
    (see `find_declaration`).
    """

    source: bytes
    tree: tree_sitter.Tree = field(compare=False, repr=False)
    path: str = "<memory>"
    language: str = "csharp"

    @classmethod
    def parse(
        cls, source: str | bytes, path: str = "<memory>", language: str = "csharp"
    ) -> "SyntaxTree":
        """Parse source text into a tree."""
        source_bytes = source.encode() if isinstance(source, str) else source
        tree = get_parser(language).parse(source_bytes)
        return cls(source=source_bytes, tree=tree, path=path, language=language)

    @property
    def root(self) -> tree_sitter.Node:
        return self.tree.root_node

    @property
    def text(self) -> str:
        return self.source.decode(errors="replace")

    @property
    def has_errors(self) -> bool:
        return self.root.has_error

    @property
    def newline(self) -> str:
        """Line terminator used by the file (CRLF if it appears anywhere)."""
        return "\r\n" if b"\r\n" in self.source else "\n"

    def node_text(self, node: tree_sitter.Node) -> str:
        """Get text content of a node."""
        return self.source[node.start_byte:node.end_byte].decode(errors="replace")

    def line_start(self, offset: int) -> int:
        """Offset of the first byte on the line containing `offset`."""
        return self.source.rfind(b"\n", 0, offset) + 1

    def span_of(self, node: tree_sitter.Node) -> Span:
        """Span of a node, with a character-based 1-based column."""
        line_start = self.line_start(node.start_byte)
        column = len(self.source[line_start:node.start_byte].decode(errors="replace"))
        return Span(
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            line=node.start_point[0] + 1,
            column=column + 1,
        )

    def line_indent(self, offset: int) -> str:
        """Leading whitespace of the line containing `offset`."""
        line_start = self.line_start(offset)
        end = line_start
        while end < len(self.source) and self.source[end:end + 1] in (b" ", b"\t"):
            end += 1
        return self.source[line_start:end].decode()

    def line_end(self, offset: int) -> int:
        """Offset of the line terminator ending the line containing `offset`."""
        end = self.source.find(b"\n", offset)
        if end == -1:
            return len(self.source)
        if end > 0 and self.source[end - 1:end] == b"\r":
            return end - 1
        return end

    def with_edit(self, edit: TextEdit) -> "SyntaxTree":
        """Apply an edit and return the re-parsed tree."""
        new_source = self.source[:edit.start] + edit.replacement + self.source[edit.end:]
        logger.debug(
            "%s: replacing bytes %d-%d (%+d)", self.path, edit.start, edit.end, edit.delta
        )
        return SyntaxTree.parse(new_source, path=self.path, language=self.language)

    def walk(self) -> Iterator[tree_sitter.Node]:
        """Yield every node depth-first in document order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_declaration(
        self, start_byte: int, kinds: tuple[str, ...] = EVENT_DECLARATION_TYPES
    ) -> tree_sitter.Node:
        """Find the innermost node of one of `kinds` enclosing `start_byte`.

        Raises:
            DeclarationNotFoundError: If no such node encloses the offset.
        """
        node = self.root.descendant_for_byte_range(start_byte, start_byte)
        while node is not None and node.type not in kinds:
            node = node.parent
        if node is None:
            raise DeclarationNotFoundError(start_byte, " or ".join(kinds))
        return node
