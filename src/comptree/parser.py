"""Parser adapter — turns JavaScript/JSX source into a tree-sitter syntax tree.

The rest of the engine only walks the resulting tree; it never tokenizes
source text itself. A source with no cleanly parsed statement is reported as
ModuleParseError with the file name and the position of the first error.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import tree_sitter_javascript as tsjavascript
from tree_sitter import Language, Node, Parser, Tree

from comptree.models import ModuleParseError

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tsjavascript.language())

# ── Encoding-safe file reading ──

# BOM signatures for UTF-16 variants
_UTF16_LE_BOM = b"\xff\xfe"
_UTF16_BE_BOM = b"\xfe\xff"


def read_text_safe(path: str | Path) -> str:
    """Read a text file, handling UTF-8, UTF-16 (BOM), and latin-1 gracefully.

    Raises OSError if the file cannot be read at all.
    """
    raw = Path(path).read_bytes()
    if raw[:2] in (_UTF16_LE_BOM, _UTF16_BE_BOM):
        return raw.decode("utf-16")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


# ── Parsed Module ──


@dataclass(frozen=True)
class ParsedModule:
    """A parsed JavaScript module."""

    filename: str
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def statements(self) -> list[Node]:
        """Top-level statements, in source order (comments excluded)."""
        return [n for n in self.root.named_children if n.type != "comment"]


def node_text(node: Optional[Node]) -> str:
    """Source text of a node, or an empty string for a missing node."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def field_or(node: Node, preferred: str, fallback: str) -> Optional[Node]:
    """Child in field ``preferred`` if present, else the one in ``fallback``."""
    child = node.child_by_field_name(preferred)
    if child is None:
        child = node.child_by_field_name(fallback)
    return child


def string_value(node: Optional[Node]) -> str:
    """Value of a string literal node, without its quotes."""
    text = node_text(node)
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


def iter_nodes(root: Node) -> Iterator[Node]:
    """Pre-order walk over every node under root, in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _first_error(root: Node) -> Optional[Node]:
    for node in iter_nodes(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None


# Top-level nodes that carry nothing the engine can use
_UNUSABLE_STATEMENTS = {"ERROR", "comment", "empty_statement"}


def usable_statements(root: Node) -> list[Node]:
    """Top-level statements that parsed cleanly and carry code."""
    return [
        n for n in root.named_children
        if n.type not in _UNUSABLE_STATEMENTS and not n.has_error
    ]


# ── Parsing ──


def parse_source(source: str, filename: str = "<string>") -> ParsedModule:
    """Parse module source text.

    Syntax the JavaScript grammar does not know (Flow annotations, export
    extensions, decorators) leaves error nodes in an otherwise usable tree.
    Such a tree is kept and the first error position is logged as a warning.

    Raises:
        ModuleParseError: No top-level statement of the source parsed cleanly.
    """
    parser = Parser(JS_LANGUAGE)
    tree = parser.parse(source.encode("utf-8"))
    if tree.root_node.has_error:
        bad = _first_error(tree.root_node)
        if bad is None:
            bad = tree.root_node
        line, column = bad.start_point
        message = f"syntax error at line {line + 1}, column {column + 1}"
        if not usable_statements(tree.root_node):
            raise ModuleParseError(filename, message)
        logger.warning("Partially parsed %s: %s", filename, message)
    logger.debug("Parsed %s", filename)
    return ParsedModule(filename=filename, tree=tree)
