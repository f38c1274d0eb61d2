"""Data model — component nodes, import bindings, build results and errors.

Nodes are immutable: the tree builder constructs each node once, after its
children are known, instead of filling fields in as resolution proceeds.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional


# ── Exceptions ──


class ComponentTreeError(Exception):
    """Base exception for component tree errors."""


class ModuleParseError(ComponentTreeError):
    """A located module could not be parsed into a syntax tree."""

    def __init__(self, filename: str, message: str):
        super().__init__(f"Could not parse {filename}: {message}")
        self.filename = filename
        self.message = message


class AliasConfigError(ComponentTreeError):
    """The alias configuration is missing, unreadable, or malformed."""


# ── Data Classes ──


@dataclass(frozen=True)
class BuildConfig:
    """Read-only settings shared by every resolution call of a build.

    Attributes:
        scan_depth: Nodes at this depth or deeper are not parsed for
            children. None means unlimited.
        hide_third_party: Mark nodes that resolve to no readable file as hidden.
        module_dir: Secondary directory searched in place of the importing
            file's directory (e.g. ``src``).
        aliases: Alias table, first path segment -> replacement prefix.
        cwd: Directory aliased paths and display paths are relative to.
    """

    scan_depth: Optional[int] = None
    hide_third_party: bool = False
    module_dir: Optional[Path] = None
    aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    cwd: Path = field(default_factory=Path.cwd)

    def within_scan_depth(self, depth: int) -> bool:
        return self.scan_depth is None or depth < self.scan_depth


@dataclass(frozen=True)
class ImportBinding:
    """One local name bound by an import declaration."""

    local_name: str  # e.g. "Header" for import Header from './Header'
    source: str  # specifier as written, e.g. "./Header" or "react-router-dom"


@dataclass(frozen=True)
class ComponentNode:
    """A component in the rendered hierarchy.

    Attributes:
        name: Local binding name used at the use site (not unique).
        filename: Resolved file, or the best-effort guess when unresolved.
        depth: Distance from the root (root = 0).
        source: Import specifier as written; None for the root.
        display_source: Prefix shown in the printed tree.
        children: Child components, in discovery order.
        resolved: Whether a readable file backs this node.
        hidden: Unresolved node suppressed by third-party hiding.
        unwrapped: Children came from a wrapped default export.
        recursive: The file already appears among this node's ancestors.
        error: Parse failure message, if the file could not be parsed.
    """

    name: str
    filename: str
    depth: int
    source: Optional[str] = None
    display_source: Optional[str] = None
    children: tuple["ComponentNode", ...] = ()
    resolved: bool = False
    hidden: bool = False
    unwrapped: bool = False
    recursive: bool = False
    error: Optional[str] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self):
        """Yield this node and all descendants, depth-first in discovery order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass
class BuildResult:
    """Complete result of building a component tree."""

    root: ComponentNode
    files_parsed: int = 0
    parse_errors: list[dict] = field(default_factory=list)  # [{file, error}]
    warnings: list[str] = field(default_factory=list)

    @property
    def found_components(self) -> bool:
        return bool(self.root.children)
