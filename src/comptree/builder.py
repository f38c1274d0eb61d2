"""Tree Builder — recovers the component hierarchy rooted at one source file.

For every node: locate the backing file, parse it, decide whether it renders
JSX or wraps another component, and recurse into the children it uses.
Unresolved and third-party modules become leaves (hidden on request); a
file that cannot be parsed stops only its own subtree.

Single-threaded and depth-first. Siblings are processed in the order their
imports were first used in the source.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from comptree.aliases import is_relative, resolve_alias
from comptree.containers import find_wrapped_import
from comptree.imports import extract_imports, has_react_import
from comptree.locator import ModuleLocator
from comptree.models import (
    BuildConfig,
    BuildResult,
    ComponentNode,
    ImportBinding,
    ModuleParseError,
)
from comptree.parser import parse_source
from comptree.usage import find_used_imports

logger = logging.getLogger(__name__)

_COMPONENT_EXTENSIONS = (".jsx", ".js")


def component_name(filename: str | Path) -> str:
    """Component name for a root file: its basename without .js/.jsx."""
    base = os.path.basename(str(filename))
    for ext in _COMPONENT_EXTENSIONS:
        if base.endswith(ext):
            return base[: -len(ext)]
    return base


def _relative_to(path: str, cwd: Path) -> str:
    prefix = f"{cwd}{os.sep}"
    return path[len(prefix):] if path.startswith(prefix) else path


@dataclass
class _Tally:
    """Per-build accounting, folded into the BuildResult at the end."""

    files_parsed: int = 0
    parse_errors: list[dict] = field(default_factory=list)


class ComponentTreeBuilder:
    """Builds a component tree from a root file.

    Usage::

        builder = ComponentTreeBuilder(BuildConfig(scan_depth=3))
        result = builder.build("src/App.jsx")
        print(len(result.root.children))
    """

    def __init__(self, config: Optional[BuildConfig] = None):
        self._config = config or BuildConfig()
        self._locator = ModuleLocator(self._config)

    @property
    def config(self) -> BuildConfig:
        return self._config

    # ── Public API ──

    def build(self, root_file: str | Path) -> BuildResult:
        """Build the tree below ``root_file``."""
        filename = os.path.abspath(os.path.join(self._config.cwd, root_file))
        tally = _Tally()
        root = self._process(
            name=component_name(filename),
            guess=filename,
            depth=0,
            source=None,
            display_source=None,
            parent_filename=None,
            ancestors=frozenset(),
            tally=tally,
        )

        result = BuildResult(
            root=root,
            files_parsed=tally.files_parsed,
            parse_errors=tally.parse_errors,
        )
        if not root.resolved:
            result.warnings.append(f"Root file not found: {filename}")
        if result.parse_errors:
            result.warnings.append(
                f"{len(result.parse_errors)} file(s) couldn't be parsed; "
                "their subtrees are incomplete"
            )
        return result

    # ── Child Construction ──

    def child_location(self, binding: ImportBinding, parent_filename: str) -> tuple[str, str]:
        """Best-guess filename and display prefix for an import made by ``parent_filename``."""
        config = self._config
        parent_dir = os.path.dirname(parent_filename)
        if is_relative(binding.source):
            guess = os.path.normpath(os.path.join(parent_dir, binding.source))
            return guess, _relative_to(guess, config.cwd)
        if config.aliases:
            guess = os.path.normpath(
                os.path.join(config.cwd, resolve_alias(binding.source, config.aliases))
            )
            return guess, _relative_to(guess, config.cwd)
        # Third party component
        return os.path.join(parent_dir, binding.source), binding.source

    # ── Node Processing ──

    def _process(
        self,
        name: str,
        guess: str,
        depth: int,
        source: Optional[str],
        display_source: Optional[str],
        parent_filename: Optional[str],
        ancestors: frozenset[str],
        tally: _Tally,
    ) -> ComponentNode:
        fields = dict(name=name, depth=depth, source=source, display_source=display_source)

        # Locating
        candidates = self._locator.candidates(guess, source, parent_filename)
        located = self._locator.locate(name, candidates)
        if located is None:
            logger.debug("Unresolved %s (%s)", name, source or guess)
            return ComponentNode(filename=guess, hidden=self._config.hide_third_party, **fields)

        filename = located.filename
        if filename in ancestors:
            logger.debug("Not expanding %s again below itself", filename)
            return ComponentNode(filename=filename, resolved=True, recursive=True, **fields)
        if not self._config.within_scan_depth(depth):
            return ComponentNode(filename=filename, resolved=True, **fields)

        # Parsing and classification
        try:
            module = parse_source(located.source, filename)
        except ModuleParseError as exc:
            return self._parse_failed(exc, fields, tally)
        tally.files_parsed += 1

        imports = extract_imports(module)
        if has_react_import(imports):
            used = find_used_imports(module, imports)
            unwrapped = False
        else:
            wrapped = find_wrapped_import(module, imports)
            used = [wrapped] if wrapped is not None else []
            unwrapped = wrapped is not None

        # Children
        children = []
        for binding in used:
            child_guess, child_display = self.child_location(binding, filename)
            children.append(
                self._process(
                    name=binding.local_name,
                    guess=child_guess,
                    depth=depth + 1,
                    source=binding.source,
                    display_source=child_display,
                    parent_filename=filename,
                    ancestors=ancestors | {filename},
                    tally=tally,
                )
            )

        return ComponentNode(
            filename=filename,
            resolved=True,
            children=tuple(children),
            unwrapped=unwrapped,
            **fields,
        )

    def _parse_failed(self, exc: ModuleParseError, fields: dict, tally: _Tally) -> ComponentNode:
        logger.warning("%s", exc)
        tally.parse_errors.append({"file": exc.filename, "error": exc.message})
        return ComponentNode(filename=exc.filename, resolved=True, error=str(exc), **fields)
