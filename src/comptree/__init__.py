"""comptree — React component hierarchy recovered by static analysis."""

__version__ = "1.1.1"

from comptree.aliases import (
    AliasTable,
    load_aliases,
    read_alias_config,
    resolve_alias,
)
from comptree.builder import ComponentTreeBuilder
from comptree.containers import find_wrapped_import
from comptree.imports import extract_imports, has_react_import
from comptree.locator import LocatedModule, ModuleLocator
from comptree.models import (
    AliasConfigError,
    BuildConfig,
    BuildResult,
    ComponentNode,
    ComponentTreeError,
    ImportBinding,
    ModuleParseError,
)
from comptree.parser import ParsedModule, parse_source
from comptree.render import render_text, write_json
from comptree.usage import find_used_imports

__all__ = [
    # Aliases
    "AliasTable",
    "resolve_alias",
    "read_alias_config",
    "load_aliases",
    # Parsing and analysis
    "ParsedModule",
    "parse_source",
    "extract_imports",
    "has_react_import",
    "find_used_imports",
    "find_wrapped_import",
    # Location
    "ModuleLocator",
    "LocatedModule",
    # Tree building
    "ComponentTreeBuilder",
    "BuildConfig",
    "BuildResult",
    "ComponentNode",
    "ImportBinding",
    # Output
    "render_text",
    "write_json",
    # Errors
    "ComponentTreeError",
    "ModuleParseError",
    "AliasConfigError",
]
