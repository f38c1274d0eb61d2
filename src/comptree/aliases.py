"""Module aliases — bundler-style ``resolve.alias`` tables.

An alias table maps the first path segment of a specifier to a real path
prefix, e.g. ``{"Components": "src/components"}`` turns
``Components/Widget`` into ``src/components/Widget``.

Tables are read from a JSON file shaped like a webpack config
(``{"resolve": {"alias": {...}}}``) or statically from a ``webpack.config.js``;
configuration files are never executed.
"""

import json
import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from tree_sitter import Node

from comptree.models import AliasConfigError, ModuleParseError
from comptree.parser import iter_nodes, node_text, parse_source, read_text_safe, string_value

logger = logging.getLogger(__name__)

AliasTable = Mapping[str, str]

EMPTY_ALIASES: AliasTable = MappingProxyType({})

# path helpers whose string arguments can be joined without running the config
_PATH_CALLS = {"path.resolve", "path.join"}


# ── Resolution ──


def is_relative(specifier: str) -> bool:
    return specifier.startswith(".")


def resolve_alias(specifier: str, aliases: AliasTable) -> str:
    """Substitute the aliased first segment of ``specifier``.

    Specifiers whose first segment is not a key with a string value are
    returned unchanged. Never touches the file system.
    """
    head, _, tail = specifier.partition("/")
    value = aliases.get(head)
    if not isinstance(value, str):
        return specifier
    resolved = value.replace("/", os.sep)
    if not tail:
        return resolved
    return resolved + os.sep + tail.replace("/", os.sep)


# ── Loading ──


def _alias_mapping(config: object) -> AliasTable:
    """Keep the string entries of ``config.resolve.alias``."""
    resolve = config.get("resolve") if isinstance(config, dict) else None
    alias = resolve.get("alias") if isinstance(resolve, dict) else None
    if alias is None:
        return EMPTY_ALIASES
    if not isinstance(alias, dict):
        raise AliasConfigError("resolve.alias must be an object")
    return MappingProxyType(
        {str(k): v for k, v in alias.items() if isinstance(v, str)}
    )


def _static_path_value(node: Node, config_dir: Path) -> Optional[str]:
    """Value of a string literal or a ``path.resolve(__dirname, '...')`` call."""
    if node.type in ("string", "template_string"):
        if any(c.type == "template_substitution" for c in node.named_children):
            return None
        return string_value(node)
    if node.type != "call_expression":
        return None
    if node_text(node.child_by_field_name("function")) not in _PATH_CALLS:
        return None
    parts: list[str] = []
    arguments = node.child_by_field_name("arguments")
    for arg in arguments.named_children if arguments is not None else ():
        if arg.type == "identifier" and node_text(arg) == "__dirname":
            parts.append(str(config_dir))
        elif arg.type == "string":
            parts.append(string_value(arg))
        else:
            return None
    if not parts:
        return None
    return os.path.normpath(os.path.join(*parts))


def _read_webpack_js(path: Path, source: str) -> AliasTable:
    """Find the first ``alias: { ... }`` object literal in a JS config."""
    try:
        module = parse_source(source, str(path))
    except ModuleParseError as exc:
        raise AliasConfigError(str(exc)) from exc

    for node in iter_nodes(module.root):
        if node.type != "pair":
            continue
        key = node.child_by_field_name("key")
        value = node.child_by_field_name("value")
        if string_value(key) != "alias" or value is None or value.type != "object":
            continue
        entries: dict[str, str] = {}
        for entry in value.named_children:
            if entry.type != "pair":
                continue
            resolved = _static_path_value(entry.child_by_field_name("value"), path.parent)
            if resolved is not None:
                entries[string_value(entry.child_by_field_name("key"))] = resolved
        return MappingProxyType(entries)
    return EMPTY_ALIASES


def read_alias_config(config_path: str | Path) -> AliasTable:
    """Read the alias table from a config file.

    Raises:
        AliasConfigError: The file is missing, unreadable, or malformed.
    """
    path = Path(config_path)
    try:
        source = read_text_safe(path)
    except OSError as exc:
        raise AliasConfigError(f"Cannot read alias config {path}: {exc}") from exc

    if path.suffix in (".js", ".cjs", ".mjs"):
        return _read_webpack_js(path, source)

    try:
        config = json.loads(source)
    except json.JSONDecodeError as exc:
        raise AliasConfigError(f"Invalid JSON in {path}: {exc}") from exc
    return _alias_mapping(config)


def load_aliases(config_path: Optional[str | Path]) -> AliasTable:
    """Load aliases, falling back to an empty table with a warning on failure."""
    if not config_path:
        return EMPTY_ALIASES
    try:
        aliases = read_alias_config(config_path)
    except AliasConfigError as exc:
        logger.warning("Ignoring alias config: %s", exc)
        return EMPTY_ALIASES
    logger.debug("Loaded %d alias(es) from %s", len(aliases), config_path)
    return aliases
