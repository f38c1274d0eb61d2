"""Import extraction — local names bound by a module's import declarations.

Also reads the re-exports of index files, which are resolved through one
extra hop by the module locator.
"""

import re
from typing import Optional

from tree_sitter import Node

from comptree.models import ImportBinding
from comptree.parser import ParsedModule, field_or, node_text, string_value

# ── Constants ──

# Imports of these are stylesheets, never components
STYLE_EXTENSIONS = ("css", "scss", "sass", "less", "styl")

# Local name whose import marks a module as JSX-bearing
REACT_BINDING = "React"

# export Foo from './Foo' (export extensions, outside the JavaScript grammar)
_EXPORT_EXTENSION_RE = re.compile(
    r"""^[ \t]*export[ \t]+([A-Za-z_$][\w$]*)[ \t]+from[ \t]+['"]([^'"]+)['"]""",
    re.MULTILINE,
)


def is_style_import(specifier: str) -> bool:
    return specifier.lower().endswith(STYLE_EXTENSIONS)


def _clause_bindings(clause: Node, source: str) -> list[ImportBinding]:
    """Bindings of one import clause: default, namespace, then named, as written."""
    bindings: list[ImportBinding] = []
    for child in clause.named_children:
        if child.type == "identifier":
            # import Foo from '...'
            bindings.append(ImportBinding(node_text(child), source))
        elif child.type == "namespace_import":
            # import * as Foo from '...'
            for part in child.named_children:
                if part.type == "identifier":
                    bindings.append(ImportBinding(node_text(part), source))
        elif child.type == "named_imports":
            # import { Foo, Bar as Baz } from '...'
            for spec in child.named_children:
                if spec.type != "import_specifier":
                    continue
                local = field_or(spec, "alias", "name")
                bindings.append(ImportBinding(string_value(local), source))
    return bindings


def extract_imports(module: ParsedModule) -> list[ImportBinding]:
    """Return one binding per import specifier, in statement order.

    Stylesheet imports and side-effect imports contribute nothing. Duplicate
    local names are kept.
    """
    bindings: list[ImportBinding] = []
    for stmt in module.statements:
        if stmt.type != "import_statement":
            continue
        source = string_value(stmt.child_by_field_name("source"))
        if is_style_import(source):
            continue
        for child in stmt.named_children:
            if child.type == "import_clause":
                bindings.extend(_clause_bindings(child, source))
    return bindings


def has_react_import(bindings: list[ImportBinding]) -> bool:
    return any(b.local_name == REACT_BINDING for b in bindings)


def scan_export_extensions(text: str) -> list[ImportBinding]:
    """``export Foo from './Foo'`` re-exports in raw source text."""
    return [
        ImportBinding(match.group(1), match.group(2))
        for match in _EXPORT_EXTENSION_RE.finditer(text)
        if match.group(1) != "default"
    ]


def extract_reexports(module: ParsedModule) -> list[ImportBinding]:
    """Names an index file makes available, paired with where they come from.

    Covers ``import Foo from './Foo'`` (re-exported later) as well as
    ``export { Foo } from './Foo'`` and ``export { default as Foo } from
    './Foo'``. The exported name is used as the binding's local name.
    ``export Foo from './Foo'`` only shows up in a partially parsed module
    and is read from its source text, after everything else.
    """
    bindings = extract_imports(module)
    for stmt in module.statements:
        if stmt.type != "export_statement":
            continue
        source_node = stmt.child_by_field_name("source")
        if source_node is None:
            continue
        source = string_value(source_node)
        for clause in stmt.named_children:
            if clause.type != "export_clause":
                continue
            for spec in clause.named_children:
                if spec.type != "export_specifier":
                    continue
                exported = field_or(spec, "alias", "name")
                bindings.append(ImportBinding(string_value(exported), source))
    if module.root.has_error:
        bindings.extend(scan_export_extensions(node_text(module.root)))
    return bindings


def _last_named(bindings: list[ImportBinding], name: str) -> Optional[ImportBinding]:
    matches = [b for b in bindings if b.local_name == name]
    return matches[-1] if matches else None


def find_reexport(module: ParsedModule, name: str) -> Optional[ImportBinding]:
    """The last binding of ``name`` in an index file, or None."""
    return _last_named(extract_reexports(module), name)


def find_reexport_in_text(source: str, name: str) -> Optional[ImportBinding]:
    """Like find_reexport, for an index file that could not be parsed at all."""
    return _last_named(scan_export_extensions(source), name)
