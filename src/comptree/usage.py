"""Child usage detection — which imports a JSX-bearing module renders.

A binding counts as a rendered child when it names a JSX element
(``<Header />``, ``<Layout>...</Layout>``, ``<Menu.Item>`` via ``Menu``) or is
passed as a ``component`` attribute (``<Route component={Home} />``).
"""

from typing import Optional

from tree_sitter import Node

from comptree.imports import has_react_import
from comptree.models import ImportBinding
from comptree.parser import ParsedModule, iter_nodes, node_text

_JSX_TAGS = {"jsx_opening_element", "jsx_self_closing_element"}

# Attribute whose value is a component reference, e.g. react-router's Route
COMPONENT_ATTRIBUTE = "component"


def _tag_identifier(element: Node) -> Optional[str]:
    """Leftmost identifier of a JSX tag name; None for fragments."""
    name = element.child_by_field_name("name")
    while name is not None and name.type in ("member_expression", "nested_identifier"):
        name = name.named_children[0] if name.named_children else None
    if name is None or name.type != "identifier":
        return None
    return node_text(name)


def _component_attribute_value(attribute: Node) -> Optional[str]:
    """Identifier passed as ``component={X}``, or None."""
    parts = attribute.named_children
    if len(parts) != 2:
        return None
    attr_name, value = parts
    if node_text(attr_name) != COMPONENT_ATTRIBUTE or value.type != "jsx_expression":
        return None
    inner = value.named_children
    if len(inner) == 1 and inner[0].type == "identifier":
        return node_text(inner[0])
    return None


def find_used_imports(
    module: ParsedModule, bindings: list[ImportBinding]
) -> list[ImportBinding]:
    """Return the imports used as child components, in first-occurrence order.

    Returns an empty list unless the module imports ``React``.
    """
    if not has_react_import(bindings):
        return []

    by_name: dict[str, ImportBinding] = {}
    for binding in bindings:
        by_name.setdefault(binding.local_name, binding)

    used: list[ImportBinding] = []
    for node in iter_nodes(module.root):
        if node.type in _JSX_TAGS:
            name = _tag_identifier(node)
        elif node.type == "jsx_attribute":
            name = _component_attribute_value(node)
        else:
            continue
        binding = by_name.get(name) if name else None
        if binding is not None and binding not in used:
            used.append(binding)
    return used
