"""Container unwrapping — the component wrapped by a higher-order default export.

Modules without JSX frequently export a wrapped component::

    const Connected = connect(mapState)(TodoList);
    export default Connected;

    export default withRouter(Dashboard);

The wrapped import is the module's single child.
"""

from typing import Optional

from tree_sitter import Node

from comptree.models import ImportBinding
from comptree.parser import ParsedModule, node_text

_VARIABLE_DECLARATIONS = {"lexical_declaration", "variable_declaration"}


def _default_export(module: ParsedModule) -> Optional[Node]:
    """Expression exported by ``export default``, or None."""
    for stmt in module.statements:
        if stmt.type != "export_statement":
            continue
        if not any(child.type == "default" for child in stmt.children):
            continue
        return stmt.child_by_field_name("value")
    return None


def _variable_initializer(module: ParsedModule, identifier: str) -> Optional[Node]:
    """Call expression a top-level variable named ``identifier`` is bound to."""
    for stmt in module.statements:
        if stmt.type == "export_statement":
            stmt = stmt.child_by_field_name("declaration")
        if stmt is None or stmt.type not in _VARIABLE_DECLARATIONS:
            continue
        for declarator in stmt.named_children:
            if declarator.type != "variable_declarator":
                continue
            if node_text(declarator.child_by_field_name("name")) != identifier:
                continue
            value = declarator.child_by_field_name("value")
            if value is not None and value.type == "call_expression":
                return value
    return None


def find_import_in_call(call: Optional[Node], names: set[str]) -> Optional[str]:
    """First imported name passed to ``call`` or, failing that, to its callees.

    ``connect(mapState)(Bar)`` checks ``(Bar)`` before ``(mapState)``.
    """
    if call is None or call.type != "call_expression":
        return None
    arguments = call.child_by_field_name("arguments")
    if arguments is not None:
        for arg in arguments.named_children:
            if arg.type == "identifier" and node_text(arg) in names:
                return node_text(arg)
    return find_import_in_call(call.child_by_field_name("function"), names)


def find_wrapped_import(
    module: ParsedModule, bindings: list[ImportBinding]
) -> Optional[ImportBinding]:
    """Return the import wrapped by the module's default export, or None."""
    exported = _default_export(module)
    if exported is None:
        return None

    if exported.type == "identifier":
        call = _variable_initializer(module, node_text(exported))
    else:
        call = exported

    found = find_import_in_call(call, {b.local_name for b in bindings})
    if found is None:
        return None
    return next(b for b in bindings if b.local_name == found)
