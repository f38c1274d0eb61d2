"""Output — the component tree as printed text or as a JSON file.

Display order is independent of discovery order: children are sorted by
source and name for readability.
"""

import dataclasses
import json
import logging
import os
from pathlib import Path

from comptree.models import ComponentNode

logger = logging.getLogger(__name__)

JSON_OUTPUT_FILE = "data.json"

CONTAINER_MARK = " (*)"


def node_label(node: ComponentNode) -> str:
    """``source/Name``, without repeating a name its directory already carries."""
    if not node.display_source:
        return node.name
    if os.path.basename(os.path.dirname(node.filename)) == node.name:
        return node.display_source
    return f"{node.display_source}/{node.name}"


def _display_key(node: ComponentNode) -> str:
    return f"{node.display_source or ''}{node.name}".upper()


def collapse_container(node: ComponentNode) -> ComponentNode:
    """Replace unwrapped containers by the component they wrap, marked with (*).

    A hidden wrapped component stays hidden; its container is kept instead.
    """
    while node.unwrapped and len(node.children) == 1 and not node.children[0].hidden:
        child = node.children[0]
        node = dataclasses.replace(child, name=child.name + CONTAINER_MARK)
    return node


def render_lines(
    node: ComponentNode,
    lines: list[str],
    prefix: str = "",
    hide_containers: bool = False,
) -> None:
    """Append the rendered children of ``node`` to ``lines``."""
    visible = [c for c in node.children if not c.hidden]
    if hide_containers:
        visible = [collapse_container(c) for c in visible]
    visible.sort(key=_display_key)

    for i, child in enumerate(visible):
        is_last = i == len(visible) - 1
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{node_label(child)}")
        render_lines(
            child,
            lines,
            prefix=prefix + ("    " if is_last else "│   "),
            hide_containers=hide_containers,
        )


def render_text(root: ComponentNode, hide_containers: bool = False) -> str:
    """The whole tree as printable text, root first."""
    if hide_containers:
        root = collapse_container(root)
    lines = [node_label(root)]
    render_lines(root, lines, hide_containers=hide_containers)
    return "\n".join(lines)


def tree_as_dict(root: ComponentNode) -> dict:
    """Every node field, children nested, suitable for JSON."""
    return dataclasses.asdict(root)


def write_json(root: ComponentNode, output_dir: str | Path = ".") -> Path:
    """Write the complete tree to data.json in ``output_dir``."""
    path = Path(output_dir) / JSON_OUTPUT_FILE
    path.write_text(json.dumps(tree_as_dict(root), indent=2) + "\n", encoding="utf-8")
    logger.info("Component tree written to %s", path)
    return path
