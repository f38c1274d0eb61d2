"""Integration test — the todo example app, end to end.

Points the builder at ``examples/todo_app`` with its real webpack config:
aliased imports, an index re-export, a redux container, react-router
``component={...}`` usage, and third-party leaves.
"""

from pathlib import Path

import pytest

from comptree.aliases import read_alias_config
from comptree.builder import ComponentTreeBuilder
from comptree.cli import main
from comptree.models import BuildConfig, BuildResult
from comptree.render import render_text

# ── Constants ──

REPO_ROOT = Path(__file__).resolve().parent.parent
TODO_APP = REPO_ROOT / "examples" / "todo_app"


# ── Fixtures ──


@pytest.fixture(scope="module")
def aliases():
    return read_alias_config(TODO_APP / "webpack.config.js")


@pytest.fixture(scope="module")
def todo_tree(aliases) -> BuildResult:
    """Build the todo app's tree once for the entire module."""
    config = BuildConfig(cwd=TODO_APP, aliases=aliases)
    return ComponentTreeBuilder(config).build("src/App.jsx")


def _child(node, name):
    return next(c for c in node.children if c.name == name)


# ── Tests ──


class TestWebpackAliases:
    def test_aliases_anchored_at_config_dir(self, aliases):
        assert aliases["Components"] == str(TODO_APP / "src" / "components")
        assert aliases["Containers"] == str(TODO_APP / "src" / "containers")


class TestTodoAppTree:
    def test_root_children_in_discovery_order(self, todo_tree):
        assert [c.name for c in todo_tree.root.children] == [
            "BrowserRouter",
            "Header",
            "Switch",
            "Route",
            "VisibleTodoList",
            "About",
        ]

    def test_third_party_leaves(self, todo_tree):
        for name in ("BrowserRouter", "Switch", "Route"):
            node = _child(todo_tree.root, name)
            assert not node.resolved
            assert node.display_source == "react-router-dom"

    def test_aliased_header(self, todo_tree):
        header = _child(todo_tree.root, "Header")
        assert header.filename == str(TODO_APP / "src" / "components" / "Header.jsx")
        assert [c.name for c in header.children] == ["Link"]

    def test_container_through_index(self, todo_tree):
        container = _child(todo_tree.root, "VisibleTodoList")
        assert container.unwrapped
        (todo_list,) = container.children
        assert todo_list.source == "Components"
        assert todo_list.filename == str(TODO_APP / "src" / "components" / "TodoList" / "TodoList.jsx")
        (todo,) = todo_list.children
        assert todo.filename == str(TODO_APP / "src" / "components" / "TodoList" / "Todo.jsx")
        assert todo.depth == 3

    def test_relative_import_reaches_same_file(self, todo_tree):
        about = _child(todo_tree.root, "About")
        header = _child(about, "Header")
        assert header.filename == _child(todo_tree.root, "Header").filename
        assert not header.recursive

    def test_no_parse_errors(self, todo_tree):
        assert todo_tree.parse_errors == []
        assert todo_tree.files_parsed == 7

    def test_hide_containers_rendering(self, todo_tree):
        text = render_text(todo_tree.root, hide_containers=True)
        assert "TodoList (*)" in text
        assert "VisibleTodoList" not in text


class TestTodoAppCli:
    def test_cli_hides_third_party(self, monkeypatch, capsys):
        monkeypatch.chdir(TODO_APP)
        assert main(["src/App.jsx", "-a", "webpack.config.js", "-t"]) == 0
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "App"
        assert "react-router-dom" not in out
        assert "src/components/Header" in out
        assert "src/pages/About" in out
