"""Tests for module location — candidate order, index re-exports, module dirs."""

import os
import textwrap
from types import MappingProxyType

from comptree.locator import (
    ModuleLocator,
    expand_candidates,
    reexport_target,
)
from comptree.models import BuildConfig


def _write(path, source=""):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source))
    return path


class TestExpandCandidates:
    def test_suffix_order(self):
        base = os.path.join("src", "Foo")
        assert expand_candidates(base) == [
            base,
            base + ".js",
            base + ".jsx",
            os.path.join(base, "index.js"),
            os.path.join(base, "index.jsx"),
        ]


class TestCandidates:
    def test_direct_only_without_aliases(self, tmp_path):
        locator = ModuleLocator(BuildConfig(cwd=tmp_path))
        guess = str(tmp_path / "Foo")
        assert locator.candidates(guess, "./Foo", str(tmp_path / "App.js")) == expand_candidates(guess)

    def test_alias_candidates_come_first(self, tmp_path):
        config = BuildConfig(cwd=tmp_path, aliases=MappingProxyType({"Components": "src/components"}))
        names = ModuleLocator(config).candidates(str(tmp_path / "Components" / "Widget"), "Components/Widget")
        assert names[0] == os.path.join(str(tmp_path), "src", "components", "Widget")
        assert len(names) == 10

    def test_relative_specifier_never_aliased(self, tmp_path):
        config = BuildConfig(cwd=tmp_path, aliases=MappingProxyType({".": "elsewhere"}))
        guess = str(tmp_path / "Foo")
        assert ModuleLocator(config).candidates(guess, "./Foo") == expand_candidates(guess)

    def test_module_dir_candidates_last(self, tmp_path):
        config = BuildConfig(cwd=tmp_path, module_dir=tmp_path / "src")
        parent = str(tmp_path / "app" / "App.js")
        guess = str(tmp_path / "app" / "shared" / "Button")
        names = ModuleLocator(config).candidates(guess, "shared/Button", parent)
        assert names[5:] == expand_candidates(str(tmp_path / "src" / "shared" / "Button"))

    def test_module_dir_needs_parent(self, tmp_path):
        config = BuildConfig(cwd=tmp_path, module_dir=tmp_path / "src")
        guess = str(tmp_path / "App")
        assert ModuleLocator(config).candidates(guess) == expand_candidates(guess)


class TestLocate:
    def test_first_existing_candidate_wins(self, tmp_path):
        _write(tmp_path / "Foo.js", "export default 1;\n")
        _write(tmp_path / "Foo.jsx", "export default 2;\n")
        locator = ModuleLocator(BuildConfig(cwd=tmp_path))
        located = locator.locate("Foo", expand_candidates(str(tmp_path / "Foo")))
        assert located.filename == str(tmp_path / "Foo.js")

    def test_directory_is_skipped_for_index(self, tmp_path):
        _write(tmp_path / "Foo" / "index.jsx", "export default 1;\n")
        locator = ModuleLocator(BuildConfig(cwd=tmp_path))
        located = locator.locate("Foo", expand_candidates(str(tmp_path / "Foo")))
        assert located.filename == str(tmp_path / "Foo" / "index.jsx")

    def test_nothing_found(self, tmp_path):
        locator = ModuleLocator(BuildConfig(cwd=tmp_path))
        assert locator.locate("Foo", expand_candidates(str(tmp_path / "Foo"))) is None

    def test_index_reexport_followed(self, tmp_path):
        _write(tmp_path / "components" / "index.js", """\
            import Button from './Button/Button';
            export { Button };
        """)
        _write(tmp_path / "components" / "Button" / "Button.jsx", "export default 1;\n")
        locator = ModuleLocator(BuildConfig(cwd=tmp_path))
        located = locator.locate("Button", expand_candidates(str(tmp_path / "components")))
        assert located.filename == str(tmp_path / "components" / "Button" / "Button.jsx")
        assert located.via_index == str(tmp_path / "components" / "index.js")

    def test_index_prefers_jsx_then_js(self, tmp_path):
        _write(tmp_path / "lib" / "index.js", "export { Card } from './Card';\n")
        _write(tmp_path / "lib" / "Card.js", "export default 1;\n")
        locator = ModuleLocator(BuildConfig(cwd=tmp_path))
        located = locator.locate("Card", expand_candidates(str(tmp_path / "lib")))
        assert located.filename == str(tmp_path / "lib" / "Card.js")

    def test_index_without_match_backs_node(self, tmp_path):
        _write(tmp_path / "lib" / "index.js", "export { Card } from './Card';\n")
        locator = ModuleLocator(BuildConfig(cwd=tmp_path))
        located = locator.locate("Other", expand_candidates(str(tmp_path / "lib")))
        assert located.filename == str(tmp_path / "lib" / "index.js")
        assert located.via_index is None

    def test_index_with_missing_target_backs_node(self, tmp_path):
        _write(tmp_path / "lib" / "index.js", "export { Card } from './Card';\n")
        locator = ModuleLocator(BuildConfig(cwd=tmp_path))
        located = locator.locate("Card", expand_candidates(str(tmp_path / "lib")))
        assert located.filename == str(tmp_path / "lib" / "index.js")

    def test_unparsable_index_backs_node(self, tmp_path):
        _write(tmp_path / "lib" / "index.js", "export { Card from;\n")
        locator = ModuleLocator(BuildConfig(cwd=tmp_path))
        located = locator.locate("Card", expand_candidates(str(tmp_path / "lib")))
        assert located.filename == str(tmp_path / "lib" / "index.js")
        assert located.via_index is None

    def test_export_extension_index(self, tmp_path):
        _write(tmp_path / "components" / "index.js", "export Button from './Button';\n")
        _write(tmp_path / "components" / "Button.jsx", "export default 1;\n")
        locator = ModuleLocator(BuildConfig(cwd=tmp_path))
        located = locator.locate("Button", expand_candidates(str(tmp_path / "components")))
        assert located.filename == str(tmp_path / "components" / "Button.jsx")
        assert located.via_index == str(tmp_path / "components" / "index.js")


class TestReexportTarget:
    def test_relative(self):
        index = os.path.join(os.sep, "p", "components", "index.js")
        assert reexport_target(index, "./Button/Button") == os.path.join(
            os.sep, "p", "components", "Button", "Button"
        )

    def test_parent_relative(self):
        index = os.path.join(os.sep, "p", "components", "index.js")
        assert reexport_target(index, "../shared/Icon") == os.path.join(os.sep, "p", "shared", "Icon")

    def test_non_relative_drops_first_segment(self):
        index = os.path.join(os.sep, "p", "components", "index.js")
        assert reexport_target(index, "components/Card") == os.path.join(os.sep, "p", "components", "Card")
