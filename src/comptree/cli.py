"""comptree CLI — print the React component hierarchy below a root file.

Usage::

    comptree [options] path/to/rootComponent.jsx

Options::

    --aliasing / -a CONFIG    Webpack config (.js) or JSON file with resolve.alias
    --hide-containers / -c    Show wrapped components in place of their containers
    --scan-depth / -d N       Limit the depth of the hierarchy that is scanned
    --json / -j               Write data.json instead of printing the tree
    --module-dir / -m DIR     Extra module directory not in node_modules, e.g. src
    --hide-third-party / -t   Hide components that resolve to no project file
    --verbose / -v            Enable verbose logging
"""

import argparse
import logging
import sys
from pathlib import Path

from comptree import __version__
from comptree.aliases import load_aliases
from comptree.builder import ComponentTreeBuilder
from comptree.models import BuildConfig
from comptree.render import render_text, write_json

EMPTY_RESULT_MESSAGE = "Could not find any components. Did you process the right file?"


def _scan_depth(value: str) -> int:
    try:
        depth = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid depth: {value!r}") from None
    return max(depth, 1)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="comptree",
        usage="%(prog)s [opts] <path/to/rootComponent>",
        description="React component hierarchy viewer.",
    )
    parser.add_argument(
        "root_component",
        type=Path,
        help="Path to the root component source file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--aliasing", "-a",
        metavar="CONFIG",
        default=None,
        help="Path to a Webpack config (or JSON file) for module alias definitions",
    )
    parser.add_argument(
        "--hide-containers", "-c",
        action="store_true",
        default=False,
        help="Hide redux container components",
    )
    parser.add_argument(
        "--scan-depth", "-d",
        type=_scan_depth,
        metavar="DEPTH",
        default=None,
        help="Limit the depth of the component hierarchy that is displayed",
    )
    parser.add_argument(
        "--json", "-j",
        action="store_true",
        default=False,
        help="Output graph to data.json instead of printing it on screen",
    )
    parser.add_argument(
        "--module-dir", "-m",
        type=Path,
        metavar="DIR",
        default=None,
        help="Path to additional modules not included in node_modules e.g. src",
    )
    parser.add_argument(
        "--hide-third-party", "-t",
        action="store_true",
        default=False,
        help="Hide third party components",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=False,
        help="Enable verbose logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns exit code (0=components found, 1=none found)."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    cwd = Path.cwd()
    root_file = cwd / args.root_component
    if not root_file.is_file():
        print(f"Error: Root component does not exist: {root_file}", file=sys.stderr)
        return 1

    config = BuildConfig(
        scan_depth=args.scan_depth,
        hide_third_party=args.hide_third_party,
        module_dir=args.module_dir.resolve() if args.module_dir else None,
        aliases=load_aliases(args.aliasing),
        cwd=cwd,
    )
    result = ComponentTreeBuilder(config).build(root_file)

    for err in result.parse_errors:
        print(f"Error: Could not parse {err['file']}: {err['error']}", file=sys.stderr)

    if not result.found_components:
        print(EMPTY_RESULT_MESSAGE, file=sys.stderr)
        return 1

    if args.json:
        try:
            path = write_json(result.root, cwd)
        except OSError as exc:
            print(f"Error: Could not write JSON output: {exc}", file=sys.stderr)
            return 1
        print(f"Component tree written: {path}")
    else:
        print(render_text(result.root, hide_containers=args.hide_containers))
    return 0
