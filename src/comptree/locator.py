"""Module location — which file on disk backs an imported component.

Each base path expands to the bare path, ``.js``, ``.jsx``, ``/index.js`` and
``/index.jsx``. Base paths are tried in a fixed order: the alias-resolved
specifier, the importing file's own guess, then the guess re-rooted in the
secondary module directory. The first readable file wins.

Index files get one extra hop: when ``components/index.js`` re-exports the
component being located, the re-exported file is used instead.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from comptree.aliases import is_relative, resolve_alias
from comptree.imports import find_reexport, find_reexport_in_text
from comptree.models import BuildConfig, ModuleParseError
from comptree.parser import parse_source, read_text_safe

logger = logging.getLogger(__name__)

# ── Constants ──

MODULE_SUFFIXES = ("", ".js", ".jsx", f"{os.sep}index.js", f"{os.sep}index.jsx")

INDEX_FILES = ("index.js", "index.jsx")

# Suffixes tried on a path re-exported by an index file, in order
REEXPORT_SUFFIXES = (".jsx", ".js")


@dataclass(frozen=True)
class LocatedModule:
    """A readable file backing a component."""

    filename: str
    source: str
    via_index: Optional[str] = None  # index file the location went through


def expand_candidates(base: str) -> list[str]:
    return [f"{base}{suffix}" for suffix in MODULE_SUFFIXES]


def _try_read(filename: str) -> Optional[str]:
    """Source text of ``filename``, or None when it is not a readable file."""
    if not os.path.isfile(filename):
        return None
    try:
        return read_text_safe(filename)
    except OSError as exc:
        logger.debug("Could not read %s: %s", filename, exc)
        return None


def reexport_target(index_filename: str, specifier: str) -> str:
    """Path a specifier re-exported by an index file points at (no suffix)."""
    index_dir = os.path.dirname(index_filename)
    if is_relative(specifier):
        return os.path.normpath(os.path.join(index_dir, specifier))
    tail = specifier.split("/")[1:]
    return os.path.join(index_dir, *tail)


class ModuleLocator:
    """Finds the files backing components for one build configuration.

    Usage::

        locator = ModuleLocator(config)
        names = locator.candidates(guess, "./Header", parent_filename)
        located = locator.locate("Header", names)
    """

    def __init__(self, config: BuildConfig):
        self._config = config

    def candidates(
        self,
        guess: str,
        source: Optional[str] = None,
        parent_filename: Optional[str] = None,
    ) -> list[str]:
        """Every file name worth trying for a node, in the order they are tried."""
        config = self._config
        names: list[str] = []

        # 1. Alias-derived candidates (never for relative specifiers)
        if config.aliases and source is not None and not is_relative(source):
            aliased = os.path.join(config.cwd, resolve_alias(source, config.aliases))
            names.extend(expand_candidates(aliased))

        # 2. The node's own best guess
        names.extend(expand_candidates(guess))

        # 3. The guess re-rooted in the secondary module directory
        if config.module_dir is not None and parent_filename is not None:
            parent_dir = os.path.dirname(parent_filename)
            if guess.startswith(parent_dir):
                rerooted = str(config.module_dir) + guess[len(parent_dir):]
                names.extend(expand_candidates(rerooted))

        return names

    def locate(self, name: str, candidates: list[str]) -> Optional[LocatedModule]:
        """First readable candidate, following index re-exports of ``name``.

        An index file that cannot be parsed is scanned for ``export Foo from``
        re-exports; failing that, the index file itself backs the component.
        """
        for filename in candidates:
            source = _try_read(filename)
            if source is None:
                continue
            if os.path.basename(filename) in INDEX_FILES:
                located = self._follow_index(name, filename, source)
                if located is not None:
                    return located
            logger.debug("Located %s at %s", name, filename)
            return LocatedModule(filename=filename, source=source)
        return None

    def _follow_index(self, name: str, index_filename: str, source: str) -> Optional[LocatedModule]:
        try:
            binding = find_reexport(parse_source(source, index_filename), name)
        except ModuleParseError as exc:
            logger.warning("Reading re-exports of %s from text: %s", index_filename, exc.message)
            binding = find_reexport_in_text(source, name)
        if binding is None:
            return None
        target = reexport_target(index_filename, binding.source)
        for suffix in REEXPORT_SUFFIXES:
            filename = f"{target}{suffix}"
            text = _try_read(filename)
            if text is not None:
                logger.debug("Located %s via %s at %s", name, index_filename, filename)
                return LocatedModule(filename=filename, source=text, via_index=index_filename)
        logger.debug("%s re-exports %s from %s, which was not found", index_filename, name, target)
        return None
