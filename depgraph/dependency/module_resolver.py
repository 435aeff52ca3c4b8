"""
Module Resolver
===============

Maps raw relative import specifiers (``./utils``, ``../api/client``) to
concrete files on disk and converts file paths into canonical module ids.

Resolution order for a specifier without a recognized extension:

1. ``<candidate>.<extension>`` next to the importing file
2. ``<candidate>/index.<extension>`` directory index file
3. a ``**/<specifier>.<extension>`` search rooted at the base path
4. steps 1-3 again for each alternate extension (ts, tsx, js, jsx, json)

A specifier that already carries a recognized extension is accepted as is.
"""

from __future__ import annotations

import logging
import os
import posixpath
from pathlib import Path

from ..errors import UnresolvedImport

logger = logging.getLogger(__name__)

# Extension preference order for extensionless specifiers
EXTENSION_PREFERENCE = ("ts", "tsx", "js", "jsx", "json")

# Extensions accepted verbatim and stripped from module ids
RECOGNIZED_EXTENSIONS = frozenset(EXTENSION_PREFERENCE) | {"mjs", "cjs"}

# Directories pruned from the pattern search
SEARCH_SKIP_DIRS = {"node_modules", ".git"}


def normalize_path(path: Path | str) -> str:
    """Return an absolute path with forward separators and no ``.``/``..`` segments."""
    text = str(path).replace("\\", "/")
    return os.path.normpath(os.path.abspath(text)).replace("\\", "/")


def is_relative_specifier(specifier: str) -> bool:
    """Check if a specifier is a relative (``.`` or ``..``) import."""
    return specifier.startswith(".")


def strip_extension(path: str) -> str:
    """Strip a recognized source extension from a path."""
    root, ext = posixpath.splitext(path)
    if ext[1:] in RECOGNIZED_EXTENSIONS:
        return root
    return path


class ModuleResolver:
    """Resolves relative import specifiers to normalized file paths."""

    def __init__(
        self,
        base_path: Path | str = ".",
        extension: str | None = None,
        variant: str = "ts",
    ):
        """
        Initialize the resolver.

        Args:
            base_path: Project root. Specifiers without an importing file are
                resolved against it, and module ids are made relative to it.
            extension: Extension tried first for extensionless specifiers.
                Defaults to the language variant.
            variant: Language variant of the project (ts, tsx, js, jsx).
        """
        self.base_path = normalize_path(base_path)
        self.variant = variant
        self.extension = (extension or variant).lstrip(".")

    def extension_order(self) -> list[str]:
        """Configured extension first, then the remaining preferences."""
        return [self.extension] + [ext for ext in EXTENSION_PREFERENCE if ext != self.extension]

    def resolve(self, specifier: str, importer: Path | str | None = None) -> str:
        """
        Resolve a relative specifier to a normalized absolute path.

        Args:
            specifier: Raw import specifier, starting with ``.`` or ``..``.
            importer: Path of the importing file, if known.

        Returns:
            Normalized absolute path of the target file.

        Raises:
            UnresolvedImport: If no existing file matches the specifier.
        """
        if not is_relative_specifier(specifier):
            raise UnresolvedImport(specifier, importer)

        spec = specifier.replace("\\", "/")
        context = posixpath.dirname(self._absolute(importer)) if importer else self.base_path
        candidate = normalize_path(posixpath.join(context, spec))

        _, ext = posixpath.splitext(spec)
        if ext[1:] in RECOGNIZED_EXTENSIONS:
            return candidate

        for extension in self.extension_order():
            path = f"{candidate}.{extension}"
            if os.path.isfile(path):
                return path

            index_file = posixpath.join(candidate, f"index.{extension}")
            if os.path.isfile(index_file):
                return index_file

            found = self._search(spec, extension)
            if found:
                logger.debug(f"Resolved '{specifier}' by pattern search: {found}")
                return found

        raise UnresolvedImport(specifier, importer)

    def try_resolve(self, specifier: str, importer: Path | str | None = None) -> str | None:
        """Resolve a specifier, returning None instead of raising."""
        try:
            return self.resolve(specifier, importer)
        except UnresolvedImport:
            return None

    def module_id(self, path: Path | str) -> str:
        """
        Convert a file path into a canonical module id.

        Relative paths are taken relative to the base path. The id is
        relative to the base path when the file lies under it, absolute
        otherwise, and never carries a recognized source extension.
        """
        normalized = self._absolute(path)

        if normalized.startswith(self.base_path.rstrip("/") + "/"):
            normalized = posixpath.relpath(normalized, self.base_path)

        return strip_extension(normalized)

    def resolve_module_id(self, specifier: str, importer: Path | str | None = None) -> str:
        """Resolve a specifier straight to a module id."""
        return self.module_id(self.resolve(specifier, importer))

    def _absolute(self, path: Path | str) -> str:
        """Normalize a path, taking relative paths from the base path."""
        text = str(path).replace("\\", "/")
        if not posixpath.isabs(text) and not os.path.isabs(text):
            text = posixpath.join(self.base_path, text)
        return normalize_path(text)

    def _search(self, specifier: str, extension: str) -> str | None:
        """
        Search under the base path for ``**/<specifier>.<extension>``.

        Skipped and hidden directories are pruned from the walk. The first
        match in sorted relative path order wins.
        """
        parts = [part for part in specifier.split("/") if part not in ("", ".", "..")]
        if not parts:
            return None

        target = "/".join(parts) + f".{extension}"
        matches: list[str] = []

        for dirpath, dirnames, filenames in os.walk(self.base_path):
            dirnames[:] = [d for d in dirnames if d not in SEARCH_SKIP_DIRS and not d.startswith(".")]
            relative_dir = posixpath.relpath(dirpath.replace("\\", "/"), self.base_path)
            for filename in filenames:
                relative = filename if relative_dir == "." else f"{relative_dir}/{filename}"
                if relative == target or relative.endswith(f"/{target}"):
                    matches.append(relative)

        if not matches:
            return None
        return normalize_path(posixpath.join(self.base_path, min(matches)))
