"""
Dependency Graph Errors
=======================

Exception hierarchy for a dependency graph run.

Per-file errors (UnresolvedImport, ParseFailure) are caught where they occur
and never abort the batch. EmptyFileSet ends the run without output, and
WriteFailure is surfaced to the caller.
"""

from __future__ import annotations

from pathlib import Path


class DependencyGraphError(Exception):
    """Base class for all dependency graph errors."""


class UnresolvedImport(DependencyGraphError):
    """Raised when a relative specifier does not map to an existing file."""

    def __init__(self, specifier: str, importer: Path | str | None = None):
        self.specifier = specifier
        self.importer = str(importer) if importer else None
        message = f"Cannot resolve import '{specifier}'"
        if self.importer:
            message += f" from {self.importer}"
        super().__init__(message)


class ParseFailure(DependencyGraphError):
    """Raised when a source file cannot be read or parsed."""

    def __init__(self, file_path: Path | str, reason: str):
        self.file_path = str(file_path)
        self.reason = reason
        super().__init__(f"Failed to parse {self.file_path}: {reason}")


class EmptyFileSet(DependencyGraphError):
    """Raised when the file pattern matches no source files."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"No files found matching pattern: {pattern}")


class WriteFailure(DependencyGraphError):
    """Raised when the serialized graph cannot be written."""

    def __init__(self, path: Path | str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to write {self.path}: {reason}")
