"""
Analysis Result Models
======================

Structured diagnostics and the result object returned by one analysis run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .graph_models import Graph


class DiagnosticLevel(Enum):
    """Severity of a diagnostic."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """A single message produced while building the graph."""

    level: DiagnosticLevel
    message: str
    file: str | None = None

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        data = {"level": self.level.value, "message": self.message}
        if self.file:
            data["file"] = self.file
        return data

    def __str__(self) -> str:
        prefix = f"{self.file}: " if self.file else ""
        return f"[{self.level.value}] {prefix}{self.message}"


@dataclass
class AnalysisResult:
    """Graph, cycles and diagnostics of one run."""

    graph: Graph = field(default_factory=Graph)
    cycles: list[list[str]] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.level is DiagnosticLevel.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.level is DiagnosticLevel.WARNING]

    def summary(self) -> dict[str, int]:
        """Node, edge and cycle counts."""
        return {
            "files": len(self.files),
            "nodes": len(self.graph.nodes),
            "edges": len(self.graph.edges),
            "import_edges": len(self.graph.import_edges()),
            "call_edges": len(self.graph.call_edges()),
            "cycles": len(self.cycles),
            "errors": len(self.errors),
        }

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "graph": self.graph.to_dict(),
            "cycles": self.cycles,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "files": self.files,
            "duration_seconds": self.duration_seconds,
        }
