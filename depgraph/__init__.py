"""
depgraph
========

Dependency and call graph extraction for JavaScript and TypeScript projects.
Resolves relative imports, indexes exports and call sites, links calls to
exporting files, detects import cycles, and renders the graph as JSON, DOT,
D3 or HTML.
"""

__version__ = "1.0.0"

from .analyzer import DependencyAnalyzer
from .config import AnalyzerConfig, AnalyzerConfigLoader
from .errors import DependencyGraphError, EmptyFileSet, ParseFailure, UnresolvedImport, WriteFailure
from .models import AnalysisResult, Diagnostic, DiagnosticLevel, EdgeType, ExportKind, FileNode, Graph, GraphEdge

__all__ = [
    "__version__",
    "DependencyAnalyzer",
    "AnalyzerConfig",
    "AnalyzerConfigLoader",
    "DependencyGraphError",
    "EmptyFileSet",
    "ParseFailure",
    "UnresolvedImport",
    "WriteFailure",
    "AnalysisResult",
    "Diagnostic",
    "DiagnosticLevel",
    "EdgeType",
    "ExportKind",
    "FileNode",
    "Graph",
    "GraphEdge",
]
