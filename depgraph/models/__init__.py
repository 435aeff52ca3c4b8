"""
Dependency Graph Models
=======================

Data models for file nodes, import/call edges, graphs and analysis results.
"""

from .analysis_result import AnalysisResult, Diagnostic, DiagnosticLevel
from .graph_models import EdgeType, ExportKind, FileNode, Graph, GraphEdge

__all__ = [
    # Graph models
    "FileNode",
    "GraphEdge",
    "Graph",
    "EdgeType",
    "ExportKind",
    # Analysis result
    "AnalysisResult",
    "Diagnostic",
    "DiagnosticLevel",
]
