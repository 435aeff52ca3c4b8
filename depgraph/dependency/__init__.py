"""
Dependency Analysis Module
==========================

Parses JavaScript and TypeScript sources with tree-sitter, resolves relative
imports, indexes exports and calls, and builds dependency graphs.
"""

from __future__ import annotations

from .cycle_detector import CycleDetector, detect_circular_dependencies
from .graph_builder import GraphBuilder
from .module_resolver import ModuleResolver
from .source_indexer import SourceIndexer
from .syntax_tree import SyntaxTree, TreeSitterParser

__all__ = [
    "CycleDetector",
    "GraphBuilder",
    "ModuleResolver",
    "SourceIndexer",
    "SyntaxTree",
    "TreeSitterParser",
    "detect_circular_dependencies",
]
