"""
Dependency Graph Builder
========================

Builds the dependency graph of a JS/TS project: parses and indexes every
file into a FileNode, then adds import edges and heuristic call edges.

Call edges match call-site names against exported function names. A name
exported by several files maps to the file processed last, so aliasing,
namespacing and re-exports are not followed.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..errors import ParseFailure
from ..models.analysis_result import Diagnostic, DiagnosticLevel
from ..models.graph_models import FileNode, Graph, GraphEdge
from .module_resolver import ModuleResolver
from .source_indexer import SourceIndexer
from .syntax_tree import SUFFIX_VARIANTS, SyntaxTree, TreeSitterParser

logger = logging.getLogger(__name__)


class GraphBuilder:
    """Builds dependency graphs from JS/TS source files."""

    def __init__(
        self,
        resolver: ModuleResolver,
        parser: TreeSitterParser | None = None,
        languages: list[str] | tuple[str, ...] = ("ts",),
        strict: bool = False,
    ):
        """
        Initialize the graph builder.

        Args:
            resolver: Resolver shared by all files of the run.
            parser: Syntax tree parser. A tree-sitter parser by default.
            languages: Language variants in scope. A file whose suffix is not
                one of them is parsed as the resolver's variant.
            strict: Treat files with syntax errors as parse failures.
        """
        self.resolver = resolver
        self.parser = parser or TreeSitterParser()
        self.languages = tuple(languages)
        self.strict = strict
        self.indexer = SourceIndexer(resolver)
        self.diagnostics: list[Diagnostic] = []

    def build(self, files: list[Path | str]) -> Graph:
        """
        Build a complete dependency graph.

        Args:
            files: Source files to analyze, in discovery order.

        Returns:
            Graph with nodes, import edges and call edges.
        """
        graph = Graph()

        for file_path in files:
            try:
                node = self.index_file(file_path)
            except ParseFailure as e:
                logger.warning(str(e))
                self._diagnose(DiagnosticLevel.ERROR, e.reason, e.file_path)
                continue

            graph.add_node(node)
            logger.debug(
                f"Processed {file_path}: {len(node.imports)} imports, "
                f"{len(node.exports)} exports, {len(node.calls)} calls"
            )

        self.build_import_edges(graph)
        self.build_call_edges(graph)

        return graph

    def index_file(self, file_path: Path | str) -> FileNode:
        """
        Read, parse and index one file.

        Raises:
            ParseFailure: If the file cannot be read or decoded, or has
                syntax errors in strict mode.
        """
        path = Path(file_path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ParseFailure(path, str(e)) from e

        tree = self.parse(content, path)
        return self.indexer.index(tree, path)

    def parse(self, content: str, path: Path) -> SyntaxTree:
        variant = self.variant_for(path)
        try:
            tree = self.parser.parse(content, variant)
        except ValueError as e:
            raise ParseFailure(path, str(e)) from e

        if tree.has_errors:
            lines = ", ".join(str(line) for line in tree.error_lines()[:5])
            message = f"Syntax errors near line(s) {lines}" if lines else "Syntax errors"
            if self.strict:
                raise ParseFailure(path, message)
            self._diagnose(DiagnosticLevel.WARNING, message, str(path))

        return tree

    def variant_for(self, path: Path) -> str:
        """Language variant for a file, from its suffix when in scope."""
        variant = SUFFIX_VARIANTS.get(path.suffix.lower())
        if variant and variant in self.languages:
            return variant
        return self.resolver.variant

    def build_import_edges(self, graph: Graph) -> None:
        """
        Add one import edge per resolved import of every node.

        Node ids and import targets are both module ids relative to the
        project root. Targets outside the analyzed file set get no edge.
        """
        for module_id, node in graph.nodes.items():
            for target in node.imports:
                if target not in graph.nodes:
                    logger.debug(f"Skipping import {module_id} -> {target}: not in analyzed files")
                    continue
                graph.edges.append(GraphEdge.import_edge(module_id, target))

    def build_call_edges(self, graph: Graph) -> None:
        """Add call edges from callers to the files exporting the called function."""
        exported_functions: dict[str, str] = {}  # function name -> module id

        for module_id, node in graph.nodes.items():
            for name in node.exported_functions():
                previous = exported_functions.get(name)
                if previous is not None and previous != module_id:
                    self._diagnose(
                        DiagnosticLevel.INFO,
                        f"Function '{name}' is also exported by {previous}; calls resolve here",
                        module_id,
                    )
                exported_functions[name] = module_id

        for module_id, node in graph.nodes.items():
            for call in sorted(node.calls):
                target = exported_functions.get(call)
                # Don't add self-references
                if target is not None and target != module_id:
                    graph.edges.append(GraphEdge.call_edge(module_id, target, call))

    def _diagnose(self, level: DiagnosticLevel, message: str, file: str | None = None) -> None:
        self.diagnostics.append(Diagnostic(level=level, message=message, file=file))
