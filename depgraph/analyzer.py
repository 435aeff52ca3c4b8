"""
Dependency Analyzer
===================

Orchestrates a dependency graph run:

1. Discover source files from the configured glob pattern
2. Build the graph (index files, import edges, call edges)
3. Detect circular imports
4. Serialize the graph and write it to the output destination
"""

from __future__ import annotations

import glob
import logging
import os
import time
import webbrowser
from pathlib import Path

from .config import AnalyzerConfig
from .dependency.cycle_detector import CycleDetector
from .dependency.graph_builder import GraphBuilder
from .dependency.module_resolver import ModuleResolver
from .dependency.syntax_tree import SUFFIX_VARIANTS, TreeSitterParser
from .errors import EmptyFileSet, WriteFailure
from .exporters.serializer import GraphSerializer
from .models.analysis_result import AnalysisResult
from .visualization import render_html

logger = logging.getLogger(__name__)


class DependencyAnalyzer:
    """Runs dependency graph analysis for one configuration."""

    # Directories to skip
    SKIP_DIRS = {
        "node_modules",
        ".git",
        "dist",
        "build",
        ".next",
        ".nuxt",
        "coverage",
    }

    def __init__(self, config: AnalyzerConfig, parser: TreeSitterParser | None = None):
        """
        Initialize the analyzer.

        Args:
            config: Settings of the run.
            parser: Syntax tree parser shared by all files.
        """
        self.config = config
        self.base_dir = config.base_dir
        self.parser = parser or TreeSitterParser()
        self.serializer = GraphSerializer()

    def discover_files(self) -> list[Path]:
        """
        Find source files matching the configured pattern.

        Returns:
            Sorted list of absolute file paths.

        Raises:
            EmptyFileSet: If nothing matches.
        """
        files: set[Path] = set()

        for match in glob.glob(self.config.pattern, root_dir=self.base_dir, recursive=True):
            path = Path(os.path.join(self.base_dir, match))
            if any(part in self.SKIP_DIRS for part in Path(match).parts):
                continue
            if path.suffix.lower() in SUFFIX_VARIANTS and path.is_file():
                files.add(path.resolve())

        if not files:
            raise EmptyFileSet(self.config.pattern)

        return sorted(files)

    def create_builder(self) -> GraphBuilder:
        resolver = ModuleResolver(
            base_path=self.base_dir,
            extension=self.config.extension,
            variant=self.config.script_variant,
        )
        return GraphBuilder(
            resolver,
            parser=self.parser,
            languages=self.config.languages,
            strict=self.config.strict,
        )

    def analyze(self, files: list[Path] | None = None) -> AnalysisResult:
        """
        Build the graph and detect cycles.

        Args:
            files: Files to analyze. Discovered from the pattern if None.

        Returns:
            AnalysisResult with graph, cycles and diagnostics.

        Raises:
            EmptyFileSet: If there are no files to analyze.
        """
        start_time = time.time()

        if files is None:
            files = self.discover_files()
        elif not files:
            raise EmptyFileSet(self.config.pattern)

        logger.info(f"Found {len(files)} files to analyze...")

        builder = self.create_builder()
        graph = builder.build(files)
        cycles = CycleDetector(graph).detect()

        return AnalysisResult(
            graph=graph,
            cycles=cycles,
            diagnostics=list(builder.diagnostics),
            files=[str(path) for path in files],
            duration_seconds=time.time() - start_time,
        )

    def render(self, result: AnalysisResult) -> str:
        """Serialize the result graph in the configured format."""
        if self.config.format == "html":
            return render_html(result.graph)
        return self.serializer.serialize(result.graph, self.config.format)

    def write(self, result: AnalysisResult, output_path: Path | None = None) -> Path:
        """
        Write the serialized graph.

        Raises:
            WriteFailure: If the output cannot be written.
        """
        output_path = Path(output_path or self.config.output_path)
        content = self.render(result)

        try:
            if not output_path.parent.exists():
                output_path.parent.mkdir(parents=True, exist_ok=True)
                logger.info(f"Created output directory: {output_path.parent}")
            output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise WriteFailure(output_path, str(e)) from e

        logger.info(f"Graph written to {output_path} in {self.config.format} format")
        return output_path

    def run(self) -> tuple[AnalysisResult, Path]:
        """Analyze, write the output, and open it when requested."""
        result = self.analyze()
        output_path = self.write(result)

        if self.config.open and self.config.format == "html":
            logger.info(f"Opening {output_path} in your browser")
            webbrowser.open(output_path.resolve().as_uri())

        return result, output_path


def format_summary(result: AnalysisResult) -> str:
    """Human readable graph summary."""
    counts = result.summary()
    lines = [
        "Graph Summary:",
        f"Total nodes: {counts['nodes']}",
        f"Total edges: {counts['edges']}",
        f"Import edges: {counts['import_edges']}",
        f"Call edges: {counts['call_edges']}",
    ]

    if result.cycles:
        lines.append("")
        lines.append("Circular Dependencies Found:")
        for i, cycle in enumerate(result.cycles, 1):
            lines.append(f"Cycle {i}: {' -> '.join(cycle)}")

    if result.errors:
        lines.append("")
        lines.append(f"Skipped {len(result.errors)} file(s):")
        lines.extend(f"  {diagnostic}" for diagnostic in result.errors)

    return "\n".join(lines)
