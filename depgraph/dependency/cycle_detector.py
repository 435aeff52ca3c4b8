"""
Circular Dependency Detection
=============================

Finds import cycles with a depth-first search over import edges. Call edges
are ignored.

Each cycle is reported as the path slice from the revisited module to the
module that closes the loop; the closing edge back to the first element is
implicit. Once a module closes a cycle it stops exploring its remaining
imports, so modules reachable only through that branch may take part in
further cycles that are not reported.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ..models.graph_models import Graph

logger = logging.getLogger(__name__)


class CycleDetector:
    """Detects circular imports in a dependency graph."""

    def __init__(self, graph: Graph):
        self.graph = graph

    def adjacency(self) -> dict[str, list[str]]:
        """Import targets of every module, in edge order."""
        adjacency: dict[str, list[str]] = {}
        for edge in self.graph.import_edges():
            adjacency.setdefault(edge.source, []).append(edge.target)
        return adjacency

    def detect(self) -> list[list[str]]:
        """
        Run the search from every unvisited module, in discovery order.

        Returns:
            List of cycles, each an ordered list of module ids.
        """
        adjacency = self.adjacency()
        visited: set[str] = set()
        cycles: list[list[str]] = []

        # Single shared path; positions maps each module on it to its index
        path: list[str] = []
        positions: dict[str, int] = {}
        pending: list[Iterator[str]] = []

        def enter(module_id: str) -> None:
            visited.add(module_id)
            positions[module_id] = len(path)
            path.append(module_id)
            pending.append(iter(adjacency.get(module_id, ())))

        for root in self.graph.nodes:
            if root in visited:
                continue

            enter(root)
            while pending:
                descended = False
                for neighbor in pending[-1]:
                    if neighbor not in visited:
                        enter(neighbor)
                        descended = True
                        break
                    if neighbor in positions:
                        cycle = path[positions[neighbor]:]
                        cycles.append(cycle)
                        logger.debug(f"Found cycle: {' -> '.join(cycle + [neighbor])}")
                        break

                if not descended:
                    pending.pop()
                    del positions[path.pop()]

        return cycles


def detect_circular_dependencies(graph: Graph) -> list[list[str]]:
    """Find import cycles in a graph."""
    return CycleDetector(graph).detect()
