"""
Graph Serializer
================

Renders a dependency graph as JSON, Graphviz DOT or a D3 force-layout
payload. Edges whose endpoints are not nodes of the graph are left out of
every format.
"""

from __future__ import annotations

import json
from typing import Any

from ..models.graph_models import EdgeType, Graph, GraphEdge

OUTPUT_FORMATS = ("json", "dot", "d3", "html")


def _dot_quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class GraphSerializer:
    """Serializes graphs to the supported output formats."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def serialize(self, graph: Graph, output_format: str) -> str:
        """
        Render a graph as text.

        Args:
            graph: Graph to render.
            output_format: One of json, dot, d3. HTML is produced by
                ``depgraph.visualization`` from the d3 payload.

        Returns:
            Serialized graph.
        """
        if output_format == "json":
            return json.dumps(self.to_json(graph), indent=self.indent)
        if output_format == "d3":
            return json.dumps(self.to_d3(graph), indent=self.indent)
        if output_format == "dot":
            return self.to_dot(graph)
        raise ValueError(f"Unsupported output format: {output_format}. Must be one of: json, dot, d3")

    def valid_edges(self, graph: Graph) -> list[GraphEdge]:
        """Edges with both endpoints in the node list."""
        return [edge for edge in graph.edges if edge.source in graph.nodes and edge.target in graph.nodes]

    def to_json(self, graph: Graph) -> dict[str, Any]:
        nodes = [
            {
                "id": node.id,
                "label": node.label,
                "exports": list(node.exports),
                "calls": sorted(node.calls),
            }
            for node in graph.nodes.values()
        ]

        edges = []
        for edge in self.valid_edges(graph):
            data = {"source": edge.source, "target": edge.target, "type": edge.edge_type}
            if edge.is_call:
                data["label"] = edge.symbol
            edges.append(data)

        return {"nodes": nodes, "edges": edges}

    def to_d3(self, graph: Graph) -> dict[str, Any]:
        nodes = [
            {
                "id": node.id,
                "label": node.label,
                "group": 1 if node.exports else 2,
            }
            for node in graph.nodes.values()
        ]

        links = [
            {
                "source": edge.source,
                "target": edge.target,
                "value": 2 if edge.edge_type == EdgeType.IMPORT.value else 1,
                "type": edge.edge_type,
            }
            for edge in self.valid_edges(graph)
        ]

        return {"nodes": nodes, "links": links}

    def to_dot(self, graph: Graph) -> str:
        lines = ["digraph DependencyGraph {", "  node [shape=box];"]

        for node in graph.nodes.values():
            lines.append(f"  {_dot_quote(node.id)} [label={_dot_quote(node.label)}];")

        for edge in self.valid_edges(graph):
            if edge.is_import:
                style, color = "solid", "black"
            else:
                style, color = "dashed", "blue"
            label = edge.symbol if edge.is_call and edge.symbol else ""
            lines.append(
                f"  {_dot_quote(edge.source)} -> {_dot_quote(edge.target)} "
                f"[style={style}, color={color}, label={_dot_quote(label)}];"
            )

        lines.append("}")
        return "\n".join(lines) + "\n"
