"""
Data Models for Dependency Graphs
=================================

Core data structures for representing a JS/TS dependency graph:
file nodes, import/call edges, and the graph that owns them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from posixpath import basename
from types import MappingProxyType
from typing import Mapping


class ExportKind(Enum):
    """Classification of an exported symbol's declaration shape."""

    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE = "type"
    ENUM = "enum"
    VARIABLE = "variable"
    DEFAULT = "default"
    UNKNOWN = "unknown"


class EdgeType(Enum):
    """Types of relationships between files."""

    IMPORT = "import"
    CALL = "call"


@dataclass(frozen=True)
class FileNode:
    """Per-file record of resolved imports, exports and call-site names."""

    id: str
    imports: tuple[str, ...] = ()
    exports: Mapping[str, ExportKind] = field(default_factory=dict)
    calls: frozenset[str] = frozenset()

    def __post_init__(self):
        # Read-only views so a built node cannot change
        object.__setattr__(self, "imports", tuple(self.imports))
        object.__setattr__(self, "exports", MappingProxyType(dict(self.exports)))
        object.__setattr__(self, "calls", frozenset(self.calls))

    def __hash__(self) -> int:
        return hash((self.id, self.imports, self.calls))

    @property
    def label(self) -> str:
        """Base name of the module, used as display label."""
        return basename(self.id)

    def exported_functions(self) -> list[str]:
        """Names exported with the function kind."""
        return [name for name, kind in self.exports.items() if kind is ExportKind.FUNCTION]

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "imports": list(self.imports),
            "exports": {name: kind.value for name, kind in self.exports.items()},
            "calls": sorted(self.calls),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FileNode":
        """Load from dict."""
        return cls(
            id=data.get("id", ""),
            imports=tuple(data.get("imports", [])),
            exports={name: ExportKind(kind) for name, kind in data.get("exports", {}).items()},
            calls=frozenset(data.get("calls", [])),
        )


@dataclass(frozen=True)
class GraphEdge:
    """An import or heuristic call relationship between two files."""

    source: str
    target: str
    edge_type: str = EdgeType.IMPORT.value
    symbol: str | None = None  # call edges only

    @classmethod
    def import_edge(cls, source: str, target: str) -> "GraphEdge":
        return cls(source=source, target=target, edge_type=EdgeType.IMPORT.value)

    @classmethod
    def call_edge(cls, source: str, target: str, symbol: str) -> "GraphEdge":
        return cls(source=source, target=target, edge_type=EdgeType.CALL.value, symbol=symbol)

    @property
    def is_import(self) -> bool:
        return self.edge_type == EdgeType.IMPORT.value

    @property
    def is_call(self) -> bool:
        return self.edge_type == EdgeType.CALL.value

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        data = {
            "source": self.source,
            "target": self.target,
            "type": self.edge_type,
        }
        if self.is_call:
            data["symbol"] = self.symbol
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "GraphEdge":
        """Load from dict."""
        return cls(
            source=data.get("source", ""),
            target=data.get("target", ""),
            edge_type=data.get("type", EdgeType.IMPORT.value),
            symbol=data.get("symbol"),
        )


@dataclass
class Graph:
    """Dependency graph of one analysis run.

    Nodes are kept in discovery order. The graph is filled by GraphBuilder
    and treated as read-only afterwards.
    """

    nodes: dict[str, FileNode] = field(default_factory=dict)
    edges: list[GraphEdge] = field(default_factory=list)

    def add_node(self, node: FileNode) -> None:
        self.nodes[node.id] = node

    def get_node(self, module_id: str) -> FileNode | None:
        """Get a node by its module id."""
        return self.nodes.get(module_id)

    def import_edges(self) -> list[GraphEdge]:
        return [edge for edge in self.edges if edge.is_import]

    def call_edges(self) -> list[GraphEdge]:
        return [edge for edge in self.edges if edge.is_call]

    def dependencies_of(self, module_id: str) -> list[GraphEdge]:
        """Get all outgoing edges for a module."""
        return [edge for edge in self.edges if edge.source == module_id]

    def dependents_of(self, module_id: str) -> list[GraphEdge]:
        """Get all incoming edges for a module."""
        return [edge for edge in self.edges if edge.target == module_id]

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "nodes": [node.to_dict() for node in self.nodes.values()],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        """Load from dict."""
        graph = cls()
        for node_data in data.get("nodes", []):
            graph.add_node(FileNode.from_dict(node_data))
        graph.edges = [GraphEdge.from_dict(edge_data) for edge_data in data.get("edges", [])]
        return graph
