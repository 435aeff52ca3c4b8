"""
Graph Exporters
===============

Serialization of dependency graphs to JSON, DOT and D3 payloads.
"""

from .serializer import OUTPUT_FORMATS, GraphSerializer

__all__ = ["GraphSerializer", "OUTPUT_FORMATS"]
