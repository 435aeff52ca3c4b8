"""
Syntax Tree Parsing
===================

Thin wrapper around tree-sitter grammars for JavaScript, JSX, TypeScript
and TSX. The rest of the package only relies on ``parse(text, variant)``
and ``SyntaxTree.visit(callback)``, so any parser exposing tree-sitter
style nodes can be substituted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)

LANGUAGE_VARIANTS = ("ts", "tsx", "js", "jsx")

# File suffix -> language variant
SUFFIX_VARIANTS = {
    ".ts": "ts",
    ".mts": "ts",
    ".cts": "ts",
    ".tsx": "tsx",
    ".js": "js",
    ".mjs": "js",
    ".cjs": "js",
    ".jsx": "jsx",
}


def _load_language(variant: str) -> Language:
    if variant == "ts":
        return Language(tree_sitter_typescript.language_typescript())
    if variant == "tsx":
        return Language(tree_sitter_typescript.language_tsx())
    if variant in ("js", "jsx"):
        # The JavaScript grammar covers JSX
        return Language(tree_sitter_javascript.language())
    raise ValueError(f"Unsupported language variant: {variant}. Must be one of: {', '.join(LANGUAGE_VARIANTS)}")


def node_text(node: Node | None) -> str:
    """Source text of a node."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def string_value(node: Node | None) -> str | None:
    """Unquoted value of a string literal node, or None for non-strings."""
    if node is None or node.type != "string":
        return None
    text = node_text(node)
    if len(text) >= 2 and text[0] in "'\"" and text[-1] == text[0]:
        return text[1:-1]
    return text


class SyntaxTree:
    """A parsed source file."""

    def __init__(self, tree: Tree, variant: str):
        self.tree = tree
        self.variant = variant

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        return self.root.has_error

    def walk(self) -> Iterator[Node]:
        """Yield every node in document (pre-)order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def visit(self, callback: Callable[[Node], None]) -> None:
        """Call ``callback`` for every node in document order."""
        for node in self.walk():
            callback(node)

    def error_lines(self) -> list[int]:
        """1-based line numbers of syntax error nodes."""
        return sorted(
            {node.start_point[0] + 1 for node in self.walk() if node.type == "ERROR" or node.is_missing}
        )


class TreeSitterParser:
    """Creates one tree-sitter parser per language variant, lazily."""

    def __init__(self):
        self._parsers: dict[str, Parser] = {}

    def get_parser(self, variant: str) -> Parser:
        """Get or create the parser for a language variant."""
        parser = self._parsers.get(variant)
        if parser is None:
            parser = Parser(_load_language(variant))
            self._parsers[variant] = parser
            logger.debug(f"Loaded {variant} parser")
        return parser

    def parse(self, text: str, variant: str) -> SyntaxTree:
        """
        Parse source text.

        Args:
            text: Source code of one file.
            variant: Language variant (ts, tsx, js, jsx).

        Returns:
            SyntaxTree for the source.
        """
        tree = self.get_parser(variant).parse(text.encode("utf-8"))
        return SyntaxTree(tree, variant)
