"""
Source Indexer
==============

Walks the syntax tree of one JS/TS file and extracts:

- relative imports (ES6 ``import``, ``export ... from``, TS ``import x =
  require()``, CommonJS ``require()`` and dynamic ``import()``), resolved to
  module ids
- exports (ES6 declarations, export lists, default exports, CommonJS
  ``module.exports``/``exports.x`` assignments) with their kind
- call-site names (``foo()`` and ``receiver.method()``)

Call matching downstream is name based, so only the callee's name is kept.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tree_sitter import Node

from ..errors import UnresolvedImport
from ..models.graph_models import ExportKind, FileNode
from .module_resolver import ModuleResolver, is_relative_specifier
from .syntax_tree import SyntaxTree, node_text, string_value

logger = logging.getLogger(__name__)

# Declaration node type -> export kind
DECLARATION_KINDS = {
    "function_declaration": ExportKind.FUNCTION,
    "generator_function_declaration": ExportKind.FUNCTION,
    "function_signature": ExportKind.FUNCTION,
    "class_declaration": ExportKind.CLASS,
    "abstract_class_declaration": ExportKind.CLASS,
    "interface_declaration": ExportKind.INTERFACE,
    "type_alias_declaration": ExportKind.TYPE,
    "enum_declaration": ExportKind.ENUM,
    "internal_module": ExportKind.UNKNOWN,
    "module": ExportKind.UNKNOWN,
}

VARIABLE_DECLARATIONS = {"lexical_declaration", "variable_declaration"}

# "function" is the pre-0.21 grammar name of function_expression
FUNCTION_EXPRESSIONS = {"function", "function_expression", "arrow_function", "generator_function"}
CLASS_EXPRESSIONS = {"class"}

# Wrappers that do not change the shape of the wrapped expression
TRANSPARENT_EXPRESSIONS = {
    "parenthesized_expression",
    "as_expression",
    "satisfies_expression",
    "non_null_expression",
}

MODULE_LOADERS = {"require"}


def expression_kind(node: Node | None) -> ExportKind:
    """Classify an expression by its shape."""
    while node is not None and node.type in TRANSPARENT_EXPRESSIONS and node.named_children:
        node = node.named_children[0]
    if node is None:
        return ExportKind.VARIABLE
    if node.type in FUNCTION_EXPRESSIONS:
        return ExportKind.FUNCTION
    if node.type in CLASS_EXPRESSIONS:
        return ExportKind.CLASS
    return ExportKind.VARIABLE


def binding_names(node: Node | None) -> list[str]:
    """All names bound by a declarator name, including destructured patterns."""
    if node is None:
        return []
    if node.type in ("identifier", "shorthand_property_identifier_pattern"):
        return [node_text(node)]
    if node.type == "pair_pattern":
        return binding_names(node.child_by_field_name("value"))
    if node.type in ("object_assignment_pattern", "assignment_pattern"):
        return binding_names(node.child_by_field_name("left"))
    if node.type in ("object_pattern", "array_pattern", "rest_pattern"):
        names: list[str] = []
        for child in node.named_children:
            names.extend(binding_names(child))
        return names
    return []


def _unwrap_declaration(node: Node) -> Node:
    """Unwrap ``declare ...`` ambient declarations."""
    while node.type == "ambient_declaration" and node.named_children:
        node = node.named_children[0]
    return node


def _property_key(node: Node | None) -> str | None:
    if node is None:
        return None
    if node.type in ("property_identifier", "identifier", "number"):
        return node_text(node)
    return string_value(node)


def _is_module_exports(node: Node | None) -> bool:
    """Check for the ``module.exports`` member expression."""
    if node is None or node.type != "member_expression":
        return False
    obj = node.child_by_field_name("object")
    prop = node.child_by_field_name("property")
    return obj is not None and obj.type == "identifier" and node_text(obj) == "module" and node_text(prop) == "exports"


class SourceIndexer:
    """Extracts imports, exports and calls from one file's syntax tree."""

    def __init__(self, resolver: ModuleResolver, resolve_local_kinds: bool = True):
        """
        Initialize the indexer.

        Args:
            resolver: Resolver used for every relative import.
            resolve_local_kinds: Look up the declared kind of locally defined
                names in export lists and ``module.exports`` objects.
        """
        self.resolver = resolver
        self.resolve_local_kinds = resolve_local_kinds

    def index(self, tree: SyntaxTree, file_path: Path | str) -> FileNode:
        """
        Build the FileNode for one file.

        Args:
            tree: Parsed syntax tree of the file.
            file_path: Path of the file, used for resolution and its id.

        Returns:
            FileNode with resolved imports, exports and calls.
        """
        return FileNode(
            id=self.resolver.module_id(file_path),
            imports=tuple(self.extract_imports(tree, file_path)),
            exports=self.extract_exports(tree),
            calls=frozenset(self.extract_calls(tree)),
        )

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def extract_imports(self, tree: SyntaxTree, file_path: Path | str | None = None) -> list[str]:
        """Resolved module ids of all relative imports, in appearance order."""
        imports: list[str] = []

        for specifier in self.import_specifiers(tree):
            if not is_relative_specifier(specifier):
                continue
            try:
                module_id = self.resolver.resolve_module_id(specifier, file_path)
            except UnresolvedImport as e:
                logger.debug(str(e))
                continue
            if module_id not in imports:
                imports.append(module_id)

        return imports

    def import_specifiers(self, tree: SyntaxTree) -> list[str]:
        """Raw string specifiers of every import form, relative or not."""
        specifiers: list[str] = []

        def visit(node: Node) -> None:
            if node.type in ("import_statement", "export_statement"):
                specifier = self._statement_source(node)
            elif node.type == "call_expression":
                specifier = self._loader_argument(node)
            else:
                return
            if specifier is not None:
                specifiers.append(specifier)

        tree.visit(visit)
        return specifiers

    def _statement_source(self, node: Node) -> str | None:
        source = node.child_by_field_name("source")
        if source is None:
            # TS: import x = require('./module')
            for child in node.named_children:
                if child.type == "import_require_clause":
                    source = child.child_by_field_name("source")
                    break
        return string_value(source)

    def _loader_argument(self, node: Node) -> str | None:
        """String argument of ``require('x')`` or ``import('x')``."""
        function = node.child_by_field_name("function")
        if function is None:
            return None
        is_loader = function.type == "import" or (
            function.type == "identifier" and node_text(function) in MODULE_LOADERS
        )
        if not is_loader:
            return None

        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return None
        args = [arg for arg in arguments.named_children if arg.type != "comment"]
        if len(args) != 1:
            return None
        return string_value(args[0])

    # ------------------------------------------------------------------
    # Exports
    # ------------------------------------------------------------------

    def extract_exports(self, tree: SyntaxTree) -> dict[str, ExportKind]:
        """Exported names mapped to their kind."""
        exports: dict[str, ExportKind] = {}
        local_kinds = self.local_declarations(tree) if self.resolve_local_kinds else {}

        def visit(node: Node) -> None:
            if node.type == "export_statement":
                self._collect_es_exports(node, exports, local_kinds)
            elif node.type == "assignment_expression":
                self._collect_commonjs_exports(node, exports, local_kinds)

        tree.visit(visit)
        return exports

    def local_declarations(self, tree: SyntaxTree) -> dict[str, ExportKind]:
        """Kinds of the top-level declarations of a file."""
        kinds: dict[str, ExportKind] = {}

        for node in tree.root.named_children:
            if node.type == "export_statement":
                node = node.child_by_field_name("declaration")
                if node is None:
                    continue
            self._declaration_exports(_unwrap_declaration(node), kinds)

        return kinds

    def _declaration_exports(self, node: Node, exports: dict[str, ExportKind]) -> None:
        if node.type in DECLARATION_KINDS:
            name = node.child_by_field_name("name")
            if name is not None:
                exports[node_text(name)] = DECLARATION_KINDS[node.type]
        elif node.type in VARIABLE_DECLARATIONS:
            for declarator in node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name = declarator.child_by_field_name("name")
                if name is None:
                    continue
                if name.type == "identifier":
                    exports[node_text(name)] = expression_kind(declarator.child_by_field_name("value"))
                else:
                    for bound in binding_names(name):
                        exports[bound] = ExportKind.VARIABLE

    def _collect_es_exports(
        self,
        node: Node,
        exports: dict[str, ExportKind],
        local_kinds: dict[str, ExportKind],
    ) -> None:
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            declaration = _unwrap_declaration(declaration)
            before = len(exports)
            self._declaration_exports(declaration, exports)
            if len(exports) == before and declaration.type in DECLARATION_KINDS:
                # export default function () {}
                exports["default"] = DECLARATION_KINDS[declaration.type]
            return

        re_exported = node.child_by_field_name("source") is not None
        for child in node.named_children:
            if child.type == "export_clause":
                for specifier in child.named_children:
                    if specifier.type != "export_specifier":
                        continue
                    local = specifier.child_by_field_name("name")
                    alias = specifier.child_by_field_name("alias")
                    exported = _property_key(alias or local)
                    if not exported:
                        continue
                    kind = ExportKind.UNKNOWN
                    if not re_exported:
                        kind = local_kinds.get(node_text(local), ExportKind.UNKNOWN)
                    exports[exported] = kind
                return
            if child.type == "namespace_export":
                # export * as ns from './module'
                for name in child.named_children:
                    exported = _property_key(name)
                    if exported:
                        exports[exported] = ExportKind.UNKNOWN
                return

        value = node.child_by_field_name("value")
        if value is None and any(child.type == "=" for child in node.children):
            # TS: export = expression
            value = node.named_children[0] if node.named_children else None
        if value is not None:
            self._default_export(value, exports)

    def _default_export(self, value: Node, exports: dict[str, ExportKind]) -> None:
        if value.type == "identifier":
            exports[node_text(value)] = ExportKind.DEFAULT
        else:
            exports["default"] = expression_kind(value)

    def _collect_commonjs_exports(
        self,
        node: Node,
        exports: dict[str, ExportKind],
        local_kinds: dict[str, ExportKind],
    ) -> None:
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if left is None or right is None or left.type != "member_expression":
            return

        if _is_module_exports(left):
            if right.type == "object":
                self._object_exports(right, exports, local_kinds)
            else:
                self._default_export(right, exports)
            return

        # exports.name = value / module.exports.name = value
        obj = left.child_by_field_name("object")
        prop = left.child_by_field_name("property")
        targets_exports = _is_module_exports(obj) or (
            obj is not None and obj.type == "identifier" and node_text(obj) == "exports"
        )
        if targets_exports and prop is not None and prop.type == "property_identifier":
            exports[node_text(prop)] = expression_kind(right)

    def _object_exports(
        self,
        obj: Node,
        exports: dict[str, ExportKind],
        local_kinds: dict[str, ExportKind],
    ) -> None:
        for member in obj.named_children:
            if member.type == "shorthand_property_identifier":
                name = node_text(member)
                exports[name] = local_kinds.get(name, ExportKind.VARIABLE)
            elif member.type == "pair":
                key = _property_key(member.child_by_field_name("key"))
                if not key:
                    continue
                value = member.child_by_field_name("value")
                kind = expression_kind(value)
                if kind is ExportKind.VARIABLE and value is not None and value.type == "identifier":
                    kind = local_kinds.get(node_text(value), ExportKind.VARIABLE)
                exports[key] = kind
            elif member.type == "method_definition":
                key = _property_key(member.child_by_field_name("name"))
                if key:
                    exports[key] = ExportKind.FUNCTION

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def extract_calls(self, tree: SyntaxTree) -> set[str]:
        """Names of every called identifier and ``receiver.method``."""
        calls: set[str] = set()

        def visit(node: Node) -> None:
            if node.type != "call_expression":
                return
            function = node.child_by_field_name("function")
            if function is None:
                return
            if function.type == "identifier":
                calls.add(node_text(function))
            elif function.type == "member_expression":
                receiver = function.child_by_field_name("object")
                method = function.child_by_field_name("property")
                if (
                    receiver is not None
                    and method is not None
                    and receiver.type == "identifier"
                    and method.type == "property_identifier"
                ):
                    calls.add(f"{node_text(receiver)}.{node_text(method)}")

        tree.visit(visit)
        return calls
