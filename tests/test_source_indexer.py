#!/usr/bin/env python3
"""
Tests for Source Indexer
========================

Tests extraction from tree-sitter syntax trees including:
- ES6, CommonJS, dynamic and TS require-style imports
- Exported declarations, variables and destructured bindings
- Export lists, default exports and CommonJS export assignments
- Call-site names
"""

import pytest
from depgraph.dependency.module_resolver import ModuleResolver
from depgraph.dependency.source_indexer import SourceIndexer
from depgraph.dependency.syntax_tree import TreeSitterParser
from depgraph.models.graph_models import ExportKind


@pytest.fixture
def indexer(resolver: ModuleResolver) -> SourceIndexer:
    return SourceIndexer(resolver)


def exports_of(indexer: SourceIndexer, parser: TreeSitterParser, code: str, variant: str = "ts") -> dict:
    return indexer.extract_exports(parser.parse(code, variant))


def calls_of(indexer: SourceIndexer, parser: TreeSitterParser, code: str, variant: str = "ts") -> set:
    return indexer.extract_calls(parser.parse(code, variant))


# =============================================================================
# IMPORTS
# =============================================================================

class TestImportExtraction:
    """Tests for import extraction."""

    def test_es6_imports_in_order(self, indexer, parser, write_files):
        """Collects ES6 imports in appearance order, package imports excluded."""
        files = write_files({"src/app.ts": "", "src/b.ts": "", "src/a.ts": "", "lib/c.ts": ""})
        code = """
import { b } from './b';
import React from 'react';
import a from "./a";
import * as c from '../lib/c';
import './b';
"""
        imports = indexer.extract_imports(parser.parse(code, "ts"), files["src/app.ts"])

        assert imports == ["src/b", "src/a", "lib/c"]

    def test_commonjs_and_dynamic_imports(self, indexer, parser, write_files):
        """Collects require() and import() calls with a string argument."""
        files = write_files({"app.js": "", "x.js": "", "y.js": ""})
        code = """
const x = require('./x');
const path = require('path');
const lazy = () => import('./y');
require(dynamicName);
"""
        imports = indexer.extract_imports(parser.parse(code, "js"), files["app.js"])

        assert imports == ["x", "y"]

    def test_ts_import_require(self, indexer, parser, write_files):
        """Collects TypeScript import-equals-require declarations."""
        files = write_files({"app.ts": "", "legacy.ts": ""})
        code = "import legacy = require('./legacy');\n"

        imports = indexer.extract_imports(parser.parse(code, "ts"), files["app.ts"])

        assert imports == ["legacy"]

    def test_re_export_source_is_an_import(self, indexer, parser, write_files):
        """export ... from './x' loads the module too."""
        files = write_files({"index.ts": "", "button.ts": "", "icons.ts": ""})
        code = """
export { Button } from './button';
export * from './icons';
"""
        imports = indexer.extract_imports(parser.parse(code, "ts"), files["index.ts"])

        assert imports == ["button", "icons"]

    def test_unresolved_imports_are_dropped(self, indexer, parser, write_files):
        """Missing targets are left out without raising."""
        files = write_files({"app.ts": "", "present.ts": ""})
        code = """
import { gone } from './missing';
import { here } from './present';
"""
        imports = indexer.extract_imports(parser.parse(code, "ts"), files["app.ts"])

        assert imports == ["present"]

    def test_import_specifiers_include_packages(self, indexer, parser):
        """Raw specifiers keep package imports for inspection."""
        code = "import fs from 'fs';\nconst u = require('./u');\n"

        assert indexer.import_specifiers(parser.parse(code, "ts")) == ["fs", "./u"]


# =============================================================================
# EXPORTS
# =============================================================================

class TestDeclarationExports:
    """Tests for exported declarations."""

    def test_declaration_kinds(self, indexer, parser):
        """Classifies each exported declaration."""
        code = """
export function load() {}
export function* ids() {}
export class Store {}
export interface Options { debug: boolean }
export type Id = string;
export enum Color { Red, Green }
"""
        exports = exports_of(indexer, parser, code)

        assert exports == {
            "load": ExportKind.FUNCTION,
            "ids": ExportKind.FUNCTION,
            "Store": ExportKind.CLASS,
            "Options": ExportKind.INTERFACE,
            "Id": ExportKind.TYPE,
            "Color": ExportKind.ENUM,
        }

    def test_variable_kinds_from_initializer(self, indexer, parser):
        """Function and class initializers change the variable kind."""
        code = """
export const handler = () => 1, limit = 10;
export const parse = function (text) { return text; };
export let Model = class {};
export var counter;
"""
        exports = exports_of(indexer, parser, code)

        assert exports["handler"] is ExportKind.FUNCTION
        assert exports["limit"] is ExportKind.VARIABLE
        assert exports["parse"] is ExportKind.FUNCTION
        assert exports["Model"] is ExportKind.CLASS
        assert exports["counter"] is ExportKind.VARIABLE

    def test_destructured_bindings(self, indexer, parser):
        """Each destructured name is recorded individually."""
        code = """
export const { host, port: serverPort, ...rest } = settings;
export const [first, , third = 3] = values;
"""
        exports = exports_of(indexer, parser, code)

        assert exports == {
            "host": ExportKind.VARIABLE,
            "serverPort": ExportKind.VARIABLE,
            "rest": ExportKind.VARIABLE,
            "first": ExportKind.VARIABLE,
            "third": ExportKind.VARIABLE,
        }

    def test_default_declarations(self, indexer, parser):
        """Default-marked declarations keep their own name and kind."""
        exports = exports_of(indexer, parser, "export default class Widget {}\n")

        assert exports == {"Widget": ExportKind.CLASS}

    def test_anonymous_default_function(self, indexer, parser):
        """Anonymous default functions are recorded as 'default'."""
        exports = exports_of(indexer, parser, "export default function () { return 1; }\n", "js")

        assert exports == {"default": ExportKind.FUNCTION}

    def test_default_identifier(self, indexer, parser):
        """export default <identifier> records the identifier as default."""
        code = "function helper() {}\nexport default helper;\n"

        assert exports_of(indexer, parser, code) == {"helper": ExportKind.DEFAULT}

    def test_ambient_declarations(self, indexer, parser):
        """declare forms are unwrapped."""
        exports = exports_of(indexer, parser, "export declare function setup(): void;\n")

        assert exports == {"setup": ExportKind.FUNCTION}


class TestExportLists:
    """Tests for named export lists."""

    def test_local_export_list_uses_declared_kind(self, indexer, parser):
        """Locally declared names keep their kind, unknown otherwise."""
        code = """
function format() {}
const VERSION = '1.0';
export { format, VERSION as version, imported };
"""
        exports = exports_of(indexer, parser, code)

        assert exports == {
            "format": ExportKind.FUNCTION,
            "version": ExportKind.VARIABLE,
            "imported": ExportKind.UNKNOWN,
        }

    def test_re_export_list_is_unknown(self, indexer, parser):
        """Re-exported names are unknown even if a local name matches."""
        code = """
function format() {}
export { format, parse as read } from './text';
"""
        exports = exports_of(indexer, parser, code)

        assert exports == {"format": ExportKind.UNKNOWN, "read": ExportKind.UNKNOWN}

    def test_local_kinds_can_be_disabled(self, resolver, parser):
        """Without local lookup, export lists are unknown."""
        indexer = SourceIndexer(resolver, resolve_local_kinds=False)
        code = "function format() {}\nexport { format };\n"

        assert exports_of(indexer, parser, code) == {"format": ExportKind.UNKNOWN}


class TestCommonJSExports:
    """Tests for module.exports and exports.x assignments."""

    def test_object_assignment(self, indexer, parser):
        """Each property of module.exports = {...} is recorded."""
        code = """
function start() {}
const retries = 3;
module.exports = {
  start,
  retries,
  stop: function () {},
  reset() {},
  name: 'app',
  boot: start,
};
"""
        exports = exports_of(indexer, parser, code, "js")

        assert exports == {
            "start": ExportKind.FUNCTION,
            "retries": ExportKind.VARIABLE,
            "stop": ExportKind.FUNCTION,
            "reset": ExportKind.FUNCTION,
            "name": ExportKind.VARIABLE,
            "boot": ExportKind.FUNCTION,
        }

    def test_property_assignments(self, indexer, parser):
        """exports.x and module.exports.x assignments are recorded."""
        code = """
exports.formatItem = function (item) { return item; };
module.exports.Parser = class {};
exports.timeout = 5000;
"""
        exports = exports_of(indexer, parser, code, "js")

        assert exports == {
            "formatItem": ExportKind.FUNCTION,
            "Parser": ExportKind.CLASS,
            "timeout": ExportKind.VARIABLE,
        }

    def test_whole_module_assignment(self, indexer, parser):
        """module.exports = <identifier> is a default export."""
        code = "function run() {}\nmodule.exports = run;\n"

        assert exports_of(indexer, parser, code, "js") == {"run": ExportKind.DEFAULT}

    def test_unrelated_assignments_ignored(self, indexer, parser):
        """Assignments to other objects are not exports."""
        code = "config.exports = {};\nwindow.app = start;\n"

        assert exports_of(indexer, parser, code, "js") == {}


# =============================================================================
# CALLS
# =============================================================================

class TestCallExtraction:
    """Tests for call-site extraction."""

    def test_identifier_and_member_calls(self, indexer, parser):
        """Records bare names and two-part receiver.method names."""
        code = """
foo();
api.fetch('/items');
a.b.c();
new Thing();
make()();
"""
        assert calls_of(indexer, parser, code) == {"foo", "api.fetch", "make"}

    def test_nested_calls_are_found(self, indexer, parser):
        """Calls inside functions, callbacks and arguments are visited."""
        code = """
function render(items) {
  items.forEach((item) => {
    console.log(formatItem(item));
  });
}
"""
        assert calls_of(indexer, parser, code, "js") == {"items.forEach", "console.log", "formatItem"}


# =============================================================================
# FILE NODES
# =============================================================================

class TestIndex:
    """Tests for building a FileNode."""

    def test_index_builds_file_node(self, indexer, parser, write_files):
        """Combines id, imports, exports and calls."""
        files = write_files({"src/main.ts": "", "src/util.ts": ""})
        code = """
import { helper } from './util';
export function main() { helper(); }
"""
        node = indexer.index(parser.parse(code, "ts"), files["src/main.ts"])

        assert node.id == "src/main"
        assert node.imports == ("src/util",)
        assert node.exports == {"main": ExportKind.FUNCTION}
        assert node.calls == frozenset({"helper"})
        assert node.label == "main"

    def test_duplicate_imports_collapse(self, indexer, parser, write_files):
        """A module imported twice appears once, at its first position."""
        files = write_files({"app.js": "", "a.js": "", "b.js": ""})
        code = """
import './a';
const b = require('./b');
const again = require('./a');
"""
        node = indexer.index(parser.parse(code, "js"), files["app.js"])

        assert node.imports == ("a", "b")

    def test_jsx_source(self, indexer, parser, write_files):
        """JSX files are parsed with the JavaScript grammar."""
        files = write_files({"App.jsx": "", "Header.jsx": ""})
        code = """
import Header from './Header';
export function App() { return <div><Header title={title()} /></div>; }
"""
        node = indexer.index(parser.parse(code, "jsx"), files["App.jsx"])

        assert node.imports == ("Header",)
        assert node.exports == {"App": ExportKind.FUNCTION}
        assert "title" in node.calls
