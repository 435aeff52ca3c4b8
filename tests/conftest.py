"""
Shared pytest fixtures for depgraph tests.
"""

import shutil
from pathlib import Path

import pytest
from depgraph.dependency.module_resolver import ModuleResolver
from depgraph.dependency.syntax_tree import TreeSitterParser

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Temporary directory with symlinks resolved."""
    return tmp_path.resolve()


@pytest.fixture
def write_files(temp_dir: Path):
    """Write ``{relative path: content}`` under temp_dir and return the paths."""

    def _write(files: dict[str, str]) -> dict[str, Path]:
        written = {}
        for name, content in files.items():
            path = temp_dir / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            written[name] = path
        return written

    return _write


@pytest.fixture(scope="session")
def parser() -> TreeSitterParser:
    """One tree-sitter parser set for the whole session."""
    return TreeSitterParser()


@pytest.fixture
def resolver(temp_dir: Path) -> ModuleResolver:
    return ModuleResolver(base_path=temp_dir, extension="ts", variant="ts")


@pytest.fixture
def js_project(temp_dir: Path) -> Path:
    """Copy of the sample JavaScript project."""
    project = temp_dir / "sample_js_project"
    shutil.copytree(FIXTURES_DIR / "sample_js_project", project)
    return project
