"""
Analyzer Configuration
======================

Settings of a dependency graph run and their loader.

Configuration files searched in order under ``<project>/.depgraph/``:
1. config.json
2. config.yaml
3. config.yml

Usage:
    from depgraph.config import AnalyzerConfigLoader

    config = AnalyzerConfigLoader(Path("/path/to/project")).load()
    config = config.merged(format="dot", output="graph.dot")
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from .dependency.syntax_tree import LANGUAGE_VARIANTS
from .exporters.serializer import OUTPUT_FORMATS

CONFIG_DIR = ".depgraph"

CONFIG_FILENAMES = [
    "config.json",
    "config.yaml",
    "config.yml",
]

# Output file extension per format
OUTPUT_EXTENSIONS = {
    "json": "json",
    "d3": "d3.json",
    "dot": "dot",
    "html": "html",
}

DEFAULT_OUTPUT_DIR = Path("dist") / "out"

CONFIG_SCHEMA = {
    "pattern": str,
    "languages": list,
    "format": str,
    "base_path": str,
    "output": str,
    "open": bool,
    "strict": bool,
}


@dataclass(frozen=True)
class AnalyzerConfig:
    """Settings of one analysis run."""

    pattern: str = "**/*.ts"
    languages: tuple[str, ...] = ("ts",)
    format: str = "html"
    base_path: str = "."
    output: str | None = None
    open: bool = False
    strict: bool = False

    @property
    def is_typescript(self) -> bool:
        return any(lang in ("ts", "tsx") for lang in self.languages)

    @property
    def is_jsx(self) -> bool:
        return any(lang in ("jsx", "tsx") for lang in self.languages)

    @property
    def script_variant(self) -> str:
        """Variant used for files whose suffix is not in scope."""
        if self.is_typescript:
            return "tsx" if self.is_jsx else "ts"
        return "jsx" if self.is_jsx else "js"

    @property
    def extension(self) -> str:
        """Extension tried first when resolving extensionless imports."""
        return self.languages[0] if self.languages else self.script_variant

    @property
    def base_dir(self) -> Path:
        return Path(self.base_path).resolve()

    @property
    def output_path(self) -> Path:
        """Destination of the serialized graph."""
        if self.output:
            return Path(self.output)
        return DEFAULT_OUTPUT_DIR / f"graph.{OUTPUT_EXTENSIONS[self.format]}"

    def merged(self, **overrides: Any) -> "AnalyzerConfig":
        """Copy with non-None overrides applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if "languages" in values:
            values["languages"] = tuple(values["languages"])
        config = replace(self, **values)
        errors = validate_config(config.to_dict())
        if errors:
            raise ValueError("Invalid configuration:\n" + "\n".join(f"  - {err}" for err in errors))
        return config

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["languages"] = list(self.languages)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalyzerConfig":
        """Load from dict, defaults for missing keys."""
        defaults = cls()
        return cls(
            pattern=data.get("pattern", defaults.pattern),
            languages=tuple(data.get("languages", defaults.languages)),
            format=data.get("format", defaults.format),
            base_path=data.get("base_path", defaults.base_path),
            output=data.get("output", defaults.output),
            open=data.get("open", defaults.open),
            strict=data.get("strict", defaults.strict),
        )

    def __str__(self) -> str:
        data = self.to_dict()
        data.update(is_typescript=self.is_typescript, is_jsx=self.is_jsx)
        return json.dumps(data, indent=2)


def validate_config(config_data: dict[str, Any]) -> list[str]:
    """
    Validate config data.

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    unknown_keys = set(config_data) - set(CONFIG_SCHEMA)
    if unknown_keys:
        errors.append(f"Unknown keys: {', '.join(sorted(unknown_keys))}")

    for key, expected in CONFIG_SCHEMA.items():
        value = config_data.get(key)
        if value is None:
            continue
        if expected is list and isinstance(value, tuple):
            value = list(value)
        if not isinstance(value, expected):
            errors.append(f"'{key}' must be a {expected.__name__}")

    languages = config_data.get("languages")
    if isinstance(languages, (list, tuple)):
        if not languages:
            errors.append("'languages' must not be empty")
        for lang in languages:
            if lang not in LANGUAGE_VARIANTS:
                errors.append(
                    f"Invalid language: {lang}. Must be one of: {', '.join(LANGUAGE_VARIANTS)}"
                )

    output_format = config_data.get("format")
    if isinstance(output_format, str) and output_format not in OUTPUT_FORMATS:
        errors.append(f"Invalid format: {output_format}. Must be one of: {', '.join(OUTPUT_FORMATS)}")

    return errors


@dataclass
class AnalyzerConfigLoader:
    """
    Loads analyzer configuration from a project directory.

    Attributes:
        project_dir: Root directory of the project
        config_file: Explicit config file, or the one found under .depgraph/
    """

    project_dir: Path = field(default_factory=Path.cwd)
    config_file: Path | None = None

    def __post_init__(self):
        self.project_dir = Path(self.project_dir).resolve()
        if self.config_file is not None:
            self.config_file = Path(self.config_file)

    def load(self) -> AnalyzerConfig:
        """
        Load configuration, falling back to defaults without a config file.

        Raises:
            ValueError: If the config file cannot be read or is invalid
        """
        if self.config_file is None:
            self.config_file = self._find_config_file()

        if self.config_file is None:
            return AnalyzerConfig(base_path=str(self.project_dir))

        config_data = self._read_config_file(self.config_file)
        if not isinstance(config_data, dict):
            raise ValueError(f"Config file {self.config_file.name} must contain an object")

        errors = validate_config(config_data)
        if errors:
            error_msg = f"Config validation errors in {self.config_file.name}:\n"
            error_msg += "\n".join(f"  - {err}" for err in errors)
            raise ValueError(error_msg)

        # Relative base paths are taken from the project directory
        base_path = Path(config_data.get("base_path", "."))
        if not base_path.is_absolute():
            base_path = self.project_dir / base_path
        config_data["base_path"] = str(base_path)
        return AnalyzerConfig.from_dict(config_data)

    def _find_config_file(self) -> Path | None:
        """Find the first existing config file."""
        config_dir = self.project_dir / CONFIG_DIR
        if not config_dir.exists():
            return None

        for filename in CONFIG_FILENAMES:
            config_path = config_dir / filename
            if config_path.exists():
                return config_path

        return None

    def _read_config_file(self, config_path: Path) -> Any:
        """
        Read and parse config file based on extension.

        Raises:
            ValueError: If file format is not supported or parsing fails
        """
        suffix = config_path.suffix.lower()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    return json.load(f)
                elif suffix in (".yaml", ".yml"):
                    return yaml.safe_load(f) or {}
                else:
                    raise ValueError(f"Unsupported config file format: {suffix}")
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Invalid {suffix.upper()} in {config_path.name}: {e}") from e
        except OSError as e:
            raise ValueError(f"Failed to read {config_path.name}: {e}") from e
