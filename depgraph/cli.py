"""
depgraph command line
=====================

Analyze imports and function calls between JS/TS files.

Usage:
    depgraph --pattern "src/**/*.ts" --format html --open
    depgraph -p "lib/**/*.js" -l js -f dot -o deps.dot
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .analyzer import DependencyAnalyzer, format_summary
from .config import AnalyzerConfigLoader
from .dependency.syntax_tree import LANGUAGE_VARIANTS
from .errors import EmptyFileSet, WriteFailure
from .exporters.serializer import OUTPUT_FORMATS

logger = logging.getLogger("depgraph")

EXIT_OK = 0
EXIT_EMPTY = 1
EXIT_FAILURE = 2


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="depgraph",
        description="Analyze imports and function calls between files.",
    )
    p.add_argument("-p", "--pattern", help="Glob pattern matching the files to analyze.")
    p.add_argument(
        "-l",
        "--language",
        dest="languages",
        action="append",
        choices=LANGUAGE_VARIANTS,
        help="Language variant in scope (repeatable). Default: ts.",
    )
    p.add_argument("-f", "--format", choices=OUTPUT_FORMATS, help="Output format. Default: html.")
    p.add_argument("-o", "--output", help="Output file. Default: dist/out/graph.<format>.")
    p.add_argument("-b", "--base-path", help="Project root for resolution and module ids.")
    p.add_argument("-c", "--config", type=Path, help="Config file (JSON or YAML).")
    p.add_argument(
        "--open",
        action="store_true",
        default=None,
        help="Open the HTML visualization in a browser.",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Skip files that contain syntax errors.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        project_dir = Path(args.base_path or ".")
        config = AnalyzerConfigLoader(project_dir, args.config).load()
        config = config.merged(
            pattern=args.pattern,
            languages=args.languages,
            format=args.format,
            output=args.output,
            base_path=args.base_path,
            open=args.open,
            strict=args.strict,
        )
    except ValueError as e:
        logger.error(str(e))
        return EXIT_FAILURE

    logger.debug(f"Configuration:\n{config}")

    analyzer = DependencyAnalyzer(config)
    try:
        result, _ = analyzer.run()
    except EmptyFileSet as e:
        logger.warning(str(e))
        return EXIT_EMPTY
    except WriteFailure as e:
        logger.error(str(e))
        return EXIT_FAILURE

    print(format_summary(result))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
