from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from blockshader.app.core.config import get_settings
from blockshader.app.core.container import build_container
from blockshader.app.core.logging import configure_logging
from blockshader.app.models.graph import BlockGraph
from blockshader.app.services.errors import GenerationError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_GRAPH = 1
EXIT_BAD_INPUT = 2


def _load_graph(path: Path) -> BlockGraph:
    return BlockGraph.model_validate_json(path.read_text(encoding="utf-8"))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compile a block graph JSON document into a fragment shader")
    parser.add_argument("graph", type=Path, help="Path to a block graph JSON document.")
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only report structural problems; do not generate code.",
    )
    parser.add_argument("--precision", choices=("lowp", "mediump", "highp"), default=None)
    parser.add_argument("--output", "-o", type=Path, default=None, help="Write the shader here instead of stdout.")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.debug or settings.debug, stream=sys.stderr)
    compiler = build_container(settings).compiler_service

    try:
        graph = _load_graph(args.graph)
    except OSError as error:
        print(f"Unable to read '{args.graph}': {error}", file=sys.stderr)
        return EXIT_BAD_INPUT
    except ValidationError as error:
        print(f"Invalid block graph document '{args.graph}':\n{error}", file=sys.stderr)
        return EXIT_BAD_INPUT

    if args.validate_only:
        report = compiler.validate_graph(graph)
        for problem in report.problems:
            print(problem, file=sys.stderr)
        return EXIT_OK if report.valid else EXIT_INVALID_GRAPH

    try:
        artifact = compiler.compile_graph(graph, precision=args.precision)
    except GenerationError as error:
        for diagnostic in error.diagnostics:
            print(diagnostic, file=sys.stderr)
        return EXIT_INVALID_GRAPH

    for problem in artifact.problems:
        print(f"warning: {problem}", file=sys.stderr)

    if args.output:
        args.output.write_text(artifact.source, encoding="utf-8")
        logger.info("Wrote shader for %d block(s) to %s", len(artifact.order), args.output)
    else:
        sys.stdout.write(artifact.source)
    return EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
