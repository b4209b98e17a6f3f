"""CLI entrypoint for flowsketch."""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from .config.settings import Settings, get_settings
from .core.exceptions import ConfigurationError, GenerationError
from .flowchart.model import LayoutParams
from .flowchart.pipeline import DiagramResult, build_diagram, diagram_from_topic
from .generation.describe import AnthropicFlowDescriber
from .utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _add_layout_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--origin-x", type=float, help="X coordinate of the first column")
    parser.add_argument("--origin-y", type=float, help="Y coordinate of the first row")
    parser.add_argument("--vertical-spacing", type=float, help="Distance between rows")
    parser.add_argument("--horizontal-spacing", type=float, help="Distance between indent columns")
    parser.add_argument("--compact", action="store_true", help="Print JSON on a single line")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowsketch",
        description="Turn step-by-step flow descriptions into diagram graphs",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Diagram a flow description")
    parse_cmd.add_argument("file", nargs="?", default="-", help="Description file, or - for stdin")
    _add_layout_args(parse_cmd)

    generate_cmd = subparsers.add_parser("generate", help="Generate a description for a topic and diagram it")
    generate_cmd.add_argument("topic", help="Topic or document summary")
    _add_layout_args(generate_cmd)

    serve_cmd = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=5001)
    serve_cmd.add_argument("--debug", action="store_true")

    return parser


def layout_params(args: argparse.Namespace, settings: Settings) -> LayoutParams:
    base = LayoutParams.from_settings(settings)
    overrides = {
        "origin_x": args.origin_x,
        "origin_y": args.origin_y,
        "vertical_spacing": args.vertical_spacing,
        "horizontal_spacing": args.horizontal_spacing,
    }
    return LayoutParams.from_dict({k: v for k, v in overrides.items() if v is not None}, base)


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as handle:
        return handle.read()


def _print_result(result: DiagramResult, compact: bool) -> None:
    indent = None if compact else 2
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=indent))


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)

    if args.command == "parse":
        try:
            text = _read_text(args.file)
        except OSError as exc:
            print(f"error: cannot read {args.file}: {exc.strerror or exc}", file=sys.stderr)
            return 1
        _print_result(build_diagram(text, layout_params(args, settings)), args.compact)
        return 0

    if args.command == "generate":
        describer = AnthropicFlowDescriber(settings)
        try:
            result = diagram_from_topic(args.topic, describer, layout_params(args, settings))
        except (ConfigurationError, GenerationError) as exc:
            logger.error("Generation failed", extra={"error": str(exc)})
            print(f"error: {exc.message}", file=sys.stderr)
            return 1
        _print_result(result, args.compact)
        return 0

    from .api.app import create_app

    app = create_app(settings)
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0


if __name__ == "__main__":
    sys.exit(main())
