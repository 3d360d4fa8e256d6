"""
Command-line interface for InkShape.

    inkshape run --strokes strokes.json --out out/ [--text text.json] [--render]
    inkshape init-config --out inkshape_config.yaml
"""

import argparse
import sys

import yaml
from pydantic import ValidationError

from inkshape.config import load_config, merge_config, save_default_config
from inkshape.tracer import get_tracer


def build_parser():
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="inkshape",
        description="Recognize shapes and diagram types in freehand strokes",
    )
    commands = parser.add_subparsers(dest="command", help="Available commands")

    run = commands.add_parser("run", help="Run recognition on a stroke file")
    run.set_defaults(handler=handle_run)
    run.add_argument("--strokes", "-s", required=True,
                     help="Stroke file (JSON, or gzip JSON ending in .gz)")
    run.add_argument("--out", "-o", required=True, help="Output directory")
    run.add_argument("--text", "-t", help="JSON file with OCR text regions")
    run.add_argument("--config", "-c", help="YAML configuration file")

    passes = run.add_argument_group("stroke pre-passes")
    passes.add_argument("--simplify", type=float, metavar="EPSILON",
                        help="Simplify strokes with this Douglas-Peucker tolerance")
    passes.add_argument("--normalize", action="store_true",
                        help="Fit strokes into the configured viewport")
    run.add_argument("--render", action="store_true", help="Also write PNG renders of the strokes")

    tracing = run.add_argument_group("tracing")
    tracing.add_argument("--trace", action="store_true", help="Enable runtime tracing")
    tracing.add_argument("--trace-level", choices=["ERROR", "WARN", "INFO", "DEBUG"],
                         help="Trace log level")
    tracing.add_argument("--trace-file", help="Also write trace lines to this file")
    tracing.add_argument("--trace-json", action="store_true", help="Add JSON trace records")

    init = commands.add_parser("init-config", help="Write the default configuration")
    init.set_defaults(handler=handle_init_config)
    init.add_argument("--out", "-o", default="inkshape_config.yaml", help="Output path")

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0
    return args.handler(args)


def handle_run(args):
    """Handle the run command; returns 1 on bad input or validation errors."""
    from inkshape.pipeline import run_pipeline

    tracer = get_tracer()
    try:
        config = merge_config(load_config(args.config), _cli_overrides(args))
        tracer.apply(config.tracing)
        with tracer.span("cli_run", module="cli"):
            result = run_pipeline(
                strokes_path=args.strokes,
                out_dir=args.out,
                text_path=args.text,
                config=config,
            )
    except (OSError, ValueError, ValidationError, yaml.YAMLError) as e:
        tracer.event(f"Run failed: {e}", level="ERROR")
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    finally:
        tracer.close()

    _print_summary(result, args.out)

    if result.validation.has_errors:
        print("\n[!] Validation errors detected. Review validation_report.json")
        return 1
    return 0


def _cli_overrides(args):
    """Translate command-line switches into a config override mapping."""
    overrides = {}
    if args.simplify is not None:
        overrides["simplify"] = {"enabled": True, "epsilon": args.simplify}
    if args.normalize:
        overrides["normalize"] = {"enabled": True}
    if args.render:
        overrides["render_enabled"] = True

    tracing = {}
    if args.trace:
        tracing["enabled"] = True
    if args.trace_level:
        tracing["level"] = args.trace_level
    if args.trace_file:
        tracing["file_path"] = args.trace_file
    if args.trace_json:
        tracing["json_output"] = True
    if tracing:
        overrides["tracing"] = tracing

    return overrides


def _print_summary(result, out_dir):
    print("\nRecognition completed.")
    print(f"  Shapes detected: {len(result.shapes)}")
    print(f"  Diagram type: {result.suggested_diagram_type} ({result.confidence:.2f})")
    print(f"  Validation: {result.validation.error_count} errors, "
          f"{result.validation.warning_count} warnings")
    print(f"\nOutputs saved to: {out_dir}/")


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
