"""
Command-line interface for the TFT display simulator.
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from tft_simulator.config import load_config
from tft_simulator.samples import get_sample
from tft_simulator.simulator import DisplaySimulator, SimulatorError
from tft_simulator.utils.logger import setup_logger

logger = logging.getLogger(__name__)

SAMPLE_PREFIX = "sample:"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_PARSE_ERRORS = 2


def read_sketch(sketch: str) -> str:
    """
    Load sketch source from a file or a bundled sample.

    Args:
        sketch: File path, or ``sample:<name>``

    Returns:
        Sketch source text
    """
    if sketch.startswith(SAMPLE_PREFIX):
        return get_sample(sketch[len(SAMPLE_PREFIX):])

    with open(sketch, "r", encoding="utf-8") as f:
        return f.read()


def parse_point(value: str) -> Tuple[float, float]:
    """Parse an ``X,Y`` command-line value."""
    try:
        x, y = (float(part) for part in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected X,Y but got '{value}'")
    return x, y


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tft-sim",
        description="Simulate TFT_eSPI sketches: extract screens and render them.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to configuration JSON file",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write logs to this rotating file",
    )

    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit log records as JSON",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Extract screens and print them as JSON")
    parse_cmd.add_argument("sketch", help="Sketch file or sample:<name>")
    parse_cmd.add_argument("--width", type=int, help="Display width")
    parse_cmd.add_argument("--height", type=int, help="Display height")
    parse_cmd.add_argument("--output", "-o", type=str, help="Write JSON to this file instead of stdout")

    render_cmd = subparsers.add_parser("render", help="Render a screen to an image")
    render_cmd.add_argument("sketch", help="Sketch file or sample:<name>")
    render_cmd.add_argument("--output", "-o", type=str, required=True, help="Output image file")
    render_cmd.add_argument("--screen", "-s", type=str, help="Screen id to show first")
    render_cmd.add_argument(
        "--touch", "-t",
        type=parse_point,
        action="append",
        default=[],
        metavar="X,Y",
        help="Touch to replay before rendering; may be repeated",
    )
    render_cmd.add_argument("--debug", action="store_true", help="Overlay touch zones")
    render_cmd.add_argument("--format", "-f", choices=["png", "svg"], help="Output format")
    render_cmd.add_argument("--width", type=int, help="Display width")
    render_cmd.add_argument("--height", type=int, help="Display height")

    return parser


def run_parse(args: argparse.Namespace, config: dict) -> int:
    simulator = DisplaySimulator(args.width, args.height, config)
    parsed = simulator.load_source(read_sketch(args.sketch))

    output = json.dumps(parsed.to_dict(), indent=2)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(exist_ok=True, parents=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(output)
        logger.info(f"Parse result saved to {output_path}")
    else:
        print(output)

    return EXIT_PARSE_ERRORS if parsed.has_errors else EXIT_OK


def run_render(args: argparse.Namespace, config: dict) -> int:
    simulator = DisplaySimulator(args.width, args.height, config)
    parsed = simulator.load_source(read_sketch(args.sketch))

    if parsed.has_errors:
        logger.error("Sketch has parse errors; nothing rendered")
        return EXIT_PARSE_ERRORS

    if args.screen:
        simulator.show_screen(args.screen)
    if args.debug:
        simulator.set_debug_mode(True)

    for x, y in args.touch:
        result = simulator.touch(x, y)
        logger.info(
            f"Touch ({x}, {y}): "
            + (f"hit {result.zone.id} -> {simulator.scene.current_screen}" if result.hit else "miss")
        )

    path = simulator.render_to_file(args.output, args.format)
    logger.info(f"Rendered {simulator.scene.current_screen} to {path}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Argument list; ``sys.argv[1:]`` when omitted

    Returns:
        Exit code (0 for success, 2 for parse errors, 1 for other failures)
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except Exception as e:
        setup_logger("DEBUG" if args.verbose else None)
        logger.error(f"Failed to load configuration: {e}")
        return EXIT_FAILURE

    setup_logger(
        "DEBUG" if args.verbose else config.get("log_level"),
        log_file=args.log_file or config.get("log_file"),
        log_json=args.log_json or config.get("log_json", False),
    )

    try:
        if args.command == "parse":
            return run_parse(args, config)
        return run_render(args, config)
    except (OSError, KeyError, SimulatorError) as e:
        logger.error(f"{args.command} failed: {e}")
        return EXIT_FAILURE
    except Exception as e:
        logger.error(f"{args.command} failed: {e}", exc_info=True)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
