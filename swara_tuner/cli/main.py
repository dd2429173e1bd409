"""Main entry point for the Swara Tuner CLI."""

import sys
import argparse
from typing import List, Optional

from ..logging_config import setup_logging
from .tuner_cli import run_analyze, run_devices, run_listen


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Swara Tuner - pitch detection with Western, swara and solfege note names"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    target_help = (
        'Target frequency such as "440Hz", or "auto" for the nearest note '
        "(default: from configuration)"
    )

    # Live tuning
    listen_parser = subparsers.add_parser("listen", help="Tune from the live input")
    listen_parser.add_argument(
        "--duration", type=float, default=30.0, help="Listening time in seconds"
    )
    listen_parser.add_argument(
        "--device", type=int, default=None, help="Audio input device ID"
    )
    listen_parser.add_argument("--target", default=None, help=target_help)
    listen_parser.add_argument(
        "--record", action="store_true", help="Record note changes while listening"
    )
    listen_parser.add_argument(
        "--export", default=None, help="Write recorded notes to this JSON file"
    )

    # Offline analysis
    analyze_parser = subparsers.add_parser(
        "analyze", help="Run the tuner over a sound file"
    )
    analyze_parser.add_argument("file", help="Path to a WAV/FLAC/OGG file")
    analyze_parser.add_argument("--target", default=None, help=target_help)
    analyze_parser.add_argument(
        "--gain", type=float, default=1.0, help="Gain applied to the samples"
    )
    analyze_parser.add_argument(
        "--export", default=None, help="Write recorded notes to this JSON file"
    )

    subparsers.add_parser("devices", help="List audio input devices")
    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, or None to use sys.argv

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    setup_logging(level="DEBUG" if parsed_args.debug else None)

    if parsed_args.command == "listen":
        return run_listen(parsed_args)
    elif parsed_args.command == "analyze":
        return run_analyze(parsed_args)
    elif parsed_args.command == "devices":
        return run_devices(parsed_args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
