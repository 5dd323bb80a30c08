"""Main entry point for the hglkit command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

import yaml

from . import __version__
from .config import HarnessConfig, load_config
from .engine import Transcriber
from .errors import HglError
from .inspector import TraceInspector
from .logging_utils import setup_logging
from .runner import TestRunner
from .spec import load_spec
from .words import iter_words

logger = logging.getLogger(__name__)


def _optional_path(value: str) -> Path | None:
    """Convert an option value to a path; an empty value means unset."""
    return Path(value) if value else None


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments for the hglkit CLI.

    Returns:
        argparse.Namespace: An object containing the parsed command-line arguments.

    """
    parser = argparse.ArgumentParser(prog="hglkit", description="Test and develop HGL transcription specs.")
    parser.add_argument(
        "--version",
        action="version",
        version=f"hglkit {__version__}",
        help="Show the version number and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Enable debug level logging and write a debug log file.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Where to write the debug log (default: hglkit-debug.log).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with default options (cover, coverprofile, verbose, debug).",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'test' command
    test_parser = subparsers.add_parser("test", help="Run the test examples of HGL specs.")
    test_parser.add_argument("specs", nargs="+", metavar="HGL", help="Spec files to test.")
    test_parser.add_argument(
        "--cover",
        action="store_true",
        default=None,
        help="Enable coverage analysis.",
    )
    test_parser.add_argument(
        "--coverprofile",
        type=_optional_path,
        default=None,
        metavar="PATH",
        help="Write a coverage profile to PATH (implies --cover).",
    )

    # 'dev' command
    dev_parser = subparsers.add_parser("dev", help="Transcribe words with an HGL spec under development.")
    dev_parser.add_argument("spec", metavar="HGL", help="The spec file.")
    dev_parser.add_argument("words", nargs="*", metavar="WORD", help="Words to transcribe (default: read lines from stdin).")
    dev_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Print the full rule trace before each transcription.",
    )

    # 'version' command
    subparsers.add_parser("version", help="Print the version number.")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stderr)
        sys.exit(1)
    return args


def _build_config(args: argparse.Namespace) -> HarnessConfig:
    """Combine the optional config file with the command-line flags; flags win."""
    base = load_config(args.config) if args.config else HarnessConfig()
    return base.merged(
        coverage_enabled=getattr(args, "cover", None),
        profile_path=getattr(args, "coverprofile", None),
        verbose=getattr(args, "verbose", None),
        debug=args.debug,
    )


def _run_test(args: argparse.Namespace, config: HarnessConfig) -> int:
    """Run the 'test' command and return the exit status."""
    report = TestRunner(config).run(args.specs)
    return 1 if report.failed else 0


def _run_dev(args: argparse.Namespace, config: HarnessConfig) -> int:
    """Run the 'dev' command and return the exit status."""
    spec = load_spec(args.spec)
    if config.verbose:
        inspector = TraceInspector(spec)
        for word in iter_words(args.words, sys.stdin):
            inspector.inspect(word)
    else:
        transcriber = Transcriber(spec)
        for word in iter_words(args.words, sys.stdin):
            print(transcriber.transcribe(word), flush=True)
    return 0


def main(argv: list[str] | None = None) -> None:
    """
    Run the main entry point for the hglkit command-line interface.

    Fatal errors are logged and end the process with status 1.
    """
    args = _parse_args(argv)

    if args.command == "version":
        print(f"hglkit-{__version__}")
        return

    try:
        config = _build_config(args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        setup_logging(version=__version__, debug=bool(args.debug), log_file=args.log_file)
        logger.critical("Failed to load configuration: %s", e)
        sys.exit(1)

    setup_logging(version=__version__, debug=config.debug, log_file=args.log_file)

    try:
        status = _run_test(args, config) if args.command == "test" else _run_dev(args, config)
    except HglError as e:
        logger.critical("%s", e)
        sys.exit(1)
    except Exception:
        logger.exception("An unexpected error occurred")
        sys.exit(1)

    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
