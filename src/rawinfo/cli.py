"""
Command line interface for rawinfo.

Usage:
  rawinfo info -f FILE [--trailer-fields]
  rawinfo isolation -f FILE [-n N [N ...]]

Each command is an entry in COMMANDS: a builder turning parsed arguments into
an options dataclass, a validator that runs before the file is opened, and a
handler that generates report lines from the opened source.
"""

import argparse
import functools
import logging
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Optional, TextIO

from . import __version__
from .config import (
    EXIT_FAILURE,
    EXIT_OK,
    EXIT_USAGE,
    LOG_FORMAT,
    InfoOptions,
    IsolationOptions,
    Settings,
)
from .core.errors import (
    SourceOpenError,
    SourceStateError,
    UnrecoverableProcessingError,
    ValidationError,
)
from .io import RawSource, open_raw_source
from .reports import info_report, isolation_report
from .validation import validate_info_options, validate_isolation_options, validate_opened_source


logger = logging.getLogger(__name__)

SourceOpener = Callable[[str], RawSource]


@dataclass(frozen=True)
class Command:
    name: str
    help: str
    build_options: Callable[[argparse.Namespace], Any]
    validate: Callable[[Any], None]
    handler: Callable[[RawSource, Any], Iterator[str]]


def _info_options(args: argparse.Namespace) -> InfoOptions:
    return InfoOptions(file=args.file, trailer_fields=args.trailer_fields)


def _isolation_options(args: argparse.Namespace) -> IsolationOptions:
    scan_numbers = tuple(args.num) if args.num else None
    return IsolationOptions(file=args.file, scan_numbers=scan_numbers)


def _run_info(source: RawSource, options: InfoOptions) -> Iterator[str]:
    return info_report(source, trailer_fields=options.trailer_fields)


def _run_isolation(source: RawSource, options: IsolationOptions) -> Iterator[str]:
    return isolation_report(source, options.scan_numbers)


COMMANDS: dict[str, Command] = {
    "info": Command(
        name="info",
        help="Print system, file, sample and instrument information",
        build_options=_info_options,
        validate=validate_info_options,
        handler=_run_info,
    ),
    "isolation": Command(
        name="isolation",
        help="Print isolation information of MS2 scans",
        build_options=_isolation_options,
        validate=validate_isolation_options,
        handler=_run_isolation,
    ),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rawinfo",
        description="Print information from mass spectrometry raw files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # File, sample and instrument information
  rawinfo info -f sample.raw

  # Also list the trailer extra fields
  rawinfo info -f sample.raw --trailer-fields

  # Isolation information of all MS2 scans
  rawinfo isolation -f sample.raw

  # Only scans 100 to 200
  rawinfo isolation -f sample.raw -n 100 200
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v for info, -vv for debug)"
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Explicit log level (overrides -v)"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    info = subparsers.add_parser("info", help=COMMANDS["info"].help)
    info.add_argument(
        "-f", "--file",
        type=str,
        required=True,
        help="Path to the raw file"
    )
    info.add_argument(
        "--trailer-fields",
        action="store_true",
        help="Also list the trailer extra fields stored for each scan"
    )

    isolation = subparsers.add_parser("isolation", help=COMMANDS["isolation"].help)
    isolation.add_argument(
        "-f", "--file",
        type=str,
        required=True,
        help="Path to the raw file"
    )
    isolation.add_argument(
        "-n", "--num",
        type=int,
        nargs="+",
        default=None,
        help="One scan number, or the first and last scan of a range (default: all scans)"
    )

    return parser


def configure_logging(verbose: int = 0, log_level: Optional[str] = None, settings: Optional[Settings] = None) -> None:
    """Send log records to stderr at the level chosen on the command line or in the environment."""
    if log_level is None:
        if verbose >= 2:
            log_level = "DEBUG"
        elif verbose == 1:
            log_level = "INFO"
        else:
            log_level = (settings or Settings.from_env()).log_level

    level = logging.getLevelName(log_level)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


@contextmanager
def open_source(path: str, opener: SourceOpener) -> Iterator[RawSource]:
    """
    Open and validate a source, and close it exactly once on the way out.

    Raises:
        SourceOpenError: If the file cannot be opened.
        SourceStateError: If the opened source cannot be read.
    """
    source = opener(path)
    try:
        validate_opened_source(source)
        yield source
    finally:
        logger.debug(f"Closing {path}")
        source.close()


def default_opener(settings: Optional[Settings] = None) -> SourceOpener:
    settings = settings or Settings.from_env()
    return functools.partial(open_raw_source, dll_paths=list(settings.dll_paths))


def run_command(name: str, options: Any, opener: SourceOpener, out: Optional[TextIO] = None) -> None:
    """
    Validate options, then stream the command's report to ``out``.

    Lines written before a failure stay written.
    """
    command = COMMANDS[name]
    out = out or sys.stdout

    command.validate(options)
    logger.info(f"Running {name} on {options.file}")
    with open_source(options.file, opener) as source:
        for line in command.handler(source, options):
            print(line, file=out)


def main(argv: Optional[list[str]] = None, opener: Optional[SourceOpener] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_USAGE

    settings = Settings.from_env()
    configure_logging(args.verbose, args.log_level, settings)

    command = COMMANDS[args.command]
    options = command.build_options(args)

    try:
        run_command(command.name, options, opener or default_opener(settings))
    except ValidationError as e:
        print(f"Input validation error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except (SourceOpenError, SourceStateError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except UnrecoverableProcessingError as e:
        print(f"Processing error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"Processing error: {type(e).__name__}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
