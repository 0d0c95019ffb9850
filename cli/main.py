"""Main CLI entry point for archive-maildir."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from archive_maildir import __version__
from archive_maildir.config.archive_config import AppConfig, ProgramOptions
from archive_maildir.config.config_loader import ConfigError, ConfigLoader
from archive_maildir.models.archive_result import ArchiveMode, ArchiveSummary, SplitPolicy
from archive_maildir.services.pipeline import ArchiveSetupError, run_archive
from archive_maildir.services.reporting import (
    AuditLogReporter,
    CompositeReporter,
    LoggingReporter,
    SummaryFormatter,
)
from archive_maildir.storage.audit_log import AuditLog
from archive_maildir.utils.date_utils import default_cutoff, parse_cutoff

EXIT_OK = 0
EXIT_SETUP_ERROR = 1
EXIT_MESSAGE_ERRORS = 2

VERBOSITY_LEVELS = {
    0: logging.CRITICAL + 1,
    1: logging.ERROR,
    2: logging.WARNING,
    3: logging.INFO,
}


def verbosity_level(count: int) -> int:
    """Map the number of ``-v`` flags to a logging level."""
    return VERBOSITY_LEVELS.get(count, logging.DEBUG)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser. Defaults come from the config file."""
    parser = argparse.ArgumentParser(
        prog="archive-maildir",
        description="Archive emails from maildir",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("path", metavar="PATH", type=Path, help="Maildir path")
    parser.add_argument("-o", "--output-dir", metavar="PATH", type=Path, help="Output directory")
    parser.add_argument("-p", "--prefix", metavar="PREFIX", help="Prefix format")
    parser.add_argument("-s", "--suffix", metavar="SUFFIX", help="Suffix format")
    parser.add_argument(
        "-S",
        "--split-by",
        metavar="PERIOD",
        choices=[policy.value for policy in SplitPolicy],
        help="Split by (year, month, day, none)",
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=[mode.value for mode in ArchiveMode],
        help="Archive mode",
    )
    parser.add_argument(
        "-b",
        "--before",
        metavar="YYYY-mm-dd",
        help="Archive emails before the given date (default: one year ago)",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Set verbosity (repeatable)"
    )
    parser.add_argument("--config", type=Path, help="Custom config file path")
    parser.add_argument("--audit-log", type=Path, help="Append archive events to this JSON-lines file")
    return parser


def build_options(args: argparse.Namespace, config: AppConfig) -> ProgramOptions:
    """
    Merge command-line arguments over config-file defaults.

    Raises:
        ValueError: If the cutoff date is invalid
        ValidationError: If an option fails validation
    """
    defaults = config.defaults

    if args.before is not None:
        before = parse_cutoff(args.before)
    elif defaults.before is not None:
        before = defaults.before
    else:
        before = default_cutoff()

    output_dir = args.output_dir
    if output_dir is None:
        output_dir = Path(defaults.output_dir).expanduser()

    return ProgramOptions(
        input_path=args.path,
        output_dir=output_dir,
        before=before,
        prefix=args.prefix if args.prefix is not None else defaults.prefix,
        suffix=args.suffix if args.suffix is not None else defaults.suffix,
        split_by=SplitPolicy(args.split_by) if args.split_by else defaults.split_by,
        archive_mode=ArchiveMode(args.mode) if args.mode else defaults.mode,
    )


def print_summary(summary: ArchiveSummary, formatter: SummaryFormatter, verbose: int) -> None:
    """Print the run summary, one line per error, and destinations when verbose."""
    for line in formatter.format_errors(summary):
        print(line, file=sys.stderr)

    if verbose and summary.destinations:
        for line in formatter.format_destinations(summary):
            print(line)

    print(formatter.format_summary(summary))


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=verbosity_level(args.verbose),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    try:
        config = ConfigLoader(args.config).load_app_config()
        options = build_options(args, config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_SETUP_ERROR
    except ValidationError as e:
        print(f"Error: invalid option: {e}", file=sys.stderr)
        return EXIT_SETUP_ERROR
    except ValueError as e:
        print(f"Error: while parsing time threshold: {e}", file=sys.stderr)
        return EXIT_SETUP_ERROR

    reporters = [LoggingReporter()]
    audit_log_path = args.audit_log or config.storage.get_audit_log_path()
    if audit_log_path:
        try:
            reporters.append(AuditLogReporter(AuditLog(audit_log_path)))
        except OSError as e:
            print(f"Error: cannot open audit log {audit_log_path}: {e}", file=sys.stderr)
            return EXIT_SETUP_ERROR

    try:
        summary = run_archive(options, CompositeReporter(reporters))
    except ArchiveSetupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_SETUP_ERROR

    print_summary(summary, SummaryFormatter(config.model_dump()), args.verbose)

    return EXIT_MESSAGE_ERRORS if summary.has_errors else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
